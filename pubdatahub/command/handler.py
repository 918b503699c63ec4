"""Command handlers, their registry and typo suggestions for the interactive shell."""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TextIO

from pubdatahub.command.parser import Command, CommandSpec, ParseError, Parser


class CommandError(Exception):
    """Raised when a command cannot be registered, parsed or executed."""


class ExitRequested(Exception):
    """Raised by the exit command to ask the shell to stop."""


@dataclass
class Session:
    """State kept for one interactive session."""

    id: str = "default"
    start_time: datetime = field(default_factory=datetime.now)
    variables: dict[str, Any] = field(default_factory=dict)
    history: list[str] = field(default_factory=list)


@dataclass
class ExecutionContext:
    """Everything a handler may need while running a command."""

    session: Session = field(default_factory=Session)
    parser: Parser | None = None
    data_sources: dict[str, Any] = field(default_factory=dict)
    job_manager: Any = None
    config: Any = None
    output: TextIO = field(default_factory=lambda: sys.stdout)
    cancel: threading.Event | None = None
    start_time: datetime | None = None


class Handler(ABC):
    """Base class for command handlers.

    By default a handler runs only the command it was specified for (by name
    or alias) and offers no argument completions.
    """

    def __init__(self, spec: CommandSpec) -> None:
        self._spec = spec

    @property
    def spec(self) -> CommandSpec:
        """The specification of the command this handler runs."""
        return self._spec

    @abstractmethod
    def execute(self, context: ExecutionContext, command: Command) -> None:
        """Run a parsed command."""

    def validate_permissions(self, context: ExecutionContext, command: Command) -> None:
        """Raise CommandError to refuse running ``command``.

        The default refuses commands this handler was not registered for.
        """
        if command.name != self._spec.name and command.name not in self._spec.aliases:
            raise CommandError(
                f"handler for {self._spec.name} cannot run command {command.name}"
            )

    def get_argument_completions(
        self, context: ExecutionContext, partial: str, args: list[str]
    ) -> list[str]:
        """Return completions for the argument being typed."""
        return []


class HandlerRegistry:
    """Maps command names and aliases to handlers and groups them by category."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}
        self._categories: dict[str, list[str]] = {}
        self._parser = Parser()

    @property
    def parser(self) -> Parser:
        """The parser holding every registered command specification."""
        return self._parser

    def register(self, handler: Handler) -> None:
        """Register ``handler`` under its command name and aliases."""
        spec = handler.spec
        if not spec.name:
            raise CommandError("handler spec must have a name")
        if spec.name in self._handlers:
            raise CommandError(f"handler for command {spec.name} already registered")
        try:
            self._parser.register_command(spec)
        except ValueError as exc:
            raise CommandError(f"failed to register command spec: {exc}") from exc

        self._handlers[spec.name] = handler
        if spec.category:
            self._categories.setdefault(spec.category, []).append(spec.name)
        for alias in spec.aliases:
            self._handlers[alias] = handler

    def execute(self, context: ExecutionContext, text: str) -> None:
        """Parse ``text`` and run it with the matching handler."""
        try:
            command = self._parser.parse(text)
        except ParseError as exc:
            raise CommandError(f"parse error: {exc}") from exc

        handler = self._handlers.get(command.name)
        if handler is None:
            raise CommandError(f"no handler registered for command: {command.name}")

        try:
            handler.validate_permissions(context, command)
        except CommandError as exc:
            raise CommandError(f"permission denied: {exc}") from exc

        context.start_time = datetime.now()
        handler.execute(context, command)

    def get_completions(self, context: ExecutionContext, text: str) -> list[str]:
        """Return completions for a command name or for the argument being typed."""
        parts = text.split()
        if not parts:
            return self._parser.get_completions("")

        ends_with_space = text.endswith(" ")
        if len(parts) == 1 and not ends_with_space:
            return self._parser.get_completions(parts[0])

        handler = self._handlers.get(parts[0])
        if handler is None:
            return []

        partial = ""
        args = parts[1:]
        if not ends_with_space and len(parts) > 1:
            partial = parts[-1]
            args = parts[1:-1]
        return handler.get_argument_completions(context, partial, args)

    def get_handler(self, name: str) -> Handler | None:
        """Return the handler for a command name or alias, or None."""
        return self._handlers.get(name)

    def list_commands(self) -> dict[str, list[str]]:
        """Command names by category; uncategorized commands are under ``""``."""
        result = {category: list(names) for category, names in self._categories.items()}
        uncategorized = [
            name
            for name, handler in self._handlers.items()
            if handler.spec.name == name and not handler.spec.category
        ]
        if uncategorized:
            result[""] = uncategorized
        return result

    def get_categories(self) -> list[str]:
        """Return every category that has at least one command."""
        return list(self._categories)


class HelpHandler(Handler):
    """Shows the list of commands or the help for one command."""

    def __init__(self, registry: HandlerRegistry) -> None:
        super().__init__(
            CommandSpec(
                name="help",
                description="Show help information for commands",
                usage="help [command]",
                category="system",
                min_args=0,
                max_args=1,
                examples=["help", "help download", "help config"],
            )
        )
        self._registry = registry

    def execute(self, context: ExecutionContext, command: Command) -> None:
        if not command.args:
            self._show_all_commands(context.output)
        else:
            self._show_command_help(context.output, command.args[0])

    def _show_all_commands(self, out: TextIO) -> None:
        print("Available commands:", file=out)
        print(file=out)
        for category, names in self._registry.list_commands().items():
            print(f"{category.title()}:" if category else "Other:", file=out)
            for name in names:
                handler = self._registry.get_handler(name)
                if handler is not None:
                    spec = handler.spec
                    print(f"  {spec.name:<15} {spec.description}", file=out)
            print(file=out)
        print(
            "Use 'help <command>' for detailed information about a specific command.",
            file=out,
        )

    def _show_command_help(self, out: TextIO, name: str) -> None:
        handler = self._registry.get_handler(name)
        if handler is None:
            raise CommandError(f"unknown command: {name}")
        try:
            text = self._registry.parser.get_command_help(handler.spec.name)
        except ParseError as exc:
            raise CommandError(f"failed to get help for command {name}: {exc}") from exc
        out.write(text)

    def get_argument_completions(
        self, context: ExecutionContext, partial: str, args: list[str]
    ) -> list[str]:
        if not args:
            return self._registry.parser.get_completions(partial)
        return []


class ExitHandler(Handler):
    """Ends the interactive shell."""

    def __init__(self) -> None:
        super().__init__(
            CommandSpec(
                name="exit",
                description="Exit the interactive shell",
                usage="exit",
                category="system",
                aliases=["quit", "q"],
                min_args=0,
                max_args=0,
            )
        )

    def execute(self, context: ExecutionContext, command: Command) -> None:
        raise ExitRequested("exit")


def is_close(a: str, b: str) -> bool:
    """True when one string is a prefix of the other or they differ in at most two places."""
    if not a or not b:
        return False
    if a.startswith(b) or b.startswith(a):
        return True
    length_gap = abs(len(a) - len(b))
    if length_gap > 2:
        return False
    differences = sum(1 for x, y in zip(a, b) if x != y) + length_gap
    return differences <= 2


class SuggestionEngine:
    """Suggests registered command names for mistyped input."""

    def __init__(self, registry: HandlerRegistry) -> None:
        self._registry = registry

    def get_suggestions(self, text: str) -> list[str]:
        """Return the command names (not aliases) close to ``text``."""
        return [
            name for name in self._registry.parser.get_completions("") if is_close(text, name)
        ]