"""Parsing of interactive shell commands: tokens, flags and arguments."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

ARG = "arg"
LONG_FLAG = "long_flag"
SHORT_FLAG = "short_flag"

FLAG_TYPES = ("string", "int", "bool", "float")

_INTEGER = re.compile(r"[+-]?[0-9]+")
_HEX_FLOAT = re.compile(r"[+-]?0[xX][0-9a-fA-F]*\.?[0-9a-fA-F]*[pP][+-]?[0-9]+")


class ParseError(Exception):
    """Raised when input cannot be turned into a valid command.

    ``command`` holds what had been parsed before the error, when anything had.
    """

    def __init__(self, message: str, command: Command | None = None) -> None:
        super().__init__(message)
        self.command = command


class UnknownCommandError(ParseError):
    """Raised when the first word names no registered command."""


@dataclass(frozen=True)
class Token:
    """One word of the input with its kind and starting position."""

    type: str
    value: str
    position: int


@dataclass(frozen=True)
class FlagSpec:
    """Definition of a flag a command accepts."""

    type: str
    short: str = ""
    description: str = ""
    default: Any = None
    required: bool = False


@dataclass
class CommandSpec:
    """Definition of a command: arguments, flags and help text."""

    name: str
    description: str = ""
    usage: str = ""
    category: str = ""
    aliases: list[str] = field(default_factory=list)
    min_args: int = 0
    max_args: int = -1  # -1 means no limit
    flags: dict[str, FlagSpec] = field(default_factory=dict)
    examples: list[str] = field(default_factory=list)


@dataclass
class Command:
    """A parsed command line."""

    name: str
    args: list[str] = field(default_factory=list)
    flags: dict[str, Any] = field(default_factory=dict)
    raw_input: str = ""
    position: int = 0


def _token_type(value: str) -> str:
    if value.startswith("--"):
        return LONG_FLAG
    if value.startswith("-") and len(value) > 1:
        return SHORT_FLAG
    return ARG


def _parse_float(text: str) -> float:
    if "_" in text or text != text.strip():
        raise ValueError(text)
    if _HEX_FLOAT.fullmatch(text):
        return float.fromhex(text)
    return float(text)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_valid_type(value: Any, expected: str) -> bool:
    if expected == "string":
        return isinstance(value, str)
    if expected == "int":
        return isinstance(value, int) and not isinstance(value, bool)
    if expected == "float":
        return isinstance(value, float)
    if expected == "bool":
        return isinstance(value, bool)
    return False


def _check_arg_count(spec: CommandSpec, count: int) -> str | None:
    if count < spec.min_args:
        return f"command {spec.name} requires at least {spec.min_args} arguments, got {count}"
    if spec.max_args >= 0 and count > spec.max_args:
        return f"command {spec.name} accepts at most {spec.max_args} arguments, got {count}"
    return None


class Parser:
    """Registry of command specifications that parses input against them."""

    def __init__(self) -> None:
        self._specs: dict[str, CommandSpec] = {}

    def register_command(self, spec: CommandSpec) -> None:
        """Register ``spec`` under its name and aliases.

        Raises ValueError if the name is empty or any name is already taken.
        """
        if not spec.name:
            raise ValueError("command name cannot be empty")
        if spec.name in self._specs:
            raise ValueError(f"command {spec.name} already registered")
        taken = {spec.name}
        for alias in spec.aliases:
            if alias in self._specs or alias in taken:
                raise ValueError(f"alias {alias} conflicts with existing command")
            taken.add(alias)
        for name in taken:
            self._specs[name] = spec

    def parse(self, text: str) -> Command:
        """Parse a command line according to the registered specifications."""
        if not text.strip():
            raise ParseError("empty command")
        try:
            tokens = self.tokenize(text)
        except ParseError as exc:
            raise ParseError(f"tokenization error: {exc}") from exc
        if not tokens:
            raise ParseError("no command found")

        first = tokens[0]
        command = Command(name=first.value, raw_input=text, position=first.position)
        spec = self._specs.get(command.name)
        if spec is None:
            raise UnknownCommandError(f"unknown command: {command.name}", command)
        return self._parse_with_spec(command, tokens[1:], spec)

    def tokenize(self, text: str) -> list[Token]:
        """Split ``text`` into tokens, honouring quotes and backslash escapes."""
        tokens: list[Token] = []
        current: list[str] = []
        quote: str | None = None
        escaped = False
        position = 0

        for index, char in enumerate(text):
            if escaped:
                current.append(char)
                escaped = False
                continue
            if char == "\\":
                escaped = True
                continue
            if quote is None and char in "\"'":
                quote = char
                continue
            if quote is not None and char == quote:
                quote = None
                continue
            if quote is None and char.isspace():
                if current:
                    value = "".join(current)
                    tokens.append(Token(_token_type(value), value, position))
                    current.clear()
                    position = index + 1
                continue
            current.append(char)

        if quote is not None:
            raise ParseError(f"unterminated quote at position {position}")
        if current:
            value = "".join(current)
            tokens.append(Token(_token_type(value), value, position))
        return tokens

    def _parse_with_spec(
        self, command: Command, tokens: list[Token], spec: CommandSpec
    ) -> Command:
        for name, flag in spec.flags.items():
            if flag.default is not None:
                command.flags[name] = flag.default

        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.type == LONG_FLAG:
                i += self._parse_flag(command, token.value[2:], tokens, i, spec, short=False)
            elif token.type == SHORT_FLAG:
                chars = token.value[1:]
                last = len(chars) - 1
                for j, char in enumerate(chars):
                    name = self._find_short_flag(char, spec)
                    where = token.position + j + 1
                    if name is None:
                        raise ParseError(f"unknown flag: -{char} at position {where}", command)
                    if j == last:
                        i += self._parse_flag(command, name, tokens, i, spec, short=True)
                    else:
                        if spec.flags[name].type != "bool":
                            raise ParseError(
                                f"non-boolean flag -{char} cannot be combined at position {where}",
                                command,
                            )
                        command.flags[name] = True
            else:
                command.args.append(token.value)
                i += 1

        problem = _check_arg_count(spec, len(command.args))
        if problem:
            raise ParseError(problem, command)

        for name, flag in spec.flags.items():
            if flag.required and name not in command.flags:
                raise ParseError(f"required flag --{name} is missing", command)
        return command

    def _parse_flag(
        self,
        command: Command,
        name: str,
        tokens: list[Token],
        index: int,
        spec: CommandSpec,
        short: bool,
    ) -> int:
        flag = spec.flags.get(name)
        if flag is None:
            prefix = "-" if short else "--"
            raise ParseError(f"unknown flag: {prefix}{name}", command)

        if flag.type == "bool":
            command.flags[name] = True
            return 1

        kinds = {"string": "a string", "int": "an integer", "float": "a float"}
        if flag.type not in kinds:
            raise ParseError(f"unsupported flag type: {flag.type}", command)
        kind = kinds[flag.type]

        if index + 1 >= len(tokens) or tokens[index + 1].type != ARG:
            raise ParseError(f"flag --{name} requires {kind} value", command)
        raw = tokens[index + 1].value

        if flag.type == "string":
            command.flags[name] = raw
        elif flag.type == "int":
            if not _INTEGER.fullmatch(raw):
                raise ParseError(f"flag --{name} requires {kind} value, got: {raw}", command)
            command.flags[name] = int(raw)
        else:
            try:
                command.flags[name] = _parse_float(raw)
            except ValueError:
                raise ParseError(
                    f"flag --{name} requires {kind} value, got: {raw}", command
                ) from None
        return 2

    @staticmethod
    def _find_short_flag(char: str, spec: CommandSpec) -> str | None:
        return next(
            (name for name, flag in spec.flags.items() if flag.short == char), None
        )

    def get_command_specs(self) -> dict[str, CommandSpec]:
        """Return a copy of the name-to-spec mapping, aliases included."""
        return dict(self._specs)

    def get_completions(self, partial: str) -> list[str]:
        """Return command names (not aliases) starting with ``partial``."""
        return [
            name
            for name, spec in self._specs.items()
            if name == spec.name and name.startswith(partial)
        ]

    def validate(self, command: Command) -> None:
        """Check a command against its specification, raising ParseError if invalid."""
        spec = self._specs.get(command.name)
        if spec is None:
            raise UnknownCommandError(f"unknown command: {command.name}", command)

        problem = _check_arg_count(spec, len(command.args))
        if problem:
            raise ParseError(problem, command)

        for name, value in command.flags.items():
            flag = spec.flags.get(name)
            if flag is None:
                raise ParseError(f"unknown flag: {name}", command)
            if not _is_valid_type(value, flag.type):
                raise ParseError(
                    f"flag {name} has invalid type: expected {flag.type}, "
                    f"got {type(value).__name__}",
                    command,
                )

    def get_command_help(self, command_name: str) -> str:
        """Return the help text for a command or alias."""
        spec = self._specs.get(command_name)
        if spec is None:
            raise UnknownCommandError(f"unknown command: {command_name}")

        lines = [f"Command: {spec.name}", f"Description: {spec.description}"]
        if spec.usage:
            lines.append(f"Usage: {spec.usage}")
        if spec.category:
            lines.append(f"Category: {spec.category}")
        if spec.aliases:
            lines.append(f"Aliases: {', '.join(spec.aliases)}")

        if spec.flags:
            lines += ["", "Flags:"]
            for name, flag in spec.flags.items():
                short = f", -{flag.short}" if flag.short else ""
                required = " (required)" if flag.required else ""
                default = (
                    f" (default: {_format_value(flag.default)})"
                    if flag.default is not None
                    else ""
                )
                lines.append(f"  --{name}{short}: {flag.description}{required}{default}")

        if spec.examples:
            lines += ["", "Examples:"]
            lines += [f"  {example}" for example in spec.examples]

        return "\n".join(lines) + "\n"