"""Glue between the command registry and the interactive shell."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import Any, TextIO

from pubdatahub.command.handler import (
    CommandError,
    ExecutionContext,
    ExitHandler,
    HandlerRegistry,
    HelpHandler,
    Session,
    SuggestionEngine,
)


class ShellIntegration:
    """Runs shell input through the registry, keeping history and offering suggestions."""

    def __init__(self, output: TextIO | None = None) -> None:
        self._output = output
        self._registry = HandlerRegistry()
        self._suggestion = SuggestionEngine(self._registry)
        self._session = Session(id="default")
        self._registry.register(HelpHandler(self._registry))
        self._registry.register(ExitHandler())

    @property
    def registry(self) -> HandlerRegistry:
        """The handler registry, for registering further commands."""
        return self._registry

    @property
    def session(self) -> Session:
        """The current session."""
        return self._session

    def _context(
        self,
        data_sources: Mapping[str, Any] | None,
        job_manager: Any,
        config: Any,
    ) -> ExecutionContext:
        return ExecutionContext(
            session=self._session,
            parser=self._registry.parser,
            data_sources=dict(data_sources or {}),
            job_manager=job_manager,
            config=config,
            output=self._output if self._output is not None else sys.stdout,
        )

    def process_command(
        self,
        text: str,
        data_sources: Mapping[str, Any] | None = None,
        job_manager: Any = None,
        config: Any = None,
    ) -> None:
        """Record ``text`` in the history and run it.

        Errors about unknown commands carry suggestions for what may have been meant.
        """
        self._session.history.append(text)
        context = self._context(data_sources, job_manager, config)
        try:
            self._registry.execute(context, text)
        except CommandError as exc:
            if "unknown command" in str(exc):
                parts = text.split()
                if parts:
                    suggestions = self._suggestion.get_suggestions(parts[0])
                    if suggestions:
                        raise CommandError(
                            f"{exc}\nDid you mean: {', '.join(suggestions)}"
                        ) from exc
            raise

    def get_completions(
        self,
        text: str,
        data_sources: Mapping[str, Any] | None = None,
        job_manager: Any = None,
        config: Any = None,
    ) -> list[str]:
        """Return tab completions for ``text``."""
        context = self._context(data_sources, job_manager, config)
        return self._registry.get_completions(context, text)

    def list_commands(self) -> dict[str, list[str]]:
        """Command names by category."""
        return self._registry.list_commands()

    def get_command_help(self, command_name: str) -> str:
        """Help text for a command or alias."""
        return self._registry.parser.get_command_help(command_name)