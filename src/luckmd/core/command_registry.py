"""Command Registry - Named invocable actions.

Plugins and extensions contribute commands by id. The first registration
for an id wins; later registrations of the same id are ignored so one
extension cannot clobber another's command.

Usage:
    registry = CommandRegistry()

    # Register a command
    registry.register("demo.say_hello", lambda name="LuckMD": f"Hello {name}")

    # Search commands
    matches = registry.search("hello")

    # Execute by ID (sync and async handlers alike)
    greeting = await registry.execute("demo.say_hello", "Ada")
"""

from __future__ import annotations

import inspect
import logging
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional, Union

from luckmd.errors import CommandNotFoundError

logger = logging.getLogger(__name__)


CommandHandler = Callable[..., Any]
AsyncCommandHandler = Callable[..., Awaitable[Any]]


@dataclass
class Command:
    """A registered command.

    Only ``id`` and ``handler`` matter to execution; the remaining fields
    are display metadata for palettes and cheatsheets.
    """

    id: str
    handler: Union[CommandHandler, AsyncCommandHandler]
    title: str = ""
    description: str = ""
    category: Optional[str] = None
    keybinding: Optional[str] = None
    source: str = "core"  # core or the contributing extension id

    def __post_init__(self):
        if not self.title:
            self.title = self.id


@dataclass
class CommandHistoryEntry:
    """An entry in command history."""

    command_id: str
    timestamp: datetime
    success: bool
    error: Optional[str] = None
    duration_ms: int = 0


class CommandRegistry:
    """Central registry for commands.

    Provides:
    - First-wins registration
    - Execution of sync and async handlers
    - Substring search across ids, titles and descriptions
    - Execution history and recent commands
    """

    def __init__(self, max_history: int = 100, max_recent: int = 10):
        self._commands: Dict[str, Command] = {}
        self._history: Deque[CommandHistoryEntry] = deque(maxlen=max_history)
        self._recent: Deque[str] = deque(maxlen=max_recent)

    def register(
        self,
        command_id: str,
        handler: Union[CommandHandler, AsyncCommandHandler],
        *,
        title: Optional[str] = None,
        description: str = "",
        category: Optional[str] = None,
        keybinding: Optional[str] = None,
        source: str = "core",
    ) -> bool:
        """Register a command handler.

        Args:
            command_id: Unique command id
            handler: Callable invoked by ``execute``
            title: Display title (defaults to the id)
            description: Short description
            category: Optional grouping for palettes
            keybinding: Optional key hint
            source: Contributor of the command

        Returns:
            True if registered, False if the id was already taken
        """
        if command_id in self._commands:
            existing = self._commands[command_id]
            logger.debug(
                "CommandRegistry: '%s' already registered by %s; ignoring %s",
                command_id,
                existing.source,
                source,
            )
            return False

        self._commands[command_id] = Command(
            id=command_id,
            handler=handler,
            title=title or command_id,
            description=description,
            category=category,
            keybinding=keybinding,
            source=source,
        )
        logger.debug(f"CommandRegistry: Registered '{command_id}' ({source})")
        return True

    def get(self, command_id: str) -> Optional[Command]:
        """Get a command by id, or None."""
        return self._commands.get(command_id)

    def has(self, command_id: str) -> bool:
        return command_id in self._commands

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def all(self) -> List[Command]:
        """All commands in registration order."""
        return list(self._commands.values())

    async def execute(self, command_id: str, *args: Any, **kwargs: Any) -> Any:
        """Execute a command by id.

        Args:
            command_id: The command id
            *args: Positional arguments for the handler
            **kwargs: Keyword arguments for the handler

        Returns:
            Whatever the handler returns (awaited if awaitable)

        Raises:
            CommandNotFoundError: If no command has this id
        """
        command = self._commands.get(command_id)
        if command is None:
            raise CommandNotFoundError(command_id)

        start = time.monotonic()
        try:
            output = command.handler(*args, **kwargs)
            if inspect.isawaitable(output):
                output = await output
        except Exception as e:
            self._record(command_id, start, error=str(e) or type(e).__name__)
            logger.error(f"CommandRegistry: Error executing '{command_id}': {e}")
            raise

        self._record(command_id, start)
        return output

    def _record(self, command_id: str, start: float, error: Optional[str] = None) -> None:
        self._history.append(
            CommandHistoryEntry(
                command_id=command_id,
                timestamp=datetime.now(),
                success=error is None,
                error=error,
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        )
        if command_id in self._recent:
            self._recent.remove(command_id)
        self._recent.appendleft(command_id)

    def search(self, query: str, limit: int = 10) -> List[Command]:
        """Search for commands by substring matching.

        Args:
            query: Search query
            limit: Maximum results to return

        Returns:
            Matching commands, most relevant first
        """
        if not query:
            return self.recent()[:limit]

        query_lower = query.lower()
        scored = []
        for cmd in self._commands.values():
            score = self._match_score(query_lower, cmd)
            if score > 0:
                scored.append((score, cmd))

        # sorted() is stable, ties keep registration order
        scored.sort(key=lambda x: x[0], reverse=True)
        return [cmd for _, cmd in scored[:limit]]

    def _match_score(self, query: str, command: Command) -> float:
        title = command.title.lower()
        cid = command.id.lower()
        desc = command.description.lower()

        if query in (title, cid):
            score = 100.0
        elif title.startswith(query) or cid.startswith(query):
            score = 75.0
        elif query in title or query in cid:
            score = 50.0
        elif query in desc:
            score = 20.0
        else:
            return 0.0

        if command.id in self._recent:
            score += 10 - list(self._recent).index(command.id)
        return score

    def recent(self) -> List[Command]:
        """Recently executed commands, newest first."""
        return [self._commands[cid] for cid in self._recent if cid in self._commands]

    @property
    def history(self) -> List[CommandHistoryEntry]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()
        self._recent.clear()
