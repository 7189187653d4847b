"""Error taxonomy for the luckmd runtime.

Lookup failures (service tokens, command ids) raise immediately to the
caller. Registration conflicts are never errors. Extension activation
failures are wrapped so they always carry the extension id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


class LuckmdError(Exception):
    """Base class for runtime errors."""


class ServiceNotFoundError(LuckmdError, LookupError):
    """Raised when a service token has no registered instance."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Service not found: {token}")


class CommandNotFoundError(LuckmdError, LookupError):
    """Raised when executing a command id that was never registered."""

    def __init__(self, command_id: str):
        self.command_id = command_id
        super().__init__(f"Command not found: {command_id}")


@dataclass(frozen=True)
class ActivationFailure:
    """Captured failure of an extension entrypoint."""

    extension_id: str
    phase: Literal["activate", "deactivate"]
    error: BaseException
    message: str

    @classmethod
    def from_exception(
        cls,
        extension_id: str,
        phase: Literal["activate", "deactivate"],
        exc: BaseException,
    ) -> "ActivationFailure":
        return cls(
            extension_id=extension_id,
            phase=phase,
            error=exc,
            message=str(exc) or type(exc).__name__,
        )


class ExtensionActivationError(LuckmdError):
    """Raised when one or more extensions fail to activate."""

    def __init__(
        self,
        extension_id: str,
        failures: Optional[list[ActivationFailure]] = None,
    ):
        self.extension_id = extension_id
        self.failures = list(failures or [])
        detail = ""
        if self.failures:
            detail = f": {self.failures[0].message}"
        super().__init__(f"Extension '{extension_id}' failed to activate{detail}")


@dataclass(frozen=True)
class HandlerError:
    """Captured event handler failure."""

    event: str
    handler: str
    message: str
