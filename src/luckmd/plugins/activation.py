"""Extension activation protocol.

Each extension moves through::

    UNACTIVATED -> ACTIVATING -> ACTIVATED -> DEACTIVATED
                             \\-> FAILED

Extensions are activated strictly one after another in the order they
were supplied. Extension N+1 does not start until extension N's
``activate`` has returned (or its awaitable has settled), because later
extensions may rely on commands and slots contributed by earlier ones.

Failure handling is chosen by ``ActivationPolicy``:

- ``ABORT``: the first failure stops activation. Remaining extensions
  are left unactivated and ``ExtensionActivationError`` is raised.
- ``COLLECT``: every extension is attempted. Failures are logged through
  the context logger and returned in the ``ActivationReport``.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence

from luckmd.core.event_bus import EXTENSION_ACTIVATED, EXTENSION_FAILED
from luckmd.errors import ActivationFailure, ExtensionActivationError
from luckmd.plugins.protocol import ActivationContext, Extension

logger = logging.getLogger(__name__)


class ActivationPolicy(str, Enum):
    """What to do when an extension fails to activate."""

    ABORT = "abort"
    COLLECT = "collect"


class ActivationState(str, Enum):
    """Lifecycle state of an extension."""

    UNACTIVATED = "unactivated"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    FAILED = "failed"
    DEACTIVATED = "deactivated"


@dataclass
class ActivationReport:
    """Outcome of one activation run."""

    activated: List[str] = field(default_factory=list)
    failures: List[ActivationFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _log_failure(context: ActivationContext, failure: ActivationFailure) -> None:
    # The logger service only guarantees positional arguments
    context.logger.error(
        "Extension '%s' failed to %s: %s",
        failure.extension_id,
        failure.phase,
        failure.message,
    )
    logger.debug(
        "Traceback for extension '%s' (%s)",
        failure.extension_id,
        failure.phase,
        exc_info=failure.error,
    )


class ExtensionActivator:
    """Runs activate/deactivate entrypoints for a set of extensions."""

    def __init__(self, policy: ActivationPolicy | str = ActivationPolicy.ABORT):
        self.policy = ActivationPolicy(policy)
        self.report = ActivationReport()
        self._states: Dict[str, ActivationState] = {}
        self._activated: List[Extension] = []

    def state(self, extension_id: str) -> ActivationState:
        return self._states.get(extension_id, ActivationState.UNACTIVATED)

    @property
    def activated(self) -> List[str]:
        return [ext.id for ext in self._activated]

    async def activate_all(
        self,
        extensions: Sequence[Extension],
        context: ActivationContext,
    ) -> ActivationReport:
        """Activate extensions sequentially in the given order.

        Raises:
            ExtensionActivationError: Under ``ABORT`` when one fails
        """
        report = ActivationReport()
        self.report = report

        for index, ext in enumerate(extensions):
            if self.state(ext.id) is not ActivationState.UNACTIVATED:
                logger.warning("Extension '%s' already %s; skipping", ext.id, self.state(ext.id).value)
                continue

            self._states[ext.id] = ActivationState.ACTIVATING
            try:
                result = ext.activate(context)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                failure = ActivationFailure.from_exception(ext.id, "activate", exc)
                self._states[ext.id] = ActivationState.FAILED
                report.failures.append(failure)
                _log_failure(context, failure)
                context.events.emit(
                    EXTENSION_FAILED, {"id": ext.id, "phase": "activate", "error": failure.message}
                )

                if self.policy is ActivationPolicy.ABORT:
                    report.skipped.extend(e.id for e in extensions[index + 1:])
                    if report.skipped:
                        logger.info("Skipping %d extension(s) after failure of '%s'", len(report.skipped), ext.id)
                    raise ExtensionActivationError(ext.id, [failure]) from exc
                continue

            self._states[ext.id] = ActivationState.ACTIVATED
            self._activated.append(ext)
            report.activated.append(ext.id)
            context.events.emit(EXTENSION_ACTIVATED, {"id": ext.id})
            logger.debug(f"Activated extension '{ext.id}'")

        if report.failures:
            context.logger.warning(
                "%d extension(s) failed to activate: %s",
                len(report.failures),
                ", ".join(f.extension_id for f in report.failures),
            )
        return report

    async def deactivate_all(self, context: ActivationContext) -> List[ActivationFailure]:
        """Deactivate activated extensions in reverse activation order.

        Failures are logged and returned, never raised.
        """
        failures: List[ActivationFailure] = []
        while self._activated:
            ext = self._activated.pop()
            deactivate = getattr(ext, "deactivate", None)
            try:
                if callable(deactivate):
                    result = deactivate(context)
                    if inspect.isawaitable(result):
                        await result
            except Exception as exc:
                failure = ActivationFailure.from_exception(ext.id, "deactivate", exc)
                failures.append(failure)
                self._states[ext.id] = ActivationState.FAILED
                _log_failure(context, failure)
                continue
            self._states[ext.id] = ActivationState.DEACTIVATED
        return failures
