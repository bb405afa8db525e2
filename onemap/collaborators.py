"""
Collaborator interfaces consumed by the mind-map engine.

The engine never generates ids, reads the clock, shows a toast or asks the
user a question directly. It goes through these protocols so the host page
(NiceGUI) and the tests can plug in their own implementations.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class IdGenerator(Protocol):
    def generate(self) -> str:
        """Return a new id, unique within the map."""
        ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> str:
        """Return the current time as an ISO-8601 string."""
        ...


@runtime_checkable
class Notifier(Protocol):
    def notify(self, title: str, message: str, severity: str = "info") -> None:
        """
        Show a user-visible message. Fire-and-forget.

        severity follows NiceGUI notification types:
        'positive', 'negative', 'warning', 'info'.
        """
        ...


@runtime_checkable
class Confirm(Protocol):
    def ask(self, message: str) -> bool:
        """Synchronous yes/no gate before a destructive operation."""
        ...


class UuidGenerator:
    """Default id generator (UUID4 strings)."""

    def generate(self) -> str:
        return str(uuid.uuid4())


class UtcClock:
    """Default clock: UTC ISO-8601 with a trailing 'Z'."""

    def now(self) -> str:
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class LoggingNotifier:
    """Notifier for headless use; writes notifications to the log."""

    _LEVELS = {
        "negative": logging.WARNING,
        "warning": logging.WARNING,
    }

    def notify(self, title: str, message: str, severity: str = "info") -> None:
        level = self._LEVELS.get(severity, logging.INFO)
        logger.log(level, f"{title}: {message}" if message else title)


class StaticConfirm:
    """Confirm that always gives the same answer (an already-answered dialog)."""

    def __init__(self, answer: bool):
        self.answer = answer

    def ask(self, message: str) -> bool:
        return self.answer
