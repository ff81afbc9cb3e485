# global_bridge/errors.py
from __future__ import annotations


class GlobalBridgeError(Exception):
    """Base class for every error the program core raises."""


class ValidationError(GlobalBridgeError, ValueError):
    """Bad field values at registration or import time."""


class RoleConstraintError(GlobalBridgeError, ValueError):
    """A pairing violates the mentor (Korean) / mentee (English) rule."""


class SelectionError(GlobalBridgeError, ValueError):
    """A required participant or activity was not selected."""


class UnknownPairError(GlobalBridgeError, KeyError):
    """An activity refers to a pair key that is not registered."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class PersistenceError(GlobalBridgeError, OSError):
    """Saving or loading the program state failed (missing file excluded)."""


class MatchingError(GlobalBridgeError, RuntimeError):
    """The optimal matcher could not produce an assignment."""
