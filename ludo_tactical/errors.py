class LudoTacticalError(Exception):
    """Base class for rejected transitions.

    ``reason`` is a short machine-readable code; the caller owns the
    user-facing wording.
    """

    def __init__(self, reason: str, message: str = ""):
        self.reason = reason
        super().__init__(message or reason)


class InvalidTurn(LudoTacticalError):
    """Wrong active player, wrong phase, stale nonce or match not running."""

    pass


class InvalidAction(LudoTacticalError):
    """Action is not part of the current legal set."""

    pass


class StaleBankEntry(LudoTacticalError):
    """Referenced bank entry was already spent (or never existed)."""

    pass


class InternalInvariantViolation(LudoTacticalError):
    """Engine reached a state its rules do not define. Never expected in play."""

    pass
