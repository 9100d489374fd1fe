"""
Errors raised by tournament operations.

None of them is fatal: the snapshot passed to a failing operation is left
untouched and stays usable.
"""


class TournamentError(Exception):
    """Base class for every error a tournament operation can raise."""


class ValidationError(TournamentError):
    """Bad user input: config values, scores or match references."""


class PreconditionError(TournamentError):
    """The operation is not allowed in the tournament's current state."""


class SchedulingInfeasible(TournamentError):
    """The randomized league scheduler could not meet every entrant's quota."""

    def __init__(self, message, entrants=None):
        super().__init__(message)
        self.entrants = list(entrants) if entrants else []
