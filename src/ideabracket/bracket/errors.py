"""Exceptions raised by the bracket engine and its storage adapters."""


class BracketError(Exception):
    """Base class for all bracket engine errors."""
    pass


class SeedingError(BracketError, ValueError):
    """Raised when a participant list cannot be ordered or seeded."""
    pass


class NotEnoughParticipantsError(SeedingError):
    """Raised when fewer participants are supplied than the caller requires."""

    def __init__(self, count: int, minimum: int):
        self.count = count
        self.minimum = minimum
        super().__init__(
            f"At least {minimum} participants are required, got {count}"
        )


class MatchNotFoundError(BracketError, LookupError):
    """Raised when a match id is not present in the supplied match list."""

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f"Match {match_id} not found")


class BracketNotFoundError(BracketError, LookupError):
    """Raised when a tournament has no stored bracket."""

    def __init__(self, tournament_id: str):
        self.tournament_id = tournament_id
        super().__init__(f"Tournament bracket not found: {tournament_id}")


class InvalidTransitionError(BracketError):
    """Raised when a match cannot move to the requested state."""
    pass


class WinnerLockedError(InvalidTransitionError):
    """Raised when changing a winner whose dependent match is already closed."""
    pass


class ConcurrentUpdateError(BracketError):
    """Raised when a bracket was modified by another writer since it was loaded."""
    pass
