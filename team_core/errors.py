class TeamCoreError(Exception):
    """Base class for errors reported by team_core."""

    def __init__(self, message: str = "", participant_id=None, team_id=None, violation=None):
        super().__init__(message)
        self.message = message
        self.participant_id = participant_id
        self.team_id = team_id
        self.violation = violation

class InsufficientParticipantsError(TeamCoreError):
    """Raised when generation is requested with fewer than 2 active participants."""

    pass

class ParticipantNotPlacedError(TeamCoreError):
    """Raised when a swap or move names a participant that is not on any team of the partition."""

    pass

class TeamNotFoundError(TeamCoreError):
    """Raised when a move names a team id that is not in the partition."""

    pass

class ConstraintViolationError(TeamCoreError):
    """Raised when a swap or move would break an active conflict or constraint."""

    pass

# Mapping of mutation error codes to exception classes
MUTATION_ERRORS = {
    "participant_not_placed": ParticipantNotPlacedError,
    "team_not_found": TeamNotFoundError,
    "constraint_violation": ConstraintViolationError,
}
