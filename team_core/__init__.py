"""
team_core package: participant/constraint models, the shared constraint predicate,
the balanced partition generator, swap/move mutations, and roster IO/export helpers.
"""
from .errors import (
    InsufficientParticipantsError, ParticipantNotPlacedError,
    TeamNotFoundError, ConstraintViolationError,
)
from .models import (
    Participant, Constraint, Team, Partition, Violation, UnresolvedPlacement,
    MutationError, MutationResult, AppSettings,
)
from .aggregates import average_rating
from .constraints import violates, find_violation
from .generator import generate
from .mutation import swap, move

__version__ = "0.1.0"

__all__ = [
    "Participant",
    "Constraint",
    "Team",
    "Partition",
    "Violation",
    "UnresolvedPlacement",
    "MutationError",
    "MutationResult",
    "AppSettings",
    "InsufficientParticipantsError",
    "ParticipantNotPlacedError",
    "TeamNotFoundError",
    "ConstraintViolationError",
    "average_rating",
    "violates",
    "find_violation",
    "generate",
    "swap",
    "move",
]
