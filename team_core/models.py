# team_core/models.py
from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from .constants import (
    RATING_MIN, RATING_MAX, TEAM_COLORS, DEFAULT_TEAM_SIZE, DEFAULT_TEAM_NAMES,
    MUTUAL_EXCLUSION, COLOR_RESTRICTION,
    normalize_constraint_type, normalize_color,
)
from .errors import MUTATION_ERRORS

def _ordered_unique(values: List[str]) -> List[str]:
    seen = set()
    out = []
    for v in values:
        v = str(v).strip()
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return out

class Participant(BaseModel):
    id: str
    name: str
    rating: float = 3.0
    active: bool = True
    conflicts: List[str] = Field(default_factory=list)  # ids this participant refuses to share a team with
    position: str = ""

    @field_validator("rating")
    @classmethod
    def _rating_in_range(cls, v):
        if v < RATING_MIN or v > RATING_MAX:
            raise ValueError(f"rating must be between {RATING_MIN} and {RATING_MAX}, got {v}")
        return v

    @field_validator("conflicts")
    @classmethod
    def _unique_conflicts(cls, v):
        return _ordered_unique(v)

class Constraint(BaseModel):
    id: str
    type: str
    participant_ids: List[str] = Field(default_factory=list)
    restricted_colors: List[str] = Field(default_factory=list)  # only read for color-restriction
    active: bool = True
    description: str = ""

    @field_validator("type")
    @classmethod
    def _canonical_type(cls, v):
        return normalize_constraint_type(v)

    @field_validator("participant_ids")
    @classmethod
    def _unique_ids(cls, v):
        return _ordered_unique(v)

    @field_validator("restricted_colors")
    @classmethod
    def _normalize_colors(cls, v):
        return _ordered_unique([normalize_color(c) for c in v])

    def applies_to(self, participant_id: str) -> bool:
        return participant_id in self.participant_ids

    @property
    def is_mutual_exclusion(self) -> bool:
        return self.type == MUTUAL_EXCLUSION

    @property
    def is_color_restriction(self) -> bool:
        return self.type == COLOR_RESTRICTION

class Team(BaseModel):
    id: str
    name: str
    color: str
    members: List[Participant] = Field(default_factory=list)
    average_rating: float = 0.0

    @field_validator("color")
    @classmethod
    def _normalize_color(cls, v):
        c = normalize_color(v)
        if not c:
            raise ValueError("team color must not be empty")
        return c

    def member_ids(self) -> List[str]:
        return [m.id for m in self.members]

    def has_member(self, participant_id: str) -> bool:
        return any(m.id == participant_id for m in self.members)

    def others(self, participant_id: str) -> List[Participant]:
        return [m for m in self.members if m.id != participant_id]

class Violation(BaseModel):
    rule: Literal["conflict", "mutual-exclusion", "color-restriction"]
    participant_id: str
    other_id: Optional[str] = None
    constraint_id: Optional[str] = None
    color: Optional[str] = None
    message: str = ""

class UnresolvedPlacement(BaseModel):
    """A participant the generator had to place against a hard rule."""
    participant_id: str
    team_id: str
    violation: Violation

class Partition(BaseModel):
    teams: List[Team] = Field(default_factory=list)
    active_ids: List[str] = Field(default_factory=list)
    unresolved: List[UnresolvedPlacement] = Field(default_factory=list)

    def team_by_id(self, team_id: str) -> Optional[Team]:
        for t in self.teams:
            if t.id == team_id:
                return t
        return None

    def team_of(self, participant_id: str) -> Optional[Team]:
        for t in self.teams:
            if t.has_member(participant_id):
                return t
        return None

    def team_by_color(self, color: str) -> Optional[Team]:
        c = normalize_color(color)
        for t in self.teams:
            if t.color == c:
                return t
        return None

    def placed_ids(self) -> List[str]:
        return [pid for t in self.teams for pid in t.member_ids()]

    @property
    def relaxed(self) -> bool:
        """True when generation had to break a hard rule to place someone."""
        return bool(self.unresolved)

class MutationError(BaseModel):
    code: Literal["participant_not_placed", "team_not_found", "constraint_violation"]
    message: str
    participant_id: Optional[str] = None
    team_id: Optional[str] = None
    side: Optional[Literal["a", "b"]] = None  # swap only: which half was rejected
    violation: Optional[Violation] = None

class MutationResult(BaseModel):
    partition: Partition
    error: Optional[MutationError] = None
    changed: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is None:
            return
        exc_cls = MUTATION_ERRORS[self.error.code]
        raise exc_cls(
            self.error.message,
            participant_id=self.error.participant_id,
            team_id=self.error.team_id,
            violation=self.error.violation,
        )

class AppSettings(BaseModel):
    team_size: int = DEFAULT_TEAM_SIZE
    team_names: List[str] = Field(default_factory=lambda: list(DEFAULT_TEAM_NAMES))
    palette: List[str] = Field(default_factory=lambda: list(TEAM_COLORS))
    refine_passes: int = 3
    random_seed: Optional[int] = None

    @field_validator("team_size")
    @classmethod
    def _positive_size(cls, v):
        if v < 1:
            raise ValueError("team_size must be at least 1")
        return v

    @field_validator("palette")
    @classmethod
    def _palette(cls, v):
        colors = [normalize_color(c) for c in v]
        if not colors or any(not c for c in colors):
            raise ValueError("palette must be a non-empty list of color labels")
        if len(set(colors)) != len(colors):
            raise ValueError("palette colors must be unique")
        return colors

    @field_validator("refine_passes")
    @classmethod
    def _non_negative(cls, v):
        if v < 0:
            raise ValueError("refine_passes must be >= 0")
        return v

    def team_name(self, index: int) -> str:
        if index < len(self.team_names) and self.team_names[index].strip():
            return self.team_names[index]
        return f"Team {index + 1}"
