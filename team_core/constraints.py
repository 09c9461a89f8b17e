# team_core/constraints.py
from __future__ import annotations
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from .constants import DIRECT_CONFLICT, MUTUAL_EXCLUSION, COLOR_RESTRICTION, TEAM_COLORS, normalize_color
from .models import Participant, Constraint, Team, UnresolvedPlacement, Violation

def in_conflict(a: Participant, b: Participant) -> bool:
    """Conflict lists are stored per participant; either side declaring it counts."""
    return b.id in a.conflicts or a.id in b.conflicts

def active_constraints(constraints: Iterable[Constraint]) -> List[Constraint]:
    return [c for c in (constraints or []) if c.active]

def find_violation(
    participant: Participant,
    teammates: Iterable[Participant],
    team_color: str,
    constraints: Iterable[Constraint],
) -> Optional[Violation]:
    """
    First rule that forbids `participant` joining `teammates` on a team of `team_color`.

    Order:
      1. direct conflicts (both storage directions)
      2. active constraints naming the participant
         - mutual-exclusion: another named participant already a teammate
         - color-restriction: team color is restricted
      unknown constraint types are skipped
    Returns None when the placement is allowed.
    """
    mates = [m for m in teammates if m.id != participant.id]
    color = normalize_color(team_color)

    for mate in mates:
        if in_conflict(participant, mate):
            return Violation(
                rule=DIRECT_CONFLICT,
                participant_id=participant.id,
                other_id=mate.id,
                message=f"{participant.name} has a conflict with {mate.name}.",
            )

    mate_ids = {m.id for m in mates}
    mate_names = {m.id: m.name for m in mates}
    for c in active_constraints(constraints):
        if not c.applies_to(participant.id):
            continue
        if c.type == MUTUAL_EXCLUSION:
            clash = [pid for pid in c.participant_ids if pid != participant.id and pid in mate_ids]
            if clash:
                return Violation(
                    rule=MUTUAL_EXCLUSION,
                    participant_id=participant.id,
                    other_id=clash[0],
                    constraint_id=c.id,
                    message=f"{participant.name} must not play with {mate_names[clash[0]]}.",
                )
        elif c.type == COLOR_RESTRICTION:
            if color in c.restricted_colors:
                return Violation(
                    rule=COLOR_RESTRICTION,
                    participant_id=participant.id,
                    constraint_id=c.id,
                    color=color,
                    message=f"{participant.name} cannot wear {color}.",
                )
    return None

def violates(
    participant: Participant,
    teammates: Iterable[Participant],
    team_color: str,
    constraints: Iterable[Constraint],
) -> bool:
    return find_violation(participant, teammates, team_color, constraints) is not None

class ConflictIndex:
    """Symmetric conflict relation over a roster (unordered id pairs)."""

    def __init__(self, participants: Iterable[Participant]):
        self._declared: Set[Tuple[str, str]] = set()
        self._pairs: Set[FrozenSet[str]] = set()
        for p in participants:
            for other in p.conflicts:
                if other == p.id:
                    continue
                self._declared.add((p.id, other))
                self._pairs.add(frozenset((p.id, other)))

    def conflicts(self, a_id: str, b_id: str) -> bool:
        return frozenset((a_id, b_id)) in self._pairs

    def partners(self, participant_id: str) -> List[str]:
        out = []
        for pair in self._pairs:
            if participant_id in pair:
                out.extend(x for x in pair if x != participant_id)
        return sorted(out)

    def pairs(self) -> List[Tuple[str, str]]:
        return sorted(tuple(sorted(p)) for p in self._pairs)

    def asymmetric_pairs(self) -> List[Tuple[str, str]]:
        """(declared_by, named) pairs listed on one side only. Reported, never repaired."""
        return sorted((a, b) for a, b in self._declared if (b, a) not in self._declared)

    def __len__(self) -> int:
        return len(self._pairs)

def validate_roster(
    participants: List[Participant],
    constraints: Optional[List[Constraint]] = None,
    palette: Optional[List[str]] = None,
) -> List[str]:
    errs: List[str] = []
    ids = [p.id for p in participants]
    known = set(ids)
    colors = set(palette or TEAM_COLORS)

    seen: Set[str] = set()
    dupes = []
    for pid in ids:
        if pid in seen and pid not in dupes:
            dupes.append(pid)
        seen.add(pid)
    if dupes:
        errs.append(f"Duplicate participant id detected: {', '.join(dupes)}")

    for p in participants:
        if p.id in p.conflicts:
            errs.append(f"Participant {p.id} lists itself as a conflict")
        unknown = [c for c in p.conflicts if c not in known and c != p.id]
        if unknown:
            errs.append(f"Participant {p.id} conflicts with unknown ids: {', '.join(unknown)}")

    by_id: Dict[str, Constraint] = {}
    for c in constraints or []:
        if c.id in by_id:
            errs.append(f"Duplicate constraint id detected: {c.id}")
        by_id[c.id] = c
        unknown = [pid for pid in c.participant_ids if pid not in known]
        if unknown:
            errs.append(f"Constraint {c.id} references unknown participants: {', '.join(unknown)}")
        if c.type == MUTUAL_EXCLUSION and len(c.participant_ids) < 2:
            errs.append(f"Constraint {c.id} ({MUTUAL_EXCLUSION}) needs at least two participants")
        elif c.type == COLOR_RESTRICTION:
            if not c.restricted_colors:
                errs.append(f"Constraint {c.id} ({COLOR_RESTRICTION}) has no restricted colors")
            bad = [col for col in c.restricted_colors if col not in colors]
            if bad:
                errs.append(f"Constraint {c.id} restricts unknown colors: {', '.join(bad)}")
            if not c.participant_ids:
                errs.append(f"Constraint {c.id} ({COLOR_RESTRICTION}) names no participants")
    return errs

def collect_unresolved(teams: List[Team], constraints: Iterable[Constraint]) -> List[UnresolvedPlacement]:
    """Every member whose current placement breaks a rule against its own teammates."""
    rules = active_constraints(constraints)
    out: List[UnresolvedPlacement] = []
    for t in teams:
        for m in t.members:
            v = find_violation(m, t.others(m.id), t.color, rules)
            if v is not None:
                out.append(UnresolvedPlacement(participant_id=m.id, team_id=t.id, violation=v))
    return out
