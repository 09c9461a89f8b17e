# team_core/mutation.py
from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from .aggregates import average_rating, refresh_average
from .constraints import active_constraints, collect_unresolved, find_violation
from .logger import get_logger
from .models import (
    Constraint, MutationError, MutationResult, Participant, Partition, Team, Violation,
)

logger = get_logger(__name__)

def find_team_of(partition: Partition, participant_id: str) -> Optional[str]:
    team = partition.team_of(participant_id)
    return team.id if team else None

def _current(participant_id: str, team: Team, roster: Dict[str, Participant]) -> Participant:
    # roster holds the freshest data (rating edits); fall back to the placed copy
    if participant_id in roster:
        return roster[participant_id]
    for m in team.members:
        if m.id == participant_id:
            return m
    raise KeyError(participant_id)

def _roster_map(roster: Optional[Iterable[Participant]]) -> Dict[str, Participant]:
    return {p.id: p for p in (roster or [])}

def _rejected(partition: Partition, code: str, message: str, **fields) -> MutationResult:
    logger.info("Mutation rejected (%s): %s", code, message)
    return MutationResult(
        partition=partition,
        error=MutationError(code=code, message=message, **fields),
        changed=False,
    )

def _violation_error(
    partition: Partition,
    participant: Participant,
    team: Team,
    violation: Violation,
    side: Optional[str] = None,
) -> MutationResult:
    return _rejected(
        partition,
        "constraint_violation",
        f"Cannot move {participant.name} to {team.name} due to constraints: {violation.message}",
        participant_id=participant.id,
        team_id=team.id,
        side=side,
        violation=violation,
    )

def swap(
    partition: Partition,
    participant_a_id: str,
    participant_b_id: str,
    roster: Optional[Iterable[Participant]] = None,
    constraints: Optional[Iterable[Constraint]] = None,
) -> MutationResult:
    """
    Exchange two participants between their teams.

    Same team is a no-op. Both halves are validated before anything changes;
    on success a new Partition is returned and the input is left as it was.
    """
    team_a = partition.team_of(participant_a_id)
    team_b = partition.team_of(participant_b_id)
    for pid, team in ((participant_a_id, team_a), (participant_b_id, team_b)):
        if team is None:
            return _rejected(
                partition, "participant_not_placed",
                f"Participant {pid} is not on any team.",
                participant_id=pid,
            )
    if team_a.id == team_b.id:
        return MutationResult(partition=partition, changed=False)

    people = _roster_map(roster)
    rules = active_constraints(constraints or [])
    a = _current(participant_a_id, team_a, people)
    b = _current(participant_b_id, team_b, people)

    v = find_violation(b, team_a.others(a.id), team_a.color, rules)
    if v is not None:
        return _violation_error(partition, b, team_a, v, side="b")
    v = find_violation(a, team_b.others(b.id), team_b.color, rules)
    if v is not None:
        return _violation_error(partition, a, team_b, v, side="a")

    out = partition.model_copy(deep=True)
    new_a = out.team_by_id(team_a.id)
    new_b = out.team_by_id(team_b.id)
    new_a.members = [b.model_copy(deep=True) if m.id == a.id else m for m in new_a.members]
    new_b.members = [a.model_copy(deep=True) if m.id == b.id else m for m in new_b.members]
    refresh_average(new_a)
    refresh_average(new_b)
    out.unresolved = collect_unresolved(out.teams, rules)
    logger.info("Swapped %s (%s) with %s (%s)", a.id, team_a.id, b.id, team_b.id)
    return MutationResult(partition=out, changed=True)

def move(
    partition: Partition,
    participant_id: str,
    source_team_id: str,
    target_team_id: str,
    roster: Optional[Iterable[Participant]] = None,
    constraints: Optional[Iterable[Constraint]] = None,
) -> MutationResult:
    """Move one participant from source to the end of target."""
    if source_team_id == target_team_id:
        return MutationResult(partition=partition, changed=False)

    source = partition.team_by_id(source_team_id)
    target = partition.team_by_id(target_team_id)
    for tid, team in ((source_team_id, source), (target_team_id, target)):
        if team is None:
            return _rejected(
                partition, "team_not_found",
                f"Team {tid} is not in this partition.",
                participant_id=participant_id, team_id=tid,
            )
    if not source.has_member(participant_id):
        return _rejected(
            partition, "participant_not_placed",
            f"Participant {participant_id} is not on {source.name}.",
            participant_id=participant_id, team_id=source.id,
        )

    rules = active_constraints(constraints or [])
    p = _current(participant_id, source, _roster_map(roster))
    v = find_violation(p, target.others(p.id), target.color, rules)
    if v is not None:
        return _violation_error(partition, p, target, v)

    out = partition.model_copy(deep=True)
    new_source = out.team_by_id(source.id)
    new_target = out.team_by_id(target.id)
    new_source.members = new_source.others(p.id)
    new_target.members = new_target.others(p.id) + [p.model_copy(deep=True)]
    refresh_average(new_source)
    refresh_average(new_target)
    out.unresolved = collect_unresolved(out.teams, rules)
    logger.info("Moved %s from %s to %s", p.id, source.id, target.id)
    return MutationResult(partition=out, changed=True)

def check_partition(partition: Partition) -> List[str]:
    """Invariant problems: stale averages, double or missing placements."""
    problems: List[str] = []
    seen: Dict[str, str] = {}
    for t in partition.teams:
        expected = average_rating(t.members)
        if t.average_rating != expected:
            problems.append(f"{t.id}: average_rating {t.average_rating} != {expected}")
        for pid in t.member_ids():
            if pid in seen:
                problems.append(f"{pid} is on both {seen[pid]} and {t.id}")
            else:
                seen[pid] = t.id
    active = set(partition.active_ids)
    missing = [pid for pid in partition.active_ids if pid not in seen]
    if missing:
        problems.append(f"active participants not on any team: {', '.join(missing)}")
    extra = [pid for pid in seen if pid not in active]
    if extra:
        problems.append(f"placed participants not in active set: {', '.join(extra)}")
    return problems
