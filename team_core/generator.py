# team_core/generator.py
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Tuple
import math
import numpy as np

from .aggregates import average_rating, balance_objective
from .constants import team_id_for
from .constraints import active_constraints, collect_unresolved, violates
from .errors import InsufficientParticipantsError
from .logger import get_logger
from .models import AppSettings, Constraint, Participant, Partition, Team

logger = get_logger(__name__)

# Candidate pairs examined across all refinement passes
REFINE_BUDGET = 200_000

def team_count_for(active_count: int, team_size: int, palette_size: int) -> int:
    if active_count <= 0:
        return 0
    return max(1, min(math.ceil(active_count / team_size), palette_size))

def _check_team_size(team_size) -> int:
    try:
        size = int(team_size)
    except (TypeError, ValueError):
        raise ValueError(f"team_size must be a whole number, got {team_size!r}") from None
    if isinstance(team_size, bool) or size != team_size:
        raise ValueError(f"team_size must be a whole number, got {team_size!r}")
    if size < 1:
        raise ValueError(f"team_size must be at least 1, got {team_size}")
    return size

def _rules_by_participant(constraints: List[Constraint]) -> Dict[str, List[Constraint]]:
    """Active constraints keyed by each participant they name."""
    out: Dict[str, List[Constraint]] = {}
    for c in constraints:
        for pid in c.participant_ids:
            out.setdefault(pid, []).append(c)
    return out

def _seed_order(players: List[Participant], seed: Optional[int]) -> List[Participant]:
    """Highest rating first. Equal ratings keep caller order, or a seeded shuffle of it."""
    if seed is not None:
        rng = np.random.default_rng(seed)
        players = [players[i] for i in rng.permutation(len(players))]
    return sorted(players, key=lambda p: -p.rating)

def _place(
    p: Participant,
    members: List[List[Participant]],
    colors: List[str],
    capacity: int,
    rules_for: Dict[str, List[Constraint]],
) -> Tuple[int, str]:
    """
    Returns (team index, how):
      "balanced": lowest average team with room that accepts p
      "overflow": least-full team that accepts p (capacity ignored)
      "forced":   least-full team, rules ignored
    """
    k = len(members)
    rules = rules_for.get(p.id, [])
    with_room = sorted(
        (i for i in range(k) if len(members[i]) < capacity),
        key=lambda i: (average_rating(members[i]), len(members[i]), i),
    )
    for i in with_room:
        if not violates(p, members[i], colors[i], rules):
            return i, "balanced"

    by_fullness = sorted(range(k), key=lambda i: (len(members[i]), i))
    for i in by_fullness:
        if not violates(p, members[i], colors[i], rules):
            return i, "overflow"

    return by_fullness[0], "forced"

def _rebalance_sizes(
    members: List[List[Participant]],
    colors: List[str],
    rules_for: Dict[str, List[Constraint]],
    capacity: int,
) -> int:
    """Move members off over-capacity teams onto teams with room, where the rules allow."""
    moved = 0
    while True:
        over = [i for i in range(len(members)) if len(members[i]) > capacity]
        under = [i for i in range(len(members)) if len(members[i]) < capacity]
        if not over or not under:
            return moved
        totals = [sum(m.rating for m in ms) for ms in members]
        counts = [len(ms) for ms in members]
        # candidates come in (o, pos, u) order, so an equal score never wins later
        best = None
        for o in over:
            for pos, m in enumerate(members[o]):
                for u in under:
                    trial_totals = list(totals)
                    trial_counts = list(counts)
                    trial_totals[o] -= m.rating
                    trial_totals[u] += m.rating
                    trial_counts[o] -= 1
                    trial_counts[u] += 1
                    score = balance_objective(trial_totals, trial_counts)
                    if best is not None and score >= best[0]:
                        continue
                    if violates(m, members[u], colors[u], rules_for.get(m.id, [])):
                        continue
                    best = (score, o, pos, u)
        if best is None:
            return moved
        _, o, pos, u = best
        members[u].append(members[o].pop(pos))
        moved += 1

def _refine(
    members: List[List[Participant]],
    colors: List[str],
    rules_for: Dict[str, List[Constraint]],
    passes: int,
    budget: int = REFINE_BUDGET,
) -> int:
    """Pairwise swaps between teams while they strictly improve balance. Sizes never change.

    The objective of a swap between two teams depends only on the rating
    difference, so scores are cached per difference until the next swap.
    Stops early once `budget` candidate pairs have been examined.
    """
    k = len(members)
    totals = [sum(m.rating for m in ms) for ms in members]
    counts = [len(ms) for ms in members]
    current = balance_objective(totals, counts)
    swaps = 0
    checked = 0

    for _ in range(passes):
        improved = False
        for i in range(k):
            for j in range(i + 1, k):
                scores: Dict[float, tuple] = {}
                for a_idx in range(len(members[i])):
                    for b_idx in range(len(members[j])):
                        if checked >= budget:
                            logger.info("Refinement stopped after %d comparisons", checked)
                            return swaps
                        checked += 1
                        a = members[i][a_idx]
                        b = members[j][b_idx]
                        delta = b.rating - a.rating
                        if delta == 0:
                            continue
                        trial = scores.get(delta)
                        if trial is None:
                            trial_totals = list(totals)
                            trial_totals[i] += delta
                            trial_totals[j] -= delta
                            trial = balance_objective(trial_totals, counts)
                            scores[delta] = trial
                        if trial >= current:
                            continue
                        rest_i = [m for m in members[i] if m.id != a.id]
                        rest_j = [m for m in members[j] if m.id != b.id]
                        if violates(b, rest_i, colors[i], rules_for.get(b.id, [])):
                            continue
                        if violates(a, rest_j, colors[j], rules_for.get(a.id, [])):
                            continue
                        members[i][a_idx] = b
                        members[j][b_idx] = a
                        totals[i] += delta
                        totals[j] -= delta
                        current = trial
                        scores.clear()
                        swaps += 1
                        improved = True
        if not improved:
            break
    return swaps

def generate(
    all_participants: Iterable[Participant],
    active_ids: Iterable[str],
    team_size: Optional[int],
    constraints: Optional[Iterable[Constraint]] = None,
    settings: Optional[AppSettings] = None,
    seed: Optional[int] = None,
) -> Partition:
    """
    Split the active participants into rating-balanced teams.

    Greedy: strongest first, each to the lowest-average team with room that the
    shared constraint predicate accepts. Falls back to any accepting team, then
    to the least-full team; the last case is logged and listed in
    `Partition.unresolved`. Over-capacity teams are then drained where the rules
    allow, and a bounded swap pass tightens the rating spread.
    """
    settings = settings or AppSettings()
    size = settings.team_size if team_size is None else _check_team_size(team_size)
    if seed is None:
        seed = settings.random_seed

    roster = {p.id: p for p in all_participants}
    active_ids = [str(pid) for pid in active_ids]
    if len(set(active_ids)) != len(active_ids):
        raise ValueError("active_ids contains duplicates")
    missing = [pid for pid in active_ids if pid not in roster]
    found = len(active_ids) - len(missing)
    if found < 2:
        raise InsufficientParticipantsError(
            f"At least 2 active participants are needed to generate teams (got {found})."
        )
    if missing:
        raise ValueError(f"active_ids not found in roster: {missing}")

    rules = active_constraints(constraints or [])
    rules_for = _rules_by_participant(rules)
    players = [roster[pid] for pid in active_ids]
    palette = settings.palette
    k = team_count_for(len(players), size, len(palette))
    capacity = math.ceil(len(players) / k)
    colors = palette[:k]
    logger.info("Generating %d team(s) for %d participants (capacity %d)", k, len(players), capacity)

    members: List[List[Participant]] = [[] for _ in range(k)]
    for p in _seed_order(players, seed):
        idx, how = _place(p, members, colors, capacity, rules_for)
        if how == "overflow":
            logger.info("%s placed on %s beyond capacity to satisfy constraints", p.id, team_id_for(idx))
        elif how == "forced":
            logger.warning("%s could not be placed without breaking a rule; forced onto %s", p.id, team_id_for(idx))
        members[idx].append(p)

    moved = _rebalance_sizes(members, colors, rules_for, capacity)
    if moved:
        logger.info("Moved %d participant(s) back under capacity", moved)
    swaps = _refine(members, colors, rules_for, settings.refine_passes)
    if swaps:
        logger.info("Refinement applied %d swap(s)", swaps)

    teams = [
        Team(
            id=team_id_for(i),
            name=settings.team_name(i),
            color=colors[i],
            members=[m.model_copy(deep=True) for m in members[i]],
            average_rating=average_rating(members[i]),
        )
        for i in range(k)
    ]
    unresolved = collect_unresolved(teams, rules)
    if unresolved:
        logger.warning(
            "Generated partition breaks %d placement rule(s): %s",
            len(unresolved), ", ".join(u.participant_id for u in unresolved),
        )
    return Partition(teams=teams, active_ids=active_ids, unresolved=unresolved)
