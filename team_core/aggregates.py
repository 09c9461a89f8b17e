# team_core/aggregates.py
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List
import numpy as np

from .models import Participant, Team

_CENTS = Decimal("0.01")

def average_rating(members: Iterable[Participant]) -> float:
    """Mean rating rounded half-up to 2 decimals; 0.0 for an empty team.

    Ratings go through their decimal string form so 2.675 rounds to 2.68,
    not to the binary-float neighbour 2.67.
    """
    ratings = [Decimal(str(m.rating)) for m in members]
    if not ratings:
        return 0.0
    mean = sum(ratings) / Decimal(len(ratings))
    return float(mean.quantize(_CENTS, rounding=ROUND_HALF_UP))

def refresh_average(team: Team) -> Team:
    team.average_rating = average_rating(team.members)
    return team

def rating_spread(teams: List[Team]) -> float:
    """Max minus min average over non-empty teams."""
    avgs = [t.average_rating for t in teams if t.members]
    if len(avgs) < 2:
        return 0.0
    return round(max(avgs) - min(avgs), 2)

def balance_objective(team_totals: List[float], team_counts: List[int]) -> tuple:
    """(spread, squared deviation) of raw team means; lower is better.

    Uses unrounded means so refinement can tell apart splits that round alike.
    Plain arithmetic over the few team totals; the generator calls this in its
    inner loops.
    """
    filled = [(t, c) for t, c in zip(team_totals, team_counts) if c > 0]
    if len(filled) < 2:
        return (0.0, 0.0)
    means = [t / c for t, c in filled]
    overall = sum(t for t, _ in filled) / sum(c for _, c in filled)
    spread = max(means) - min(means)
    sq_dev = sum((m - overall) ** 2 for m in means)
    # round away float noise so equal splits compare equal
    return (round(spread, 9), round(sq_dev, 9))

def balance_summary(teams: List[Team]) -> Dict[str, object]:
    rows = []
    for t in teams:
        ratings = np.array([m.rating for m in t.members], dtype=float)
        rows.append({
            "team_id": t.id,
            "name": t.name,
            "color": t.color,
            "size": int(ratings.size),
            "total": float(ratings.sum()) if ratings.size else 0.0,
            "average": t.average_rating,
        })
    sizes = [r["size"] for r in rows]
    return {
        "teams": rows,
        "spread": rating_spread(teams),
        "size_delta": (max(sizes) - min(sizes)) if sizes else 0,
    }
