"""
Internal helpers for tests (not imported by the library).
"""
from __future__ import annotations
from typing import List, Optional
from .models import Participant, Constraint

def quick_participant(pid: str, rating: float = 3, conflicts: Optional[List[str]] = None,
                      name: Optional[str] = None, active: bool = True) -> Participant:
    return Participant(
        id=pid, name=name or pid.upper(), rating=rating,
        active=active, conflicts=conflicts or [],
    )

def quick_roster(ratings: List[float]) -> List[Participant]:
    return [quick_participant(f"p{i + 1}", r) for i, r in enumerate(ratings)]

def separate(cid: str, *pids: str, active: bool = True) -> Constraint:
    return Constraint(id=cid, type="mutual-exclusion", participant_ids=list(pids), active=active)

def no_color(cid: str, pid: str, *colors: str, active: bool = True) -> Constraint:
    return Constraint(id=cid, type="color-restriction", participant_ids=[pid],
                      restricted_colors=list(colors), active=active)
