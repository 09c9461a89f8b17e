# team_core/io.py
from __future__ import annotations
import io
import json
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd

from .config import settings_from_dict
from .models import AppSettings, Constraint, Participant, Partition, Team

# Roster CSV columns
REQUIRED_COLUMNS = ["id", "name", "rating"]
OPTIONAL_COLUMNS = ["active", "conflicts", "position"]

CONSTRAINT_COLUMNS = ["id", "type", "participant_ids"]

LIST_SEP = ";"

_TRUE = {"1", "true", "yes", "y", "x"}

def _split_ids(value) -> List[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    return [s.strip() for s in str(value).split(LIST_SEP) if s.strip()]

def _as_bool(value, default: bool = True) -> bool:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE

def _read_csv(file_like) -> pd.DataFrame:
    if isinstance(file_like, (bytes, bytearray)):
        file_like = io.BytesIO(file_like)
    df = pd.read_csv(file_like, dtype=str, keep_default_na=False)
    df.columns = [c.strip().lower() for c in df.columns]
    return df

def load_roster_csv(file_like) -> List[Participant]:
    """
    Roster CSV: id,name,rating[,active,conflicts,position].
    `conflicts` is a ';'-separated list of participant ids.
    """
    df = _read_csv(file_like)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    for c in OPTIONAL_COLUMNS:
        if c not in df.columns:
            df[c] = ""

    ratings = pd.to_numeric(df["rating"], errors="coerce")
    bad = df[ratings.isna()]
    if not bad.empty:
        rows = ", ".join(str(i + 2) for i in bad.index.tolist())
        raise ValueError(f"Invalid rating at rows: {rows}")

    players: List[Participant] = []
    for (_, r), rating in zip(df.iterrows(), ratings):
        if not str(r["id"]).strip():
            continue
        players.append(Participant(
            id=str(r["id"]).strip(),
            name=str(r["name"]).strip(),
            rating=float(rating),
            active=_as_bool(r["active"] or None),
            conflicts=_split_ids(r["conflicts"]),
            position=str(r["position"]).strip(),
        ))
    return players

def load_constraints_csv(file_like) -> List[Constraint]:
    """Constraint CSV: id,type,participant_ids[,restricted_colors,active,description]."""
    df = _read_csv(file_like)
    missing = [c for c in CONSTRAINT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    out: List[Constraint] = []
    for _, r in df.iterrows():
        out.append(Constraint(
            id=str(r["id"]).strip(),
            type=str(r["type"]).strip(),
            participant_ids=_split_ids(r["participant_ids"]),
            restricted_colors=_split_ids(r.get("restricted_colors", "")),
            active=_as_bool(r.get("active", "") or None),
            description=str(r.get("description", "")).strip(),
        ))
    return out

def roster_to_dataframe(players: List[Participant]) -> pd.DataFrame:
    rows = []
    for p in players:
        rows.append({
            "id": p.id,
            "name": p.name,
            "rating": p.rating,
            "active": p.active,
            "conflicts": LIST_SEP.join(p.conflicts),
            "position": p.position,
        })
    return pd.DataFrame(rows, columns=REQUIRED_COLUMNS + OPTIONAL_COLUMNS)

def save_roster_csv_bytes(players: List[Participant]) -> bytes:
    buf = io.StringIO()
    roster_to_dataframe(players).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")

def build_template_csv() -> bytes:
    example = (
        "id,name,rating,active,conflicts,position\n"
        "p1,Alex Quinn,4,true,p2,Midfielder\n"
        "p2,Sam Rivera,3,true,,Defender\n"
    )
    return example.encode("utf-8")

# ---------------------------
# Saved app data (JSON export)
# ---------------------------
def _participant_from_saved(d: Dict[str, Any]) -> Participant:
    return Participant(
        id=str(d["id"]),
        name=str(d.get("name", "")),
        rating=d.get("rating", 3),
        active=bool(d.get("active", True)),
        conflicts=[str(x) for x in d.get("conflicts", []) or []],
        position=str(d.get("position", "") or ""),
    )

def _constraint_from_saved(d: Dict[str, Any]) -> Constraint:
    return Constraint(
        id=str(d["id"]),
        type=str(d.get("type", "")),
        participant_ids=[str(x) for x in d.get("playerIds", d.get("participant_ids", [])) or []],
        restricted_colors=list(d.get("restrictedColors", d.get("restricted_colors", [])) or []),
        active=bool(d.get("active", True)),
        description=str(d.get("description", "") or ""),
    )

def _team_from_saved(d: Dict[str, Any]) -> Team:
    return Team(
        id=str(d["id"]),
        name=str(d.get("name", "")),
        color=str(d.get("teamColor", d.get("color", ""))),
        members=[_participant_from_saved(p) for p in d.get("players", d.get("members", [])) or []],
        average_rating=float(d.get("averageRating", d.get("average_rating", 0)) or 0),
    )

def load_snapshot_json(text: str) -> Tuple[List[Participant], List[Constraint], AppSettings, Optional[Partition]]:
    """
    Read an exported app data document:
      {players, constraints, settings, lastGenerated: {teams, activePlayerIds}}
    Missing sections fall back to empty / defaults. Team averages are taken as stored;
    run mutation.check_partition to detect stale ones.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON snapshot: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Snapshot must be a JSON object.")

    players = [_participant_from_saved(p) for p in data.get("players") or []]
    constraints = [_constraint_from_saved(c) for c in data.get("constraints") or []]
    settings = settings_from_dict(data.get("settings") or {})

    partition = None
    last = data.get("lastGenerated")
    if last:
        partition = Partition(
            teams=[_team_from_saved(t) for t in last.get("teams") or []],
            active_ids=[str(x) for x in last.get("activePlayerIds") or []],
        )
    return players, constraints, settings, partition
