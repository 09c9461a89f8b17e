# team_core/export.py
from __future__ import annotations
from typing import List, Optional
import io
import pandas as pd
from reportlab.lib.pagesizes import letter
from reportlab.lib import colors
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from .aggregates import rating_spread
from .constants import EMPTY_TEAM_PLACEHOLDER, TEAM_COLORS
from .models import Partition

def format_teams_text(partition: Partition, palette: Optional[List[str]] = None) -> str:
    """
    One section per color in palette order:

        *white:*
        Ann, Bob
        *colored:*
        (no players)
    """
    lines = []
    for color in palette or TEAM_COLORS:
        lines.append(f"*{color}:*")
        team = partition.team_by_color(color)
        if team and team.members:
            lines.append(", ".join(m.name for m in team.members))
        else:
            lines.append(EMPTY_TEAM_PLACEHOLDER)
    return "\n".join(lines) + "\n"

def export_filename(date_str: str) -> str:
    # date comes from the caller; the core never reads the clock
    return f"soccer-teams-{date_str}.txt"

def partition_to_dataframe(partition: Partition) -> pd.DataFrame:
    rows = []
    for t in partition.teams:
        for m in t.members:
            rows.append({
                "team_id": t.id,
                "team": t.name,
                "color": t.color,
                "participant_id": m.id,
                "name": m.name,
                "position": m.position,
                "rating": m.rating,
            })
    cols = ["team_id", "team", "color", "participant_id", "name", "position", "rating"]
    return pd.DataFrame(rows, columns=cols)

def balance_dashboard_df(partition: Partition) -> pd.DataFrame:
    flagged = {u.participant_id for u in partition.unresolved}
    rows = []
    for t in partition.teams:
        rows.append({
            "team_id": t.id,
            "team": t.name,
            "color": t.color,
            "players": len(t.members),
            "average_rating": t.average_rating,
            "flag_rule_broken": any(m.id in flagged for m in t.members),
        })
    dash = pd.DataFrame(rows, columns=["team_id", "team", "color", "players", "average_rating", "flag_rule_broken"])
    return dash.sort_values(["average_rating", "team_id"], ascending=[False, True]).reset_index(drop=True)

def render_pdf(partition: Partition, title: str = "Teams") -> bytes:
    buf = io.BytesIO()
    page_size = letter
    c = canvas.Canvas(buf, pagesize=page_size)

    c.setFont("Helvetica-Bold", 16)
    c.drawString(40, page_size[1] - 40, title)
    c.setFont("Helvetica", 10)
    c.drawString(40, page_size[1] - 58, f"Rating spread: {rating_spread(partition.teams):.2f}")

    data = [["Team", "Color", "Avg", "Players"]]
    for t in partition.teams:
        names = ", ".join(m.name for m in t.members) or EMPTY_TEAM_PLACEHOLDER
        data.append([t.name, t.color, f"{t.average_rating:.2f}", names])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))

    _, table_h = table.wrapOn(c, page_size[0] - 80, page_size[1] - 100)
    table.drawOn(c, 40, page_size[1] - 80 - table_h)

    c.showPage()
    c.save()
    return buf.getvalue()
