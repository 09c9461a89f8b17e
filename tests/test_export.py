from team_core.export import (
    format_teams_text, export_filename, partition_to_dataframe, balance_dashboard_df, render_pdf,
)
from team_core.generator import generate
from team_core.models import Partition, Team
from team_core.test_helpers import quick_participant, quick_roster

def test_format_teams_text_one_section_per_color():
    ann = quick_participant("a", 4, name="Ann")
    bob = quick_participant("b", 3, name="Bob")
    part = Partition(
        teams=[
            Team(id="t1", name="One", color="white", members=[ann, bob]),
            Team(id="t2", name="Two", color="colored"),
        ],
        active_ids=["a", "b"],
    )
    assert format_teams_text(part) == (
        "*white:*\n"
        "Ann, Bob\n"
        "*colored:*\n"
        "(no players)\n"
        "*black:*\n"
        "(no players)\n"
    )

def test_export_filename():
    assert export_filename("2024-05-01") == "soccer-teams-2024-05-01.txt"

def test_dataframes():
    roster = quick_roster([5, 4, 3, 3, 2, 1])
    part = generate(roster, [p.id for p in roster], 2, [])
    df = partition_to_dataframe(part)
    assert len(df) == 6
    assert set(df["color"]) == {"white", "colored", "black"}
    dash = balance_dashboard_df(part)
    assert list(dash["team_id"]) == ["team-1", "team-2", "team-3"]
    assert dash["players"].tolist() == [2, 2, 2]
    assert not dash["flag_rule_broken"].any()

def test_render_pdf_returns_pdf_bytes():
    roster = quick_roster([5, 4, 3, 2])
    part = generate(roster, [p.id for p in roster], 2, [])
    pdf = render_pdf(part, title="Sunday Game")
    assert pdf.startswith(b"%PDF")
