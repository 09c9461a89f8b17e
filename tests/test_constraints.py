from team_core.constraints import (
    violates, find_violation, in_conflict, ConflictIndex, validate_roster, collect_unresolved,
)
from team_core.models import Constraint, Team
from team_core.test_helpers import quick_participant, separate, no_color

def test_conflict_checked_in_both_directions():
    a = quick_participant("a", conflicts=["b"])
    b = quick_participant("b")
    assert in_conflict(a, b) and in_conflict(b, a)
    # declared only on a, but b joining a is rejected too
    assert violates(b, [a], "white", [])
    assert violates(a, [b], "white", [])
    v = find_violation(b, [a], "white", [])
    assert v.rule == "conflict"
    assert v.other_id == "a"

def test_mutual_exclusion_rejects_named_teammate():
    a, b, c = quick_participant("a"), quick_participant("b"), quick_participant("c")
    rules = [separate("c1", "a", "b")]
    assert violates(a, [c, b], "black", rules)
    assert not violates(a, [c], "black", rules)
    # constraint does not name c, so c is free to join anyone
    assert not violates(c, [a, b], "black", rules)
    v = find_violation(a, [b], "black", rules)
    assert v.rule == "mutual-exclusion"
    assert v.constraint_id == "c1"

def test_participant_is_not_its_own_teammate():
    a = quick_participant("a", conflicts=["a"])
    rules = [separate("c1", "a", "b")]
    assert not violates(a, [a], "white", rules)

def test_color_restriction():
    a = quick_participant("a")
    rules = [no_color("c1", "a", "white", "black")]
    assert violates(a, [], "white", rules)
    assert violates(a, [], "Black", rules)
    assert not violates(a, [], "colored", rules)
    v = find_violation(a, [], "white", rules)
    assert v.rule == "color-restriction"
    assert v.color == "white"

def test_inactive_and_unknown_constraints_are_ignored():
    a, b = quick_participant("a"), quick_participant("b")
    rules = [
        separate("c1", "a", "b", active=False),
        no_color("c2", "a", "white", active=False),
        Constraint(id="c3", type="captain-pairing", participant_ids=["a", "b"]),
    ]
    assert rules[2].type == "captain-pairing"
    assert not violates(a, [b], "white", rules)

def test_legacy_constraint_names_normalize():
    assert Constraint(id="x", type="cannot_play_together").type == "mutual-exclusion"
    assert Constraint(id="x", type="separate_teams").type == "mutual-exclusion"
    c = Constraint(id="x", type="cannot_wear_color", participant_ids=["a"], restricted_colors=["WHITE"])
    assert c.type == "color-restriction"
    assert c.restricted_colors == ["white"]
    assert violates(quick_participant("a"), [], "white", [c])

def test_conflict_index_is_symmetric_and_reports_one_sided_pairs():
    roster = [
        quick_participant("a", conflicts=["b"]),
        quick_participant("b"),
        quick_participant("c", conflicts=["d"]),
        quick_participant("d", conflicts=["c"]),
    ]
    idx = ConflictIndex(roster)
    assert idx.conflicts("a", "b") and idx.conflicts("b", "a")
    assert not idx.conflicts("a", "c")
    assert idx.partners("b") == ["a"]
    assert idx.pairs() == [("a", "b"), ("c", "d")]
    assert idx.asymmetric_pairs() == [("a", "b")]
    assert len(idx) == 2

def test_validate_roster_collects_problems():
    roster = [
        quick_participant("a", conflicts=["zz"]),
        quick_participant("a"),
        quick_participant("b", conflicts=["b"]),
    ]
    rules = [
        separate("c1", "a"),
        no_color("c2", "b", "purple"),
        separate("c3", "a", "ghost"),
    ]
    errs = validate_roster(roster, rules)
    text = "\n".join(errs)
    assert "Duplicate participant id detected: a" in text
    assert "unknown ids: zz" in text
    assert "b lists itself" in text
    assert "c1 (mutual-exclusion) needs at least two participants" in text
    assert "c2 restricts unknown colors: purple" in text
    assert "c3 references unknown participants: ghost" in text

def test_validate_roster_clean():
    roster = [quick_participant("a", conflicts=["b"]), quick_participant("b")]
    assert validate_roster(roster, [separate("c1", "a", "b"), no_color("c2", "a", "black")]) == []

def test_collect_unresolved_flags_both_sides():
    a = quick_participant("a", conflicts=["b"])
    b = quick_participant("b")
    c = quick_participant("c")
    team = Team(id="team-1", name="A", color="white", members=[a, b, c])
    found = collect_unresolved([team], [])
    assert sorted(u.participant_id for u in found) == ["a", "b"]
    assert all(u.team_id == "team-1" for u in found)
