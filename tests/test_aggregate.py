import pandas as pd

from mutlollipop.aggregate import drop_unparsed, mutated_positions, summarize_changes
from mutlollipop.config import CBIOPORTAL_CATEGORIES
from mutlollipop.parsing import parse_changes


def _parsed(changes, classes):
    frame = pd.DataFrame({"Variant_Classification": classes, "AAChange": changes})
    return drop_unparsed(parse_changes(frame, "AAChange"))


def test_drop_unparsed_logs_count(caplog):
    caplog.set_level("INFO")
    parsed = _parsed(["p.P459L", "p.?", "notanumber"], ["Missense_Mutation"] * 3)
    assert len(parsed) == 1
    assert parsed["pos"].dtype == "int64"
    assert "Removed 2 mutations" in caplog.text


def test_summary_counts_sum_to_parsed_rows(rng):
    positions = rng.integers(1, 50, size=200)
    classes = rng.choice(["Missense_Mutation", "Nonsense_Mutation", "Splice_Site"], size=200)
    changes = [f"p.A{pos}V" for pos in positions] + ["p.?"]
    parsed = _parsed(changes, list(classes) + ["Missense_Mutation"])
    summary = summarize_changes(parsed)
    assert summary["count"].sum() == 200
    per_pos = summary.groupby("pos")["count"].sum()
    expected = pd.Series(positions).value_counts()
    for pos, count in expected.items():
        assert per_pos[pos] == count


def test_summary_sorted_by_position_with_stable_ties():
    parsed = _parsed(
        ["p.D816V", "p.V560G", "p.V560D", "p.V560G", "p.D816V"],
        [
            "Missense_Mutation",
            "Missense_Mutation",
            "Missense_Mutation",
            "Missense_Mutation",
            "Nonsense_Mutation",
        ],
    )
    summary = summarize_changes(parsed)
    assert summary["pos"].tolist() == [560, 560, 816, 816]
    assert summary["conv"].tolist() == ["V560G", "V560D", "D816V", "D816V"]
    assert summary["count"].tolist() == [2, 1, 1, 1]


def test_category_map_collapses_before_grouping():
    parsed = _parsed(
        ["p.R100*", "p.R100*", "p.R100*", "p.A5V"],
        ["Nonsense_Mutation", "Frame_Shift_Del", "Nonsense_Mutation", "Translation_Start_Site"],
    )
    summary = summarize_changes(parsed, CBIOPORTAL_CATEGORIES)
    assert summary.to_dict("records") == [
        {"Variant_Classification": "Other", "conv": "A5V", "pos": 5, "count": 1},
        {"Variant_Classification": "Truncating", "conv": "R100*", "pos": 100, "count": 3},
    ]


def test_mutated_positions_ranked():
    parsed = _parsed(
        ["p.A1V", "p.B2C", "p.B2C", "p.B2D", "p.C3D", "p.C3D"],
        ["Missense_Mutation"] * 6,
    )
    ranked = mutated_positions(summarize_changes(parsed))
    assert ranked["pos"].tolist() == [2, 3, 1]
    assert ranked["mutations"].tolist() == [3, 2, 1]
