import pandas as pd
import pytest

from mutlollipop.parsing import parse_changes, parse_position, shorten_change, strip_prefix


@pytest.mark.parametrize(
    "change, expected",
    [
        ("p.P459L", 459),
        ("p.Leu2195ProfsTer30", 2195),
        ("p.C229Lfs*18", 229),
        ("p.L2195Pfs*30", 2195),
        ("729_731del", 729),
        ("p.M1_K2del", 1),
        ("459", 459),
        (459.0, 459),
        ("p.D816*", 816),
        ("p.*757Lext*?", 757),
        ("p.Asn1986GlnfsTer13", 1986),
    ],
)
def test_parse_position(change, expected):
    assert parse_position(change) == expected


@pytest.mark.parametrize("change", ["notanumber", "p.?", "p.=", "", None, float("nan")])
def test_parse_position_unparsable(change):
    assert parse_position(change) is None


def test_parse_position_is_non_negative():
    assert parse_position("-12") == 12


def test_strip_prefix():
    assert strip_prefix("p.P459L") == "P459L"
    assert strip_prefix("ENSP0001.2:p.V600E") == "V600E"
    assert strip_prefix("459") == "459"
    assert strip_prefix(459.0) == "459"
    assert strip_prefix(None) is None


def test_shorten_change():
    assert shorten_change("Leu2195ProfsTer30") == "L2195Pfs*30"
    assert shorten_change("Val600Glu") == "V600E"
    assert shorten_change("P459L") == "P459L"
    assert shorten_change(None) is None


def test_parse_changes_adds_columns_without_mutating_input():
    frame = pd.DataFrame({"AAChange": ["p.P459L", "p.Leu2195ProfsTer30", "p.?"]})
    parsed = parse_changes(frame, "AAChange")
    assert list(frame.columns) == ["AAChange"]
    assert parsed["conv"].tolist() == ["P459L", "Leu2195ProfsTer30", "?"]
    assert parsed["pos"].iloc[0] == 459
    assert parsed["pos"].iloc[1] == 2195
    assert pd.isna(parsed["pos"].iloc[2])


def test_parse_changes_short_notation():
    frame = pd.DataFrame({"HGVSp": ["p.Leu2195ProfsTer30"]})
    parsed = parse_changes(frame, "HGVSp", short_notation=True)
    assert parsed["conv"].tolist() == ["L2195Pfs*30"]
    assert parsed["pos"].iloc[0] == 2195


def test_parse_changes_numeric_column():
    frame = pd.DataFrame({"Protein_Change": [560.0, None, 816.0]})
    parsed = parse_changes(frame, "Protein_Change")
    assert parsed["conv"].tolist()[0] == "560"
    assert parsed["pos"].iloc[0] == 560
    assert pd.isna(parsed["pos"].iloc[1])
    assert parsed["pos"].iloc[2] == 816
