import pytest

from mutlollipop.errors import ChangeColumnNotFoundError
from mutlollipop.aggregate import drop_unparsed, summarize_changes
from mutlollipop.maf import MafHandler, resolve_change_column
from mutlollipop.parsing import parse_changes


def test_resolve_change_column_default_order(caplog):
    caplog.set_level("INFO")
    assert resolve_change_column(["AAChange", "Protein_Change"]) == "Protein_Change"
    assert "Protein_Change" in caplog.text
    assert resolve_change_column(["HGVSp_Short", "AAChange"]) == "HGVSp_Short"


def test_resolve_change_column_explicit():
    assert resolve_change_column(["HGVSp", "HGVSp_Short"], aa_col="HGVSp") == "HGVSp"
    with pytest.raises(ChangeColumnNotFoundError):
        resolve_change_column(["HGVSp_Short"], aa_col="HGVSp")


def test_resolve_change_column_missing():
    with pytest.raises(ChangeColumnNotFoundError, match="Available fields"):
        resolve_change_column(["Hugo_Symbol", "Variant_Classification"])


def test_subset_excludes_synonymous_and_cnv(maf_df):
    maf = MafHandler(maf_df)
    kit = maf.subset("KIT")
    assert len(kit) == 8
    assert set(kit["Variant_Classification"]) == {"Missense_Mutation", "Nonsense_Mutation"}
    assert len(maf.subset("KIT", include_syn=True)) == 9
    assert maf.subset("BRAF").empty


def test_subset_does_not_rename_source(maf_df):
    maf = MafHandler(maf_df)
    columns = list(maf.data.columns)
    resolve_change_column(maf.subset("KIT").columns)
    assert list(maf.data.columns) == columns


def test_mutation_rate(maf_df):
    maf = MafHandler(maf_df)
    assert maf.sample_count == 10
    assert maf.mutation_rate("KIT") == 80.0
    assert maf.mutation_rate("TP53") == 20.0


def test_from_file_skips_comments(maf_df, tmp_path):
    path = tmp_path / "test.maf"
    with open(path, "w") as f:
        f.write("#version 2.4\n")
        maf_df.to_csv(f, sep="\t", index=False)
    maf = MafHandler.from_file(path)
    assert len(maf.data) == len(maf_df)


def test_required_columns(maf_df):
    with pytest.raises(ValueError):
        MafHandler(maf_df.drop(columns=["Variant_Type"]))


def test_from_file_keeps_numeric_changes_as_text(tmp_path):
    path = tmp_path / "numeric.maf"
    path.write_text(
        "Hugo_Symbol\tVariant_Classification\tVariant_Type\tProtein_Change\n"
        "KIT\tMissense_Mutation\tSNP\t560\n"
        "KIT\tMissense_Mutation\tSNP\t\n"
    )
    maf = MafHandler.from_file(path)
    kit = maf.subset("KIT")
    column = resolve_change_column(kit.columns)
    assert column == "Protein_Change"

    summary = summarize_changes(drop_unparsed(parse_changes(kit, column)))
    assert summary["pos"].tolist() == [560]
    assert summary["conv"].tolist() == ["560"]
