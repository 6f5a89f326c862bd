import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy
import pandas as pd
import pytest


def _maf_rows():
    rows = []
    for i in range(5):
        rows.append(("KIT", "SNP", "Missense_Mutation", "p.V560D", f"S{i + 1}"))
    for i in range(3):
        rows.append(("KIT", "SNP", "Nonsense_Mutation", "p.D816*", f"S{i + 6}"))
    # filtered out: synonymous, copy number, other genes
    rows.append(("KIT", "SNP", "Silent", "p.V560V", "S1"))
    rows.append(("KIT", "CNV", "Missense_Mutation", "p.V560D", "S2"))
    rows.append(("TP53", "SNP", "Missense_Mutation", "p.R273H", "S9"))
    rows.append(("TP53", "SNP", "Missense_Mutation", "p.R273C", "S10"))
    rows.append(("TP53", "SNP", "Frame_Shift_Del", "p.?", "S10"))
    return pd.DataFrame(
        rows,
        columns=[
            "Hugo_Symbol",
            "Variant_Type",
            "Variant_Classification",
            "HGVSp_Short",
            "Tumor_Sample_Barcode",
        ],
    )


def _domain_rows():
    columns = ["HGNC", "refseq.ID", "protein.ID", "aa.length", "Start", "End", "Label"]
    rows = [
        ("KIT", "NM_000222", "NP_000213", 976, 27, 112, "Ig"),
        ("KIT", "NM_000222", "NP_000213", 976, 212, 308, "Ig"),
        ("KIT", "NM_000222", "NP_000213", 976, 589, 924, "Pkinase_Tyr"),
        ("KIT", "NM_001093772", "NP_001087241", 972, 27, 112, "Ig"),
        ("KIT", "NM_001093772", "NP_001087241", 972, 585, 920, "Pkinase_Tyr"),
        ("TP53", "NM_000546", "NP_000537", 393, 95, 288, "P53"),
        ("TP53", "NM_000546", "NP_000537", 393, 319, 357, "P53_tetramer"),
        ("NODOM", "NM_999999", "NP_999999", 150, None, None, None),
    ]
    return pd.DataFrame(rows, columns=columns)


@pytest.fixture(scope="function")
def maf_df():
    """Small MAF: KIT has 5 missense at 560 and 3 nonsense at 816."""
    return _maf_rows()


@pytest.fixture(scope="function")
def domains_df():
    """Protein domain table with two KIT transcripts."""
    return _domain_rows()


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture(scope="function")
def rng():
    return numpy.random.default_rng(0)
