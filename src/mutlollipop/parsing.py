"""Protein change parsing module.

Extracts residue positions from protein change annotations. Accepted inputs
include bare numbers ("459"), short HGVS ("p.P459L", "p.C229Lfs*18") and long
HGVS ("p.Leu2195ProfsTer30"), as well as multi-residue ranges ("729_731del").
"""

import logging
import numbers
import re
from typing import Optional

import pandas as pd
from Bio.Data import IUPACData
from Bio.SeqUtils import seq1

logger = logging.getLogger(__name__)

_TERMINATION = re.compile(r"Ter.*")
_ALPHA = re.compile(r"[A-Za-z]")
_TRAILING_STAR = re.compile(r"\*$")
_LEADING_STAR = re.compile(r"^\*")
_STAR_SUFFIX = re.compile(r"\*.*")
_NON_NUMERIC = re.compile(r"[^0-9_\-]")

_THREE_LETTER = re.compile(
    "|".join(sorted(list(IUPACData.protein_letters_3to1) + ["Ter"]))
)


def strip_prefix(change) -> Optional[str]:
    """Return the part of a change annotation after its "p." style prefix.

    Args:
        change: Raw protein change annotation

    Returns:
        Trailing segment after the last ".", or None for missing values
    """
    if change is None or pd.isna(change):
        return None
    # Numeric-only columns come back from pandas as floats (560.0)
    if isinstance(change, numbers.Real) and float(change).is_integer():
        return str(int(change))
    change = str(change).strip()
    if not change:
        return None
    return change.split(".")[-1]


def parse_position(change) -> Optional[int]:
    """Extract the affected residue position from a protein change.

    Args:
        change: Raw protein change annotation

    Returns:
        Residue position, or None when no position can be recovered
    """
    conv = strip_prefix(change)
    if conv is None:
        return None

    pos = _TERMINATION.sub("", conv)
    pos = _ALPHA.sub("", pos)
    pos = _TRAILING_STAR.sub("", pos)
    pos = _LEADING_STAR.sub("", pos)
    pos = _STAR_SUFFIX.sub("", pos)
    pos = _NON_NUMERIC.sub("", pos)

    # Ranges such as 729_731del are placed at their first residue
    pos = pos.split("_")[0]

    try:
        return abs(int(pos))
    except ValueError:
        return None


def shorten_change(change: Optional[str]) -> Optional[str]:
    """Convert three-letter amino acid codes to one-letter codes.

    Converts 'Leu2195ProfsTer30' to 'L2195Pfs*30'. Strings already in
    one-letter form are returned unchanged.
    """
    if change is None:
        return None
    return _THREE_LETTER.sub(
        lambda m: seq1(m.group(0), custom_map={"Ter": "*"}), change
    )


def parse_changes(
    mutations: pd.DataFrame, column: str = "AAChange", short_notation: bool = False
) -> pd.DataFrame:
    """Annotate mutation records with their change string and residue position.

    Args:
        mutations: Mutation records
        column: Column holding the protein change annotation
        short_notation: Convert long HGVS amino acid codes to one-letter codes

    Returns:
        Copy of ``mutations`` with added ``conv`` and ``pos`` columns. ``pos``
        is a nullable integer column.
    """
    parsed = mutations.copy()
    conv = parsed[column].map(strip_prefix)
    if short_notation:
        conv = conv.map(shorten_change)
    parsed["conv"] = conv
    parsed["pos"] = pd.array(
        [parse_position(change) for change in parsed[column]], dtype="Int64"
    )
    logger.debug(
        f"Parsed {parsed['pos'].notna().sum()}/{len(parsed)} protein changes from {column}"
    )
    return parsed
