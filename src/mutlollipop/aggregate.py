"""Aggregation of parsed mutations into lollipop points."""

import logging
from typing import Mapping, Optional

import pandas as pd

logger = logging.getLogger(__name__)

GROUP_COLUMNS = ["Variant_Classification", "conv", "pos"]


def drop_unparsed(parsed: pd.DataFrame) -> pd.DataFrame:
    """Remove mutations whose residue position could not be parsed.

    Args:
        parsed: Output of ``parse_changes``

    Returns:
        Rows with a known position
    """
    missing = parsed["pos"].isna()
    if missing.any():
        logger.info(
            f"Removed {int(missing.sum())} mutations for which AA position was not available"
        )
    kept = parsed[~missing].copy()
    kept["pos"] = kept["pos"].astype("int64")
    return kept


def summarize_changes(
    parsed: pd.DataFrame, category_map: Optional[Mapping[str, str]] = None
) -> pd.DataFrame:
    """Count mutations per (classification, change, position).

    Args:
        parsed: Mutations with ``Variant_Classification``, ``conv`` and ``pos``
        category_map: Optional classification remapping applied before grouping.
            Classifications missing from the map are grouped as "Other".

    Returns:
        One row per group with a ``count`` column, sorted by position. Groups
        at the same position keep their first-appearance order.
    """
    data = parsed[GROUP_COLUMNS].copy()
    if category_map is not None:
        data["Variant_Classification"] = (
            data["Variant_Classification"].map(dict(category_map)).fillna("Other")
        )

    summary = (
        data.groupby(GROUP_COLUMNS, sort=False, dropna=False)
        .size()
        .reset_index(name="count")
    )
    return summary.sort_values("pos", kind="stable").reset_index(drop=True)


def mutated_positions(summary: pd.DataFrame) -> pd.DataFrame:
    """Rank positions by their total number of mutations.

    Args:
        summary: Output of ``summarize_changes``

    Returns:
        DataFrame with ``pos`` and ``mutations`` columns, most mutated first
    """
    ranked = (
        summary.groupby("pos", sort=False)["count"]
        .sum()
        .reset_index(name="mutations")
    )
    return ranked.sort_values("mutations", ascending=False, kind="stable").reset_index(
        drop=True
    )
