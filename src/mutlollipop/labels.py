"""Selection and collapsing of protein change labels."""

import re
from collections.abc import Iterable
from typing import List, Optional, Union

import pandas as pd

from .errors import LollipopError

LABEL_COLUMNS = ["pos2", "count2", "label"]

_CHANGE_PREFIX = re.compile(r"^[A-Za-z]*[0-9]*")

LabelPositions = Optional[Union[str, int, Iterable[int]]]


def compound_label(changes: Iterable[str]) -> str:
    """Merge changes at one position into a single label.

    The first change is kept in full; later ones lose their leading residue
    and position, e.g. ["P459L", "P459V", "P459A"] gives "P459L/V/A".
    """
    unique: List[str] = list(dict.fromkeys(str(change) for change in changes))
    if len(unique) == 1:
        return unique[0]
    suffixes = [_CHANGE_PREFIX.sub("", change) for change in unique[1:]]
    return "/".join([unique[0]] + suffixes)


def collapse_labels(points: pd.DataFrame) -> pd.DataFrame:
    """Combine labels that share a display position.

    Args:
        points: Rows with ``pos2``, ``count2`` and ``conv``

    Returns:
        One row per ``pos2`` with the compound label at the tallest head
    """
    if points.empty:
        return pd.DataFrame(columns=LABEL_COLUMNS)
    collapsed = points.groupby("pos2", sort=False).agg(
        count2=("count2", "max"), label=("conv", compound_label)
    )
    return collapsed.reset_index()[LABEL_COLUMNS]


def _requested_positions(label_pos) -> Optional[set]:
    if isinstance(label_pos, str) and label_pos == "all":
        return None
    if isinstance(label_pos, str) or not isinstance(label_pos, Iterable):
        label_pos = [label_pos]
    try:
        return {int(pos) for pos in label_pos}
    except (TypeError, ValueError):
        raise LollipopError(
            f"label_pos must be \"all\" or residue positions, got {label_pos!r}"
        ) from None


def select_labels(
    summary: pd.DataFrame, label_pos: LabelPositions, collapse: bool = True
) -> pd.DataFrame:
    """Pick the lollipops to annotate with their protein change.

    Args:
        summary: Aggregated points with ``pos``, ``pos2``, ``count2`` and ``conv``
        label_pos: None for no labels, "all" for every point, or residue
            position(s) to label
        collapse: Merge labels sharing a display position

    Returns:
        DataFrame with ``pos2``, ``count2`` and ``label`` columns
    """
    if label_pos is None:
        return pd.DataFrame(columns=LABEL_COLUMNS)

    wanted = _requested_positions(label_pos)
    if wanted is None:
        points = summary
    else:
        points = summary[summary["pos"].isin(wanted)]

    if collapse:
        return collapse_labels(points)
    return points.rename(columns={"conv": "label"})[LABEL_COLUMNS].reset_index(
        drop=True
    )
