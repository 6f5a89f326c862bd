"""Lollipop head placement.

Heads that sit within ``cluster_size`` residues of each other are spread along
the protein axis. Only the display position (``pos2``) moves; stems still start
at the true residue (``pos``).
"""

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def repel_positions(
    positions: Sequence[float],
    protein_length: Optional[float] = None,
    cluster_size: float = 10,
) -> np.ndarray:
    """Spread clustered positions apart.

    Args:
        positions: Residue positions sorted ascending
        protein_length: Upper bound for display positions, if known
        cluster_size: Minimum spacing between neighbouring heads

    Returns:
        Display positions in the same order as ``positions``
    """
    pos = np.asarray(positions, dtype=float)
    spread = pos.copy()
    n = len(pos)
    if n < 2 or cluster_size <= 0:
        return spread

    breaks = np.flatnonzero(np.diff(pos) >= cluster_size) + 1
    for cluster in np.split(np.arange(n), breaks):
        if len(cluster) > 1:
            offsets = (np.arange(len(cluster)) - (len(cluster) - 1) / 2) * cluster_size
            spread[cluster] = pos[cluster].mean() + offsets

    for i in range(1, n):
        spread[i] = max(spread[i], spread[i - 1] + cluster_size)

    if protein_length is not None:
        if (n - 1) * cluster_size > protein_length:
            logger.warning(
                f"{n} points do not fit within {protein_length} residues at spacing {cluster_size}"
            )
        else:
            spread[-1] = min(spread[-1], protein_length)
            for i in range(n - 2, -1, -1):
                spread[i] = min(spread[i], spread[i + 1] - cluster_size)
            spread[0] = max(spread[0], 0.0)
            for i in range(1, n):
                spread[i] = max(spread[i], spread[i - 1] + cluster_size)

    return spread


def assign_display_positions(
    summary: pd.DataFrame,
    protein_length: Optional[float] = None,
    repel: bool = False,
    cluster_size: float = 10,
) -> pd.DataFrame:
    """Add the ``pos2`` display position column.

    Args:
        summary: Aggregated points sorted by ``pos``
        protein_length: Protein length in residues
        repel: Spread clustered points apart
        cluster_size: Minimum spacing used when repelling

    Returns:
        Copy of ``summary`` with ``pos2``
    """
    placed = summary.copy()
    if repel:
        placed["pos2"] = repel_positions(placed["pos"], protein_length, cluster_size)
    else:
        placed["pos2"] = placed["pos"].astype(float)
    return placed
