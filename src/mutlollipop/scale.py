"""Count axis compression.

Raw mutation counts are mapped onto a display range of [1, 6] so plots keep the
same height whatever the most mutated residue. Tick labels carry the true
counts at the tick marks that are drawn.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

DISPLAY_MIN = 1.0
DISPLAY_SPAN = 5.0
MAX_TICKS = 6


@dataclass
class AxisScale:
    """Display heights for each count plus the y-axis tick table."""

    display: np.ndarray
    tick_positions: List[float] = field(default_factory=list)
    tick_labels: List[int] = field(default_factory=list)


def compress_counts(counts: Sequence[int], simple_axis: bool = False) -> AxisScale:
    """Map raw counts onto the display range.

    Args:
        counts: Raw mutation counts, one per lollipop
        simple_axis: Only keep the lowest and highest ticks

    Returns:
        AxisScale with display heights aligned to ``counts``

    Raises:
        ValueError: If ``counts`` is empty
    """
    counts = np.asarray(counts, dtype=float)
    if counts.size == 0:
        raise ValueError("Cannot build a count axis without any counts")

    max_count = counts.max()
    if max_count <= DISPLAY_SPAN:
        display = DISPLAY_MIN + counts
        tick_positions = [2.0, 3.0, 4.0, 5.0, 6.0]
        tick_labels = [1, 2, 3, 4, 5]
    else:
        display = DISPLAY_MIN + counts * (DISPLAY_SPAN / max_count)
        ticks = sorted(set(zip(display.tolist(), counts.astype(int).tolist())))
        tick_positions = [pos for pos, _ in ticks]
        tick_labels = [lab for _, lab in ticks]

    if len(tick_positions) > MAX_TICKS:
        seen = set()
        kept = []
        for pos, lab in zip(tick_positions, tick_labels):
            bucket = int(np.round(pos))
            if bucket not in seen:
                seen.add(bucket)
                kept.append((pos, lab))
        tick_positions = [pos for pos, _ in kept]
        tick_labels = [lab for _, lab in kept]

    if simple_axis:
        tick_positions = [min(tick_positions), max(tick_positions)]
        tick_labels = [min(tick_labels), max(tick_labels)]

    return AxisScale(
        display=display, tick_positions=tick_positions, tick_labels=tick_labels
    )
