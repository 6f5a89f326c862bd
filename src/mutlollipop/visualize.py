"""Lollipop plot rendering module.

This module provides the LollipopVisualizer class for drawing mutation counts
per residue as lollipops over a protein's domain structure.
"""

import logging
import math
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import pandas as pd
from adjustText import adjust_text
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.patches import Rectangle
from matplotlib.ticker import MaxNLocator

from .config import Config, DEFAULT_CLASSIFICATION_COLORS
from .domains import ProteinStructure, domain_label_positions
from .scale import AxisScale

logger = logging.getLogger(__name__)


def protein_axis_ticks(length: int) -> List[int]:
    """Residue axis ticks ending just past the protein's last residue.

    Args:
        length: Protein length in amino acids

    Returns:
        Tick positions starting at 0; the last tick is ``length + 3``
    """
    locator = MaxNLocator(nbins=5, steps=[1, 2, 2.5, 5, 10], integer=True)
    ticks = [int(t) for t in locator.tick_values(0, length) if 0 <= t < length]
    end = int(length) + 3
    # Drop the penultimate tick when it would crowd the end tick
    if len(ticks) > 1 and end - ticks[-1] <= 10:
        ticks = ticks[:-1]
    return ticks + [end]


def save_figure(
    fig: Figure,
    fn: Union[str, Path],
    width: Optional[float] = None,
    height: Optional[float] = None,
) -> Path:
    """Save a plot as ``<fn>.pdf``.

    Args:
        fig: Figure to save
        fn: Output path without extension
        width: Page width in inches (defaults to Config.FIG_WIDTH)
        height: Page height in inches (defaults to Config.FIG_HEIGHT)

    Returns:
        Path of the written PDF
    """
    output_path = Path(f"{fn}.pdf")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.set_size_inches(width or Config.FIG_WIDTH, height or Config.FIG_HEIGHT)
    fig.savefig(
        output_path,
        bbox_inches="tight",
        facecolor="white",
        edgecolor="none",
        format="pdf",
    )
    logger.info(f"Saved lollipop plot to {output_path}")
    return output_path


class LollipopVisualizer:
    """Draw lollipop plots of mutation counts along a protein.

    Lollipops sit above the protein track: stems start at the mutated residue
    and heads are drawn at the display position and compressed height.
    """

    def __init__(
        self,
        colors: Optional[Mapping[str, str]] = None,
        domain_colors: Optional[Mapping[str, str]] = None,
        point_size: float = 20,
        label_size: float = 8,
        label_angle: float = 0,
        legend_text_size: float = 10,
        domain_label_size: float = 7,
        title_size: Tuple[float, float] = (12, 10),
    ):
        """Initialize the LollipopVisualizer.

        Args:
            colors: Variant classification to color mapping
            domain_colors: Domain label to color mapping
            point_size: Marker area of lollipop heads
            label_size: Font size of protein change labels
            label_angle: Rotation of protein change labels
            legend_text_size: Font size of legend entries
            domain_label_size: Font size of domain labels
            title_size: Font sizes of title and subtitle
        """
        self.colors = dict(colors if colors is not None else DEFAULT_CLASSIFICATION_COLORS)
        self.domain_colors = dict(domain_colors) if domain_colors is not None else None
        self.point_size = point_size
        self.label_size = label_size
        self.label_angle = label_angle
        self.legend_text_size = legend_text_size
        self.domain_label_size = domain_label_size
        self.title_size = title_size

        # Track colors
        self.stem_color = "#b3b3b3"
        self.protein_color = "#bebebe"
        self.unknown_color = "#9E9E9E"

        # Track geometry (in display units of the count axis)
        self.protein_track = (0.2, 0.8)
        self.domain_track = (0.1, 0.9)
        self.y_max = 6.0
        self.y_limit = 6.5

    def _get_classification_color(self, classification: str) -> str:
        return self.colors.get(classification, self.unknown_color)

    def _get_domain_colors(self, labels: Sequence[str]) -> Dict[str, str]:
        """Assign a color to every domain label.

        Labels missing from user supplied colors fall back to the tab20 palette.
        """
        cmap = plt.get_cmap("tab20")
        palette = {}
        for i, label in enumerate(labels):
            if self.domain_colors and label in self.domain_colors:
                palette[label] = self.domain_colors[label]
            else:
                palette[label] = cmap(i % cmap.N)
        return palette

    def draw_lollipops(self, ax, points: pd.DataFrame) -> List[Line2D]:
        """Draw stems and heads; returns legend handles for classifications."""
        for _, point in points.iterrows():
            ax.plot(
                [point["pos"], point["pos2"]],
                [self.protein_track[1], point["count2"] - 0.03],
                color=self.stem_color,
                linewidth=0.5,
                zorder=1,
            )

        handles = []
        for classification in points["Variant_Classification"].unique():
            subset = points[points["Variant_Classification"] == classification]
            color = self._get_classification_color(classification)
            ax.scatter(
                subset["pos2"],
                subset["count2"],
                s=self.point_size,
                c=color,
                alpha=0.7,
                zorder=3,
            )
            handles.append(
                Line2D(
                    [0],
                    [0],
                    marker="o",
                    color="w",
                    markerfacecolor=color,
                    label=classification,
                    markersize=8,
                )
            )
        return handles

    def draw_axes(self, ax, scale: AxisScale, x_ticks: List[int]) -> None:
        """Draw the count axis with true-count labels and the residue axis."""
        x_end = max(x_ticks)
        ax.plot([0, 0], [min(scale.tick_positions), self.y_max], color="black", linewidth=1)
        ax.plot([0, x_end], [0, 0], color="black", linewidth=1)

        ax.set_yticks(scale.tick_positions)
        ax.set_yticklabels([str(lab) for lab in scale.tick_labels], fontweight="bold", fontsize=12)
        ax.set_xticks(x_ticks)
        ax.set_xticklabels([str(t) for t in x_ticks], fontweight="bold", fontsize=9)
        ax.set_ylim(0, self.y_limit)
        ax.set_xlim(0, x_end + round(0.02 * x_end))
        ax.set_ylabel("# Mutations")

        for spine in ax.spines.values():
            spine.set_visible(False)

    def draw_protein(
        self,
        ax,
        protein: ProteinStructure,
        show_domain_label: bool = True,
        unique_domain_labels: bool = True,
    ) -> List[Rectangle]:
        """Draw the protein bar and its domains.

        Returns:
            Legend handles for domains when they are not labelled in place
        """
        ymin, ymax = self.protein_track
        ax.add_patch(
            Rectangle(
                (0, ymin),
                protein.length,
                ymax - ymin,
                facecolor=self.protein_color,
                edgecolor="none",
                zorder=0,
            )
        )

        domains = protein.domains
        if domains.empty:
            return []

        palette = self._get_domain_colors(list(dict.fromkeys(domains["Label"])))
        dmin, dmax = self.domain_track
        for _, domain in domains.iterrows():
            ax.add_patch(
                Rectangle(
                    (domain["Start"], dmin),
                    domain["End"] - domain["Start"],
                    dmax - dmin,
                    facecolor=palette[domain["Label"]],
                    edgecolor="none",
                    zorder=0.5,
                )
            )

        if show_domain_label:
            labels = domain_label_positions(domains, unique=unique_domain_labels)
            for _, label in labels.iterrows():
                ax.text(
                    label["pos"],
                    0.5,
                    label["Label"],
                    ha="center",
                    va="center",
                    fontsize=self.domain_label_size,
                    fontweight="bold",
                    zorder=2,
                )
            return []

        return [
            Rectangle((0, 0), 1, 1, facecolor=color, label=label)
            for label, color in palette.items()
        ]

    def draw_labels(self, ax, labels: pd.DataFrame, points: pd.DataFrame) -> None:
        """Annotate lollipops with their protein change, repelling overlaps."""
        if labels.empty:
            return
        texts = [
            ax.text(
                row["pos2"] + 0.3,
                row["count2"] + 0.3,
                row["label"],
                fontsize=self.label_size,
                fontweight="bold",
                rotation=self.label_angle,
                zorder=4,
            )
            for _, row in labels.iterrows()
        ]
        adjust_text(
            texts,
            x=points["pos2"].tolist(),
            y=points["count2"].tolist(),
            ax=ax,
            arrowprops=dict(arrowstyle="-", color="gray", alpha=0.6, lw=0.5),
        )

    def draw_title(
        self,
        ax,
        title: str,
        subtitle: Optional[str] = None,
        title_color: str = "black",
        subtitle_color: str = "black",
        title_size: Optional[Tuple[float, float]] = None,
    ) -> None:
        """Draw a left aligned title with an optional subtitle."""
        sizes = title_size or self.title_size
        ax.text(
            0,
            1.14 if subtitle else 1.05,
            title,
            transform=ax.transAxes,
            fontsize=sizes[0],
            fontweight="bold",
            color=title_color,
        )
        if subtitle:
            ax.text(
                0,
                1.04,
                subtitle,
                transform=ax.transAxes,
                fontsize=sizes[1],
                fontweight="bold",
                color=subtitle_color,
            )

    def plot(
        self,
        points: pd.DataFrame,
        scale: AxisScale,
        protein: ProteinStructure,
        labels: Optional[pd.DataFrame] = None,
        titles: Optional[Dict] = None,
        show_domain_label: bool = True,
        unique_domain_labels: bool = True,
    ) -> Figure:
        """Compose the full lollipop plot.

        Args:
            points: Aggregated points with pos, pos2, count2 and Variant_Classification
            scale: Count axis produced by ``compress_counts``
            protein: Transcript whose domains are drawn
            labels: Protein change labels from ``select_labels``
            titles: Keyword arguments for ``draw_title``
            show_domain_label: Label domains in place instead of in the legend
            unique_domain_labels: One label per domain name

        Returns:
            The matplotlib Figure
        """
        fig, ax = plt.subplots(figsize=(Config.FIG_WIDTH, Config.FIG_HEIGHT))

        x_ticks = protein_axis_ticks(protein.length)
        mutation_handles = self.draw_lollipops(ax, points)
        domain_handles = self.draw_protein(
            ax, protein, show_domain_label, unique_domain_labels
        )
        self.draw_axes(ax, scale, x_ticks)

        handles = mutation_handles + domain_handles
        if handles:
            ax.legend(
                handles=handles,
                loc="upper center",
                bbox_to_anchor=(0.5, -0.12),
                ncol=max(1, math.ceil(len(handles) / 3)),
                frameon=False,
                prop={"size": self.legend_text_size},
                handlelength=1,
            )

        if labels is not None:
            self.draw_labels(ax, labels, points)

        if titles:
            self.draw_title(ax, **titles)

        fig.tight_layout()
        return fig
