"""Lollipop plots of somatic mutations over protein domains.

Example:
    >>> from mutlollipop.lollipop import lollipop_plot
    >>> fig = lollipop_plot("tcga_laml.maf.gz", gene="KIT", aa_col="Protein_Change",
    ...                     domains="protein_domains.txt.gz", label_pos="all")
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union

import pandas as pd
from matplotlib.figure import Figure

from .aggregate import drop_unparsed, mutated_positions, summarize_changes
from .config import CBIOPORTAL_CATEGORIES, CBIOPORTAL_COLORS, Config
from .domains import ProteinDomainHandler, ProteinStructure
from .errors import MissingGeneError, NoMutationsError
from .labels import LabelPositions, select_labels
from .layout import assign_display_positions
from .logging_utils import DebugLogger
from .maf import MafHandler, resolve_change_column
from .parsing import parse_changes
from .scale import compress_counts
from .visualize import LollipopVisualizer, save_figure

logger = logging.getLogger(__name__)

MafSource = Union[MafHandler, pd.DataFrame, str, Path]
DomainSource = Optional[Union[ProteinDomainHandler, pd.DataFrame, str, Path]]


def _as_maf_handler(maf: MafSource) -> MafHandler:
    if isinstance(maf, MafHandler):
        return maf
    if isinstance(maf, pd.DataFrame):
        return MafHandler(maf)
    return MafHandler.from_file(maf)


def _as_domain_handler(domains: DomainSource) -> ProteinDomainHandler:
    if isinstance(domains, ProteinDomainHandler):
        return domains
    if isinstance(domains, pd.DataFrame):
        return ProteinDomainHandler(domains)
    if domains is None:
        domains = Config.PROTEIN_DOMAINS_PATH
        if not domains:
            raise ValueError(
                "No protein domain table given and MUTLOLLIPOP_PROTEIN_DOMAINS is not set"
            )
    return ProteinDomainHandler.from_file(domains)


def plot_titles(
    gene: str,
    protein: ProteinStructure,
    mutation_rate: float,
    show_mutation_rate: bool = True,
    cbioportal: bool = False,
    title_size: Tuple[float, float] = (12, 10),
) -> Dict:
    """Build the title settings passed to ``LollipopVisualizer.draw_title``."""
    rate_title = f"{gene}: [Somatic Mutation Rate: {mutation_rate}%]"
    if cbioportal:
        return {
            "title": rate_title,
            "subtitle": f"{gene}: {protein.refseq_id}",
            "title_color": "blue",
            "subtitle_color": "#1F78B4",
            "title_size": (10, 7),
        }
    if show_mutation_rate:
        return {
            "title": rate_title,
            "subtitle": protein.refseq_id,
            "title_size": title_size,
        }
    return {"title": f"{gene} ({protein.refseq_id})", "title_size": title_size}


def lollipop_plot(
    maf: MafSource,
    gene: Optional[str] = None,
    aa_col: Optional[str] = None,
    label_pos: LabelPositions = None,
    domains: DomainSource = None,
    refseq_id: Optional[str] = None,
    protein_id: Optional[str] = None,
    show_mutation_rate: bool = True,
    fn: Optional[Union[str, Path]] = None,
    show_domain_label: bool = True,
    cbioportal: bool = False,
    repel: bool = False,
    cluster_size: Optional[float] = None,
    collapse_pos_label: bool = True,
    print_count: bool = False,
    colors: Optional[Mapping[str, str]] = None,
    domain_colors: Optional[Mapping[str, str]] = None,
    label_only_unique_domains: bool = True,
    default_y_axis: bool = True,
    short_notation: bool = False,
    point_size: float = 20,
    label_size: float = 8,
    label_angle: float = 0,
    legend_text_size: float = 10,
    domain_label_size: float = 7,
    title_size: Tuple[float, float] = (12, 10),
    debug: bool = False,
) -> Union[Figure, pd.DataFrame]:
    """Draw a lollipop plot of amino acid changes on a protein structure.

    Protein changes are read from ``aa_col`` or, by default, the first of
    HGVSp_Short, Protein_Change or AAChange. Changes may be bare positions or
    HGVS protein notation (p.P459L, p.L2195Pfs*30, p.Leu2195ProfsTer30).

    Args:
        maf: MafHandler, mutation DataFrame or path to a MAF file
        gene: HGNC symbol to plot
        aa_col: Column holding protein changes
        label_pos: Residue position(s) to label, or "all"
        domains: ProteinDomainHandler, domain DataFrame or path; defaults to
            Config.PROTEIN_DOMAINS_PATH
        refseq_id: RefSeq transcript to draw instead of the longest one
        protein_id: RefSeq protein to draw instead of the longest one
        show_mutation_rate: Show the somatic mutation rate in the title
        fn: Basename of a PDF to write
        show_domain_label: Label domains in place; otherwise list them in the legend
        cbioportal: Collapse classifications into Truncating/Missense/In-frame
            and use MutationMapper style titles
        repel: Spread lollipops that are within ``cluster_size`` residues
        cluster_size: Minimum spacing when repelling (defaults to Config.CLUSTER_SIZE)
        collapse_pos_label: Merge labels at the same position ("P459L/V")
        print_count: Log the number of mutations per position
        colors: Variant classification colors
        domain_colors: Domain label colors
        label_only_unique_domains: Label each domain name once
        default_y_axis: If False, only label the lowest and highest counts
        short_notation: Convert three-letter amino acid codes to one letter
        point_size: Marker area of lollipop heads
        label_size: Font size of change labels
        label_angle: Rotation of change labels
        legend_text_size: Font size of legend entries
        domain_label_size: Font size of domain labels
        title_size: Font sizes for title and subtitle
        debug: Log intermediate pipeline details

    Returns:
        The matplotlib Figure, or a table of mutated positions ranked by
        mutation count when none of ``label_pos`` is mutated

    Raises:
        MissingGeneError: If no gene is given
        ChangeColumnNotFoundError: If no protein change column is found
        NoMutationsError: If the gene has no usable mutations
        ProteinNotFoundError: If no protein structure is available
    """
    if not gene:
        raise MissingGeneError("Please provide a gene name.")

    debug_log = DebugLogger(logger, debug=debug)
    handler = _as_maf_handler(maf)

    with debug_log.section(f"Selecting mutations for {gene}"):
        mut = handler.subset(gene)
        change_col = resolve_change_column(mut.columns, aa_col)
        prot_dat = pd.DataFrame(
            {
                "Variant_Type": mut["Variant_Type"],
                "Variant_Classification": mut["Variant_Classification"],
                "AAChange": mut[change_col],
            }
        )
        debug_log.field("Change column", change_col)
        debug_log.field("Records", len(prot_dat))

    if prot_dat.empty:
        raise NoMutationsError(f"{gene} does not seem to have any mutations!")

    protein = _as_domain_handler(domains).get_protein(gene, refseq_id, protein_id)
    debug_log.field("Transcript", f"{protein.refseq_id} ({protein.length} aa)")

    if cbioportal:
        category_map = CBIOPORTAL_CATEGORIES
        colors = CBIOPORTAL_COLORS
    else:
        category_map = None

    with debug_log.section("Parsing protein changes"):
        parsed = drop_unparsed(
            parse_changes(prot_dat, "AAChange", short_notation=short_notation)
        )
        debug_log.field("Parsed rows", len(parsed))
    if parsed.empty:
        raise NoMutationsError(
            f"{gene} has no mutations with a parsable amino acid position!"
        )

    with debug_log.section("Summarizing lollipops"):
        summary = summarize_changes(parsed, category_map)
        scale = compress_counts(summary["count"], simple_axis=not default_y_axis)
        summary["count2"] = scale.display
        summary = assign_display_positions(
            summary,
            protein_length=protein.length,
            repel=repel,
            cluster_size=cluster_size if cluster_size is not None else Config.CLUSTER_SIZE,
        )
        debug_log.field("Lollipops", len(summary))
        debug_log.field("Max count", int(summary["count"].max()))

    labels = select_labels(summary, label_pos, collapse=collapse_pos_label)
    if label_pos is not None and labels.empty:
        logger.warning(
            f"Position {label_pos} doesn't seem to be mutated. Here are the mutated foci."
        )
        return mutated_positions(summary)

    titles = plot_titles(
        gene,
        protein,
        handler.mutation_rate(gene),
        show_mutation_rate=show_mutation_rate,
        cbioportal=cbioportal,
        title_size=title_size,
    )

    visualizer = LollipopVisualizer(
        colors=colors,
        domain_colors=domain_colors,
        point_size=point_size,
        label_size=label_size,
        label_angle=label_angle,
        legend_text_size=legend_text_size,
        domain_label_size=domain_label_size,
        title_size=title_size,
    )
    fig = visualizer.plot(
        summary,
        scale,
        protein,
        labels=labels,
        titles=titles,
        show_domain_label=show_domain_label,
        unique_domain_labels=label_only_unique_domains,
    )

    if print_count:
        logger.info("\n" + mutated_positions(summary).to_string(index=False))

    if fn is not None:
        save_figure(fig, fn)

    return fig
