#!/usr/bin/env python3
"""Draw lollipop plots of somatic mutations for one or more genes.

This script loads a MAF file and a protein domain table once, then writes one
PDF per gene along with a CSV summary of the genes processed.

Arguments:
    maf (str): Path to MAF file (plain or gzip compressed).
    output_dir (str): Directory to save plots and the summary.
    --gene (List[str]): Gene symbols to plot.
    --gene-list (str): File with one gene symbol per line.
    --domains (str): Protein domain table (defaults to MUTLOLLIPOP_PROTEIN_DOMAINS).
    --aa-col (str): Column holding protein changes.
    --label-pos (List[str]): Residue positions to label, or "all".
    --style (str): YAML file with plot style overrides.

Returns:
    None

Raises:
    LollipopError: Per-gene failures are logged and the gene is skipped.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
from tqdm import tqdm

from mutlollipop.config import Config, load_style_config
from mutlollipop.domains import ProteinDomainHandler
from mutlollipop.errors import LollipopError
from mutlollipop.logging_utils import configure_logging
from mutlollipop.lollipop import lollipop_plot
from mutlollipop.maf import MafHandler
from mutlollipop.utils import parse_gene_list, save_gene_level_results

logger = logging.getLogger(__name__)


class TqdmLoggingHandler(logging.Handler):
    """Logging handler that uses tqdm.write() to avoid interfering with progress bars.

    Only uses tqdm.write() when output is to a TTY (interactive terminal).
    """

    def emit(self, record):
        """Emit a log record using tqdm.write() or stderr."""
        try:
            msg = self.format(record)
            if sys.stderr.isatty():
                tqdm.write(msg, file=sys.stderr)
            else:
                sys.stderr.write(msg + "\n")
                sys.stderr.flush()
        except Exception:
            self.handleError(record)


def parse_label_positions(values: Optional[List[str]]):
    """Convert --label-pos values into the form lollipop_plot expects."""
    if not values:
        return None
    if values == ["all"]:
        return "all"
    return [int(v) for v in values]


def main(
    maf_path: str,
    output_dir: str,
    genes: List[str],
    domains_path: Optional[str] = None,
    plot_options: Optional[Dict] = None,
) -> pd.DataFrame:
    """Plot every gene and save a summary table.

    Args:
        maf_path (str): Path to the MAF file.
        output_dir (str): Directory for PDFs and the summary CSV.
        genes (List[str]): Gene symbols to plot.
        domains_path (Optional[str]): Protein domain table path.
        plot_options (Optional[Dict]): Extra keyword arguments for lollipop_plot.

    Returns:
        pd.DataFrame: One row per gene with its status.
    """
    start_time = datetime.now()
    plot_options = plot_options or {}
    output_dir_path = Path(output_dir)
    output_dir_path.mkdir(parents=True, exist_ok=True)

    logger.info("Loading mutation data...")
    maf = MafHandler.from_file(maf_path)
    domains_path = domains_path or Config.PROTEIN_DOMAINS_PATH
    if not domains_path:
        raise ValueError("No protein domain table given (--domains)")
    logger.info("Loading protein domains...")
    domains = ProteinDomainHandler.from_file(domains_path)

    results = []
    show_progress = sys.stderr.isatty()
    for gene in tqdm(
        genes,
        desc="Plotting genes",
        unit="gene",
        disable=not show_progress,
        file=sys.stderr,
    ):
        result = {"gene": gene, "status": "success", "plot": None, "error": None}
        try:
            plot = lollipop_plot(
                maf,
                gene=gene,
                domains=domains,
                fn=output_dir_path / gene,
                **plot_options,
            )
        except LollipopError as e:
            logger.error(f"Skipping {gene}: {e}")
            result.update(status="failed", error=str(e))
        else:
            if isinstance(plot, pd.DataFrame):
                result.update(
                    status="unlabelled",
                    error="Requested label positions are not mutated",
                )
            else:
                result["plot"] = str(output_dir_path / f"{gene}.pdf")
                plt.close(plot)
        results.append(result)

    save_gene_level_results(results, output_dir_path)

    duration = datetime.now() - start_time
    failed = sum(r["status"] != "success" for r in results)
    logger.info(f"Plotted {len(results) - failed}/{len(results)} genes in {duration}")
    return pd.DataFrame(results)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Draw lollipop plots of somatic mutations over protein domains"
    )
    parser.add_argument("maf", help="Path to MAF file")
    parser.add_argument("output_dir", help="Directory to save output files")
    genes_group = parser.add_mutually_exclusive_group(required=True)
    genes_group.add_argument("--gene", nargs="+", help="Gene symbols to plot")
    genes_group.add_argument("--gene-list", help="File containing gene names")
    parser.add_argument("--domains", default=None, help="Protein domain table")
    parser.add_argument("--aa-col", default=None, help="Column holding protein changes")
    parser.add_argument(
        "--label-pos", nargs="+", default=None, help='Positions to label, or "all"'
    )
    parser.add_argument("--refseq-id", default=None, help="RefSeq transcript to draw")
    parser.add_argument("--protein-id", default=None, help="RefSeq protein to draw")
    parser.add_argument("--repel", action="store_true", help="Spread close lollipops")
    parser.add_argument(
        "--cbioportal",
        action="store_true",
        help="Collapse classifications into Truncating/Missense/In-frame",
    )
    parser.add_argument(
        "--short-notation",
        action="store_true",
        help="Convert three-letter amino acid codes to one letter",
    )
    parser.add_argument("--style", default=None, help="YAML file with style overrides")
    parser.add_argument(
        "--print-count", action="store_true", help="Log mutations per position"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase verbosity (use -v or -vv for more detail)",
    )

    args = parser.parse_args()

    if args.verbose == 0:
        log_level = logging.WARNING
    elif args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG
    configure_logging(level=log_level, handler=TqdmLoggingHandler())

    if args.domains is None:
        Config.validate()

    genes = args.gene if args.gene else parse_gene_list(args.gene_list)

    plot_options = load_style_config(args.style) if args.style else {}
    plot_options.update(
        aa_col=args.aa_col,
        label_pos=parse_label_positions(args.label_pos),
        refseq_id=args.refseq_id,
        protein_id=args.protein_id,
        repel=args.repel,
        cbioportal=args.cbioportal,
        short_notation=args.short_notation,
        print_count=args.print_count,
        debug=args.verbose > 1,
    )

    main(
        maf_path=args.maf,
        output_dir=args.output_dir,
        genes=genes,
        domains_path=args.domains,
        plot_options=plot_options,
    )
