"""Utility functions for batch lollipop plotting."""

import logging
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

logger = logging.getLogger(__name__)


def parse_gene_list(gene_list_path: Union[str, Path]) -> List[str]:
    """Parse a file containing a list of gene names.

    Args:
        gene_list_path (Union[str, Path]): Path to file containing gene names.

    Returns:
        List[str]: List of gene names, blank lines and '#' comments skipped.

    Raises:
        FileNotFoundError: If the gene list file does not exist.
    """
    gene_list_path = Path(gene_list_path)
    if not gene_list_path.exists():
        raise FileNotFoundError(f"Gene list file not found: {gene_list_path}")
    with open(gene_list_path, "r") as f:
        gene_names = [
            line.strip() for line in f if line.strip() and not line.startswith("#")
        ]
    logger.info(f"Read {len(gene_names)} genes from {gene_list_path}")
    return gene_names


def save_gene_level_results(
    results: List[Dict],
    output_dir: Union[str, Path],
    filename: str = "lollipop_summary.csv",
) -> Path:
    """Save per-gene plotting results to CSV file.

    Args:
        results: One dictionary per gene (gene, status, plot path, counts)
        output_dir: Directory to save the results file
        filename: Name of the results file

    Returns:
        Path of the written CSV
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / filename
    pd.DataFrame(results).to_csv(output_path, index=False)
    logger.info(f"Gene-level results saved to {output_path}")
    return output_path
