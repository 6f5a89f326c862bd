"""Mutation annotation (MAF) table handling module.

This module provides the MafHandler class for loading somatic mutation
records, selecting the records of one gene, and summarizing how many samples
carry a mutation in that gene.
"""

import gzip
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import pandas as pd

from .config import DEFAULT_CHANGE_COLUMNS, NON_SYNONYMOUS_CLASSES
from .errors import ChangeColumnNotFoundError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["Hugo_Symbol", "Variant_Classification", "Variant_Type"]
SAMPLE_COLUMN = "Tumor_Sample_Barcode"


def resolve_change_column(
    columns: Iterable[str],
    aa_col: Optional[str] = None,
    candidates: Sequence[str] = DEFAULT_CHANGE_COLUMNS,
) -> str:
    """Find the column holding protein change annotations.

    Args:
        columns: Available column names
        aa_col: Explicit column name, used as-is when present
        candidates: Names searched in order when ``aa_col`` is not given

    Returns:
        Name of the column to read protein changes from

    Raises:
        ChangeColumnNotFoundError: If no usable column exists
    """
    columns = list(columns)
    if aa_col is not None:
        if aa_col not in columns:
            raise ChangeColumnNotFoundError(
                f"Column {aa_col} not found. Available fields: {', '.join(columns)}"
            )
        return aa_col

    for candidate in candidates:
        if candidate in columns:
            logger.info(
                f"Assuming protein change information are stored under column {candidate}. "
                f"Use argument aa_col to override if necessary."
            )
            return candidate

    raise ChangeColumnNotFoundError(
        "AAChange field not found in MAF. Use argument aa_col to manually specify "
        f"field name containing protein changes. Available fields: {', '.join(columns)}"
    )


def _count_header_lines(file_path: Union[str, Path]) -> int:
    """Count the leading '#' lines (e.g. "#version 2.4") of a MAF file."""
    opener = gzip.open if str(file_path).endswith(".gz") else open
    count = 0
    with opener(file_path, "rt") as f:
        for line in f:
            if not line.startswith("#"):
                break
            count += 1
    return count


class MafHandler:
    """Handles somatic mutation records in MAF format.

    Attributes:
        data (pd.DataFrame): One row per observed variant.
    """

    def __init__(self, data: pd.DataFrame):
        """Initialize the handler from a mutation table.

        Args:
            data: Mutation records with at least Hugo_Symbol,
                Variant_Classification and Variant_Type

        Raises:
            ValueError: If required columns are missing
        """
        missing = [col for col in REQUIRED_COLUMNS if col not in data.columns]
        if missing:
            raise ValueError(f"MAF is missing required columns: {', '.join(missing)}")
        self.data = data

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "MafHandler":
        """Load a tab separated MAF file, skipping '#' header lines.

        Args:
            file_path: Path to the MAF file (plain or gzip compressed)

        Returns:
            MafHandler for the file
        """
        data = pd.read_csv(
            file_path,
            sep="\t",
            skiprows=_count_header_lines(file_path),
            dtype={column: str for column in DEFAULT_CHANGE_COLUMNS},
            compression="infer",
            low_memory=False,
        )
        logger.info(f"Loaded {len(data)} mutation records from {file_path}")
        return cls(data)

    @property
    def sample_count(self) -> int:
        """Number of distinct samples in the table."""
        if SAMPLE_COLUMN not in self.data.columns:
            return 0
        return int(self.data[SAMPLE_COLUMN].nunique())

    def subset(self, gene: str, include_syn: bool = False) -> pd.DataFrame:
        """Select the mutation records of one gene.

        Args:
            gene: HGNC symbol
            include_syn: Keep synonymous and non-coding classifications

        Returns:
            Copy of the matching rows, copy-number variants excluded
        """
        rows = (self.data["Hugo_Symbol"] == gene) & (self.data["Variant_Type"] != "CNV")
        if not include_syn:
            rows &= self.data["Variant_Classification"].isin(NON_SYNONYMOUS_CLASSES)
        return self.data[rows].copy()

    def mutation_rate(self, gene: str) -> float:
        """Percentage of samples carrying a non-synonymous mutation in ``gene``.

        Args:
            gene: HGNC symbol

        Returns:
            Mutation rate in percent, rounded to two decimals
        """
        samples = self.sample_count
        if samples == 0:
            return 0.0
        mutated = self.subset(gene)[SAMPLE_COLUMN].nunique()
        return round(mutated / samples * 100, 2)
