"""Protein domain reference handling module.

This module provides the ProteinDomainHandler class for loading a protein
domain table and selecting the transcript whose domain structure is drawn
beneath a lollipop plot.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .errors import ProteinNotFoundError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["HGNC", "refseq.ID", "protein.ID", "aa.length", "Start", "End", "Label"]


@dataclass
class ProteinStructure:
    """Domain layout of one transcript.

    Attributes:
        gene: HGNC symbol
        refseq_id: RefSeq transcript identifier
        protein_id: RefSeq protein identifier
        length: Protein length in amino acids
        domains: Domain segments with ``Start``, ``End`` and ``Label``
    """

    gene: str
    refseq_id: str
    protein_id: str
    length: int
    domains: pd.DataFrame


class ProteinDomainHandler:
    """Handles protein domain annotations keyed by gene, transcript and protein.

    The table holds one row per domain segment:
    HGNC, refseq.ID, protein.ID, aa.length, Start, End, Label
    """

    def __init__(self, domains: Optional[pd.DataFrame] = None):
        """Initialize the handler, optionally from an already loaded table.

        Args:
            domains: Domain table with the required columns
        """
        self.domains = pd.DataFrame(columns=REQUIRED_COLUMNS)
        if domains is not None:
            self._set_domains(domains)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "ProteinDomainHandler":
        """Create a handler from a domain table on disk."""
        handler = cls()
        handler.load(file_path)
        return handler

    def load(self, file_path: Union[str, Path]) -> None:
        """Load a tab separated domain table (gzip compression is detected).

        Args:
            file_path: Path to the domain table

        Raises:
            ValueError: If required columns are missing
        """
        table = pd.read_csv(file_path, sep="\t", compression="infer", low_memory=False)
        self._set_domains(table)
        logger.debug(f"Loaded {len(self.domains)} domain rows from {file_path}")

    def _set_domains(self, table: pd.DataFrame) -> None:
        missing = [col for col in REQUIRED_COLUMNS if col not in table.columns]
        if missing:
            raise ValueError(
                f"Protein domain table is missing columns: {', '.join(missing)}"
            )
        self.domains = table.copy()

    def get_protein(
        self,
        gene: str,
        refseq_id: Optional[str] = None,
        protein_id: Optional[str] = None,
    ) -> ProteinStructure:
        """Select the transcript to draw for a gene.

        Args:
            gene: HGNC symbol
            refseq_id: RefSeq transcript ID to use instead of the longest transcript
            protein_id: RefSeq protein ID to use instead of the longest transcript

        Returns:
            ProteinStructure of the selected transcript

        Raises:
            ProteinNotFoundError: If the gene or requested ID is not in the table
        """
        prot = self.domains[self.domains["HGNC"] == gene]
        if prot.empty:
            raise ProteinNotFoundError(f"Structure for protein {gene} not found.")

        if refseq_id is not None:
            prot = self.domains[self.domains["refseq.ID"] == refseq_id]
            if prot.empty:
                raise ProteinNotFoundError(
                    f"Transcript {refseq_id} not found in protein domain table."
                )
        elif protein_id is not None:
            prot = self.domains[self.domains["protein.ID"] == protein_id]
            if prot.empty:
                raise ProteinNotFoundError(
                    f"Protein {protein_id} not found in protein domain table."
                )
        else:
            txs = prot["refseq.ID"].unique()
            if len(txs) > 1:
                logger.info(
                    f"{len(txs)} transcripts available. Use refseq_id or protein_id to manually specify tx name."
                )
                available = prot.drop_duplicates("protein.ID")[
                    ["HGNC", "refseq.ID", "protein.ID", "aa.length"]
                ]
                logger.info("\n" + available.to_string(index=False))
                longest = prot[prot["aa.length"] == prot["aa.length"].max()]
                chosen = longest["refseq.ID"].iloc[0]
                prot = prot[prot["refseq.ID"] == chosen]
                logger.info(f"Using longer transcript {chosen} for now.")

        domains = prot[prot["Label"].notna()][["Start", "End", "Label"]]
        return ProteinStructure(
            gene=gene,
            refseq_id=str(prot["refseq.ID"].iloc[0]),
            protein_id=str(prot["protein.ID"].iloc[0]),
            length=int(prot["aa.length"].max()),
            domains=domains.reset_index(drop=True),
        )


def domain_label_positions(domains: pd.DataFrame, unique: bool = True) -> pd.DataFrame:
    """Compute x positions for domain labels.

    Args:
        domains: Domain segments with ``Start``, ``End`` and ``Label``
        unique: One label per domain name, placed at the mean of its segment
            midpoints

    Returns:
        DataFrame with ``Label`` and ``pos`` columns
    """
    labels = domains[["Label"]].copy()
    labels["pos"] = (domains["Start"] + domains["End"]) / 2
    if unique:
        labels = labels.groupby("Label", sort=False)["pos"].mean().reset_index()
    return labels.reset_index(drop=True)
