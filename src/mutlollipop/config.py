"""Configuration management for mutlollipop.

This module loads configuration from environment variables or a .env file and
holds the read-only lookup tables (classification sets, palettes and category
maps) shared by the plotting pipeline.
"""

import os
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Optional, Union

import yaml


def load_env_file(env_path: Optional[str] = None) -> None:
    """Load environment variables from .env file.

    Args:
        env_path: Optional path to .env file. If not provided, searches in standard locations.
    """
    if env_path:
        env_file = Path(env_path)
    else:
        # Search for .env in this directory and up to 3 parent levels
        current = Path(__file__).parent
        for _ in range(4):
            env_file = current / ".env"
            if env_file.exists():
                break
            current = current.parent
        else:
            return

    if not env_file.exists():
        return

    with open(env_file, "r") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            # Parse KEY=VALUE
            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                # Don't override existing environment variables
                if key not in os.environ:
                    os.environ[key] = value


# Load .env file on module import
load_env_file()


class Config:
    """Configuration class for reference data locations and plot defaults."""

    # Tab separated protein domain table (HGNC, refseq.ID, protein.ID, aa.length, Start, End, Label)
    PROTEIN_DOMAINS_PATH: Optional[str] = os.getenv("MUTLOLLIPOP_PROTEIN_DOMAINS")

    # Minimum spacing (in residues) between repelled lollipop heads
    CLUSTER_SIZE: int = int(os.getenv("MUTLOLLIPOP_CLUSTER_SIZE", "10"))

    # Exported page size (inches)
    FIG_WIDTH: float = float(os.getenv("MUTLOLLIPOP_FIG_WIDTH", "8"))
    FIG_HEIGHT: float = float(os.getenv("MUTLOLLIPOP_FIG_HEIGHT", "4"))

    @classmethod
    def validate(cls) -> None:
        """Validate that required configuration is present."""
        if not cls.PROTEIN_DOMAINS_PATH:
            import warnings

            warnings.warn(
                "MUTLOLLIPOP_PROTEIN_DOMAINS not set. Pass a protein domain table "
                "explicitly or add its path to the .env file.",
                UserWarning,
            )


# Variant classifications kept when synonymous variants are excluded
NON_SYNONYMOUS_CLASSES = frozenset(
    {
        "Frame_Shift_Del",
        "Frame_Shift_Ins",
        "Splice_Site",
        "Translation_Start_Site",
        "Nonsense_Mutation",
        "Nonstop_Mutation",
        "In_Frame_Del",
        "In_Frame_Ins",
        "Missense_Mutation",
    }
)

# Fallback search order for the protein change column
DEFAULT_CHANGE_COLUMNS = ("HGVSp_Short", "Protein_Change", "AAChange")

# cBioPortal MutationMapper style categories
CBIOPORTAL_CATEGORIES = MappingProxyType(
    {
        "Nonstop_Mutation": "Truncating",
        "Frame_Shift_Del": "Truncating",
        "Missense_Mutation": "Missense",
        "Nonsense_Mutation": "Truncating",
        "Splice_Site": "Truncating",
        "Frame_Shift_Ins": "Truncating",
        "In_Frame_Del": "In-frame",
        "In_Frame_Ins": "In-frame",
    }
)

CBIOPORTAL_COLORS = MappingProxyType(
    {
        "Truncating": "black",
        "Missense": "#33A02C",
        "In-frame": "brown",
        "Other": "#9E9E9E",
    }
)

# ColorBrewer "Paired" followed by the first "Spectral" shades
DEFAULT_CLASSIFICATION_COLORS = MappingProxyType(
    {
        "Nonstop_Mutation": "#A6CEE3",
        "Frame_Shift_Del": "#1F78B4",
        "Silent": "#B2DF8A",
        "Missense_Mutation": "#33A02C",
        "IGR": "#FB9A99",
        "Nonsense_Mutation": "#E31A1C",
        "RNA": "#FDBF6F",
        "Splice_Site": "#FF7F00",
        "Intron": "#CAB2D6",
        "Frame_Shift_Ins": "#6A3D9A",
        "In_Frame_Del": "#B15928",
        "ITD": "#9E0142",
        "In_Frame_Ins": "#D53E4F",
        "Translation_Start_Site": "#F46D43",
        "Multi_Hit": "black",
    }
)

STYLE_KEYS = (
    "colors",
    "domain_colors",
    "point_size",
    "label_size",
    "label_angle",
    "legend_text_size",
    "domain_label_size",
    "title_size",
)


def load_style_config(config_file: Union[str, Path]) -> Dict:
    """Read plot style overrides from a YAML file.

    Args:
        config_file: Path to YAML style file

    Returns:
        Dictionary of style keyword arguments for ``lollipop_plot``

    Raises:
        ValueError: If the file holds anything but a mapping of known style keys
    """
    with open(config_file) as f:
        style = yaml.safe_load(f) or {}

    if not isinstance(style, dict):
        raise ValueError(f"Style file {config_file} must contain a mapping")

    unknown = sorted(set(style) - set(STYLE_KEYS))
    if unknown:
        raise ValueError(
            f"Unknown style keys in {config_file}: {', '.join(unknown)}"
        )

    if "title_size" in style:
        style["title_size"] = tuple(style["title_size"])

    return style
