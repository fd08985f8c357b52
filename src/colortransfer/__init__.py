"""
colortransfer - Reinhard color transfer and sample-based colorization

Moves the color mood of a source image onto a target image in the
decorrelated Lαβ space of Ruderman et al., following Reinhard, Ashikhmin,
Gooch and Shirley, "Color Transfer between Images" (2001).
"""

__version__ = "0.1.0"

# Statistics and transfer
from .channel_statistics import ChannelStats as ChannelStats
from .channel_statistics import compute_statistics as compute_statistics

# Colorization
from .colorization import ColorizationSampler as ColorizationSampler
from .colorization import SampleBank as SampleBank
from .colorization import SampleCountError as SampleCountError

# Colorspaces
from .colorspaces import COLORSPACES as COLORSPACES
from .colorspaces import ColorspaceManager as ColorspaceManager

# Configuration
from .config import TransferConfig as TransferConfig
from .config import create_transfer_config as create_transfer_config

# Pipelines
from .pipeline import ColorTransferPipeline as ColorTransferPipeline
from .pipeline import TransferResult as TransferResult
from .pipeline import colorize_images as colorize_images
from .pipeline import transfer_images as transfer_images
from .renormalize import RunningExtent as RunningExtent
from .transfer import match_statistics as match_statistics


def list_available_colorspaces():
    """Returns a list of available colorspace names."""
    return list(COLORSPACES.keys())


def create_pipeline(**config_overrides):
    """
    Create a pipeline from keyword overrides of TransferConfig.

    Returns:
        ColorTransferPipeline: New pipeline instance
    """
    return ColorTransferPipeline(create_transfer_config(**config_overrides))


__all__ = [
    # Pipelines
    "ColorTransferPipeline",
    "TransferResult",
    "transfer_images",
    "colorize_images",
    "create_pipeline",
    # Building blocks
    "ChannelStats",
    "compute_statistics",
    "match_statistics",
    "RunningExtent",
    "ColorizationSampler",
    "SampleBank",
    "SampleCountError",
    # Configuration
    "TransferConfig",
    "create_transfer_config",
    # Utilities
    "list_available_colorspaces",
    "COLORSPACES",
    "ColorspaceManager",
]
