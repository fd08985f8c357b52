"""
Reinhard statistic matching in decorrelated Lαβ space.

Every channel of the target is shifted and scaled so that its mean and
standard deviation equal those of the source:

    x' = (sigma_s / sigma_t) * (x - mu_t) + mu_s
"""

import logging

import numpy as np

from .channel_statistics import ChannelStats, compute_statistics
from .colorspaces import validate_buffer

logger = logging.getLogger(__name__)

# Deviations below this are rounding noise from averaging identical values
MIN_DEVIATION = 1e-10


def scale_ratios(source_stats: ChannelStats, target_stats: ChannelStats) -> np.ndarray:
    """
    Per-channel sigma_s / sigma_t.

    A channel where either deviation is zero carries no usable scale and
    gets a ratio of 1: its values are moved onto the source mean but not
    scaled.
    """
    flat = (target_stats.stddev < MIN_DEVIATION) | (source_stats.stddev < MIN_DEVIATION)
    if flat.any():
        logger.debug(f"Zero deviation on channels {np.flatnonzero(flat).tolist()}, ratio 1")
    safe_stddev = np.where(flat, 1.0, target_stats.stddev)
    return np.where(flat, 1.0, source_stats.stddev / safe_stddev)


def match_statistics(
    target_buffer: np.ndarray,
    source_stats: ChannelStats,
    target_stats: ChannelStats,
) -> np.ndarray:
    """
    Rewrite ``target_buffer`` in place with the source statistics.

    Args:
        target_buffer: decorrelated target buffer (rows, cols, 3)
        source_stats: statistics to impose
        target_stats: statistics of ``target_buffer`` before the call

    Returns:
        The same buffer
    """
    validate_buffer(target_buffer)
    ratios = scale_ratios(source_stats, target_stats)
    target_buffer -= target_stats.mean
    target_buffer *= ratios
    target_buffer += source_stats.mean
    return target_buffer


def transfer_statistics(
    source_buffer: np.ndarray, target_buffer: np.ndarray
) -> tuple[ChannelStats, ChannelStats]:
    """
    Measure both decorrelated buffers and match the target to the source.

    Returns:
        (source_stats, target_stats), the statistics measured before matching
    """
    validate_buffer(source_buffer)
    source_stats = compute_statistics(source_buffer)
    target_stats = compute_statistics(target_buffer)
    logger.info(
        f"Source mean {np.round(source_stats.mean, 4).tolist()}, "
        f"target mean {np.round(target_stats.mean, 4).tolist()}"
    )
    match_statistics(target_buffer, source_stats, target_stats)
    return source_stats, target_stats
