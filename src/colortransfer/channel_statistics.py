"""Per-channel statistics of decorrelated pixel buffers."""

from dataclasses import dataclass

import numpy as np

from .exact_matrices import N_CHANNELS


@dataclass(frozen=True)
class ChannelStats:
    """Mean and population standard deviation of each channel."""

    mean: np.ndarray
    stddev: np.ndarray

    def as_dict(self) -> dict:
        return {"mean": self.mean.tolist(), "stddev": self.stddev.tolist()}


def channel_mean(buffer: np.ndarray) -> np.ndarray:
    """Sum of each channel divided by rows * cols."""
    pixels = buffer.reshape(-1, N_CHANNELS)
    return pixels.sum(axis=0) / pixels.shape[0]


def channel_stddev(buffer: np.ndarray, mean: np.ndarray) -> np.ndarray:
    """
    Population standard deviation around a supplied mean.

    Divides by rows * cols, not rows * cols - 1.
    """
    pixels = buffer.reshape(-1, N_CHANNELS)
    deviations = pixels - mean
    return np.sqrt((deviations * deviations).sum(axis=0) / pixels.shape[0])


def compute_statistics(buffer: np.ndarray) -> ChannelStats:
    mean = channel_mean(buffer)
    return ChannelStats(mean=mean, stddev=channel_stddev(buffer, mean))
