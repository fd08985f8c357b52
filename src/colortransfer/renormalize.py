"""
Data-dependent renormalization of reconstructed RGB buffers.

The inverse color conversion produces RGB values with no fixed range. The
observed per-channel extent is recorded during that pass and then used here
to map each channel affinely onto the display range.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from .exact_matrices import N_CHANNELS

logger = logging.getLogger(__name__)

# Relative span under which a channel counts as flat; identical pixels can
# come out of the matrix products a few ulps apart.
FLAT_TOLERANCE = 1e-9


@dataclass
class RunningExtent:
    """Per-channel minimum and maximum seen so far."""

    minimum: np.ndarray = field(default_factory=lambda: np.full(N_CHANNELS, np.inf))
    maximum: np.ndarray = field(default_factory=lambda: np.full(N_CHANNELS, -np.inf))
    count: int = 0

    def update(self, values: np.ndarray) -> None:
        """
        Fold a block of pixel values into the extent.

        Args:
            values: array whose last axis holds the 3 channels
        """
        flat = values.reshape(-1, N_CHANNELS)
        if flat.shape[0] == 0:
            return
        np.minimum(self.minimum, flat.min(axis=0), out=self.minimum)
        np.maximum(self.maximum, flat.max(axis=0), out=self.maximum)
        self.count += flat.shape[0]

    @property
    def is_populated(self) -> bool:
        return self.count > 0

    @property
    def span(self) -> np.ndarray:
        return self.maximum - self.minimum

    def as_dict(self) -> dict:
        return {"min": self.minimum.tolist(), "max": self.maximum.tolist()}


def rescale(
    buffer: np.ndarray,
    extent: RunningExtent,
    display_min: float,
    display_max: float,
    dtype=np.uint8,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """
    Map a raw RGB buffer onto [display_min, display_max].

    Each channel c is mapped by the affine function sending extent.minimum[c]
    to display_min and extent.maximum[c] to display_max. The result is
    clipped to the display range and rounded to the nearest integer. A channel whose
    extent is flat (within FLAT_TOLERANCE of its magnitude) maps to the
    midpoint of the display range.

    Args:
        buffer: raw RGB buffer (rows, cols, 3) produced by the inverse pass
        extent: extent recorded by that same pass
        display_min: lowest output value
        display_max: highest output value
        dtype: component type of the returned image
        out: optional image of the buffer's shape to write into; its dtype
            takes precedence over ``dtype``

    Returns:
        ``out``, or a new array of ``dtype``, with the rescaled components

    Raises:
        ValueError: if the extent is empty or not finite, or the display
            range is inverted
    """
    if not extent.is_populated:
        raise ValueError("Extent is empty; run the inverse conversion before rescaling")
    if not display_min < display_max:
        raise ValueError(
            f"display_min must be below display_max, got [{display_min}, {display_max}]"
        )
    if not (np.isfinite(extent.minimum).all() and np.isfinite(extent.maximum).all()):
        raise ValueError(f"Extent is not finite: {extent.as_dict()}")
    if out is not None and out.shape != buffer.shape:
        raise ValueError(f"Output shape {out.shape} does not match buffer shape {buffer.shape}")

    minimum = extent.minimum
    maximum = extent.maximum
    span = maximum - minimum
    flat = span <= FLAT_TOLERANCE * np.maximum(1.0, np.abs(maximum))
    safe_span = np.where(flat, 1.0, span)

    # gain * (v - min) + display_min, the affine map anchored at the minimum
    gain = np.where(flat, 0.0, (display_max - display_min) / safe_span)
    base = np.where(flat, (display_min + display_max) / 2.0, display_min)
    if flat.any():
        logger.debug(f"Flat extent on channels {np.flatnonzero(flat).tolist()}, using midpoint")

    mapped = (buffer - minimum) * gain + base
    np.clip(mapped, display_min, display_max, out=mapped)
    np.rint(mapped, out=mapped)
    if out is None:
        return mapped.astype(dtype)
    out[...] = mapped
    return out
