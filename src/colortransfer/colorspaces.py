"""
Color space transformations for the Reinhard transfer pipeline.

RGB -> LMS -> log(LMS) -> Lαβ and back. Both directions rewrite a float
pixel buffer of shape (rows, cols, 3) in place. The inverse direction also
folds every reconstructed RGB value into a RunningExtent so the caller can
renormalize afterwards.
"""

import logging
from abc import ABC, abstractmethod

import numpy as np

from .exact_matrices import (
    LAB_TO_LOGLMS,
    LMS_TO_RGB,
    LOGLMS_TO_LAB,
    N_CHANNELS,
    RGB_TO_LMS,
)
from .renormalize import RunningExtent

logger = logging.getLogger(__name__)

# Largest LMS value the inverse will produce. The headroom keeps the LMS -> RGB
# product and the later extent arithmetic finite.
LMS_CEILING = np.finfo(np.float64).max / (4.0 * np.abs(LMS_TO_RGB).sum(axis=1).max())


def validate_buffer(buffer: np.ndarray) -> tuple[int, int]:
    """
    Check that ``buffer`` is a usable pixel buffer.

    Returns:
        (rows, cols) of the buffer

    Raises:
        ValueError: if the buffer is not a floating (rows, cols, 3) array
            with at least one row and one column
    """
    if not isinstance(buffer, np.ndarray) or buffer.ndim != 3:
        raise ValueError("Pixel buffer must be a numpy array of shape (rows, cols, 3)")
    if buffer.shape[2] != N_CHANNELS:
        raise ValueError(f"Pixel buffer must have {N_CHANNELS} channels, got {buffer.shape[2]}")
    rows, cols = buffer.shape[:2]
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Pixel buffer dimensions must be positive, got {rows}x{cols}")
    if not np.issubdtype(buffer.dtype, np.floating):
        raise ValueError(f"Pixel buffer must hold floating point samples, got {buffer.dtype}")
    return rows, cols


class AbstractColorspace(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the colorspace."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of the colorspace."""
        pass

    @abstractmethod
    def forward(self, buffer: np.ndarray) -> np.ndarray:
        pass

    @abstractmethod
    def inverse(self, buffer: np.ndarray, extent: RunningExtent) -> np.ndarray:
        pass


class LalphabetaColorspace(AbstractColorspace):
    """
    Decorrelated Lαβ space of Ruderman et al. reached through log(LMS).

    The logarithm and its inverse power step share one base, so a buffer
    converted forward and back comes out unchanged up to rounding.
    """

    def __init__(self, log_base: float, name: str, description: str):
        if log_base <= 0.0 or log_base == 1.0:
            raise ValueError(f"Invalid logarithm base {log_base}")
        self._name, self._description = name, description
        self.log_base = float(log_base)
        self._log_scale = 1.0 / np.log(self.log_base)
        self._log_ceiling = np.log(LMS_CEILING) * self._log_scale

    @property
    def name(self):
        return self._name

    @property
    def description(self):
        return self._description

    def _log(self, lms: np.ndarray) -> np.ndarray:
        # log(0) is taken as 0 so black pixels do not turn into -inf
        log_lms = np.zeros_like(lms)
        np.log(lms, out=log_lms, where=lms != 0.0)
        log_lms *= self._log_scale
        return log_lms

    def forward(self, buffer: np.ndarray) -> np.ndarray:
        """
        Convert an RGB buffer to Lαβ in place.

        Args:
            buffer: float buffer (rows, cols, 3) with RGB components

        Returns:
            The same buffer, now holding L, α, β
        """
        validate_buffer(buffer)
        lms = buffer @ RGB_TO_LMS.T
        zero_count = int(np.count_nonzero(lms == 0.0))
        if zero_count:
            logger.debug(f"{zero_count} zero LMS components, log taken as 0")
        buffer[...] = self._log(lms) @ LOGLMS_TO_LAB.T
        return buffer

    def inverse(self, buffer: np.ndarray, extent: RunningExtent) -> np.ndarray:
        """
        Convert an Lαβ buffer back to raw RGB in place.

        The reconstructed values are not clamped to a display range; their
        per-channel range is recorded in ``extent`` for a later rescale. Only
        log(LMS) values that would overflow are capped at LMS_CEILING.

        Args:
            buffer: float buffer (rows, cols, 3) with L, α, β
            extent: accumulator updated with the raw RGB range

        Returns:
            The same buffer, now holding unclamped RGB
        """
        validate_buffer(buffer)
        log_lms = buffer @ LAB_TO_LOGLMS.T
        clipped = int(np.count_nonzero(log_lms > self._log_ceiling))
        if clipped:
            logger.warning(f"{clipped} log(LMS) components above {self._log_ceiling:.1f}, clipped")
            np.minimum(log_lms, self._log_ceiling, out=log_lms)
        lms = np.power(self.log_base, log_lms)
        rgb = lms @ LMS_TO_RGB.T
        extent.update(rgb)
        buffer[...] = rgb
        return buffer


class Log10LalphabetaColorspace(LalphabetaColorspace):
    def __init__(self):
        super().__init__(10.0, "LAB10", "Lαβ through base-10 log(LMS)")


class NaturalLogLalphabetaColorspace(LalphabetaColorspace):
    def __init__(self):
        super().__init__(np.e, "LABE", "Lαβ through natural log(LMS)")


DEFAULT_COLORSPACE = "LAB10"

COLORSPACES: dict[str, AbstractColorspace] = {
    cs.name: cs
    for cs in [
        Log10LalphabetaColorspace(),
        NaturalLogLalphabetaColorspace(),
    ]
}


class ColorspaceManager:
    """Manager for available colorspaces."""

    def list_available(self):
        """List all available colorspace names."""
        return list(COLORSPACES.keys())

    def get_colorspace(self, name):
        """Get a colorspace instance by name."""
        if name not in COLORSPACES:
            raise ValueError(f"Unknown colorspace '{name}'")
        return COLORSPACES[name]

    def is_available(self, name):
        """Check if a colorspace is available."""
        return name in COLORSPACES


def forward(buffer: np.ndarray) -> np.ndarray:
    """RGB -> Lαβ in place with the default colorspace."""
    return COLORSPACES[DEFAULT_COLORSPACE].forward(buffer)


def inverse(buffer: np.ndarray, extent: RunningExtent) -> np.ndarray:
    """Lαβ -> RGB in place with the default colorspace."""
    return COLORSPACES[DEFAULT_COLORSPACE].inverse(buffer, extent)
