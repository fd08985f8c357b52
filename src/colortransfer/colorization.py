"""
Example-based colorization in decorrelated Lαβ space.

A bank of source pixels is drawn at random. Every target pixel is described
by the mean plus standard deviation of the luminance around it, matched to
the bank sample with the closest luminance, and given that sample's α and β.
The target's own luminance is never touched.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .colorspaces import validate_buffer
from .exact_matrices import CHROMINANCE_CHANNELS, LUMINANCE_CHANNEL
from .numba_utils import (
    nearest_index,
    nearest_sample_indices,
    window_luminance_signatures,
    window_signature,
)

logger = logging.getLogger(__name__)

DEFAULT_SAMPLES = 200
DEFAULT_PATCH_SIZE = 2


class SampleCountError(ValueError):
    """More samples requested than the source has unconsumed pixels."""


@dataclass
class SampleBank:
    """
    Lαβ triples drawn from a source buffer.

    Attributes:
        samples: (n, 3) array of L, α, β
        coordinates: (n, 2) array of (row, col) each sample came from
        consumed: boolean (rows, cols) mask of every pixel drawn so far
    """

    samples: np.ndarray
    coordinates: np.ndarray
    consumed: np.ndarray

    def __len__(self) -> int:
        return self.samples.shape[0]

    @property
    def luminance(self) -> np.ndarray:
        return np.ascontiguousarray(self.samples[:, LUMINANCE_CHANNEL])


@dataclass
class ColorizationStatistics:
    """Match indices and how often each bank sample was used."""

    indices: np.ndarray
    sample_usage: np.ndarray

    def as_dict(self) -> dict:
        used = int(np.count_nonzero(self.sample_usage))
        return {
            "samples": int(self.sample_usage.shape[0]),
            "samples_used": used,
            "most_used_sample": int(np.argmax(self.sample_usage)),
            "sample_usage": self.sample_usage.tolist(),
        }


def _validate_patch_size(patch_size: int) -> None:
    if patch_size < 1:
        raise ValueError(f"Patch size must be at least 1, got {patch_size}")


def luminance_signature(
    buffer: np.ndarray, row: int, col: int, patch_size: int = DEFAULT_PATCH_SIZE
) -> float:
    """
    Luminance signature of one pixel.

    Mean plus population standard deviation of L over the window of
    2 * patch_size rows and columns starting patch_size before the pixel.
    Windows at the border are clamped, not padded.
    """
    rows, cols = validate_buffer(buffer)
    _validate_patch_size(patch_size)
    if not (0 <= row < rows and 0 <= col < cols):
        raise IndexError(f"Pixel ({row}, {col}) outside {rows}x{cols} buffer")
    luminance = np.ascontiguousarray(buffer[..., LUMINANCE_CHANNEL])
    return float(window_signature(luminance, row, col, patch_size))


def nearest_sample(bank: SampleBank, signature: float) -> int:
    """
    Index of the bank sample whose luminance is closest to ``signature``.

    Ties resolve to the lowest index.
    """
    if len(bank) == 0:
        raise ValueError("Sample bank is empty")
    return int(nearest_index(bank.luminance, float(signature)))


class ColorizationSampler:
    """
    Draws sample banks and colorizes target buffers.

    Args:
        seed: seed for the random generator; None draws fresh entropy
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def build_sample_bank(
        self,
        source_buffer: np.ndarray,
        n: int = DEFAULT_SAMPLES,
        consumed: np.ndarray | None = None,
    ) -> SampleBank:
        """
        Draw ``n`` distinct, not yet consumed pixels from the source.

        The source buffer is left untouched. Drawn pixels are marked in
        ``consumed``, which is created if not given and returned on the bank;
        passing it back in on a later call keeps the banks disjoint.

        Raises:
            SampleCountError: if n < 1 or fewer than n pixels are still free
        """
        rows, cols = validate_buffer(source_buffer)
        if consumed is None:
            consumed = np.zeros((rows, cols), dtype=bool)
        elif consumed.shape != (rows, cols) or consumed.dtype != bool:
            raise ValueError("Consumed mask must be a boolean array matching the source")

        free = np.flatnonzero(~consumed.ravel())
        if n < 1:
            raise SampleCountError(f"Sample count must be at least 1, got {n}")
        if n > free.size:
            raise SampleCountError(
                f"Requested {n} samples but only {free.size} of {rows * cols} source pixels are available"
            )

        chosen = self.rng.choice(free, size=n, replace=False)
        coordinates = np.column_stack(np.unravel_index(chosen, (rows, cols)))
        samples = source_buffer[coordinates[:, 0], coordinates[:, 1]].copy()
        consumed[coordinates[:, 0], coordinates[:, 1]] = True

        logger.info(f"Drew {n} samples from {rows}x{cols} source ({free.size - n} left)")
        return SampleBank(samples=samples, coordinates=coordinates, consumed=consumed)

    def colorize(
        self,
        target_buffer: np.ndarray,
        source_buffer: np.ndarray,
        bank: SampleBank,
        patch_size: int = DEFAULT_PATCH_SIZE,
    ) -> ColorizationStatistics:
        """
        Give every target pixel the chrominance of its nearest bank sample.

        Signatures are taken from the target's luminance plane, which this
        method never writes, so the result does not depend on pixel order.

        Args:
            target_buffer: decorrelated target buffer, rewritten in place
            source_buffer: decorrelated source buffer the bank was drawn from
            bank: sample bank built from ``source_buffer``
            patch_size: half-width of the signature window

        Returns:
            ColorizationStatistics with the per-pixel match index
        """
        validate_buffer(target_buffer)
        source_shape = validate_buffer(source_buffer)
        _validate_patch_size(patch_size)
        if len(bank) == 0:
            raise ValueError("Sample bank is empty")
        if bank.consumed.shape != source_shape:
            raise ValueError("Sample bank was not drawn from this source buffer")

        luminance = np.ascontiguousarray(target_buffer[..., LUMINANCE_CHANNEL])
        signatures = window_luminance_signatures(luminance, patch_size)
        indices = nearest_sample_indices(signatures, bank.luminance)

        chrominance = list(CHROMINANCE_CHANNELS)
        target_buffer[..., chrominance] = bank.samples[indices][..., chrominance]

        usage = np.bincount(indices.ravel(), minlength=len(bank))
        logger.info(
            f"Colorized {indices.size} pixels using {int(np.count_nonzero(usage))} of {len(bank)} samples"
        )
        return ColorizationStatistics(indices=indices, sample_usage=usage)
