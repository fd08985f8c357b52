"""
Color transfer and colorization pipelines.

Both pipelines share the same frame:

1. Copy source and target images into float buffers
2. Convert both buffers to Lαβ
3. Rewrite the target buffer (statistic matching or colorization)
4. Convert the target back to RGB, recording the per-channel extent
5. Rescale into the display range and build the output image
"""

import logging
from typing import Any

import numpy as np

from .colorization import ColorizationSampler
from .colorspaces import ColorspaceManager
from .config import TransferConfig
from .io_utils import image_to_buffer, max_component, new_image, save_image, validate_image
from .renormalize import RunningExtent, rescale
from .transfer import transfer_statistics

logger = logging.getLogger(__name__)


class TransferResult:
    """Result container for one pipeline run."""

    def __init__(
        self,
        image: np.ndarray,
        mode: str,
        parameters: dict[str, Any],
        statistics: dict[str, Any],
        extent: RunningExtent,
    ):
        self.image = image
        self.mode = mode
        self.parameters = parameters
        self.statistics = statistics
        self.extent = extent

    def save(self, filepath: str):
        """Save the output image to file."""
        save_image(self.image, filepath)

    def __repr__(self):
        return f"TransferResult({self.mode}, shape={self.image.shape})"


class ColorTransferPipeline:
    """
    Runs Reinhard color transfer or colorization on pairs of RGB images.

    Args:
        config: run parameters; defaults to TransferConfig()
    """

    def __init__(self, config: TransferConfig | None = None):
        self.config = (config or TransferConfig()).validate()
        self.colorspace_manager = ColorspaceManager()
        self.colorspace = self.colorspace_manager.get_colorspace(self.config.colorspace)

    def transfer(self, source: np.ndarray, target: np.ndarray) -> TransferResult:
        """
        Give ``target`` the color statistics of ``source``.

        Args:
            source: RGB image supplying the colors
            target: RGB image to recolor

        Returns:
            TransferResult with an image of the target's shape and dtype
        """
        display_max = self._prepare(source, target)
        source_buffer = self.colorspace.forward(image_to_buffer(source))
        target_buffer = self.colorspace.forward(image_to_buffer(target))

        source_stats, target_stats = transfer_statistics(source_buffer, target_buffer)
        del source_buffer

        image, extent = self._finish(target_buffer, target.dtype, display_max)
        return TransferResult(
            image=image,
            mode="transfer",
            parameters=self._parameters(display_max, ("colorspace", "display_min")),
            statistics={
                "source": source_stats.as_dict(),
                "target": target_stats.as_dict(),
                "extent": extent.as_dict(),
            },
            extent=extent,
        )

    def colorize(self, source: np.ndarray, target: np.ndarray) -> TransferResult:
        """
        Transplant chrominance from ``source`` samples onto ``target``.

        Args:
            source: RGB image the sample bank is drawn from
            target: RGB image whose luminance is kept

        Returns:
            TransferResult with an image of the target's shape and dtype
        """
        display_max = self._prepare(source, target)
        source_buffer = self.colorspace.forward(image_to_buffer(source))
        target_buffer = self.colorspace.forward(image_to_buffer(target))

        sampler = ColorizationSampler(seed=self.config.seed)
        bank = sampler.build_sample_bank(source_buffer, self.config.samples)
        colorization_stats = sampler.colorize(
            target_buffer, source_buffer, bank, patch_size=self.config.patch_size
        )
        del source_buffer

        image, extent = self._finish(target_buffer, target.dtype, display_max)
        return TransferResult(
            image=image,
            mode="colorize",
            parameters=self._parameters(
                display_max, ("colorspace", "display_min", "samples", "patch_size", "seed")
            ),
            statistics={
                "colorization": colorization_stats.as_dict(),
                "extent": extent.as_dict(),
            },
            extent=extent,
        )

    def _prepare(self, source: np.ndarray, target: np.ndarray) -> float:
        validate_image(source)
        validate_image(target)
        display_max = self.config.resolve_display_max(max_component(target))
        logger.info(
            f"Source {source.shape[1]}x{source.shape[0]}, target {target.shape[1]}x{target.shape[0]}, "
            f"colorspace {self.colorspace.name}"
        )
        return display_max

    def _finish(
        self, target_buffer: np.ndarray, dtype, display_max: float
    ) -> tuple[np.ndarray, RunningExtent]:
        extent = RunningExtent()
        self.colorspace.inverse(target_buffer, extent)
        logger.info(f"Reconstructed RGB extent: {extent.as_dict()}")
        image = new_image(*target_buffer.shape[:2], dtype=dtype)
        rescale(target_buffer, extent, self.config.display_min, display_max, out=image)
        return image, extent

    def _parameters(self, display_max: float, keys: tuple[str, ...]) -> dict[str, Any]:
        config = self.config.as_dict()
        parameters = {key: config[key] for key in keys}
        parameters["display_max"] = display_max
        return parameters


def transfer_images(
    source: np.ndarray, target: np.ndarray, config: TransferConfig | None = None
) -> np.ndarray:
    """Reinhard color transfer of ``source`` onto ``target``."""
    return ColorTransferPipeline(config).transfer(source, target).image


def colorize_images(
    source: np.ndarray, target: np.ndarray, config: TransferConfig | None = None
) -> np.ndarray:
    """Sample-based colorization of ``target`` from ``source``."""
    return ColorTransferPipeline(config).colorize(source, target).image
