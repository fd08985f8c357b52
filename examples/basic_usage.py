"""
Basic usage examples for colortransfer.

Demonstrates color transfer and colorization on synthetic images.
"""

import numpy as np
from PIL import Image

from colortransfer import (
    ColorTransferPipeline,
    create_pipeline,
    list_available_colorspaces,
)


def create_test_image(height=120, width=160, warm=True):
    """Create a synthetic gradient image with a warm or cool cast."""
    y, x = np.mgrid[0:height, 0:width]
    base = (x / width * 200 + y / height * 55).astype(np.float64)
    if warm:
        channels = [base, base * 0.7, base * 0.4]
    else:
        channels = [base * 0.4, base * 0.8, base]
    return np.clip(np.stack(channels, axis=-1), 0, 255).astype(np.uint8)


def example_color_transfer():
    """Transfer the mood of a warm image onto a cool one."""
    print("=== Color Transfer ===")

    source = create_test_image(warm=True)
    target = create_test_image(warm=False)

    pipeline = ColorTransferPipeline()
    result = pipeline.transfer(source, target)

    print(f"Output shape: {result.image.shape}")
    print(f"Source mean (Lαβ): {result.statistics['source']['mean']}")
    print(f"Target mean (Lαβ): {result.statistics['target']['mean']}")

    Image.fromarray(result.image).save("example_transfer.png")
    print("Saved: example_transfer.png")
    return result


def example_colorization():
    """Colorize a gray image from a warm one."""
    print("\n=== Colorization ===")

    source = create_test_image(warm=True)
    gray = create_test_image(warm=False).mean(axis=-1).astype(np.uint8)
    target = np.repeat(gray[..., None], 3, axis=-1)

    pipeline = create_pipeline(samples=200, seed=0)
    result = pipeline.colorize(source, target)

    info = result.statistics["colorization"]
    print(f"Samples used: {info['samples_used']} of {info['samples']}")

    Image.fromarray(result.image).save("example_colorization.png")
    print("Saved: example_colorization.png")
    return result


def example_colorspace_comparison():
    """Compare log bases on the same pair."""
    print("\n=== Colorspace Comparison ===")

    source = create_test_image(warm=True)
    target = create_test_image(warm=False)

    for name in list_available_colorspaces():
        result = create_pipeline(colorspace=name).transfer(source, target)
        Image.fromarray(result.image).save(f"example_transfer_{name.lower()}.png")
        print(f"Processed with {name}: saved example_transfer_{name.lower()}.png")


if __name__ == "__main__":
    example_color_transfer()
    example_colorization()
    example_colorspace_comparison()
