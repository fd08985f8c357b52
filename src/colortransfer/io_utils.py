import logging
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

SUPPORTED_DTYPES = (np.uint8, np.uint16)


def validate_image(image: np.ndarray) -> None:
    """Validate an RGB image array."""
    if image is None:
        raise ValueError("Image cannot be None")
    if not isinstance(image, np.ndarray) or image.ndim != 3 or image.shape[2] != 3:
        raise ValueError("Image must be a numpy array of shape (H, W, 3)")
    if image.shape[0] <= 0 or image.shape[1] <= 0:
        raise ValueError(f"Image dimensions must be positive, got {image.shape[:2]}")
    if image.dtype not in SUPPORTED_DTYPES:
        raise ValueError(f"Image must be uint8 or uint16, got {image.dtype}")


def max_component(image: np.ndarray) -> int:
    """Largest value a component of ``image`` can hold."""
    return int(np.iinfo(image.dtype).max)


def image_to_buffer(image: np.ndarray) -> np.ndarray:
    """Copy an image into a new float64 pixel buffer."""
    validate_image(image)
    return image.astype(np.float64)


def new_image(rows: int, cols: int, dtype=np.uint8) -> np.ndarray:
    """Blank RGB image."""
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Image dimensions must be positive, got {rows}x{cols}")
    return np.zeros((rows, cols, 3), dtype=dtype)


def load_image(file_path: str | Path) -> np.ndarray:
    """
    Load an image file as an RGB uint8 array.

    Raises:
        FileNotFoundError: if the file does not exist
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {file_path}")

    with Image.open(path) as img:
        logger.info(f"Loading {path.name}: {img.size[0]}x{img.size[1]} {img.mode}")
        if img.mode != "RGB":
            img = img.convert("RGB")
        return np.array(img, dtype=np.uint8)


def save_image(image: np.ndarray, file_path: str | Path) -> None:
    """
    Write an RGB image; the format follows the file extension.

    Raises:
        OSError: if OpenCV has no writer for the extension, or cannot encode
            or write the file
    """
    validate_image(image)
    path = Path(file_path)
    if not cv2.haveImageWriter(str(path)):
        raise OSError(f"No image writer for extension '{path.suffix}': {path}")
    try:
        written = cv2.imwrite(str(path), cv2.cvtColor(image, cv2.COLOR_RGB2BGR))
    except cv2.error as e:
        raise OSError(f"Could not write image to {path}: {e}") from e
    if not written:
        raise OSError(f"Could not write image to {path}")
    logger.info(f"Saved {path}")
