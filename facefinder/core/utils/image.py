"""
Image processing utility functions.
"""
import math
from typing import Tuple

import cv2
import numpy as np


def bytes_to_numpy_array(image_bytes: bytes, flags: int = cv2.IMREAD_COLOR) -> np.ndarray:
    """Convert image bytes to a numpy array.

    Args:
        image_bytes: Raw image bytes
        flags: OpenCV imread flags (default: COLOR)

    Returns:
        numpy.ndarray: Image as a numpy array

    Raises:
        ValueError: If the image cannot be decoded
    """
    np_array = np.frombuffer(image_bytes, np.uint8)
    img = cv2.imdecode(np_array, flags)

    if img is None:
        raise ValueError("Failed to decode image bytes")

    return img


def fit_to_pixel_budget(width: int, height: int, max_pixels: int) -> Tuple[int, int]:
    """Scale (width, height) down so that width * height <= max_pixels.

    Sizes already within budget are returned unchanged.
    """
    pixels = width * height
    if pixels <= max_pixels:
        return width, height
    scale = math.sqrt(max_pixels / pixels)
    return int(width * scale), int(height * scale)
