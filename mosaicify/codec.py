"""
Image decoding and encoding through Pillow.

Images are handled internally as RGBA uint8 numpy arrays of shape
(height, width, 4) and converted back to a mode the source format can hold
when saved.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeError, ImageEncodeError


# Integer grayscale modes wider than 8 bits; Pillow opens 16-bit PNGs as one of these
WIDE_GRAY_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I")


@dataclass
class DecodedImage:
    """A decoded image and the source mode needed to write it back."""
    pixels: np.ndarray
    mode: str = "RGBA"

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


def to_rgba8(pil_image: Image.Image) -> np.ndarray:
    """
    Convert a Pillow image to an RGBA uint8 array.

    16-bit grayscale is scaled down to 8 bits by keeping the high byte;
    Pillow's own conversion would clip everything above 255.
    """
    if pil_image.mode in WIDE_GRAY_MODES:
        wide = np.clip(np.asarray(pil_image, dtype=np.int64), 0, 0xFFFF)
        pil_image = Image.fromarray((wide >> 8).astype(np.uint8))
    return np.array(pil_image.convert("RGBA"), dtype=np.uint8)


def load_image(path: Union[str, Path]) -> DecodedImage:
    """
    Decode an image file into an RGBA buffer.

    Args:
        path: Image file to read

    Returns:
        Decoded image with its source mode

    Raises:
        ImageDecodeError: If the file is missing, corrupt or not an image
    """
    path = Path(path)
    try:
        with Image.open(path) as pil_image:
            source_mode = pil_image.mode
            if "transparency" in pil_image.info:
                source_mode = "RGBA"
            pixels = to_rgba8(pil_image)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeError(f"Failed to decode {path}: {e}") from e

    return DecodedImage(pixels=pixels, mode=source_mode)


def output_mode(source_mode: str) -> str:
    """Pillow mode to save in, given the mode the image was read in."""
    if "A" in source_mode:
        return "RGBA"
    if source_mode in ("L", "1", "F") + WIDE_GRAY_MODES:
        return "L"
    return "RGB"


def save_image(image: DecodedImage, path: Union[str, Path]) -> None:
    """
    Encode an image to ``path``, creating parent directories as needed.

    The format is chosen by Pillow from the file extension.

    Raises:
        ImageEncodeError: If the directory or file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        pil_image = Image.fromarray(image.pixels)
        target_mode = output_mode(image.mode)
        if target_mode != "RGBA":
            pil_image = pil_image.convert(target_mode)
        pil_image.save(path)
    except (OSError, ValueError, KeyError) as e:
        raise ImageEncodeError(f"Failed to save {path}: {e}") from e
