"""
Region geometry: resolving configured regions onto a concrete image and
partitioning rectangles into mosaic blocks.

``resolve_region`` is the only place that turns configured (possibly
edge-relative) coordinates into absolute pixel offsets.
"""

from typing import Iterator

from .config import AbsoluteRect, Region


def resolve_region(region: Region, image_width: int, image_height: int) -> AbsoluteRect:
    """
    Resolve a configured region into an absolute rectangle on an image.

    Negative ``x``/``y`` count from the right/bottom edge. The result is
    clamped so it always lies inside the image; a region that falls off the
    canvas collapses to a zero-area rectangle instead of raising.

    Args:
        region: Configured region
        image_width: Width of the target image in pixels
        image_height: Height of the target image in pixels

    Returns:
        Rectangle satisfying ``x + width <= image_width`` and
        ``y + height <= image_height``
    """
    x = region.x_offset.to_absolute(image_width)
    y = region.y_offset.to_absolute(image_height)

    # Keep the origin on the canvas; a zero-sized image pins it to 0
    x = min(x, max(image_width - 1, 0))
    y = min(y, max(image_height - 1, 0))

    width = max(0, min(region.width, image_width - x))
    height = max(0, min(region.height, image_height - y))

    return AbsoluteRect(x=x, y=y, width=width, height=height)


def iter_blocks(rect: AbsoluteRect, block_size: int) -> Iterator[AbsoluteRect]:
    """
    Partition ``rect`` into mosaic blocks, row-major.

    Blocks are ``block_size`` square except along the right and bottom
    edges, where they are truncated to stay inside ``rect``.
    """
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")

    for block_y in range(rect.y, rect.bottom, block_size):
        block_height = min(block_size, rect.bottom - block_y)
        for block_x in range(rect.x, rect.right, block_size):
            block_width = min(block_size, rect.right - block_x)
            yield AbsoluteRect(block_x, block_y, block_width, block_height)
