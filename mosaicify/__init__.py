"""
Mosaicify - batch pixelation of fixed image regions.

This package provides tools for:
- Resolving configured regions, including edge-relative offsets, onto images
- Block-averaging mosaic with blur-strength color attenuation
- Sequential or parallel batch processing with per-file error isolation
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config import MosaicifyConfig, MosaicConfig, PathConfig, Region, AbsoluteRect
from .geometry import resolve_region, iter_blocks
from .mosaic import MosaicFilter
from .pipeline import BatchPipeline, BatchReport
from .logger import get_logger

__all__ = [
    "MosaicifyConfig",
    "MosaicConfig",
    "PathConfig",
    "Region",
    "AbsoluteRect",
    "resolve_region",
    "iter_blocks",
    "MosaicFilter",
    "BatchPipeline",
    "BatchReport",
    "get_logger"
]
