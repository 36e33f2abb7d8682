"""
Per-file processing: discovering inputs and mosaicking one image.
"""

from pathlib import Path
from typing import List, Union

from .codec import load_image, save_image
from .config import MosaicifyConfig
from .errors import DiscoveryError, ProcessingError
from .geometry import resolve_region
from .logger import LoggerMixin
from .mosaic import MosaicFilter


class ImageProcessor(LoggerMixin):
    """
    Applies every configured region to a single image.

    Holds only read-only state, so one instance can be shared by all worker
    threads of a batch.
    """

    def __init__(self, config: MosaicifyConfig):
        """
        Initialize processor.

        Args:
            config: Validated configuration
        """
        self.config = config
        self.mosaic_filter = MosaicFilter(config.mosaic)

    def process_image(self, input_path: Union[str, Path]) -> Path:
        """
        Mosaic every configured region of one image and write the result.

        Args:
            input_path: Image to process

        Returns:
            Path the processed image was written to

        Raises:
            ProcessingError: If the file cannot be decoded or written
        """
        input_path = Path(input_path)
        output_path = self.get_output_path(input_path)

        image = load_image(input_path)
        self.log_info(f"Processing {input_path.name}, size {image.width}x{image.height}")

        for region in self.config.regions:
            rect = resolve_region(region, image.width, image.height)
            self.log_debug(
                f"  Region '{region.name}': position ({rect.x}, {rect.y}), "
                f"size {rect.width}x{rect.height}"
            )
            self.mosaic_filter.apply(image.pixels, rect)

        save_image(image, output_path)
        self.log_info(f"Saved {output_path}")
        return output_path

    def get_output_path(self, input_path: Path) -> Path:
        """Output location for ``input_path``: same file name, output directory."""
        if not input_path.name:
            raise ProcessingError(f"Cannot determine a file name for {input_path}")
        return self.config.paths.output_dir / input_path.name

    def get_image_files(self) -> List[Path]:
        """
        List supported image files directly inside the input directory.

        Returns:
            Matching files sorted by name

        Raises:
            DiscoveryError: If the input directory cannot be read
        """
        input_dir = self.config.paths.input_dir
        try:
            entries = list(input_dir.iterdir())
        except OSError as e:
            raise DiscoveryError(f"Cannot read input directory {input_dir}: {e}") from e

        files = [
            path for path in entries
            if path.is_file() and self.config.paths.accepts(path)
        ]
        return sorted(files)
