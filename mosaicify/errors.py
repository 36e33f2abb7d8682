"""
Exception hierarchy for Mosaicify.

Fatal errors (configuration, discovery, output directory) abort a run before
any file is processed. Per-file errors are caught by the batch pipeline and
reported without stopping the batch.
"""


class MosaicifyError(Exception):
    """Base class for all Mosaicify errors."""


class ConfigError(MosaicifyError):
    """Configuration is missing, malformed or fails validation."""


class PipelineError(MosaicifyError):
    """A batch-level failure that aborts the whole run."""


class DiscoveryError(PipelineError):
    """The input directory could not be listed."""


class ProcessingError(MosaicifyError):
    """Processing a single file failed."""


class ImageDecodeError(ProcessingError):
    """An input file could not be decoded as an image."""


class ImageEncodeError(ProcessingError):
    """A processed image could not be written."""
