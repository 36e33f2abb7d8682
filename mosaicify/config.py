"""
Configuration management for Mosaicify.

Defines data classes and enums for configuration management with type hints.
Configuration files may be TOML or JSON; the suffix selects the parser.
"""

import json
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, FrozenSet, NamedTuple, Tuple, Union
from pathlib import Path

from .errors import ConfigError


DEFAULT_FORMATS = ("jpg", "jpeg", "png", "bmp", "gif", "tiff", "webp")


class Anchor(Enum):
    """Edge an offset is measured from."""
    START = "start"  # left / top
    END = "end"      # right / bottom


class Offset(NamedTuple):
    """A distance measured from one edge of an image axis."""
    anchor: Anchor
    distance: int

    @classmethod
    def from_signed(cls, value: int) -> "Offset":
        """Decode the config encoding: negative values count from the far edge."""
        if value >= 0:
            return cls(Anchor.START, value)
        return cls(Anchor.END, -value)

    def to_absolute(self, extent: int) -> int:
        """Absolute position on an axis of length ``extent``, never below 0."""
        if self.anchor is Anchor.START:
            return self.distance
        return max(0, extent - self.distance)


@dataclass(frozen=True)
class Region:
    """A named rectangle to mosaic, in image-relative coordinates."""
    name: str
    x: int
    y: int
    width: int
    height: int

    @property
    def x_offset(self) -> Offset:
        return Offset.from_signed(self.x)

    @property
    def y_offset(self) -> Offset:
        return Offset.from_signed(self.y)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Region":
        """Create from dictionary."""
        try:
            return cls(
                name=str(data["name"]),
                x=int(data["x"]),
                y=int(data["y"]),
                width=int(data["width"]),
                height=int(data["height"])
            )
        except KeyError as e:
            raise ConfigError(f"Region is missing required key {e}") from e
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid region definition {data!r}: {e}") from e


@dataclass(frozen=True)
class AbsoluteRect:
    """A rectangle in absolute pixel coordinates, inside its image."""
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class PathConfig:
    """Input/output locations and the accepted file extensions."""
    input_dir: Path = field(default_factory=lambda: Path("input"))
    output_dir: Path = field(default_factory=lambda: Path("output"))
    supported_formats: FrozenSet[str] = field(
        default_factory=lambda: frozenset(DEFAULT_FORMATS)
    )

    def __post_init__(self):
        # frozen, so normalise through object.__setattr__
        object.__setattr__(self, "input_dir", Path(self.input_dir))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        object.__setattr__(
            self,
            "supported_formats",
            frozenset(normalize_extension(ext) for ext in self.supported_formats)
        )

    def accepts(self, path: Path) -> bool:
        """Whether ``path`` has one of the supported extensions."""
        return normalize_extension(path.suffix) in self.supported_formats


@dataclass(frozen=True)
class MosaicConfig:
    """Mosaic parameters, shared read-only by every file and worker."""
    block_size: int = 10
    blur_strength: int = 5


@dataclass(frozen=True)
class MosaicifyConfig:
    """Main configuration class for a Mosaicify run."""
    paths: PathConfig = field(default_factory=PathConfig)
    mosaic: MosaicConfig = field(default_factory=MosaicConfig)
    regions: Tuple[Region, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "regions", tuple(self.regions))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "MosaicifyConfig":
        """
        Load configuration from a TOML or JSON file.

        Args:
            path: Path to the configuration file

        Returns:
            Parsed (not yet validated) configuration

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigError: If the file cannot be read or parsed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            if path.suffix.lower() == ".json":
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            else:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
        except (json.JSONDecodeError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to parse config file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MosaicifyConfig":
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a table/object")

        try:
            paths_data = data["paths"]
            mosaic_data = data["mosaic"]
        except KeyError as e:
            raise ConfigError(f"Configuration is missing section {e}") from e

        try:
            paths = PathConfig(
                input_dir=Path(paths_data["input_dir"]),
                output_dir=Path(paths_data["output_dir"]),
                supported_formats=frozenset(
                    _string_list(paths_data.get("supported_formats", DEFAULT_FORMATS), "supported_formats")
                )
            )
            mosaic = MosaicConfig(
                block_size=int(mosaic_data["block_size"]),
                blur_strength=int(mosaic_data["blur_strength"])
            )
        except KeyError as e:
            raise ConfigError(f"Configuration is missing key {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

        regions_data = data.get("regions", [])
        if not isinstance(regions_data, list):
            raise ConfigError(f'"regions" must be a list of region tables, got {regions_data!r}')

        regions = tuple(Region.from_dict(r) for r in regions_data)
        return cls(paths=paths, mosaic=mosaic, regions=regions)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "paths": {
                "input_dir": str(self.paths.input_dir),
                "output_dir": str(self.paths.output_dir),
                "supported_formats": sorted(self.paths.supported_formats)
            },
            "mosaic": {
                "block_size": self.mosaic.block_size,
                "blur_strength": self.mosaic.blur_strength
            },
            "regions": [r.to_dict() for r in self.regions]
        }

    def validate(self) -> None:
        """
        Check the invariants the processing core relies on.

        Raises:
            ConfigError: On the first violated constraint
        """
        if not self.paths.input_dir.is_dir():
            raise ConfigError(f"Input directory does not exist: {self.paths.input_dir}")

        if not self.paths.supported_formats:
            raise ConfigError("At least one supported format is required")

        if self.mosaic.block_size <= 0:
            raise ConfigError("Mosaic block size must be greater than 0")

        if not 1 <= self.mosaic.blur_strength <= 10:
            raise ConfigError("Blur strength must be between 1 and 10")

        for region in self.regions:
            if region.width <= 0 or region.height <= 0:
                raise ConfigError(
                    f"Region '{region.name}' must have a non-zero width and height"
                )


def normalize_extension(ext: str) -> str:
    """Lowercase an extension and strip its leading dot."""
    return ext.lower().lstrip(".")


def _string_list(value: Any, key: str) -> Tuple[str, ...]:
    """Accept a list of strings; a bare string would be split into characters."""
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f'"{key}" must be a list of strings, got {value!r}')
    return tuple(value)
