"""User configuration for proctop."""

import logging
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from proctop.palettes import PALETTES, palette_index

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "proctop" / "config.toml"

MIN_REFRESH_RATE = 0.1
MIN_CELL_WIDTH = 4


@dataclass(frozen=True)
class Config:
    """Settings read from the config file and command line."""

    refresh_rate: float = 2.0  # Seconds between snapshots
    row_height: int = 1
    max_cell_width: int = 30
    palette: str = PALETTES[0].name

    @property
    def palette_index(self) -> int:
        return palette_index(self.palette)

    def normalized(self) -> "Config":
        """Copy with out-of-range values clamped and unknown palettes reset."""
        palette = self.palette
        try:
            palette_index(palette)
        except ValueError as exc:
            logger.warning("%s, using %s", exc, PALETTES[0].name)
            palette = PALETTES[0].name
        return replace(
            self,
            refresh_rate=max(MIN_REFRESH_RATE, self.refresh_rate),
            row_height=max(1, self.row_height),
            max_cell_width=max(MIN_CELL_WIDTH, self.max_cell_width),
            palette=palette,
        )

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """
        Load the config file, falling back to defaults.

        A missing file is not an error. An unreadable or malformed file is
        logged and ignored.
        """
        config_path = path or DEFAULT_CONFIG_PATH
        if not config_path.exists():
            return cls()
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            config = cls(
                refresh_rate=float(data.get("refresh_rate", cls.refresh_rate)),
                row_height=int(data.get("row_height", cls.row_height)),
                max_cell_width=int(data.get("max_cell_width", cls.max_cell_width)),
                palette=str(data.get("palette", cls.palette)),
            )
        except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as exc:
            logger.warning("Ignoring config file %s: %s", config_path, exc)
            return cls()
        return config.normalized()
