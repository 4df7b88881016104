"""Runtime settings and logging setup.

Settings come from ``CURVELAB_*`` environment variables with defaults from
``curvelab.constants``.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .constants import (
    CURVE_SAMPLES,
    DEFAULT_DEGREE,
    DEFAULT_PALETTE,
    MAX_DEGREE,
    PAD_FACTOR,
    PALETTES,
)
from .core.trace_store import TraceStore
from .themes import DEFAULT_THEME, THEMES

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ENV_PREFIX = "CURVELAB_"


@dataclass(frozen=True)
class Settings:
    palette: str = DEFAULT_PALETTE
    curve_samples: int = CURVE_SAMPLES
    pad_factor: float = PAD_FACTOR
    default_degree: int = DEFAULT_DEGREE
    theme: str = DEFAULT_THEME
    log_level: str = "INFO"

    def __post_init__(self):
        if self.palette not in PALETTES:
            raise ValueError(
                f"{ENV_PREFIX}PALETTE: unknown palette {self.palette!r}"
            )
        if self.theme not in THEMES:
            raise ValueError(f"{ENV_PREFIX}THEME: unknown theme {self.theme!r}")
        if self.curve_samples < 2:
            raise ValueError(f"{ENV_PREFIX}CURVE_SAMPLES must be >= 2")
        if not self.pad_factor > 0:
            raise ValueError(f"{ENV_PREFIX}PAD_FACTOR must be positive")
        if not 1 <= self.default_degree <= MAX_DEGREE:
            raise ValueError(
                f"{ENV_PREFIX}DEFAULT_DEGREE must be between 1 and {MAX_DEGREE}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(
                f"{ENV_PREFIX}LOG_LEVEL: unknown level {self.log_level!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        kwargs = {}
        for field_name, cast in (
            ("palette", str),
            ("curve_samples", int),
            ("pad_factor", float),
            ("default_degree", int),
            ("theme", str),
            ("log_level", str),
        ):
            key = ENV_PREFIX + field_name.upper()
            raw = env.get(key)
            if raw is None or raw == "":
                continue
            try:
                kwargs[field_name] = cast(raw)
            except ValueError as exc:
                raise ValueError(f"{key}: invalid value {raw!r}") from exc
        return cls(**kwargs)

    def palette_colors(self) -> List[str]:
        return list(PALETTES[self.palette])


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def build_store(settings: Optional[Settings] = None) -> TraceStore:
    settings = settings or Settings()
    return TraceStore(palette=settings.palette_colors())


__all__ = ["Settings", "configure_logging", "build_store", "LOG_FORMAT"]
