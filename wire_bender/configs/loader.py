"""Configuration loader for the wire bender.

Loads and validates ``machine.yaml`` into a typed, frozen dataclass.
Every value the G-code generator needs (feed rates, clearance positions,
duck pin heights) comes from here; the defaults match the stock machine.

Feed rates are emitted verbatim as the G-code ``F`` parameter; no unit
conversion happens anywhere in the pipeline.

Usage::

    from wire_bender.configs.loader import load_config
    cfg = load_config()                         # default path
    cfg = load_config("/custom/machine.yaml")   # explicit path
    cfg = cfg.with_overrides(bend_feedrate=4000)
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from wire_bender.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "machine.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenderConfig:
    """Machine parameters used by G-code generation.

    Attributes
    ----------
    feed_feedrate : float
        ``F`` value for wire feed moves.
    bend_feedrate : float
        ``F`` value for bend moves.
    positive_bend_clearance : float
        Bend-axis position that clears the wire while on the positive side.
    negative_bend_clearance : float
        Bend-axis position that clears the wire while on the negative side.
    duck_engaged_z : float
        Duck pin position when raised (head free to change side).
    duck_released_z : float
        Duck pin position when lowered (ready to bend).
    """

    feed_feedrate: float = 360.0
    bend_feedrate: float = 6000.0
    positive_bend_clearance: float = -82.0
    negative_bend_clearance: float = -122.0
    duck_engaged_z: float = 180.0
    duck_released_z: float = 0.0

    def clearance_for(self, angle: float) -> float:
        """Return the clearance position for the side *angle* lies on.

        ``angle <= 0`` is the negative side, ``angle > 0`` the positive.
        """
        if angle <= 0:
            return self.negative_bend_clearance
        return self.positive_bend_clearance

    def with_overrides(self, **overrides: Any) -> BenderConfig:
        """Return a validated copy with some options replaced.

        Options passed as ``None`` keep their current value, so callers
        can forward optional CLI flags untouched.

        Raises
        ------
        ConfigError
            If an option name is unknown or a value fails validation.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(
                f"Unknown configuration option(s): {', '.join(unknown)}"
            )

        changes: dict[str, float] = {}
        for name, value in overrides.items():
            if value is None:
                continue
            try:
                changes[name] = float(value)
            except (TypeError, ValueError) as exc:
                raise ConfigError(
                    f"{name} must be numeric, got {value!r}"
                ) from exc

        cfg = replace(self, **changes)
        validate_config(cfg)
        return cfg

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_config(cfg: BenderConfig) -> None:
    """Check physical plausibility of a configuration.

    Raises
    ------
    ConfigError
        If a feed rate is not strictly positive or any value is not finite.
    """
    for name, value in cfg.as_dict().items():
        if not math.isfinite(value):
            raise ConfigError(f"{name} must be finite, got {value}")

    if cfg.feed_feedrate <= 0:
        raise ConfigError(
            f"feed_feedrate must be > 0, got {cfg.feed_feedrate}"
        )
    if cfg.bend_feedrate <= 0:
        raise ConfigError(
            f"bend_feedrate must be > 0, got {cfg.bend_feedrate}"
        )

    if cfg.positive_bend_clearance == cfg.negative_bend_clearance:
        logger.warning(
            "Positive and negative bend clearances are identical (%.3f); "
            "side changes will not move the bend head",
            cfg.positive_bend_clearance,
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a mapping, got {type(section).__name__}"
        )
    return section


def load_config(path: str | Path | None = None) -> BenderConfig:
    """Load and validate machine configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``machine.yaml``.  ``None`` loads the default shipped
        alongside this module.  Keys missing from the file keep their
        built-in defaults.

    Returns
    -------
    BenderConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If the file is empty, malformed, or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed configuration file: {exc}") from exc
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    defaults = BenderConfig()
    try:
        feeds = _section(data, "feedrates")
        clear = _section(data, "clearances")
        duck = _section(data, "duck")

        config = BenderConfig(
            feed_feedrate=float(feeds.get("feed", defaults.feed_feedrate)),
            bend_feedrate=float(feeds.get("bend", defaults.bend_feedrate)),
            positive_bend_clearance=float(
                clear.get("positive", defaults.positive_bend_clearance)
            ),
            negative_bend_clearance=float(
                clear.get("negative", defaults.negative_bend_clearance)
            ),
            duck_engaged_z=float(
                duck.get("engaged_z", defaults.duck_engaged_z)
            ),
            duck_released_z=float(
                duck.get("released_z", defaults.duck_released_z)
            ),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc

    validate_config(config)
    logger.info("Configuration loaded successfully")
    return config
