"""Generator configuration: typed config, YAML files, JSON round trip.

``GeneratorConfig`` is the caller-owned tuple ``(text, dot_size, spread,
padding, seed)``.  It is a frozen dataclass; "changing" a setting means
building a new config with :meth:`GeneratorConfig.replace`.

Regeneration rule:
    Dots depend on ``generation_key`` only.  ``padding`` changes the
    export framing but never the dots, so callers compare
    ``generation_key`` before calling the generator again.

Two serialized forms exist:

* YAML files (``generator_config.v1``) -- validated with pydantic, fail
  fast with :class:`ConfigError`.
* JSON text (camelCase keys, as typed into a text box) -- lenient:
  bad input never raises, it returns the previous config plus an error
  flag.

Usage::

    from eightsix.configs.loader import load_config, apply_config_json
    cfg = load_config()                         # shipped defaults
    cfg, error = apply_config_json(cfg, '{"seed": 7}')
"""

from __future__ import annotations

import json
import logging
import math
import random
from dataclasses import dataclass, replace as dc_replace
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from eightsix.configs.validators import SCHEMA_NAME, ConfigFileV1
from eightsix.utils.fs import atomic_yaml_dump, load_json_text, load_yaml

logger = logging.getLogger(__name__)

RANDOM_SEED_LIMIT = 100000


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when a configuration file fails validation."""

    pass


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeneratorConfig:
    """Generator and export settings.

    Parameters
    ----------
    text : str
        Text to encode.
    dot_size : float
        Dot radius times 1000 (slider range 20..80).
    spread : float
        Outer ring radius (slider range 0.5..1.2).
    padding : float
        Export border in percent of a unit (slider range 0..100).
    seed : int
        PRNG seed; any integer, wrapped to 32 bits by the generator.
    """

    text: str = ""
    dot_size: float = 45
    spread: float = 0.85
    padding: float = 20
    seed: int = 12345

    @property
    def dot_radius(self) -> float:
        return self.dot_size / 1000

    @property
    def padding_fraction(self) -> float:
        return self.padding / 100

    @property
    def total_radius(self) -> float:
        """Half-size of the export viewport: content extent plus padding."""
        return self.spread + self.dot_radius + self.padding_fraction

    @property
    def generation_key(self) -> tuple[str, float, float, int]:
        """Fields that change the generated dots (padding excluded)."""
        return (self.text, self.dot_size, self.spread, self.seed)

    def replace(self, **changes: Any) -> GeneratorConfig:
        """Return a copy with *changes* applied."""
        return dc_replace(self, **changes)

    def needs_regeneration(self, other: GeneratorConfig) -> bool:
        """True when *other* would produce different dots than this config."""
        return self.generation_key != other.generation_key


# ---------------------------------------------------------------------------
# YAML files
# ---------------------------------------------------------------------------


def _integral(value: float) -> float | int:
    # Keep slider-style integers as ints so JSON output reads "45", not "45.0"
    return int(value) if float(value).is_integer() else value


def load_config(path: str | Path | None = None) -> GeneratorConfig:
    """Load and validate a generator configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to a ``generator_config.v1`` file.  ``None`` loads the
        defaults shipped alongside this module.

    Returns
    -------
    GeneratorConfig

    Raises
    ------
    ConfigError
        If the file is empty or fails schema validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "defaults.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    data = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    try:
        parsed = ConfigFileV1.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration file {path}:\n{e}") from e

    return GeneratorConfig(
        text=parsed.text,
        dot_size=_integral(parsed.dot_size),
        spread=parsed.spread,
        padding=_integral(parsed.padding),
        seed=parsed.seed,
    )


def save_config(config: GeneratorConfig, path: str | Path) -> None:
    """Write *config* as a ``generator_config.v1`` YAML file (atomic)."""
    atomic_yaml_dump(
        {
            "schema": SCHEMA_NAME,
            "text": config.text,
            "dot_size": config.dot_size,
            "spread": config.spread,
            "padding": config.padding,
            "seed": _integral_seed(config.seed),
        },
        path,
    )
    logger.info("Saved configuration to %s", path)


# ---------------------------------------------------------------------------
# JSON round trip
# ---------------------------------------------------------------------------

# JSON key -> (dataclass field, accepted Python types)
_JSON_FIELDS: dict[str, tuple[str, tuple[type, ...]]] = {
    "text": ("text", (str,)),
    "dotSize": ("dot_size", (int, float)),
    "spread": ("spread", (int, float)),
    "padding": ("padding", (int, float)),
    "seed": ("seed", (int, float)),
}


def _integral_seed(value: int | float) -> int:
    # Floor to the state the generator derives; files hold integer seeds
    if isinstance(value, int):
        return value
    if not math.isfinite(value):
        return 0
    return math.floor(value)


def config_to_json(config: GeneratorConfig) -> str:
    """Serialize *config* to the 2-space indented JSON shown to users."""
    return json.dumps(
        {
            "text": config.text,
            "dotSize": config.dot_size,
            "spread": config.spread,
            "padding": config.padding,
            "seed": config.seed,
        },
        indent=2,
        ensure_ascii=False,
    )


def apply_config_json(
    config: GeneratorConfig, text: str,
) -> tuple[GeneratorConfig, bool]:
    """Apply user-edited JSON on top of *config*.

    Parameters
    ----------
    config : GeneratorConfig
        Current (prior) configuration.
    text : str
        JSON text, typically edited by hand.

    Returns
    -------
    tuple[GeneratorConfig, bool]
        ``(new_config, error)``.  On malformed JSON, ``new_config`` is
        *config* itself and ``error`` is True.

    Notes
    -----
    Each known key is applied only if its JSON type matches (``text`` a
    string, the rest numbers; ``true``/``false`` are not numbers).
    Unknown keys are ignored and missing keys keep their prior value.
    A ``null`` document counts as malformed; any other non-object
    document changes nothing.
    """
    try:
        parsed = load_json_text(text)
    except ValueError as e:
        logger.warning("Ignoring malformed configuration JSON: %s", e)
        return config, True

    if parsed is None:
        logger.warning("Ignoring configuration JSON: document is null")
        return config, True
    if not isinstance(parsed, dict):
        return config, False

    changes: dict[str, Any] = {}
    for key, (field_name, types) in _JSON_FIELDS.items():
        value = parsed.get(key)
        if isinstance(value, bool) or not isinstance(value, types):
            continue
        changes[field_name] = value

    if "seed" in changes:
        changes["seed"] = _integral_seed(changes["seed"])

    if not changes:
        return config, False
    return config.replace(**changes), False


# ---------------------------------------------------------------------------
# Seeds
# ---------------------------------------------------------------------------


def random_seed(rng: random.Random | None = None) -> int:
    """Draw a fresh seed in ``[0, 100000)``."""
    rng = rng or random.Random()
    return rng.randrange(RANDOM_SEED_LIMIT)


def randomized(config: GeneratorConfig, rng: random.Random | None = None) -> GeneratorConfig:
    """Return *config* with a freshly drawn seed."""
    return config.replace(seed=random_seed(rng))
