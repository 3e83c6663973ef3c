"""
Decoder configuration.

Settings are read once from environment variables (optionally seeded from a
``.env`` file) and frozen. Every decode call receives the same instance by
reference; nothing mutates it afterwards.

Environment variables:
    GEOXACML_ENV: Selects ``.env.<env>`` before falling back to ``.env``
    GEOXACML_DEFAULT_SRS: CRS assumed for bare WKT without out-of-band CRS
    GEOXACML_QUADRANT_SEGMENTS: Circle buffer resolution
    GEOXACML_LOG_LEVEL: Level for the ``services.geoxacml`` logger
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from .core.constants import (
    CRS_ATTRIBUTE,
    DEFAULT_QUADRANT_SEGMENTS,
    DEFAULT_SRS,
    GML2_NAMESPACES,
    GML3_NAMESPACES,
    SRS_ATTRIBUTE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecoderConfig:
    """Immutable settings shared by all decode calls."""

    default_srs: str = DEFAULT_SRS
    """CRS assumed for bare WKT when the caller supplies none"""

    quadrant_segments: int = DEFAULT_QUADRANT_SEGMENTS
    """Segments per quadrant when buffering CIRCLE / CircleByCenterPoint"""

    gml2_namespaces: Tuple[str, ...] = GML2_NAMESPACES
    gml3_namespaces: Tuple[str, ...] = GML3_NAMESPACES

    srs_attribute_names: Tuple[str, ...] = (SRS_ATTRIBUTE, CRS_ATTRIBUTE)
    """Out-of-band attribute keys that carry the CRS of a bare WKT value"""

    log_level: str = "WARNING"

    @property
    def gml_namespaces(self) -> Tuple[str, ...]:
        return self.gml2_namespaces + self.gml3_namespaces


def _find_env_file(env: str) -> Optional[str]:
    """Pick ``.env.<env>`` if present, else ``.env``, else nothing."""
    for candidate in (f".env.{env}", ".env"):
        if os.path.exists(candidate):
            return candidate
    return None


def load_decoder_config(load_env_file: bool = True) -> DecoderConfig:
    """
    Build a DecoderConfig from the process environment.

    Args:
        load_env_file: Read ``.env.<GEOXACML_ENV>`` / ``.env`` first

    Returns:
        Frozen configuration; unset variables keep their defaults

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    if load_env_file:
        env = os.getenv("GEOXACML_ENV", "development")
        env_file = _find_env_file(env)
        if env_file:
            load_dotenv(env_file)
            logger.debug(f"Loaded environment from {env_file} (GEOXACML_ENV={env})")

    defaults = DecoderConfig()

    segments_raw = os.getenv("GEOXACML_QUADRANT_SEGMENTS")
    try:
        quadrant_segments = int(segments_raw) if segments_raw else defaults.quadrant_segments
    except ValueError as e:
        raise ValueError(f"GEOXACML_QUADRANT_SEGMENTS must be an integer, got: {segments_raw}") from e

    config = DecoderConfig(
        default_srs=os.getenv("GEOXACML_DEFAULT_SRS", defaults.default_srs),
        quadrant_segments=quadrant_segments,
        log_level=os.getenv("GEOXACML_LOG_LEVEL", defaults.log_level).upper(),
    )

    logging.getLogger("services.geoxacml").setLevel(config.log_level)
    return config


# Shared by reference across all decode calls
DEFAULT_CONFIG = DecoderConfig()
