# geopower/errors.py
from __future__ import annotations


class GeoPowerError(Exception):
    """Base class for errors raised by geopower."""


class ParameterError(GeoPowerError, ValueError):
    """Invalid distribution parameters or simulation settings."""


class ConfigError(GeoPowerError, ValueError):
    """Configuration file or config dict cannot be turned into an input set."""
