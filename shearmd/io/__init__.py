"""Configuration input and output."""

from .base import Configuration, ConfigurationReader, ConfigurationWriter
from .cnf import CnfReader, CnfWriter

__all__ = [
    "Configuration",
    "ConfigurationReader",
    "ConfigurationWriter",
    "CnfReader",
    "CnfWriter",
]
