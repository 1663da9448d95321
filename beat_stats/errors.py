"""Exceptions raised while collecting Beat metrics."""
from __future__ import annotations


class BeatError(Exception):
    """Base class for every failure of a collection cycle."""


class ConfigError(BeatError):
    """Invalid configuration or URL."""


class NetworkError(BeatError):
    """The Beat endpoint could not be reached or answered with an error status."""


class DecodeError(BeatError):
    """A response body or value could not be decoded."""


class TLSConfigError(DecodeError):
    """TLS client settings could not be turned into a usable client."""
