"""Runtime configuration helpers."""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .errors import ConfigError

DEFAULT_URL = "http://127.0.0.1:5066"
DEFAULT_METHOD = "GET"
DEFAULT_TIMEOUT_SECONDS = 5.0

DESCRIPTION = "Read metrics exposed by Beat"

SAMPLE_CONFIG = """\
## An URL from which to read Beat-formatted JSON
## Default is "http://127.0.0.1:5066".
url: "http://127.0.0.1:5066"

## Enable collection of the Beat stats
collect_beat_stats: true

## Enable the collection if Libbeat stats
collect_libbeat_stats: true

## Enable the collection of OS level stats
collect_system_stats: false

## Enable the collection of Filebeat stats
collect_filebeat_stats: true

## HTTP method
# method: "GET"

## Optional HTTP headers
# headers:
#   X-Special-Header: "Special-Value"

## Override HTTP "Host" header
# host_header: "logstash.example.com"

## Timeout for HTTP requests, e.g. 5, "5s", "1m30s" or "250ms"; 0 disables it
timeout: "5s"

## Optional HTTP Basic Auth credentials
# username: "username"
# password: "pa$$word"

## Optional TLS Config
# tls_ca: "/etc/beat-stats/ca.pem"
# tls_cert: "/etc/beat-stats/cert.pem"
# tls_key: "/etc/beat-stats/key.pem"
## Use TLS but skip chain & host verification
# insecure_skip_verify: false
"""

_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)"
_UNIT = r"(?:ns|us|\u00b5s|\u03bcs|ms|s|m|h)"
_BARE_RE = re.compile(rf"^{_NUMBER}$")
_DURATION_RE = re.compile(rf"^(?:{_NUMBER}{_UNIT})+$")
_PART_RE = re.compile(rf"({_NUMBER})({_UNIT})")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "\u00b5s": 1e-6,
    "\u03bcs": 1e-6,
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


@dataclass(frozen=True)
class BeatConfig:
    url: str = DEFAULT_URL

    collect_beat_stats: bool = True
    collect_libbeat_stats: bool = True
    collect_system_stats: bool = True
    collect_filebeat_stats: bool = True

    username: str = ""
    password: str = ""
    method: str = DEFAULT_METHOD
    headers: Dict[str, str] = field(default_factory=dict)
    host_header: str = ""
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    tls_ca: str = ""
    tls_cert: str = ""
    tls_key: str = ""
    insecure_skip_verify: bool = False


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 5067
    log_level: str = "info"
    config_path: Optional[str] = None
    interval: float = 10.0


def parse_duration(value: Union[str, int, float]) -> float:
    """Convert a duration into seconds.

    Accepts a number of seconds (``5``, ``"2.5"``) or a sequence of
    number/unit pairs using ``ns``, ``us``, ``ms``, ``s``, ``m`` and ``h``
    (``"500ms"``, ``"1m30s"``, ``"1.5h"``). Zero is allowed.
    """
    if isinstance(value, bool):
        raise ConfigError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = str(value).strip()
        if _BARE_RE.match(text):
            seconds = float(text)
        elif _DURATION_RE.match(text):
            seconds = sum(
                float(number) * _DURATION_UNITS[unit] for number, unit in _PART_RE.findall(text)
            )
        else:
            raise ConfigError(f"invalid duration: {value!r}")
    if seconds < 0:
        raise ConfigError(f"duration must not be negative: {value!r}")
    return seconds


def config_from_mapping(data: Optional[Mapping[str, Any]]) -> BeatConfig:
    """Validate a decoded configuration mapping and build a :class:`BeatConfig`."""
    if data is None:
        return BeatConfig()
    if not isinstance(data, Mapping):
        raise ConfigError("configuration must be a mapping")

    known = {f.name: f for f in fields(BeatConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, raw in data.items():
        if key == "timeout":
            values[key] = parse_duration(raw)
        elif key == "headers":
            if raw is None:
                raw = {}
            if not isinstance(raw, Mapping):
                raise ConfigError("headers must be a mapping of strings")
            values[key] = {str(name): str(header) for name, header in raw.items()}
        elif isinstance(known[key].default, bool):
            if not isinstance(raw, bool):
                raise ConfigError(f"{key} must be a boolean")
            values[key] = raw
        else:
            if raw is None:
                raw = ""
            if not isinstance(raw, str):
                raise ConfigError(f"{key} must be a string")
            values[key] = raw
    return BeatConfig(**values)


def load_config(path: Union[str, Path]) -> BeatConfig:
    """Read a YAML configuration file."""
    try:
        with open(path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read configuration {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    return config_from_mapping(data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    host = os.getenv("BEAT_STATS_HOST", "0.0.0.0")
    port = int(os.getenv("BEAT_STATS_PORT", "5067"))
    log_level = os.getenv("BEAT_STATS_LOG_LEVEL", "info").lower()
    config_path = os.getenv("BEAT_STATS_CONFIG") or None
    interval = parse_duration(os.getenv("BEAT_STATS_INTERVAL", "10"))
    return Settings(
        host=host,
        port=port,
        log_level=log_level,
        config_path=config_path,
        interval=interval,
    )
