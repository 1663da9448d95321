"""Helpers for collecting Beat identity tags and stats sections."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping
from urllib.parse import urlsplit

from .accumulator import Accumulator
from .config import BeatConfig
from .errors import ConfigError, DecodeError
from .fetcher import JsonFetcher
from .flatten import flatten_json

SUFFIX_INFO = "/"
SUFFIX_STATS = "/stats"

# Beat fields have always been reported with underscores, e.g. cpu_total_ticks.
FIELD_SEPARATOR = "_"

# (stats section, measurement name, toggle on BeatConfig), in report order.
SECTIONS = (
    ("beat", "beat", "collect_beat_stats"),
    ("filebeat", "beat_filebeat", "collect_filebeat_stats"),
    ("libbeat", "beat_libbeat", "collect_libbeat_stats"),
    ("system", "beat_system", "collect_system_stats"),
)


def _string_field(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"info field {key!r} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class BeatInfo:
    beat: str = ""
    hostname: str = ""
    name: str = ""
    uuid: str = ""
    version: str = ""

    @classmethod
    def from_json(cls, payload: Any) -> "BeatInfo":
        if not isinstance(payload, dict):
            raise DecodeError("info document must be a JSON object")
        return cls(
            beat=_string_field(payload, "beat"),
            hostname=_string_field(payload, "hostname"),
            name=_string_field(payload, "name"),
            uuid=_string_field(payload, "uuid"),
            version=_string_field(payload, "version"),
        )

    def tags(self) -> Dict[str, str]:
        return {
            "beat_id": self.uuid,
            "beat_name": self.name,
            "beat_host": self.hostname,
            "beat_version": self.version,
        }


@dataclass(frozen=True)
class BeatStats:
    beat: Any = None
    filebeat: Any = None
    libbeat: Any = None
    system: Any = None

    @classmethod
    def from_json(cls, payload: Any) -> "BeatStats":
        if not isinstance(payload, dict):
            raise DecodeError("stats document must be a JSON object")
        return cls(
            beat=payload.get("beat"),
            filebeat=payload.get("filebeat"),
            libbeat=payload.get("libbeat"),
            system=payload.get("system"),
        )


def build_url(base_url: str, suffix: str) -> str:
    url = base_url + suffix
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(f"invalid Beat URL: {url!r}")
    return url


def gather_info_tags(fetcher: JsonFetcher, base_url: str) -> Dict[str, str]:
    """Fetch the identity document and return the tags shared by every measurement."""
    info = fetcher.fetch_into(build_url(base_url, SUFFIX_INFO), BeatInfo.from_json)
    return info.tags()


def gather_stats(config: BeatConfig, fetcher: JsonFetcher, accumulator: Accumulator) -> None:
    """Run one collection cycle.

    Both documents are fetched before anything is reported, so a failure of
    either request leaves the accumulator untouched.
    """
    stats_url = build_url(config.url, SUFFIX_STATS)

    tags = gather_info_tags(fetcher, config.url)
    stats = fetcher.fetch_into(stats_url, BeatStats.from_json)

    for section, measurement, toggle in SECTIONS:
        if not getattr(config, toggle):
            continue
        fields = flatten_json(getattr(stats, section), "", FIELD_SEPARATOR)
        accumulator.add_fields(measurement, fields, tags)
