"""Sinks receiving the measurements of a collection cycle."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol


class Accumulator(Protocol):
    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, Any],
        tags: Mapping[str, str],
    ) -> None:
        ...


@dataclass
class Measurement:
    name: str
    fields: Dict[str, Any]
    tags: Dict[str, str]
    timestamp: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "fields": dict(self.fields),
            "tags": dict(self.tags),
            "timestamp": self.timestamp.isoformat(),
        }


class MemoryAccumulator:
    """Keeps measurements in memory. Calls without any field are dropped."""

    def __init__(self) -> None:
        self.measurements: List[Measurement] = []

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, Any],
        tags: Mapping[str, str],
    ) -> None:
        if not fields:
            return
        self.measurements.append(Measurement(measurement, dict(fields), dict(tags)))

    def get(self, name: str) -> Optional[Measurement]:
        for item in self.measurements:
            if item.name == name:
                return item
        return None

    def has_measurement(self, name: str) -> bool:
        return self.get(name) is not None

    def clear(self) -> None:
        self.measurements.clear()
