"""Polling loop that gathers Beat metrics on a fixed interval and logs them."""
from __future__ import annotations

import logging
import time
from typing import Any, Optional

from .accumulator import Measurement, MemoryAccumulator
from .config import BeatConfig, get_settings, load_config
from .errors import BeatError
from .plugin import Beat

logger = logging.getLogger(__name__)


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace(",", "\\,").replace(" ", "\\ ").replace("=", "\\=")


def _format_field(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(float(value))
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_measurement(measurement: Measurement) -> str:
    """Render a measurement in line-protocol form, tags and fields sorted by key."""
    tags = "".join(
        f",{_escape(key)}={_escape(value)}"
        for key, value in sorted(measurement.tags.items())
        if value
    )
    fields = ",".join(
        f"{_escape(key)}={_format_field(value)}" for key, value in sorted(measurement.fields.items())
    )
    timestamp = int(measurement.timestamp.timestamp() * 1_000_000_000)
    return f"{_escape(measurement.name)}{tags} {fields} {timestamp}"


def run_cycle(beat: Beat) -> MemoryAccumulator:
    accumulator = MemoryAccumulator()
    beat.gather(accumulator)
    return accumulator


def run_poller(beat: Beat, interval: float, iterations: Optional[int] = None) -> None:
    logger.info("Poller started: reading %s every %.1fs", beat.config.url, interval)

    completed = 0
    while iterations is None or completed < iterations:
        start_time = time.time()
        try:
            accumulator = run_cycle(beat)
            for measurement in accumulator.measurements:
                logger.info("%s", format_measurement(measurement))
            logger.debug("Gathered %d measurements", len(accumulator.measurements))
        except BeatError as exc:
            logger.warning("Gathering Beat metrics failed: %s", exc)
        completed += 1
        if iterations is not None and completed >= iterations:
            break
        elapsed = time.time() - start_time
        time.sleep(max(0.0, interval - elapsed))


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    config = load_config(settings.config_path) if settings.config_path else BeatConfig()
    beat = Beat(config)
    try:
        run_poller(beat, settings.interval)
    finally:
        beat.close()


if __name__ == "__main__":
    main()
