"""Beat monitoring input: polls a Beat HTTP endpoint and reports flat metrics."""
from importlib.metadata import version

from .accumulator import Accumulator, Measurement, MemoryAccumulator
from .config import BeatConfig, load_config
from .errors import BeatError, ConfigError, DecodeError, NetworkError, TLSConfigError
from .flatten import flatten_json
from .plugin import Beat, new_beat

__all__ = [
    "Accumulator",
    "Beat",
    "BeatConfig",
    "BeatError",
    "ConfigError",
    "DecodeError",
    "Measurement",
    "MemoryAccumulator",
    "NetworkError",
    "TLSConfigError",
    "flatten_json",
    "load_config",
    "new_beat",
    "__version__",
]

try:
    __version__ = version("beat-stats")
except Exception:  # pragma: no cover - fallback when package metadata missing
    __version__ = "0.1.0"
