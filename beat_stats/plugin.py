"""The Beat input: configuration, lazily built client and the gather entry point."""
from __future__ import annotations

from typing import Optional

from . import inputs
from .accumulator import Accumulator
from .config import DESCRIPTION, SAMPLE_CONFIG, BeatConfig
from .fetcher import BeatHttpClient, JsonFetcher, create_http_client
from .metrics import gather_stats


class Beat:
    def __init__(self, config: Optional[BeatConfig] = None) -> None:
        self.config = config or BeatConfig()
        self.client: Optional[BeatHttpClient] = None

    def description(self) -> str:
        return DESCRIPTION

    def sample_config(self) -> str:
        return SAMPLE_CONFIG

    def gather(self, accumulator: Accumulator) -> None:
        """Collect one cycle of Beat metrics into ``accumulator``.

        The HTTP client is built on the first call and reused afterwards, even
        if ``config`` is replaced later on.
        """
        if self.client is None:
            self.client = create_http_client(self.config)
        gather_stats(self.config, JsonFetcher(self.config, self.client), accumulator)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None


def new_beat() -> Beat:
    return Beat()


inputs.add("beat", new_beat)
