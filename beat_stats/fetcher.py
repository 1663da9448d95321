"""HTTP access to the Beat monitoring endpoint."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, TypeVar, Union

import requests
from requests.auth import HTTPBasicAuth

from .config import DEFAULT_METHOD, BeatConfig
from .errors import DecodeError, NetworkError, TLSConfigError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BeatHttpClient:
    """A session whose timeout and TLS settings are fixed when it is built."""

    session: requests.Session
    timeout: Optional[float]

    def close(self) -> None:
        self.session.close()


def _tls_settings(config: BeatConfig) -> Tuple[Union[bool, str], Optional[Tuple[str, str]]]:
    if bool(config.tls_cert) != bool(config.tls_key):
        raise TLSConfigError("tls_cert and tls_key must be set together")
    for option in ("tls_ca", "tls_cert", "tls_key"):
        path = getattr(config, option)
        if path and not os.path.isfile(path):
            raise TLSConfigError(f"{option} file not found: {path}")

    verify: Union[bool, str] = True
    if config.insecure_skip_verify:
        verify = False
    elif config.tls_ca:
        verify = config.tls_ca
    cert = (config.tls_cert, config.tls_key) if config.tls_cert else None
    return verify, cert


def create_http_client(config: BeatConfig) -> BeatHttpClient:
    """Build the client used to access the Beat API."""
    verify, cert = _tls_settings(config)
    session = requests.Session()
    # no proxies or netrc credentials from the environment
    session.trust_env = False
    session.verify = verify
    session.cert = cert
    return BeatHttpClient(session=session, timeout=config.timeout or None)


class JsonFetcher:
    """Issues configured requests and decodes their JSON bodies."""

    def __init__(self, config: BeatConfig, client: BeatHttpClient) -> None:
        self.config = config
        self.client = client

    def fetch(self, url: str) -> Any:
        method = self.config.method or DEFAULT_METHOD
        headers = dict(self.config.headers)
        # custom headers are applied after basic auth, so an explicit
        # Authorization header wins over username/password
        auth = None
        has_authorization = any(name.lower() == "authorization" for name in headers)
        if (self.config.username or self.config.password) and not has_authorization:
            auth = HTTPBasicAuth(self.config.username, self.config.password)
        if self.config.host_header:
            headers["Host"] = self.config.host_header

        try:
            with self.client.session.request(
                method,
                url,
                auth=auth,
                headers=headers,
                timeout=self.client.timeout,
            ) as response:
                logger.debug("%s %s -> %s", method, url, response.status_code)
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError as exc:
                    raise DecodeError(f"invalid JSON from {url}: {exc}") from exc
        except requests.Timeout as exc:
            raise NetworkError(f"timed out requesting {url}: {exc}") from exc
        except requests.ConnectionError as exc:
            raise NetworkError(f"cannot connect to {url}: {exc}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"request to {url} failed: {exc}") from exc

    def fetch_into(self, url: str, decoder: Callable[[Any], T]) -> T:
        """Fetch ``url`` and hand the decoded body to ``decoder``."""
        return decoder(self.fetch(url))
