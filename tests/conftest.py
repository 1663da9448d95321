from __future__ import annotations

import json
import socket
import threading
from dataclasses import dataclass, field
from email.message import Message
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest

DATA_DIR = Path(__file__).parent / "data"


def load_json(name: str) -> Any:
    with open(DATA_DIR / name, encoding="utf-8") as handle:
        return json.load(handle)


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Message


@dataclass
class FakeBeat:
    url: str
    routes: Dict[str, Tuple[int, bytes]] = field(default_factory=dict)
    requests: List[RecordedRequest] = field(default_factory=list)

    def set_json(self, path: str, payload: Any, status: int = 200) -> None:
        self.routes[path] = (status, json.dumps(payload).encode("utf-8"))

    def set_raw(self, path: str, body: bytes, status: int = 200) -> None:
        self.routes[path] = (status, body)


def _handler_for(fake: FakeBeat):
    class Handler(BaseHTTPRequestHandler):
        def _respond(self) -> None:
            fake.requests.append(RecordedRequest(self.command, self.path, self.headers))
            status, body = fake.routes.get(self.path, (404, b'{"error": "not found"}'))
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        do_GET = _respond
        do_POST = _respond
        do_PUT = _respond

        def log_message(self, format, *args):  # noqa: A002 - silence test output
            pass

    return Handler


@pytest.fixture()
def beat6_tags() -> Dict[str, str]:
    return {
        "beat_host": "node-6",
        "beat_id": "9c1c8697-acb4-4df0-987d-28197814f785",
        "beat_name": "node-6-test",
        "beat_version": "6.4.2",
    }


@pytest.fixture()
def beat_info() -> Dict[str, Any]:
    return load_json("beat6_info.json")


@pytest.fixture()
def beat_stats() -> Dict[str, Any]:
    return load_json("beat6_stats.json")


@pytest.fixture()
def fake_beat(beat_info, beat_stats):
    """A Beat HTTP endpoint on a free local port serving the beat6 documents."""
    fake = FakeBeat(url="")
    server = ThreadingHTTPServer(("127.0.0.1", 0), _handler_for(fake))
    fake.url = f"http://127.0.0.1:{server.server_address[1]}"
    fake.set_json("/", beat_info)
    fake.set_json("/stats", beat_stats)

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield fake
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture()
def closed_url() -> str:
    """URL of a local port nobody listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"

