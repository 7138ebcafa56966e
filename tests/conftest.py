import json
import os
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, List

import pytest


class FakeFacilitator:
    """Threaded HTTP server that answers /verify and /settle with canned responses."""

    def __init__(self) -> None:
        self.routes: Dict[str, Dict[str, Any]] = {}
        self.requests: List[Dict[str, Any]] = []
        self._lock = threading.Lock()
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), self._handler_class())
        self._server.daemon_threads = True
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def respond(self, path: str, *, status: int = 200, body: Any = None,
                raw: bytes = None, delay: float = 0.0, echo: bool = False) -> None:
        if raw is None:
            raw = json.dumps(body if body is not None else {}).encode()
        self.routes[path] = {"status": status, "raw": raw, "delay": delay, "echo": echo}

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()

    def _handler_class(self):
        facilitator = self

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length") or 0)
                data = self.rfile.read(length)
                with facilitator._lock:
                    facilitator.requests.append(
                        {
                            "path": self.path,
                            "headers": dict(self.headers),
                            "body": json.loads(data) if data else None,
                        }
                    )
                route = facilitator.routes.get(self.path)
                if route is None:
                    self.send_response(404)
                    self.end_headers()
                    return
                if route["delay"]:
                    time.sleep(route["delay"])
                raw = route["raw"]
                if route["echo"]:
                    # Reflect the payer back so callers can match responses to requests.
                    payer = json.loads(data)["paymentPayload"]["payload"]["payer"]
                    raw = json.dumps({"isValid": True, "payer": payer}).encode()
                self.send_response(route["status"])
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(raw)))
                self.end_headers()
                self.wfile.write(raw)

            def log_message(self, format, *args):
                pass

        return Handler


@pytest.fixture(autouse=True)
def no_proxy_env(monkeypatch) -> None:
    """Keep proxy settings from the host environment away from local requests."""
    for key in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(key, raising=False)
    for key in [name for name in os.environ if name.startswith("X402_FACILITATOR_")]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def facilitator():
    server = FakeFacilitator()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def payment_payload() -> dict:
    return {
        "x402Version": 1,
        "scheme": "exact",
        "network": "base-sepolia",
        "payload": {
            "signature": "0x" + "d" * 130,
            "authorization": {
                "from": "0x" + "b" * 40,
                "to": "0x" + "c" * 40,
                "value": "1000000",
                "validAfter": "0",
                "validBefore": "9999999999",
                "nonce": "0x" + "0" * 64,
            },
        },
    }


@pytest.fixture
def payment_requirements() -> dict:
    return {
        "scheme": "exact",
        "network": "base-sepolia",
        "maxAmountRequired": "1000000",
        "resource": "https://example.com/protected-resource",
        "description": "Example payment for x402-protected resource",
        "mimeType": "application/json",
        "outputSchema": None,
        "payTo": "0x" + "c" * 40,
        "maxTimeoutSeconds": 600,
        "asset": "0x036CbD53842c5426634e7929541eC2318f3dCF7e",
        "extra": {"name": "USDC", "version": "2"},
    }
