"""
HTTP metrics endpoint for the CRUD benchmark.

Serves the registry in the Prometheus text exposition format from a daemon
thread, independent of the benchmark loop. The collector may scrape at any
time, including while an operation is being timed.
"""

from __future__ import annotations

import threading
from typing import Optional

from prometheus_client import start_http_server

from crud_benchmark.metrics.registry import MetricsRegistry
from crud_benchmark.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_PORT = 2112
METRICS_PATH = "/metrics"


class MetricsServer:
    """
    Lifecycle wrapper around prometheus_client's built-in HTTP server.

    Parameters
    ----------
    registry : MetricsRegistry
        Registry whose gauges are exposed.
    port : int
        Listening port; 0 lets the OS choose a free one.
    addr : str
        Bind address.
    """

    def __init__(
        self, registry: MetricsRegistry, port: int = DEFAULT_PORT, addr: str = "0.0.0.0"
    ) -> None:
        self._registry = registry
        self.port = port
        self.addr = addr
        self._server = None
        self._thread: Optional[threading.Thread] = None

    @property
    def url(self) -> str:
        host = "localhost" if self.addr in ("0.0.0.0", "") else self.addr
        return f"http://{host}:{self.port}{METRICS_PATH}"

    def start(self) -> int:
        """Start serving and return the bound port."""
        if self._server is not None:
            return self.port
        log.info("Exposing prometheus server", extra={"addr": self.addr, "port": self.port})
        self._server, self._thread = start_http_server(
            self.port, addr=self.addr, registry=self._registry.collector_registry
        )
        self.port = self._server.server_port
        log.info("Successfully exposed prometheus server", extra={"url": self.url})
        return self.port

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
        self._server = None
        self._thread = None
        log.info("Prometheus server stopped")

    def __enter__(self) -> "MetricsServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


__all__ = ["DEFAULT_PORT", "METRICS_PATH", "MetricsServer"]
