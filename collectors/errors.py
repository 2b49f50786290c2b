"""Exception types raised by the Bamboo client and configuration loader."""

from __future__ import annotations


class ExporterError(Exception):
    """Base exception for the exporter."""


class ConfigurationError(ExporterError):
    """Invalid or missing startup configuration. Fatal."""


class ScrapeError(ExporterError):
    """A single upstream call failed during a scrape.

    Scrape errors never abort a scrape: the collector logs them and
    publishes zeroes for the affected gauges.
    """

    def __init__(self, endpoint: str, message: str) -> None:
        self.endpoint = endpoint
        super().__init__(message)


class TransportError(ScrapeError):
    """Network-level failure, timeouts included."""

    def __init__(self, endpoint: str, cause: Exception) -> None:
        self.cause = cause
        super().__init__(endpoint, f"request to {endpoint} failed: {cause!r}")


class UpstreamStatusError(ScrapeError):
    """Upstream answered with something other than HTTP 200."""

    def __init__(self, endpoint: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(
            endpoint,
            f"cannot access {endpoint} endpoint (HTTP {status_code}), "
            "do you have correct permissions?",
        )


class DecodeError(ScrapeError):
    """Response body is not the JSON shape we expect."""

    def __init__(self, endpoint: str, reason: str) -> None:
        self.reason = reason
        super().__init__(endpoint, f"cannot decode {endpoint} response: {reason}")
