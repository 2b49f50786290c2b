"""Exporter configuration: YAML file, environment and command-line overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlparse

import yaml

from .bamboo_client import DEFAULT_TIMEOUT, SUPPORTED_SCHEMES
from .errors import ConfigurationError

ENV_VARS = {
    "uri": "BAMBOO_URI",
    "user": "BAMBOO_USER",
    "password": "BAMBOO_PASSWORD",
}


@dataclass
class ExporterConfig:
    uri: str | None = None
    user: str | None = None
    password: str | None = None
    listen_address: str = ":8080"
    telemetry_path: str = "/metrics"
    timeout: float = DEFAULT_TIMEOUT

    @property
    def host(self) -> str:
        host, _, _ = self.listen_address.rpartition(":")
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        _, _, port = self.listen_address.rpartition(":")
        return int(port)

    def validate(self) -> None:
        if not self.uri or not self.user or not self.password:
            raise ConfigurationError("uri, user & password are mandatory")
        # YAML happily turns "password: 1234" into an int.
        self.uri, self.user, self.password = str(self.uri), str(self.user), str(self.password)
        self.listen_address = str(self.listen_address)
        if urlparse(self.uri).scheme not in SUPPORTED_SCHEMES:
            raise ConfigurationError(f"schema not supported: {self.uri!r}")
        if not self.telemetry_path.startswith("/"):
            raise ConfigurationError(f"telemetry path must start with '/': {self.telemetry_path!r}")
        if ":" not in self.listen_address:
            raise ConfigurationError(f"listen address must be host:port: {self.listen_address!r}")
        _, _, port = self.listen_address.rpartition(":")
        if not (port.isascii() and port.isdigit()) or not 0 < int(port) < 65536:
            raise ConfigurationError(f"invalid listen port: {self.listen_address!r}")
        try:
            timeout = float(self.timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f"timeout must be a number: {self.timeout!r}") from None
        if timeout <= 0:
            raise ConfigurationError(f"timeout must be positive: {self.timeout!r}")
        self.timeout = timeout


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")
    return data


def load_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ExporterConfig:
    """Build and validate the config. Later sources win: file < env < overrides."""
    known = {f.name for f in fields(ExporterConfig)}
    values: dict[str, Any] = {}

    if path is not None:
        data = _read_yaml(Path(path))
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(map(str, unknown)))}")
        values.update({k: v for k, v in data.items() if v is not None})

    env = os.environ if environ is None else environ
    for key, var in ENV_VARS.items():
        if env.get(var):
            values[key] = env[var]

    for key, value in (overrides or {}).items():
        if key in known and value is not None:
            values[key] = value

    config = ExporterConfig(**values)
    config.validate()
    return config


def add_config_arguments(parser) -> None:
    """Register the flags shared by web.py and monitor.py on an argparse parser."""
    parser.add_argument("-c", "--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--uri", default=None, help="Bamboo base URI (http or https)")
    parser.add_argument("--user", default=None, help="Bamboo user name")
    parser.add_argument("--password", default=None, help="Bamboo user password")
    parser.add_argument(
        "--listen-address", default=None,
        help="Address on which to expose metrics (default: :8080)",
    )
    parser.add_argument(
        "--telemetry-path", default=None,
        help="Path under which to expose metrics (default: /metrics)",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help=f"Upstream request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--log-level", default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )


def config_from_args(args) -> ExporterConfig:
    overrides = {
        "uri": args.uri,
        "user": args.user,
        "password": args.password,
        "listen_address": args.listen_address,
        "telemetry_path": args.telemetry_path,
        "timeout": args.timeout,
    }
    return load_config(args.config, overrides)
