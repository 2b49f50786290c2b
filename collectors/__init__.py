from .base import Agent, AgentSample, BaseCollector, MetricSet, QueueSnapshot, ServerInfo
from .bamboo_client import BambooClient
from .bamboo_collector import BambooCollector
from .config import ExporterConfig, add_config_arguments, config_from_args, load_config
from .errors import (
    ConfigurationError,
    DecodeError,
    ExporterError,
    ScrapeError,
    TransportError,
    UpstreamStatusError,
)
from .exposition import render

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentSample",
    "BaseCollector",
    "MetricSet",
    "QueueSnapshot",
    "ServerInfo",
    "BambooClient",
    "BambooCollector",
    "ExporterConfig",
    "add_config_arguments",
    "config_from_args",
    "load_config",
    "ConfigurationError",
    "DecodeError",
    "ExporterError",
    "ScrapeError",
    "TransportError",
    "UpstreamStatusError",
    "render",
]
