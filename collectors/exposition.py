"""Render a MetricSet in the Prometheus text format."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from .base import MetricSet

NAMESPACE = "bamboo"
AGENT_LABELS = ["hostName", "isRemote", "isEnabled", "isActive", "id"]
CONTENT_TYPE = CONTENT_TYPE_LATEST


def _gauge(name: str, documentation: str, value: float) -> GaugeMetricFamily:
    return GaugeMetricFamily(f"{NAMESPACE}_{name}", documentation, value=value)


class MetricSetCollector(Collector):
    """Prometheus collector serving one immutable snapshot."""

    def __init__(self, snapshot: MetricSet) -> None:
        self.snapshot = snapshot

    def collect(self):
        s = self.snapshot
        yield _gauge("running", "is bamboo running?", s.running)
        yield _gauge("agent_count_total", "number of build agents", s.agent_count_total)
        yield _gauge("agent_count_busy", "number of busy build agents", s.agent_count_busy)
        yield _gauge("queue_count", "number of jobs in build queue", s.queue_count)

        agents = GaugeMetricFamily(
            f"{NAMESPACE}_agent_busy", "bamboo agent information", labels=AGENT_LABELS
        )
        for sample in s.agents:
            agents.add_metric(sample.labels, sample.value)
        yield agents

        yield _gauge("up", "was the last scrape of bamboo successful?", s.up)


def render(snapshot: MetricSet) -> bytes:
    registry = CollectorRegistry(auto_describe=False)
    registry.register(MetricSetCollector(snapshot))
    return generate_latest(registry)
