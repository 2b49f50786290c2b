"""Collector turning one round of Bamboo API calls into a MetricSet."""

from __future__ import annotations

import logging

from .bamboo_client import BambooClient
from .base import AgentSample, BaseCollector, MetricSet
from .errors import ScrapeError

logger = logging.getLogger(__name__)


class BambooCollector(BaseCollector):
    def __init__(self, client: BambooClient, name: str = "bamboo") -> None:
        super().__init__(name)
        self.client = client

    async def collect(self) -> MetricSet:
        # All state is local: concurrent scrapes never see each other's values.
        errors: list[str] = []

        running = 0
        try:
            info = await self.client.get_server_info()
            running = 1 if info.is_running else 0
        except ScrapeError as e:
            self._record(errors, e)

        agent_total = 0
        agent_busy = 0
        samples: list[AgentSample] = []
        try:
            agents = await self.client.get_agents()
        except ScrapeError as e:
            self._record(errors, e)
        else:
            agent_total = len(agents)
            for agent in agents:
                sample = agent.to_sample()
                agent_busy += sample.value
                samples.append(sample)

        queue_count = 0
        try:
            queue = await self.client.get_queue()
            queue_count = queue.size
        except ScrapeError as e:
            self._record(errors, e)

        return MetricSet(
            up=0 if errors else 1,
            running=running,
            agent_count_total=agent_total,
            agent_count_busy=agent_busy,
            queue_count=queue_count,
            agents=tuple(samples),
            errors=tuple(errors),
        )

    def _record(self, errors: list[str], exc: ScrapeError) -> None:
        logger.warning("Can't scrape %s %s: %s", self.name, exc.endpoint, exc)
        errors.append(str(exc))
