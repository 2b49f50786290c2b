"""Base collector ABC and shared data types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


@dataclass(frozen=True)
class Agent:
    id: int
    host_name: str = ""
    remote_type: str = ""
    active: bool = False
    enabled: bool = False
    busy: bool = False

    @property
    def is_remote(self) -> bool:
        # Anything other than "remote" counts as a local agent.
        return self.remote_type.lower() == "remote"

    @property
    def display_name(self) -> str:
        return self.host_name.lower().replace(" ", "_")

    def to_sample(self) -> AgentSample:
        return AgentSample(
            host_name=self.display_name,
            is_remote=_yes_no(self.is_remote),
            is_enabled=_yes_no(self.enabled),
            is_active=_yes_no(self.active),
            id=str(self.id),
            value=1 if self.busy else 0,
        )


@dataclass(frozen=True)
class QueueSnapshot:
    size: int = 0


@dataclass(frozen=True)
class ServerInfo:
    build_number: str = ""
    state: str = ""
    version: str = ""

    @property
    def is_running(self) -> bool:
        return self.state.lower() == "running"


@dataclass(frozen=True)
class AgentSample:
    """One row of bamboo_agent_busy."""

    host_name: str
    is_remote: str
    is_enabled: str
    is_active: str
    id: str
    value: int

    @property
    def labels(self) -> list[str]:
        return [self.host_name, self.is_remote, self.is_enabled, self.is_active, self.id]


@dataclass(frozen=True)
class MetricSet:
    """Everything one scrape publishes."""

    up: int = 0
    running: int = 0
    agent_count_total: int = 0
    agent_count_busy: int = 0
    queue_count: int = 0
    agents: tuple[AgentSample, ...] = ()
    errors: tuple[str, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict:
        return {
            "up": self.up,
            "running": self.running,
            "agent_count_total": self.agent_count_total,
            "agent_count_busy": self.agent_count_busy,
            "queue_count": self.queue_count,
            "agents": [
                {
                    "hostName": a.host_name,
                    "isRemote": a.is_remote,
                    "isEnabled": a.is_enabled,
                    "isActive": a.is_active,
                    "id": a.id,
                    "busy": a.value,
                }
                for a in self.agents
            ],
            "errors": list(self.errors),
        }


class BaseCollector(ABC):
    """Abstract base for all metric collectors."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    async def collect(self) -> MetricSet:
        """Fetch current metrics. Must not raise on upstream failure, degrade instead."""
        ...
