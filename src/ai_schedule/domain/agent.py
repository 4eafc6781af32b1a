from __future__ import annotations

from datetime import datetime
from enum import Enum

from ai_schedule.domain.base import DomainModel


class AgentStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    BUSY = "busy"


class Agent(DomainModel):
    """Capability descriptor of an external executor. Never executed here."""

    id: str
    name: str
    description: str = ""
    capabilities: tuple[str, ...] = ()
    status: AgentStatus = AgentStatus.OFFLINE
    version: str = ""
    last_heartbeat: datetime
