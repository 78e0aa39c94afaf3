"""Messages — the system/advisor feed shown beside the map."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Sender(Enum):
    SYSTEM = "System"
    ADVISOR = "Advisor"


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AdvisorMessage:
    """One immutable entry in the message feed.

    Attributes:
        text: Message body.
        sender: Who posted it.
        severity: Display tone.
        timestamp: When it was posted (timezone-aware).
        id: Unique message id.
    """

    text: str
    sender: Sender = Sender.SYSTEM
    severity: Severity = Severity.INFO
    timestamp: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
