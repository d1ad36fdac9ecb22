from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone

@dataclass(frozen=True)
class Stream:
    id:    str
    title: str

@dataclass(frozen=True)
class AlertCondition:
    id:          str
    description: str

@dataclass(frozen=True)
class CheckResult:
    condition:     AlertCondition
    description:   str
    matched_count: int      = 0
    triggered_at:  datetime = field(default_factory=lambda: datetime.now(timezone.utc))

@dataclass(frozen=True)
class AlertEvent:
    stream: Stream
    result: CheckResult

    @property
    def id(self) -> str:
        return f"{self.stream.id}:{self.result.condition.id}"
