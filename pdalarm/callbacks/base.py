from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional
from pdalarm.fields import ConfigurationRequest
from pdalarm.models import AlertEvent, CheckResult, Stream

class AlarmCallback(ABC):
    """What the host platform expects from an alarm callback plugin."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def initialize(self, config: Mapping[str, Any]) -> None: ...

    @abstractmethod
    def call(self, stream: Stream, result: CheckResult) -> Optional[str]: ...

    def handle(self, event: AlertEvent) -> Optional[str]:
        return self.call(event.stream, event.result)

    @abstractmethod
    def requested_configuration(self) -> ConfigurationRequest: ...

    @abstractmethod
    def attributes(self) -> Mapping[str, Any]: ...

    @abstractmethod
    def check_configuration(self) -> Any: ...
