from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional
from pdalarm.callbacks.base import AlarmCallback
from pdalarm.client import PagerDutyClient
from pdalarm.config import (CK_CLIENT, CK_CLIENT_URL, CK_CUSTOM_INCIDENT_KEY, CK_INCIDENT_KEY_PREFIX, CK_SERVICE_KEY,
                            EVENTS_API_URL, CallbackConfig, freeze)
from pdalarm.fields import ConfigurationRequest, boolean_field, text_field
from pdalarm.models import CheckResult, Stream
from pdalarm.transport import HttpTransport

log = logging.getLogger(__name__)

MASK = "****"

class PagerDutyAlarmCallback(AlarmCallback):
    def __init__(self, transport: Optional[HttpTransport] = None, url: str = EVENTS_API_URL):
        self.transport = transport or HttpTransport()
        self.url       = url
        self._source: Mapping[str, Any]        = freeze({})
        self._config: Optional[CallbackConfig] = None

    @property
    def name(self) -> str:
        return "PagerDuty alarm callback"

    def initialize(self, config: Mapping[str, Any]) -> None:
        self._source = freeze(config)
        self._config = None

    def check_configuration(self) -> CallbackConfig:
        self._config = CallbackConfig.from_mapping(self._source)
        return self._config

    def call(self, stream: Stream, result: CheckResult) -> Optional[str]:
        config = self._config or self.check_configuration()
        return self.call_with(PagerDutyClient(config, self.transport, self.url), stream, result)

    def call_with(self, client: PagerDutyClient, stream: Stream, result: CheckResult) -> Optional[str]:
        log.debug(f"Triggering PagerDuty for stream {stream.id}, condition {result.condition.id}")
        return client.trigger(stream, result)

    def requested_configuration(self) -> ConfigurationRequest:
        return (ConfigurationRequest()
                .add_field(text_field(CK_SERVICE_KEY, "PagerDuty service key", "", "PagerDuty service key", optional=False))
                .add_field(boolean_field(CK_CUSTOM_INCIDENT_KEY, "Use custom incident key", True,
                                         "Generate a custom incident key based on the Stream and the Alert Condition."))
                .add_field(text_field(CK_INCIDENT_KEY_PREFIX, "Incident key prefix", "Graylog2/", "Identifies the incident."))
                .add_field(text_field(CK_CLIENT, "Client name", "Graylog2",
                                      "The name of the Graylog2 server that is triggering the PagerDuty event."))
                .add_field(text_field(CK_CLIENT_URL, "Client URL", "",
                                      "The URL of the Graylog2 server that is triggering the PagerDuty event.")))

    def attributes(self) -> Dict[str, Any]:
        """Display view of the configuration. Never used to send anything."""
        return {k: (MASK if k == CK_SERVICE_KEY else v) for k, v in self._source.items()}
