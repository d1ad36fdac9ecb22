"""PagerDuty Events API v1 client.

One client is built per notification. It derives the incident key, builds the
``trigger`` event and posts it once; retrying is left to whoever invoked the
callback.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from pdalarm.config import EVENTS_API_URL, CallbackConfig
from pdalarm.errors import TransportFailure
from pdalarm.models import CheckResult, Stream
from pdalarm.transport import HttpTransport, TransportError

log = logging.getLogger(__name__)

EVENT_TYPE_TRIGGER     = "trigger"
INCIDENT_KEY_SEPARATOR = "/"
MAX_DESCRIPTION        = 1024

def incident_key(prefix: str, stream_id: str, condition_id: str) -> str:
    """Deterministic key for a (stream, condition) pair.

    Both ids are percent-encoded with no safe characters, so the separator
    can never appear inside a component and distinct pairs never collide.
    Hex and UUID ids come through unchanged.
    """
    return f"{prefix}{quote(str(stream_id), safe='')}{INCIDENT_KEY_SEPARATOR}{quote(str(condition_id), safe='')}"

def stream_link(client_url: str, stream: Stream) -> str:
    return f"{client_url.rstrip('/')}/streams/{quote(str(stream.id), safe='')}/messages?q=%2A&rangetype=relative&relative=3600"

class PagerDutyClient:
    def __init__(self, config: CallbackConfig, transport: Optional[HttpTransport] = None, url: str = EVENTS_API_URL):
        self.config    = config
        self.transport = transport or HttpTransport()
        self.url       = url

    def incident_key_for(self, stream: Stream, result: CheckResult) -> Optional[str]:
        if not self.config.use_custom_incident_key:
            return None
        return incident_key(self.config.incident_key_prefix, stream.id, result.condition.id)

    def build_event(self, stream: Stream, result: CheckResult) -> Dict[str, Any]:
        cfg   = self.config
        event: Dict[str, Any] = {
            "service_key": cfg.service_key,
            "event_type":  EVENT_TYPE_TRIGGER,
            "description": f"[ {stream.title} ] {result.description}"[:MAX_DESCRIPTION],
            "client":      cfg.client,
            "details": {
                "stream_id":             stream.id,
                "stream_title":          stream.title,
                "condition_id":          result.condition.id,
                "condition_description": result.condition.description,
                "triggered_at":          result.triggered_at.isoformat(),
                "matched_message_count": result.matched_count,
            },
        }
        key = self.incident_key_for(stream, result)
        if key is not None:
            event["incident_key"] = key
        if cfg.client_url:
            event["client_url"] = cfg.client_url
            event["contexts"]   = [{"type": "link", "href": stream_link(cfg.client_url, stream), "text": "Stream"}]
        return event

    def trigger(self, stream: Stream, result: CheckResult) -> Optional[str]:
        """Send a trigger event. Returns the incident key PagerDuty reports."""
        event = self.build_event(stream, result)
        try:
            resp = self.transport.post_json(self.url, event)
        except TransportError as e:
            log.error(f"PagerDuty unreachable: {e}")
            raise TransportFailure(f"Couldn't send event to PagerDuty: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        if not resp.ok or body.get("status") != "success":
            reason = body.get("message") or resp.text() or "no response body"
            if body.get("errors"):
                reason = f"{reason} ({'; '.join(str(e) for e in body['errors'])})"
            log.error(f"PagerDuty rejected event for stream {stream.id}: HTTP {resp.status} {reason}")
            raise TransportFailure(f"Error while creating event in PagerDuty: HTTP {resp.status}: {reason}",
                                   status=resp.status, response=body or resp.text())

        key = body.get("incident_key", event.get("incident_key"))
        log.info(f"PagerDuty event sent for stream {stream.id} (incident_key: {key})")
        return key
