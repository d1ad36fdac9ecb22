from __future__ import annotations
import http.client, json, logging, socket, urllib.error, urllib.request
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pdalarm import __version__

log = logging.getLogger(__name__)

class TransportError(Exception):
    """No usable HTTP response was obtained (connection refused, DNS, timeout, broken response, bad URL...)."""

@dataclass(frozen=True)
class HttpResponse:
    status: int
    body:   bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))

    def text(self, limit: int = 200) -> str:
        return self.body.decode("utf-8", errors="replace")[:limit]

class HttpTransport:
    """Blocking JSON-over-HTTP POST. Holds no per-request state, so one instance may be shared across threads."""

    def __init__(self, timeout: float = 10, headers: Optional[Dict[str, str]] = None):
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json", "User-Agent": f"pdalarm/{__version__}", **(headers or {})}

    def post_json(self, url: str, payload: Dict[str, Any]) -> HttpResponse:
        data = json.dumps(payload).encode()
        try:
            req = urllib.request.Request(url, data=data, headers=dict(self.headers), method="POST")
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return HttpResponse(resp.status, resp.read())
        except urllib.error.HTTPError as e:
            # non-2xx still carries a body worth reporting
            log.debug(f"POST {url} -> HTTP {e.code}")
            return HttpResponse(e.code, self._error_body(e))
        except urllib.error.URLError as e:
            raise TransportError(f"Failed to connect to {url}: {e.reason}") from e
        except (socket.timeout, TimeoutError) as e:
            raise TransportError(f"Timed out after {self.timeout}s posting to {url}") from e
        except http.client.HTTPException as e:
            raise TransportError(f"Broken response from {url}: {e!r}") from e
        except ValueError as e:
            raise TransportError(f"Invalid endpoint URL {url!r}: {e}") from e
        except OSError as e:
            raise TransportError(f"POST {url} failed: {e}") from e

    @staticmethod
    def _error_body(e: urllib.error.HTTPError) -> bytes:
        if not e.fp: return b""
        try:
            return e.read()
        except (http.client.HTTPException, OSError) as err:
            log.debug(f"Couldn't read HTTP {e.code} body: {err!r}")
            return b""
