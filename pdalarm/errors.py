from __future__ import annotations
from typing import Any, Optional

class CallbackError(Exception):
    """Base class for everything the PagerDuty callback raises."""

class ConfigurationError(CallbackError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field   = field
        self.message = message

class MissingRequiredField(ConfigurationError):
    """A mandatory option is absent or empty."""

class InvalidFieldFormat(ConfigurationError):
    """An option is set but violates its shape constraint."""

class AlarmCallbackError(CallbackError):
    pass

class TransportFailure(AlarmCallbackError):
    """The trigger event could not be delivered. The caller decides whether to retry."""

    def __init__(self, message: str, status: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status   = status
        self.response = response
