"""pdalarm - PagerDuty alarm callback for log stream alert conditions"""
__version__ = "1.0.0"
__license__ = "MIT"

from pdalarm.callbacks import AlarmCallback, PagerDutyAlarmCallback
from pdalarm.client import PagerDutyClient, incident_key
from pdalarm.config import CallbackConfig, collect_errors, validate
from pdalarm.errors import (CallbackError, ConfigurationError, InvalidFieldFormat, MissingRequiredField,
                            TransportFailure)
from pdalarm.models import AlertCondition, AlertEvent, CheckResult, Stream

__all__ = ["AlarmCallback", "PagerDutyAlarmCallback", "PagerDutyClient", "incident_key",
           "CallbackConfig", "collect_errors", "validate",
           "CallbackError", "ConfigurationError", "InvalidFieldFormat", "MissingRequiredField", "TransportFailure",
           "AlertCondition", "AlertEvent", "CheckResult", "Stream", "__version__"]
