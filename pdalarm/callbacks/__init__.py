from pdalarm.callbacks.base import AlarmCallback
from pdalarm.callbacks.pagerduty import MASK, PagerDutyAlarmCallback

__all__ = ["AlarmCallback", "PagerDutyAlarmCallback", "MASK"]
