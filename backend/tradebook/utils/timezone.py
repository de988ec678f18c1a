from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from tradebook.core.config import settings

BUSINESS_TZ = ZoneInfo(settings.business_timezone)


def now_business() -> datetime:
    return datetime.now(tz=BUSINESS_TZ)


def today_business() -> date:
    return now_business().date()


def utcnow_naive() -> datetime:
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)
