from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from classdesk.config import settings


APP_TIMEZONE = settings.app_timezone or 'UTC'
APP_ZONEINFO = ZoneInfo(APP_TIMEZONE)


class TimeProvider:
    def now(self) -> datetime:
        return datetime.now(APP_ZONEINFO)

    def today(self) -> date:
        return self.now().date()

    def today_iso(self) -> str:
        return self.today().isoformat()

    def week_start(self) -> date:
        today = self.today()
        return today - timedelta(days=today.weekday())


default_time_provider = TimeProvider()
