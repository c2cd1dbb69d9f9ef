"""
Market calendar: is the US equities market open right now?

Rule: open iff the weekday in America/New_York is Monday-Friday and the time
of day lies in [open, close). Exchange holidays are NOT modelled; on a
holiday the dashboard still treats the market as open.
"""

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from tickerboard.domain.entities.market_status import MarketStatus

ET = ZoneInfo("America/New_York")


@dataclass(frozen=True)
class MarketHours:
    open: time = time(9, 30)
    close: time = time(16, 0)

    @property
    def open_minute(self) -> int:
        return self.open.hour * 60 + self.open.minute

    @property
    def close_minute(self) -> int:
        return self.close.hour * 60 + self.close.minute


NYSE_HOURS = MarketHours()


def eastern_now() -> datetime:
    return datetime.now(ET)


def _to_eastern(now: Optional[datetime]) -> datetime:
    if now is None:
        return eastern_now()
    if now.tzinfo is None:
        return now.replace(tzinfo=ET)
    return now.astimezone(ET)


def is_market_open(now: Optional[datetime] = None, hours: MarketHours = NYSE_HOURS) -> bool:
    et = _to_eastern(now)
    if et.weekday() >= 5:
        return False
    minute_of_day = et.hour * 60 + et.minute
    return hours.open_minute <= minute_of_day < hours.close_minute


def market_status(now: Optional[datetime] = None, hours: MarketHours = NYSE_HOURS) -> MarketStatus:
    et = _to_eastern(now)
    is_open = is_market_open(et, hours)
    return MarketStatus(
        is_open=is_open,
        message="Market Open" if is_open else "Market Closed",
        current_time=et.strftime("%I:%M %p"),
        current_date=f"{et.strftime('%A, %B')} {et.day}, {et.year}",
    )


def format_hours(hours: MarketHours = NYSE_HOURS) -> str:
    return (
        f"{hours.open.hour}:{hours.open.minute:02d} - "
        f"{hours.close.hour}:{hours.close.minute:02d} ET"
    )
