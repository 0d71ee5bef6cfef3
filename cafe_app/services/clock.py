"""
Voting Clock

Time-window policy for the daily voting cycle. Voting for tomorrow's menu
is open until the cutoff hour (18:00 by default) in the cafe's time zone.

Services never read the wall clock themselves: they receive the cycle date
and, where the window matters, ``now`` from the caller. Only the HTTP layer
and the CLI jobs ask the clock for the current time.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Optional
from zoneinfo import ZoneInfo

from flask import current_app

DEFAULT_CUTOFF_HOUR = 18
DEFAULT_TIMEZONE = "Asia/Riyadh"


class VotingClock:
    def __init__(self, tz_name: str = DEFAULT_TIMEZONE, cutoff_hour: int = DEFAULT_CUTOFF_HOUR):
        self.tz = ZoneInfo(tz_name)
        self.cutoff_hour = cutoff_hour

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def _local(self, now: datetime) -> datetime:
        # Naive datetimes are taken as already local
        if now.tzinfo is None:
            return now
        return now.astimezone(self.tz)

    def is_voting_closed(self, now: datetime) -> bool:
        return self._local(now).hour >= self.cutoff_hour

    def time_remaining(self, now: datetime) -> Optional[Dict[str, int]]:
        if self.is_voting_closed(now):
            return None
        local = self._local(now)
        deadline = local.replace(hour=self.cutoff_hour, minute=0, second=0, microsecond=0)
        seconds = int((deadline - local).total_seconds())
        return {"hours": seconds // 3600, "minutes": (seconds % 3600) // 60}

    def today(self, now: datetime) -> date:
        return self._local(now).date()

    def tomorrow(self, now: datetime) -> date:
        return self.today(now) + timedelta(days=1)


class FixedClock(VotingClock):
    """Clock pinned to one instant, for tests and replays."""

    def __init__(self, fixed: datetime, tz_name: str = DEFAULT_TIMEZONE, cutoff_hour: int = DEFAULT_CUTOFF_HOUR):
        super().__init__(tz_name, cutoff_hour)
        self.fixed = fixed

    def now(self) -> datetime:
        return self.fixed

    def set_time(self, fixed: datetime) -> None:
        self.fixed = fixed


def init_clock(app) -> None:
    app.extensions["cafe_clock"] = VotingClock(
        app.config.get("CAFE_TIMEZONE", DEFAULT_TIMEZONE),
        app.config.get("CAFE_CUTOFF_HOUR", DEFAULT_CUTOFF_HOUR),
    )


def get_clock() -> VotingClock:
    return current_app.extensions["cafe_clock"]
