from datetime import date, datetime, timedelta, timezone


def monday_of(d: date) -> date:
    # Monday = 0, Sunday = 6
    return d - timedelta(days=d.weekday())


def week_start_for(dt: datetime, tz_name: str | None = None) -> date:
    """Monday-aligned week key for a timestamp, in local (or `tz_name`) time."""
    return monday_of(to_local_datetime(dt, tz_name).date())


def weeks_back(week_start: date, offset: int) -> date:
    """Week key `offset` weeks before `week_start` (offset 0 is the same week)."""
    return week_start - timedelta(weeks=offset)


def days_left_in_week(now: datetime) -> int:
    """Days left in a Monday-start week, counting today.

    Mon=7, Tue=6, Wed=5, Thu=4, Fri=3, Sat=2, Sun=1
    """
    return 7 - now.weekday()


def same_local_day(ts: datetime, now: datetime) -> bool:
    """True when `ts` falls on `now`'s calendar day, judged in `now`'s timezone.

    A naive `ts` next to an aware `now` is assumed to be UTC (what the
    database hands back for server-side timestamps).
    """
    if now.tzinfo is not None:
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        ts = ts.astimezone(now.tzinfo)
    return ts.date() == now.date()


def to_local_datetime(dt, tz_name: str | None = None):
    """Convert a datetime from source tz (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    - If `dt` has no tzinfo, assume UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
        try:
            return dt.astimezone(ZoneInfo(tz_name))
        except ZoneInfoNotFoundError:
            return dt.astimezone()
    return dt.astimezone()


def local_now(tz_name: str | None = None) -> datetime:
    return to_local_datetime(datetime.now(timezone.utc), tz_name)
