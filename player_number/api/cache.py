from datetime import date, datetime, time, timedelta, timezone
from email.utils import format_datetime

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(weeks=1)
ONE_YEAR = timedelta(weeks=52)

# Fixed UTC-8, where the last North American games of a day are played
GAMES_DAY_TZ = timezone(timedelta(hours=-8), "UTC-8")


def http_date(moment: datetime) -> str:
    """RFC 1123 date for Expires headers, e.g. 'Thu, 01 Jun 2023 15:00:00 GMT'."""
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def expires_after(now: datetime, delta: timedelta) -> str:
    return http_date(now + delta)


def games_day(now: datetime) -> date:
    """The calendar date games are listed under at the given instant."""
    return now.astimezone(GAMES_DAY_TZ).date()


def end_of_games_day(now: datetime) -> datetime:
    """Last millisecond of the current games day, as a UTC instant."""
    end = datetime.combine(games_day(now), time(23, 59, 59, 999000), tzinfo=GAMES_DAY_TZ)
    return end.astimezone(timezone.utc)
