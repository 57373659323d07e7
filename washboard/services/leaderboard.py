import logging
import math
from datetime import datetime, time, timedelta, timezone

from sqlalchemy import select

from washboard.models import Score, utcnow
from washboard.services.sessions import require_text

logger = logging.getLogger(__name__)

RANGES = ('daily', 'weekly', 'all')
DEFAULT_RANGE = 'daily'
DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50


def normalize_range(raw) -> str:
    """Unknown or missing ranges fall back to daily."""
    return raw if raw in RANGES else DEFAULT_RANGE


def normalize_limit(raw) -> int:
    """Absent or unparsable limits give the default; blank counts as zero."""
    if raw is None or isinstance(raw, bool):
        return DEFAULT_LIMIT
    if isinstance(raw, str) and not raw.strip():
        return MIN_LIMIT
    try:
        number = float(raw)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_LIMIT
    if not math.isfinite(number):
        return DEFAULT_LIMIT
    return max(MIN_LIMIT, min(MAX_LIMIT, math.floor(number)))


def window_start(range_key: str, now: datetime, tz=None):
    """Return the naive-UTC lower bound of a leaderboard window, or None.

    Midnights are taken in ``tz`` (server local time when None), each with
    the UTC offset in force on that date, then converted back to UTC for
    comparison with stored timestamps.
    """
    if range_key == 'all':
        return None
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    start_date = now.astimezone(tz).date()
    if range_key == 'weekly':
        # weekday(): Mon -> 0 ... Sun -> 6
        start_date -= timedelta(days=start_date.weekday())
    midnight = datetime.combine(start_date, time())
    if tz is not None:
        midnight = midnight.replace(tzinfo=tz)
    # A naive midnight is resolved with the system's local rules
    return midnight.astimezone(timezone.utc).replace(tzinfo=None)


class LeaderboardQuery:
    def __init__(self, store, clock=utcnow, tz=None):
        self.store = store
        self.clock = clock
        self.tz = tz

    def rank(self, location_id, range_key=DEFAULT_RANGE, limit=DEFAULT_LIMIT):
        """Top scores for a location: value desc, earliest first, then id."""
        location_id = require_text(location_id, 'locationId')
        range_key = normalize_range(range_key)
        limit = normalize_limit(limit)
        start = window_start(range_key, self.clock(), self.tz)

        query = select(Score).where(Score.location_id == location_id)
        if start is not None:
            query = query.where(Score.created_at >= start)
        query = query.order_by(
            Score.value.desc(),
            Score.created_at.asc(),
            Score.id.asc(),
        ).limit(limit)

        with self.store.transaction() as session:
            entries = list(session.execute(query).scalars().all())
        logger.debug(f"[rank] location={location_id} range={range_key} limit={limit} entries={len(entries)}")
        return entries
