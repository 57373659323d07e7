import logging
import math

from washboard.errors import InvalidScore
from washboard.models import Score, as_naive_utc, utcnow
from washboard.services.sessions import require_text

logger = logging.getLogger(__name__)

SCORE_MIN = 0
SCORE_MAX = 1_000_000
NICKNAME_MAX_LEN = 24


def normalize_score(raw) -> int:
    """Coerce a submitted score to an int clamped to [SCORE_MIN, SCORE_MAX].

    Out-of-range and fractional values are normalized, not rejected. An
    absent or blank score counts as zero. Only input that is not a finite
    number raises ``InvalidScore``.
    """
    if raw is None:
        return SCORE_MIN
    if isinstance(raw, bool):
        raise InvalidScore()
    if isinstance(raw, int):
        return max(SCORE_MIN, min(SCORE_MAX, raw))
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return SCORE_MIN
    try:
        number = float(raw)
    except (TypeError, ValueError, OverflowError):
        raise InvalidScore()
    if not math.isfinite(number):
        raise InvalidScore()
    return math.floor(max(SCORE_MIN, min(SCORE_MAX, number)))


def normalize_nickname(raw):
    if raw is None:
        return None
    return str(raw).strip()[:NICKNAME_MAX_LEN]


class ScoreLedger:
    """Records exactly one score per consumed play session."""

    def __init__(self, store, authority, clock=utcnow):
        self.store = store
        self.authority = authority
        self.clock = clock

    def submit(self, location_id, token, raw_score, raw_nickname=None) -> Score:
        location_id = require_text(location_id, 'locationId')
        token = require_text(token, 'token')
        value = normalize_score(raw_score)
        nickname = normalize_nickname(raw_nickname)

        # Consumption and insert commit together; a failed insert leaves
        # the session unconsumed.
        with self.store.transaction() as session:
            consumed = self.authority.consume(session, token, location_id)
            score = Score(
                location_id=location_id,
                value=value,
                nickname=nickname,
                created_at=as_naive_utc(self.clock()),
            )
            session.add(score)
            session.flush()
        logger.info(f"[submit] location={location_id} session={consumed.session_id} score={score.id} value={value}")
        return score
