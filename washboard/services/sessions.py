import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select, update

from washboard.errors import AlreadyUsed, Expired, InvalidArgument, InvalidToken
from washboard.models import PlaySession, as_naive_utc, utcnow

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=10)
LOCATION_ID_MAX_LEN = 64


@dataclass(frozen=True)
class ConsumeResult:
    session_id: int
    location_id: str
    used_at: datetime


def require_text(value, name: str, max_len=None) -> str:
    """Coerce a request field to a trimmed, non-empty string."""
    text_value = '' if value is None else str(value).strip()
    if not text_value:
        raise InvalidArgument(f'{name} is required')
    if max_len is not None and len(text_value) > max_len:
        raise InvalidArgument(f'{name} must be at most {max_len} characters')
    return text_value


def _token_hint(token: str) -> str:
    return f"{token[:6]}..." if len(token) > 6 else '...'


class SessionAuthority:
    """Issues play-session tokens and performs their one-way consumption."""

    def __init__(self, store, ttl: timedelta = DEFAULT_TTL, clock=utcnow):
        self.store = store
        self.ttl = ttl
        self.clock = clock

    def issue(self, location_id) -> PlaySession:
        location_id = require_text(location_id, 'locationId', LOCATION_ID_MAX_LEN)
        now = as_naive_utc(self.clock())
        play_session = PlaySession(
            location_id=location_id,
            token=secrets.token_urlsafe(32),
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self.store.transaction() as session:
            session.add(play_session)
            session.flush()
        logger.info(f"[issue] location={location_id} session={play_session.id} expires={play_session.expires_at.isoformat()}")
        return play_session

    def validate_and_consume(self, token, location_id) -> ConsumeResult:
        token = require_text(token, 'token')
        location_id = require_text(location_id, 'locationId')
        with self.store.transaction() as session:
            return self.consume(session, token, location_id)

    def consume(self, session, token: str, location_id: str) -> ConsumeResult:
        """Mark the session used inside the caller's unit of work.

        A single conditional UPDATE decides the winner; when it touches no
        row the session is re-read only to report why.
        """
        now = as_naive_utc(self.clock())
        result = session.execute(
            update(PlaySession)
            .where(
                PlaySession.token == token,
                PlaySession.location_id == location_id,
                PlaySession.used_at.is_(None),
                PlaySession.expires_at > now,
            )
            .values(used_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            session_id = session.execute(
                select(PlaySession.id).where(PlaySession.token == token)
            ).scalar_one()
            logger.info(f"[consume] location={location_id} session={session_id} token={_token_hint(token)}")
            return ConsumeResult(session_id=session_id, location_id=location_id, used_at=now)

        row = session.execute(
            select(PlaySession.used_at, PlaySession.expires_at).where(
                PlaySession.token == token,
                PlaySession.location_id == location_id,
            )
        ).first()
        if row is None:
            logger.info(f"[consume-reject] location={location_id} token={_token_hint(token)} reason=invalid")
            raise InvalidToken()
        if row.used_at is not None:
            logger.info(f"[consume-reject] location={location_id} token={_token_hint(token)} reason=used")
            raise AlreadyUsed()
        logger.info(f"[consume-reject] location={location_id} token={_token_hint(token)} reason=expired")
        raise Expired()
