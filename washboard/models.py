from datetime import datetime, timezone

from washboard import db


def utcnow():
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_naive_utc(value: datetime) -> datetime:
    """Normalize to the naive-UTC form stored in the database."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value):
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class PlaySession(db.Model):
    __tablename__ = 'play_session'
    __table_args__ = (
        db.Index('ix_play_session_location_token', 'location_id', 'token'),
    )
    id = db.Column(db.Integer, primary_key=True)
    location_id = db.Column(db.String(64), nullable=False)
    token = db.Column(db.String(64), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            'token': self.token,
            'expiresAt': isoformat_utc(self.expires_at),
        }


class Score(db.Model):
    __tablename__ = 'score'
    __table_args__ = (
        db.Index('ix_score_location_created', 'location_id', 'created_at'),
    )
    id = db.Column(db.Integer, primary_key=True)
    location_id = db.Column(db.String(64), nullable=False)
    value = db.Column(db.Integer, nullable=False)
    nickname = db.Column(db.String(24), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'locationId': self.location_id,
            'value': self.value,
            'nickname': self.nickname,
            'createdAt': isoformat_utc(self.created_at),
        }
