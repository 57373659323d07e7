import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure the project root (containing the `washboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from washboard import create_app, db, get_services
from washboard.models import Score


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_TTL_SEC = 600
    LOG_LEVEL = 'DEBUG'
    CORS_ORIGINS = ['http://localhost:3000']


class FakeClock:
    """Callable clock pinned to a fixed instant until advanced."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def _build_app(config_class):
    application = create_app(config_class)
    with application.app_context():
        # Ensure models are imported so tables are created
        import washboard.models  # noqa: F401
        db.create_all()
    return application


def _teardown_app(application):
    with application.app_context():
        db.session.remove()
        db.drop_all()
    get_services(application).store.close()


@pytest.fixture()
def flask_app():
    application = _build_app(TestConfig)
    yield application
    _teardown_app(application)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def services(flask_app):
    return get_services(flask_app)


@pytest.fixture()
def store(services):
    return services.store


@pytest.fixture()
def clock():
    # Sunday afternoon, UTC
    return FakeClock(datetime(2026, 10, 18, 15, 0, tzinfo=timezone.utc))


@pytest.fixture()
def file_app(tmp_path):
    """App backed by a SQLite file so several connections can race."""
    db_path = tmp_path / 'washboard.db'
    config_class = type('FileConfig', (TestConfig,), {
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'SQLALCHEMY_ENGINE_OPTIONS': {
            'connect_args': {'timeout': 30, 'check_same_thread': False},
            'pool_size': 20,
            'max_overflow': 0,
        },
        'LOG_LEVEL': 'INFO',
    })
    application = _build_app(config_class)
    yield application
    _teardown_app(application)


@pytest.fixture()
def add_score(store):
    """Insert a score row directly, bypassing the session protocol."""
    def _add(location_id, value, created_at, nickname=None):
        if created_at.tzinfo is not None:
            created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
        with store.transaction() as session:
            score = Score(location_id=location_id, value=value, nickname=nickname, created_at=created_at)
            session.add(score)
            session.flush()
        return score
    return _add
