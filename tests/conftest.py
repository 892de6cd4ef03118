"""Shared test fixtures."""
import pytest
from unittest.mock import patch, MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.database import Base


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = create_engine('sqlite:///:memory:')
    import app.models.referral
    import app.models.scout
    import app.models.candidate
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(db_session):
    """Route all get_session() calls to the test session.

    We disable close() so that route handlers calling session.close()
    in their finally blocks don't invalidate the shared test session.
    """
    _real_close = db_session.close
    db_session.close = lambda: None
    with patch('app.database.get_session', return_value=db_session):
        yield db_session
    db_session.close = _real_close


@pytest.fixture
def mock_redis():
    """Mock Redis client. lock() hands out a lock that is always acquired."""
    mock = MagicMock()
    mock.lock.return_value.acquire.return_value = True
    with patch('app.extensions.redis_client', mock):
        yield mock


@pytest.fixture
def store(db_session):
    """RecordStore over the test session."""
    from app.services.record_store import RecordStore
    return RecordStore(db_session)


class FakeNotifier:
    """Collects sent mail instead of delivering it."""

    def __init__(self):
        self.sent = []

    def send(self, to_address, subject, body):
        self.sent.append((to_address, subject, body))
        return True

    @property
    def recipients(self):
        return [to for to, _, _ in self.sent]


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def engine(store, notifier):
    """ReferralEngine with default collection names and no feeds configured."""
    from app.config import ProgramConfig
    from app.pipeline.manager import ReferralEngine
    return ReferralEngine(store=store, notifier=notifier, program=ProgramConfig())


@pytest.fixture
def app():
    """Flask test app."""
    from app import create_app
    app = create_app()
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_record():
    """Factory fixture — builds a ReferralRecord with sensible defaults."""
    from app.pipeline.base import ReferralRecord

    def _make(**overrides):
        defaults = dict(
            scout_code='SC-001',
            candidate_phone='0712345678',
            candidate_email='jane.driver@example.com',
        )
        defaults.update(overrides)
        return ReferralRecord(**defaults)
    return _make


@pytest.fixture
def seed_reference(db_session):
    """Scouts and churned drivers used across intake tests."""
    from app.models.candidate import ChurnedCandidate
    from app.models.scout import Scout

    db_session.add_all([
        Scout(code='SC-001', scout_id='S1', name='Amina Otieno', email='amina@example.com'),
        Scout(code='SC-002', scout_id='S2', name='Brian Kimani', email='brian@example.com'),
        ChurnedCandidate(candidate_id='C1', phone='0712345678', email='jane.driver@example.com'),
        ChurnedCandidate(candidate_id='C2', phone='0799000111', email='paul.driver@example.com'),
    ])
    db_session.commit()
