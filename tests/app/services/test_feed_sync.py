"""Tests for app.services.feed_sync — reading an external table."""
import pytest
from sqlalchemy import create_engine, text

from app.exceptions import ConfigurationError
from app.services.feed_sync import fetch_feed_rows


@pytest.fixture
def feed_url(tmp_path):
    """File-backed SQLite database standing in for the external feed."""
    url = f"sqlite:///{tmp_path / 'feed.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE churn_export (row_no INTEGER PRIMARY KEY, candidate_id TEXT, phone TEXT, email TEXT)"))
        conn.execute(text("INSERT INTO churn_export VALUES (2, 'C2', '0799000111', 'paul@example.com')"))
        conn.execute(text("INSERT INTO churn_export VALUES (1, 'C1', '0712345678', 'jane@example.com')"))
    engine.dispose()
    return url


class TestFetchFeedRows:

    def test_returns_rows_as_dicts_in_key_order(self, feed_url):
        rows = fetch_feed_rows(feed_url, 'churn_export')
        assert [r['candidate_id'] for r in rows] == ['C1', 'C2']
        assert rows[0]['phone'] == '0712345678'
        assert set(rows[0]) == {'row_no', 'candidate_id', 'phone', 'email'}

    def test_missing_source_table_raises(self, feed_url):
        with pytest.raises(ConfigurationError) as exc:
            fetch_feed_rows(feed_url, 'does_not_exist')
        assert exc.value.collection == 'does_not_exist'
        assert exc.value.__cause__ is None
        assert exc.value.__suppress_context__ is True

    def test_feeds_end_to_end_into_store(self, feed_url, engine, store):
        assert engine.sync_external_feed(feed_url, 'churn_export', 'Churned Drivers') == 2
        assert [r.email for r in store.read_all('Churned Drivers')] == ['jane@example.com', 'paul@example.com']
