"""
External feed reader — pulls a whole table from another database.

The churn and activity feeds are owned by other teams; source_id is the
SQLAlchemy URL of their database and source_collection the table name.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy import MetaData, Table, create_engine, select
from sqlalchemy.exc import NoSuchTableError

from app.exceptions import ConfigurationError

logger = logging.getLogger('services.feed_sync')


def fetch_feed_rows(source_id: str, source_collection: str) -> List[Dict[str, Any]]:
    """Every row of source_collection as a dict, in the source's stored order."""
    engine = create_engine(source_id.replace('postgres://', 'postgresql://', 1))
    try:
        try:
            table = Table(source_collection, MetaData(), autoload_with=engine)
        except NoSuchTableError:
            raise ConfigurationError(source_collection, 'missing from external source') from None

        query = select(table)
        primary_key = list(table.primary_key.columns)
        if primary_key:
            query = query.order_by(*primary_key)

        with engine.connect() as conn:
            rows = [dict(row._mapping) for row in conn.execute(query)]

        logger.info("Fetched %d rows from external %s", len(rows), source_collection)
        return rows
    finally:
        engine.dispose()
