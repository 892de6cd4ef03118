"""
Record Store — the storage contract the engine talks to.

Collections are addressed by name ("Valid Referrals", "Scouts", ...) and rows
by their stable primary key, never by position. Every write commits on its
own so a batch job that dies half-way leaves each processed row intact.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, inspect as sa_inspect, select

from app import config
from app.exceptions import ConfigurationError
from app.models.candidate import BlockedCandidate, ChurnedCandidate, DriverActivity
from app.models.referral import CompensationDue, NotEligibleReferral, Referral, ValidReferral
from app.models.scout import Scout

logger = logging.getLogger('services.record_store')


COLLECTION_MODELS = {
    config.REFERRALS:              Referral,
    config.SCOUTS:                 Scout,
    config.CHURNED_CANDIDATES:     ChurnedCandidate,
    config.VALID_REFERRALS:        ValidReferral,
    config.NOT_ELIGIBLE_REFERRALS: NotEligibleReferral,
    config.ACTIVITY_FEED:          DriverActivity,
    config.COMPENSATION_DUE:       CompensationDue,
    config.BLOCKED_LIST:           BlockedCandidate,
}


class RecordStore:
    """Named-collection facade over a SQLAlchemy session."""

    def __init__(self, session, models: Dict[str, Any] = None):
        self.session = session
        self.models = dict(COLLECTION_MODELS if models is None else models)
        self._verified = set()

    # ── Reads ────────────────────────────────────────────────────────────────

    def read_all(self, collection: str) -> List[Any]:
        """All rows of a collection in insertion order."""
        model = self.require(collection)
        return list(self.session.scalars(select(model).order_by(model.id)))

    def read_last(self, collection: str) -> Optional[Any]:
        """Newest row of a collection, or None when it is empty."""
        model = self.require(collection)
        return self.session.scalars(
            select(model).order_by(model.id.desc()).limit(1)
        ).first()

    def get(self, collection: str, row_id: int) -> Optional[Any]:
        model = self.require(collection)
        return self.session.get(model, row_id)

    # ── Writes ───────────────────────────────────────────────────────────────

    def append(self, collection: str, values: Dict[str, Any]) -> Any:
        """Insert one row and return it (with its id populated)."""
        model = self.require(collection)
        row = model(**_filter_values(model, values))
        self.session.add(row)
        self.session.commit()
        return row

    def update_field(self, collection: str, row_id: int, field: str, value: Any):
        model = self.require(collection)
        if field not in _column_names(model):
            raise ValueError(f"{collection} has no field '{field}'")
        row = self.session.get(model, row_id)
        if row is None:
            raise LookupError(f"{collection} row {row_id} not found")
        setattr(row, field, _coerce(model, field, value))
        self.session.commit()

    def update_fields(self, collection: str, row_id: int, values: Dict[str, Any]):
        """Several update_field calls committed together."""
        model = self.require(collection)
        row = self.session.get(model, row_id)
        if row is None:
            raise LookupError(f"{collection} row {row_id} not found")
        for field, value in _filter_values(model, values).items():
            setattr(row, field, value)
        self.session.commit()

    def delete_row(self, collection: str, row_id: int):
        model = self.require(collection)
        self.session.execute(delete(model).where(model.id == row_id))
        self.session.commit()

    def clear_and_replace(self, collection: str, rows: Iterable[Dict[str, Any]]) -> int:
        """Replace the whole collection with rows. Returns the new row count."""
        model = self.require(collection)
        new_rows = [model(**_filter_values(model, values)) for values in rows]
        try:
            self.session.execute(delete(model))
            self.session.add_all(new_rows)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info("Replaced %s with %d rows", collection, len(new_rows))
        return len(new_rows)

    # ── Collection checks ────────────────────────────────────────────────────

    def require(self, collection: str):
        """Return the model for a collection or raise ConfigurationError."""
        model = self.models.get(collection)
        if model is None:
            raise ConfigurationError(collection, 'not mapped to a table')
        if collection not in self._verified:
            if not sa_inspect(self.session.connection()).has_table(model.__tablename__):
                raise ConfigurationError(collection, f"table '{model.__tablename__}' is missing")
            self._verified.add(collection)
        return model


# ── Private helpers ──────────────────────────────────────────────────────────

def _column_names(model) -> List[str]:
    return [c.name for c in model.__table__.columns]


def _filter_values(model, values: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the fields the model knows; ids are always store-assigned."""
    known = set(_column_names(model)) - {'id'}
    return {k: _coerce(model, k, v) for k, v in values.items() if k in known}


def _coerce(model, field: str, value: Any) -> Any:
    """Normalize feed values to what the column type accepts."""
    column = model.__table__.columns[field]
    python_type = _python_type(column)
    if value is None:
        return None
    if python_type is date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = str(value).strip()
        return date.fromisoformat(text[:10]) if text else None
    if python_type is int and not isinstance(value, int):
        text = str(value).strip()
        return int(float(text)) if text else 0
    if python_type is str and not isinstance(value, str):
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    return value


def _python_type(column):
    try:
        return column.type.python_type
    except NotImplementedError:
        return None
