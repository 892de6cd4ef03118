"""
Alembic environment — runs migrations against app.database.engine.
"""
from alembic import context

from app.database import Base, engine
import app.models.referral  # noqa: F401
import app.models.scout  # noqa: F401
import app.models.candidate  # noqa: F401

target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(url=str(engine.url), target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
