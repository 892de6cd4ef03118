"""Referral program schema

Revision ID: d1f0a6c3b8e2
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'd1f0a6c3b8e2'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

REFERRAL_TABLES = ('referrals', 'valid_referrals', 'not_eligible_referrals', 'compensation_due')


def _referral_columns():
    return [
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('scout_code', sa.Text(), server_default=''),
        sa.Column('candidate_phone', sa.Text(), server_default=''),
        sa.Column('candidate_email', sa.Text(), server_default=''),
        sa.Column('scout_name', sa.Text(), server_default=''),
        sa.Column('scout_email', sa.Text(), server_default=''),
        sa.Column('scout_eligibility', sa.Text(), server_default=''),
        sa.Column('candidate_eligibility', sa.Text(), server_default=''),
        sa.Column('scout_id', sa.Text(), server_default=''),
        sa.Column('candidate_id', sa.Text(), server_default=''),
        sa.Column('resolved_candidate_email', sa.Text(), server_default=''),
        sa.Column('duplicate_rank', sa.Integer(), server_default='0'),
        sa.Column('trip_scenario', sa.Text(), server_default=''),
        sa.Column('reactivation_date', sa.Date(), nullable=True),
        sa.Column('last_activity_date', sa.Date(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table('referrals', *_referral_columns())
    op.create_table('valid_referrals', *_referral_columns())
    op.create_table(
        'not_eligible_referrals',
        *_referral_columns(),
        sa.Column('escalation_status', sa.Text(), server_default=''),
        sa.Column('resolution_note', sa.Text(), server_default=''),
        sa.Column('resolution_count', sa.Integer(), server_default='0'),
        sa.Column('resolution', sa.Text(), server_default=''),
    )
    op.create_table('compensation_due', *_referral_columns())

    op.create_table(
        'scouts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('code', sa.Text(), nullable=False),
        sa.Column('scout_id', sa.Text(), server_default=''),
        sa.Column('name', sa.Text(), server_default=''),
        sa.Column('email', sa.Text(), server_default=''),
        sa.UniqueConstraint('code', name='uq_scouts_code'),
    )
    op.create_table(
        'churned_candidates',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('candidate_id', sa.Text(), server_default=''),
        sa.Column('phone', sa.Text(), server_default=''),
        sa.Column('email', sa.Text(), server_default=''),
    )
    op.create_table(
        'driver_activity',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('candidate_id', sa.Text(), nullable=False),
        sa.Column('activity_date', sa.Date(), nullable=True),
    )
    op.create_index('ix_driver_activity_candidate_id', 'driver_activity', ['candidate_id'])
    op.create_table(
        'blocked_candidates',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('candidate_id', sa.Text(), server_default=''),
        sa.Column('phone', sa.Text(), server_default=''),
        sa.Column('reason', sa.Text(), server_default=''),
        sa.Column('escalation', sa.Text(), server_default=''),
    )


def downgrade() -> None:
    op.drop_table('blocked_candidates')
    op.drop_index('ix_driver_activity_candidate_id', table_name='driver_activity')
    op.drop_table('driver_activity')
    op.drop_table('churned_candidates')
    op.drop_table('scouts')
    for table in reversed(REFERRAL_TABLES):
        op.drop_table(table)
