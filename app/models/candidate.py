"""
Candidate-side reference tables: churned drivers, activity feed, blocked list.

Churned Drivers and Driver Activity are replaced wholesale by the external
feed sync; stored order is insertion order (primary key).
"""
from sqlalchemy import Column, Integer, Text, Date

from app.database import Base


class ChurnedCandidate(Base):
    __tablename__ = 'churned_candidates'

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(Text, default='')
    phone = Column(Text, default='')
    email = Column(Text, default='')


class DriverActivity(Base):
    __tablename__ = 'driver_activity'

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(Text, nullable=False, index=True)
    activity_date = Column(Date, nullable=True)


class BlockedCandidate(Base):
    __tablename__ = 'blocked_candidates'

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(Text, default='')
    phone = Column(Text, default='')
    reason = Column(Text, default='')
    escalation = Column(Text, default='')   # manual note, cleared in bulk
