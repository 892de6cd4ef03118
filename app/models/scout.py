"""
Scout model — existing drivers allowed to refer, keyed by referral code.
"""
from sqlalchemy import Column, Integer, Text

from app.database import Base


class Scout(Base):
    __tablename__ = 'scouts'

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(Text, nullable=False, unique=True)
    scout_id = Column(Text, default='')
    name = Column(Text, default='')
    email = Column(Text, default='')
