"""SQLAlchemy models for the local record store."""

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DBProfile(Base):  # type: ignore
    """
    User profile, one row per user identity.

    +--------------+-------------+------+-----+
    | Field        | Type        | Null | Key |
    +--------------+-------------+------+-----+
    | id           | varchar(64) | NO   | PRI |
    | home_country | varchar(2)  | YES  |     |
    | created_at   | datetime    | NO   |     |
    +--------------+-------------+------+-----+
    """

    __tablename__ = 'user_profiles'

    id = Column(String(64), primary_key=True)
    home_country = Column(String(2))
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class DBTravel(Base):  # type: ignore
    """A trip in the user's travel history."""

    __tablename__ = 'user_travels'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    country = Column(String(2), nullable=False)
    city = Column(String(255))
    start_date = Column(Date)
    end_date = Column(Date)
    memo = Column(Text)


TABLES = {
    DBProfile.__tablename__: DBProfile,
    DBTravel.__tablename__: DBTravel,
}
