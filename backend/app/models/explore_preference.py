from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from app.db.db import Base


class ExplorePreference(Base):
    """Last destination and home airport a user explored with."""
    __tablename__ = "explore_preferences"

    user_id = Column(String(64), primary_key=True)
    home_airport = Column(String(8), nullable=True)
    last_destination = Column(String(128), nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
