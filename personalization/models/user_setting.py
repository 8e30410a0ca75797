from sqlalchemy import Column, Integer, String, DateTime, JSON, UniqueConstraint
from datetime import datetime, timezone
from personalization.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class UserSetting(Base):
    """Per-user personalization blob (quiz config, memory records, metrics)"""
    __tablename__ = "user_settings"
    __table_args__ = (UniqueConstraint("user_id", "setting_key", name="uq_user_setting"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    setting_key = Column(String, nullable=False)  # "quiz_config", "memory_strength", "learning_metrics"
    setting_value = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
