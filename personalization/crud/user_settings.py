from sqlalchemy.orm import Session
from personalization.models import UserSetting
from typing import Any, Optional


def get_setting(db: Session, user_id: str, setting_key: str) -> Optional[UserSetting]:
    """Get one stored setting for a user"""
    return db.query(UserSetting).filter(
        UserSetting.user_id == user_id,
        UserSetting.setting_key == setting_key
    ).first()


def upsert_setting(db: Session, user_id: str, setting_key: str, setting_value: Any) -> UserSetting:
    """Create or overwrite a stored setting"""
    setting = get_setting(db, user_id, setting_key)
    if setting:
        setting.setting_value = setting_value
    else:
        setting = UserSetting(
            user_id=user_id,
            setting_key=setting_key,
            setting_value=setting_value
        )
        db.add(setting)
    db.commit()
    db.refresh(setting)
    return setting
