from personalization.models.user_setting import UserSetting

__all__ = [
    "UserSetting",
]
