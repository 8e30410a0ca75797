from personalization.crud.user_settings import get_setting, upsert_setting

__all__ = [
    "get_setting",
    "upsert_setting",
]
