import os


def get_settings_module() -> str:
    # APP_ENV chọn module cấu hình, mặc định là 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "duty_roster.config.production"

    if env in {"test", "testing"}:
        return "duty_roster.config.testing"

    return "duty_roster.config.development"
