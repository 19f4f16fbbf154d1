import os

_ENV_MODULES = {
    "dev": "config.development",
    "development": "config.development",
    "test": "config.testing",
    "testing": "config.testing",
    "prod": "config.production",
    "production": "config.production",
}


def get_settings_module() -> str:
    """Settings module for this process.

    ``ATTENDANCE_SETTINGS`` names a module outright (e.g. a deployment-specific
    ``config.staging``); otherwise ``APP_ENV`` picks one of the bundled ones,
    falling back to development.
    """

    explicit = os.getenv("ATTENDANCE_SETTINGS", "").strip()
    if explicit:
        return explicit

    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ENV_MODULES.get(env, "config.development")
