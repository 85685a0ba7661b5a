import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, default is development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def settings_dict(module) -> dict:
    """Upper-case attributes of a settings module as a plain dict."""
    return {k: getattr(module, k) for k in dir(module) if k.isupper()}
