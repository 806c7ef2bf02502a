import importlib
import os
from types import ModuleType
from typing import Optional

_ENV_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
    "dev": "config.development",
    "development": "config.development",
}


def get_settings_module(app_env: Optional[str] = None) -> str:
    # APP_ENV chọn module cấu hình; giá trị lạ rơi về development
    env = (app_env or os.getenv("APP_ENV") or "development").strip().lower()
    return _ENV_MODULES.get(env, "config.development")


def load_settings(app_env: Optional[str] = None) -> ModuleType:
    return importlib.import_module(get_settings_module(app_env))
