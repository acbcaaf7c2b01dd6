from __future__ import annotations

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8')

    app_name: str = 'dirshare'
    app_host: str = '0.0.0.0'
    app_port: int = 8080
    serve_root: str = '.'
    log_level: str = 'info'


def normalize_root(value: str) -> str:
    return os.path.abspath(value).replace(os.sep, '/')


settings = Settings()
