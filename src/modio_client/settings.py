"""クライアント設定（pydantic BaseModel）と YAML 読み込み"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ModioErrorCodes, SettingsError

API_VERSION = "v1"
API_URL_TESTSERVER = "https://api.test.mod.io/"
API_URL_PRODUCTIONSERVER = "https://api.mod.io/"
CLIENT_VERSION = "0.1.0"
USER_AGENT = f"modioPythonClient-{CLIENT_VERSION}"


def api_url_for(test_server: bool = False) -> str:
    """本番サーバーまたはテストサーバーの API URL を返す。"""
    base = API_URL_TESTSERVER if test_server else API_URL_PRODUCTIONSERVER
    return base + API_VERSION


class RequestLoggingOptions(BaseModel):
    """リクエストのログ出力設定。"""

    errors_as_warnings: bool = True
    log_all_responses: bool = False
    log_on_send: bool = False


class LogSection(BaseModel):
    """ログ設定。"""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class ModioSettings(BaseModel):
    """mod.io クライアント設定。"""

    api_url: str = Field(default_factory=api_url_for)
    game_id: int = Field(default=0, ge=0)
    game_api_key: str = ""
    language_code: str = "en"
    user_agent: str = USER_AGENT
    timeout_seconds: float = Field(default=30.0, gt=0)
    request_logging: RequestLoggingOptions = Field(default_factory=RequestLoggingOptions)
    log: LogSection = Field(default_factory=LogSection)

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsError(
            code=ModioErrorCodes.READ_FILE,
            message=f"Failed to read settings file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise SettingsError(
            code=ModioErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise SettingsError(
            code=ModioErrorCodes.PARSE_YAML,
            message=f"Settings file must contain a mapping: {path}",
        )
    return data


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(base_path: Path, env_path: Path | None = None) -> ModioSettings:
    """設定ファイルを読み込んで ModioSettings を返す。

    base_path: ベース設定ファイルパス（必須）
    env_path: 環境別設定ファイルパス（オプション）。存在する場合はベースにマージ。
    """
    data = _read_yaml(base_path)
    if env_path is not None and env_path.exists():
        data = _merge(data, _read_yaml(env_path))
    try:
        return ModioSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(
            code=ModioErrorCodes.VALIDATION,
            message=f"Settings validation failed: {e}",
            cause=e,
        ) from e
