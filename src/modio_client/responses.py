"""レスポンスの分類とデコード"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from .exceptions import DeserializationError, HttpError, ModioError, TransportError
from .models import RequestPage
from .transport import ExchangeResult

RETRY_AFTER_HEADERS = ("x-ratelimit-retryafter", "retry-after")


def classify_result(result: ExchangeResult) -> tuple[str, ModioError | None]:
    """通信結果を (成功時の本文, エラー) に分類する。

    エラーが None のときのみ本文が有効。成功ステータスでも本文が UTF-8 として
    読めない場合は DeserializationError を返す。
    """
    if result.network_error is not None:
        return "", TransportError(
            f"Request could not be completed: {result.network_error}",
            cause=result.network_error,
        )
    status = result.status_code or 0
    if status >= 400:
        return "", _http_error(status, result)
    try:
        return result.body.decode("utf-8"), None
    except UnicodeDecodeError as e:
        return "", DeserializationError(f"Response body is not valid UTF-8: {e}", cause=e)


def parse_error_envelope(body: bytes | str) -> dict[str, Any] | None:
    """mod.io のエラーエンベロープ {"error": {...}} を取り出す。"""
    try:
        data = json.loads(body)
    except (ValueError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    return error if isinstance(error, dict) else None


def _http_error(status: int, result: ExchangeResult) -> HttpError:
    envelope = parse_error_envelope(result.body) or {}
    message = envelope.get("message") or httpx.codes.get_reason_phrase(status) or f"HTTP {status}"
    return HttpError(
        status_code=status,
        message=message,
        error_code=envelope.get("code"),
        error_ref=envelope.get("error_ref"),
        field_errors=envelope.get("errors") or {},
        retry_after=_retry_after(result.headers),
    )


def _retry_after(headers: dict[str, str]) -> int | None:
    lowered = {k.lower(): v for k, v in headers.items()}
    for name in RETRY_AFTER_HEADERS:
        value = lowered.get(name)
        if value is None:
            continue
        try:
            return max(0, int(value))
        except ValueError:
            continue
    return None


# ---- decoders ----
# デコーダは値オブジェクト。同じモデル向けのデコーダは等価になり、
# 合流したリクエストでは 1 回だけ実行される。


@dataclass(frozen=True)
class JsonDecoder:
    """本文を JSON として読み込む。"""

    def __call__(self, body: str) -> Any:
        return json.loads(body)


@dataclass(frozen=True)
class ModelDecoder:
    """本文を model.from_dict() で変換する。"""

    model: type

    def __call__(self, body: str) -> Any:
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError(f"expected JSON object for {self.model.__name__}")
        return self.model.from_dict(data)


@dataclass(frozen=True)
class PageDecoder:
    """本文を RequestPage[model] に変換する。"""

    model: type

    def __call__(self, body: str) -> RequestPage[Any]:
        data = json.loads(body)
        if not isinstance(data, dict):
            raise ValueError(f"expected JSON object for RequestPage[{self.model.__name__}]")
        return RequestPage.from_dict(data, self.model.from_dict)


@dataclass(frozen=True)
class AccessTokenDecoder:
    """認証レスポンスから access_token を取り出す。"""

    def __call__(self, body: str) -> str:
        data = json.loads(body)
        token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise ValueError("response does not contain an access_token")
        return token
