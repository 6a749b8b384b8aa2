"""RequestCoordinator: 進行中リクエストの合流とコールバック配信"""

from __future__ import annotations

import hashlib
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import structlog

from .exceptions import DeserializationError, ModioError, ModioErrorCodes
from .responses import classify_result
from .settings import RequestLoggingOptions
from .transport import ExchangeResult, Transport, TransportHandle, WebRequest

logger = structlog.get_logger(__name__)

ResponseDecoder = Callable[[str], Any]
SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[ModioError], None]

# Diagnostic.kind には ModioErrorCodes の値を使う
DIAG_ORPHAN_COMPLETION = ModioErrorCodes.ORPHAN_COMPLETION
DIAG_DESERIALIZATION = ModioErrorCodes.DESERIALIZATION_ERROR
DIAG_CALLBACK_FAILED = ModioErrorCodes.CALLBACK_FAILED


@dataclass
class _Subscriber:
    callback: SuccessCallback
    decoder: ResponseDecoder | None = None


@dataclass
class PendingRequest:
    """1 つの進行中の通信とその購読者。"""

    key: str
    handle: TransportHandle
    success_callbacks: list[_Subscriber] = field(default_factory=list)
    error_callbacks: list[ErrorCallback] = field(default_factory=list)

    def subscribe(
        self,
        on_success: SuccessCallback | None,
        on_error: ErrorCallback | None,
        decoder: ResponseDecoder | None,
    ) -> None:
        if on_success is not None:
            self.success_callbacks.append(_Subscriber(on_success, decoder))
        if on_error is not None:
            self.error_callbacks.append(on_error)


@dataclass(frozen=True)
class Diagnostic:
    """呼び出し元に届かない異常の記録。"""

    kind: str
    message: str
    url: str = ""


def normalize_url(url: str) -> str:
    """重複判定用に URL を正規化する。

    scheme と host を小文字化し、fragment を除き、クエリを名前順に並べる。
    同名パラメータの相対順序は保たれる。
    """
    parts = urlsplit(url)
    query = sorted(parse_qsl(parts.query, keep_blank_values=True), key=lambda kv: kv[0])
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path, urlencode(query), "")
    )


def deduplication_key(request: WebRequest) -> str:
    """重複判定キー。認証ヘッダーが異なるリクエストは別のキーになる。"""
    key = f"{request.method} {normalize_url(request.url)}"
    authorization = request.headers.get("Authorization")
    if authorization:
        digest = hashlib.sha256(authorization.encode("utf-8")).hexdigest()[:16]
        key = f"{key} auth={digest}"
    return key


class RequestCoordinator:
    """同一の読み取りリクエストを 1 回の通信にまとめ、結果を全購読者に配信する。

    レジストリの操作はすべて self._lock の下で行う。コールバックはロックの外、
    トランスポートの完了通知から呼び出される。
    """

    def __init__(
        self,
        transport: Transport,
        logging_options: RequestLoggingOptions | None = None,
        max_diagnostics: int = 100,
    ) -> None:
        self._transport = transport
        self._logging = logging_options or RequestLoggingOptions()
        self._lock = threading.Lock()
        self._by_key: dict[str, PendingRequest] = {}
        self._by_handle: dict[int, PendingRequest] = {}
        self._diagnostics: deque[Diagnostic] = deque(maxlen=max_diagnostics)

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._by_handle)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        with self._lock:
            return list(self._diagnostics)

    def is_pending(self, request: WebRequest) -> bool:
        """同じ読み取りリクエストが進行中か。"""
        if not request.is_read:
            return False
        with self._lock:
            return deduplication_key(request) in self._by_key

    def dispatch(
        self,
        request: WebRequest,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
        decoder: ResponseDecoder | None = None,
    ) -> TransportHandle:
        """リクエストを送信し、結果を受け取るコールバックを登録する。

        進行中の同一読み取りリクエストがあれば新しい通信は開始せず、その通信に
        コールバックを追加する。書き込み系のリクエストは常に新しい通信になる。
        """
        key = deduplication_key(request) if request.is_read else None
        started = False
        with self._lock:
            pending = self._by_key.get(key) if key is not None else None
            if pending is None:
                handle = self._transport.start_exchange(request)
                pending = PendingRequest(
                    key=key or f"{request.method} {request.url}#{handle.id}",
                    handle=handle,
                )
                if key is not None:
                    self._by_key[key] = pending
                self._by_handle[handle.id] = pending
                self._transport.on_complete(handle, self.on_transport_complete)
                started = True
            pending.subscribe(on_success, on_error, decoder)

        if started and self._logging.log_on_send:
            logger.info("request sent", method=request.method, url=request.url)
        elif not started:
            logger.debug("request coalesced", key=pending.key, handle=pending.handle.id)
        return pending.handle

    def on_transport_complete(self, handle: TransportHandle) -> None:
        """トランスポートの完了通知を処理する。"""
        with self._lock:
            pending = self._by_handle.pop(handle.id, None)
            if pending is not None and self._by_key.get(pending.key) is pending:
                del self._by_key[pending.key]
            if pending is None:
                self._diagnostics.append(
                    Diagnostic(
                        DIAG_ORPHAN_COMPLETION,
                        f"no pending request for exchange {handle.id}",
                        handle.request.url,
                    )
                )
        if pending is None:
            logger.warning("orphan completion ignored", handle=handle.id, url=handle.request.url)
            return

        result = handle.result
        if result is None:
            result = ExchangeResult(
                network_error=RuntimeError(f"exchange {handle.id} completed without a result")
            )
        body, error = classify_result(result)
        if isinstance(error, DeserializationError):
            # 本文が読めない成功レスポンスは既定値 None で成功側に配信する
            self._deserialization_failed(error, pending)
            for subscriber in pending.success_callbacks:
                self._invoke(subscriber.callback, None, handle)
            return
        self._log_outcome(handle, error)

        if error is not None:
            for on_error in pending.error_callbacks:
                self._invoke(on_error, error, handle)
        else:
            self._deliver_success(pending, body)

    def _deliver_success(self, pending: PendingRequest, body: str) -> None:
        decoded: dict[Any, Any] = {}
        for subscriber in pending.success_callbacks:
            value: Any = body
            if subscriber.decoder is not None:
                cache_key = _cache_key(subscriber.decoder)
                if cache_key not in decoded:
                    decoded[cache_key] = self._decode(subscriber.decoder, body, pending)
                value = decoded[cache_key]
            self._invoke(subscriber.callback, value, pending.handle)

    def _decode(self, decoder: ResponseDecoder, body: str, pending: PendingRequest) -> Any:
        try:
            return decoder(body)
        except Exception as e:
            error = DeserializationError(
                f"Failed to convert response into {_decoder_name(decoder)} representation: {e}",
                cause=e,
            )
            self._deserialization_failed(error, pending)
            return None

    def _deserialization_failed(self, error: DeserializationError, pending: PendingRequest) -> None:
        url = pending.handle.request.url
        self._record(DIAG_DESERIALIZATION, str(error), url)
        logger.warning("response deserialization failed", url=url, error=str(error))

    def _invoke(self, callback: Callable[[Any], None], value: Any, handle: TransportHandle) -> None:
        try:
            callback(value)
        except Exception as e:
            self._record(DIAG_CALLBACK_FAILED, f"{type(e).__name__}: {e}", handle.request.url)
            logger.exception("request callback raised", url=handle.request.url)

    def _record(self, kind: str, message: str, url: str) -> None:
        with self._lock:
            self._diagnostics.append(Diagnostic(kind, message, url))

    def _log_outcome(self, handle: TransportHandle, error: ModioError | None) -> None:
        request = handle.request
        status = handle.result.status_code if handle.result is not None else None
        if error is not None:
            log = logger.warning if self._logging.errors_as_warnings else logger.error
            log(
                "request failed",
                method=request.method,
                url=request.url,
                status=status,
                error=str(error),
            )
        elif self._logging.log_all_responses:
            logger.info("request succeeded", method=request.method, url=request.url, status=status)


def _cache_key(decoder: ResponseDecoder) -> Any:
    try:
        hash(decoder)
    except TypeError:
        return id(decoder)
    return decoder


def _decoder_name(decoder: ResponseDecoder) -> str:
    model = getattr(decoder, "model", None)
    if model is not None:
        return model.__name__
    return getattr(decoder, "__name__", type(decoder).__name__)
