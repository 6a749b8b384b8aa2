"""InMemoryTransport 実装"""

from __future__ import annotations

import json as _json
import threading
from typing import Any

from .transport import CompletionCallback, ExchangeResult, Transport, TransportHandle, WebRequest


class InMemoryTransport(Transport):
    """テスト用インメモリトランスポート。

    通信は complete() / fail() が呼ばれるまで完了しない。
    """

    def __init__(self) -> None:
        self._handles: list[TransportHandle] = []
        self._late: list[tuple[CompletionCallback, TransportHandle]] = []
        self._lock = threading.Lock()

    @property
    def exchanges(self) -> list[TransportHandle]:
        """開始されたすべての通信。"""
        with self._lock:
            return list(self._handles)

    @property
    def pending(self) -> list[TransportHandle]:
        with self._lock:
            return [h for h in self._handles if not h.done]

    def start_exchange(self, request: WebRequest) -> TransportHandle:
        handle = TransportHandle(request)
        with self._lock:
            self._handles.append(handle)
        return handle

    def on_complete(self, handle: TransportHandle, callback: CompletionCallback) -> None:
        if not handle.add_listener(callback):
            with self._lock:
                self._late.append((callback, handle))

    def complete(
        self,
        handle: TransportHandle,
        status_code: int = 200,
        body: bytes | str = b"",
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """通信をレスポンス付きで完了させる。"""
        if json is not None:
            body = _json.dumps(json)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._finish(
            handle,
            ExchangeResult(status_code=status_code, body=body, headers=headers or {}),
        )

    def fail(self, handle: TransportHandle, error: Exception) -> None:
        """通信をネットワークエラーで完了させる。"""
        self._finish(handle, ExchangeResult(network_error=error))

    def flush(self) -> int:
        """完了後に登録されたリスナーを呼び出し、その件数を返す。"""
        with self._lock:
            late, self._late = self._late, []
        for callback, handle in late:
            callback(handle)
        return len(late)

    def _finish(self, handle: TransportHandle, result: ExchangeResult) -> None:
        for listener in handle.resolve(result):
            listener(handle)
