"""httpx を使った HTTP トランスポート実装"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx
import structlog

from .exceptions import TransportError
from .transport import CompletionCallback, ExchangeResult, Transport, TransportHandle, WebRequest

logger = structlog.get_logger(__name__)


@dataclass
class TransportConfig:
    """トランスポート設定。"""

    timeout_seconds: float = 30.0
    follow_redirects: bool = True


class HttpxTransport(Transport):
    """httpx.AsyncClient で通信を行うトランスポート。

    通信はイベントループ上のタスクとして実行される。loop を省略した場合は最初の
    start_exchange() 呼び出し時に実行中のループに束縛されるため、実行中のループが
    ないスレッドから使う場合は loop を明示的に渡すこと。渡さずに呼び出すと
    TransportError が送出される。
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._config = config or TransportConfig()
        self._loop = loop
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def config(self) -> TransportConfig:
        return self._config

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            follow_redirects=self._config.follow_redirects,
        )

    def _bound_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise TransportError(
                    "HttpxTransport needs a running event loop; pass loop= when"
                    " dispatching from a thread without one",
                    cause=e,
                ) from e
        return self._loop

    def start_exchange(self, request: WebRequest) -> TransportHandle:
        handle = TransportHandle(request)
        loop = self._bound_loop()
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            task = loop.create_task(self._exchange(handle))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            asyncio.run_coroutine_threadsafe(self._exchange(handle), loop)
        return handle

    def on_complete(self, handle: TransportHandle, callback: CompletionCallback) -> None:
        if not handle.add_listener(callback):
            self._bound_loop().call_soon_threadsafe(callback, handle)

    async def _exchange(self, handle: TransportHandle) -> None:
        request = handle.request
        files = [
            (a.key, (a.file_name, a.contents, a.mime_type)) for a in request.attachments
        ]
        try:
            async with self._make_client() as client:
                resp = await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    data=_form_data(request.form_fields) or None,
                    files=files or None,
                )
            result = ExchangeResult(
                status_code=resp.status_code,
                body=resp.content,
                headers=dict(resp.headers),
            )
        except Exception as e:
            logger.debug("exchange failed", url=request.url, error=str(e))
            result = ExchangeResult(network_error=e)
        for listener in handle.resolve(result):
            listener(handle)


def _form_data(fields: list[tuple[str, str]]) -> dict[str, str | list[str]]:
    """(key, value) の並びを httpx の data 形式に変換する。同じキーはリストにまとめる。"""
    data: dict[str, str | list[str]] = {}
    for key, value in fields:
        current = data.get(key)
        if current is None:
            data[key] = value
        elif isinstance(current, list):
            current.append(value)
        else:
            data[key] = [current, value]
    return data
