"""Transport 抽象とリクエスト/レスポンス型"""

from __future__ import annotations

import itertools
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

from .query import BinaryDataParameter

READ_METHODS = frozenset({"GET", "HEAD"})


@dataclass
class WebRequest:
    """送信するリクエストの記述子。"""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    form_fields: list[tuple[str, str]] = field(default_factory=list)
    attachments: list[BinaryDataParameter] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    @property
    def is_read(self) -> bool:
        """副作用のない読み取りリクエストか。"""
        return self.method in READ_METHODS


@dataclass
class ExchangeResult:
    """1 回の通信の生の結果。"""

    status_code: int | None = None
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)
    network_error: Exception | None = None


CompletionCallback = Callable[["TransportHandle"], None]

_handle_ids = itertools.count(1)


class TransportHandle:
    """進行中の通信を表すハンドル。"""

    def __init__(self, request: WebRequest) -> None:
        self.id = next(_handle_ids)
        self.request = request
        self.result: ExchangeResult | None = None
        self._listeners: list[CompletionCallback] = []
        self._lock = threading.Lock()

    @property
    def done(self) -> bool:
        return self.result is not None

    def add_listener(self, callback: CompletionCallback) -> bool:
        """完了リスナーを登録する。既に完了していれば登録せず False を返す。"""
        with self._lock:
            if self.result is not None:
                return False
            self._listeners.append(callback)
            return True

    def resolve(self, result: ExchangeResult) -> list[CompletionCallback]:
        """結果を確定し、呼び出すべきリスナーを返す。"""
        with self._lock:
            if self.result is not None:
                raise RuntimeError(f"exchange {self.id} already resolved")
            self.result = result
            listeners, self._listeners = self._listeners, []
        return listeners

    def __repr__(self) -> str:
        state = "done" if self.done else "pending"
        return f"<TransportHandle {self.id} {self.request.method} {self.request.url} {state}>"


class Transport(ABC):
    """HTTP トランスポート抽象基底クラス。"""

    @abstractmethod
    def start_exchange(self, request: WebRequest) -> TransportHandle:
        """非同期に通信を開始する。ブロックしてはならない。"""
        ...

    @abstractmethod
    def on_complete(self, handle: TransportHandle, callback: CompletionCallback) -> None:
        """通信完了時に callback(handle) を 1 回だけ呼び出す。

        呼び出し元のスタック上で同期的に callback を呼んではならない。
        """
        ...
