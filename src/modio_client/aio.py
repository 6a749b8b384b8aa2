"""コールバック API を await で使うためのブリッジ"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from .exceptions import ModioError


async def call_async(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """on_success / on_error を受け取る操作を呼び出し、結果を待つ。

    例:
        mod = await call_async(client.get_mod, 42)

    Returns:
        on_success に渡された値（引数なしのコールバックでは None）

    Raises:
        ModioError: on_error に渡されたエラー
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    def _set_result(value: Any = None) -> None:
        if not future.done():
            future.set_result(value)

    def _set_error(error: ModioError) -> None:
        if not future.done():
            future.set_exception(error)

    def on_success(*value: Any) -> None:
        loop.call_soon_threadsafe(_set_result, *value)

    def on_error(error: ModioError) -> None:
        loop.call_soon_threadsafe(_set_error, error)

    operation(*args, on_success=on_success, on_error=on_error, **kwargs)
    return await future
