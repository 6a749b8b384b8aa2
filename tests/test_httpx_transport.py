"""HttpxTransport のユニットテスト（respx モック）"""

import asyncio
from typing import Any

import httpx
import pytest
import respx

from modio_client.aio import call_async
from modio_client.client import ModioClient
from modio_client.coordinator import RequestCoordinator
from modio_client.exceptions import HttpError, TransportError
from modio_client.httpx_transport import HttpxTransport, TransportConfig, _form_data
from modio_client.models import ModProfile
from modio_client.query import FormParameters
from modio_client.session import UserSession
from modio_client.settings import ModioSettings
from modio_client.transport import TransportHandle, WebRequest

API_URL = "https://api.test.mod.io/v1"


def make_client(transport: HttpxTransport | None = None) -> ModioClient:
    settings = ModioSettings(api_url=API_URL, game_id=1, game_api_key="key")
    return ModioClient(
        RequestCoordinator(transport or HttpxTransport(TransportConfig(timeout_seconds=5.0))),
        settings,
        UserSession(oauth_token="tok"),
    )


@respx.mock
async def test_get_mod_success() -> None:
    """Mod の取得が成功すること。"""
    route = respx.get(f"{API_URL}/games/1/mods/42").mock(
        return_value=httpx.Response(200, json={"id": 42, "name": "Better Trees"})
    )
    mod = await call_async(make_client().get_mod, 42)
    assert isinstance(mod, ModProfile)
    assert mod.name == "Better Trees"
    assert route.calls.last.request.headers["Authorization"] == "Bearer tok"


@respx.mock
async def test_concurrent_reads_share_one_http_call() -> None:
    """同時に発行した同一 GET で HTTP 通信が 1 回だけ行われること。"""
    route = respx.get(f"{API_URL}/games/1/mods/42").mock(
        return_value=httpx.Response(200, json={"id": 42})
    )
    client = make_client()
    first, second = await asyncio.gather(
        call_async(client.get_mod, 42),
        call_async(client.get_mod, 42),
    )
    assert route.call_count == 1
    assert first is second


@respx.mock
async def test_http_error_is_raised() -> None:
    """エラーレスポンスで HttpError が送出されること。"""
    respx.get(f"{API_URL}/games/1/mods/404").mock(
        return_value=httpx.Response(
            404, json={"error": {"code": 404, "error_ref": 15022, "message": "Mod not found."}}
        )
    )
    with pytest.raises(HttpError) as exc_info:
        await call_async(make_client().get_mod, 404)
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Mod not found."


@respx.mock
async def test_connection_error_is_transport_error() -> None:
    """接続エラーで TransportError が送出されること。"""
    respx.get(f"{API_URL}/games/1/mods/42").mock(side_effect=httpx.ConnectError("refused"))
    with pytest.raises(TransportError):
        await call_async(make_client().get_mod, 42)


@respx.mock
async def test_form_body_is_urlencoded() -> None:
    """フォーム値が URL エンコードで送られること。"""
    route = respx.post(f"{API_URL}/games/1/mods").mock(
        return_value=httpx.Response(201, json={"id": 5})
    )
    params = FormParameters().add("name", "Better Trees").add_array("tags", ["A", "B"])
    await call_async(make_client().add_mod, params)
    request = route.calls.last.request
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert request.content == b"name=Better+Trees&tags%5B%5D=A&tags%5B%5D=B"


@respx.mock
async def test_attachments_are_sent_as_multipart() -> None:
    """添付ファイルがあれば multipart で送られること。"""
    route = respx.post(f"{API_URL}/games/1/mods/5/files").mock(
        return_value=httpx.Response(201, json={"id": 9, "mod_id": 5})
    )
    params = FormParameters().add("version", "1.0").add_file("filedata", b"PK\x03\x04", "mod.zip")
    modfile = await call_async(make_client().add_modfile, 5, params)
    request = route.calls.last.request
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert modfile.id == 9


@respx.mock
async def test_delete_returns_none() -> None:
    """削除系エンドポイントは None を返すこと。"""
    respx.delete(f"{API_URL}/games/1/mods/5").mock(return_value=httpx.Response(204))
    assert await call_async(make_client().delete_mod, 5) is None


@respx.mock
async def test_dispatch_from_worker_thread() -> None:
    """別スレッドから dispatch しても通信がループ上で完了すること。"""
    respx.get(f"{API_URL}/games/1").mock(return_value=httpx.Response(200, json={"id": 1}))
    loop = asyncio.get_running_loop()
    client = make_client(HttpxTransport(loop=loop))
    future: asyncio.Future[Any] = loop.create_future()

    def on_success(game: Any) -> None:
        loop.call_soon_threadsafe(future.set_result, game)

    await asyncio.to_thread(client.get_game, on_success)
    game = await asyncio.wait_for(future, timeout=5)
    assert game.id == 1


@respx.mock
async def test_late_listener_is_called_asynchronously() -> None:
    """完了後に登録したリスナーが呼び出し元のスタック外で呼ばれること。"""
    respx.get(f"{API_URL}/games").mock(return_value=httpx.Response(200, json={}))
    transport = HttpxTransport()
    handle = transport.start_exchange(WebRequest("GET", f"{API_URL}/games"))
    finished = asyncio.Event()
    transport.on_complete(handle, lambda _h: finished.set())
    await asyncio.wait_for(finished.wait(), timeout=5)

    called: list[TransportHandle] = []
    transport.on_complete(handle, called.append)
    assert called == []
    await asyncio.sleep(0)
    assert called == [handle]


def test_form_data_groups_repeated_keys() -> None:
    """同じキーの値がリストにまとめられること。"""
    assert _form_data([("a", "1"), ("tags[]", "x"), ("tags[]", "y"), ("tags[]", "z")]) == {
        "a": "1",
        "tags[]": ["x", "y", "z"],
    }


def test_start_exchange_without_loop_raises_transport_error() -> None:
    """実行中のループも loop 指定もなければ TransportError が送出され、何も登録されないこと。"""
    coordinator = RequestCoordinator(HttpxTransport())
    with pytest.raises(TransportError) as exc_info:
        coordinator.dispatch(WebRequest("GET", f"{API_URL}/games"))
    assert "loop" in exc_info.value.message
    assert coordinator.pending_count == 0
