"""レスポンス分類とデコーダのユニットテスト"""

import pytest

from modio_client.exceptions import DeserializationError, HttpError, ModioErrorCodes, TransportError
from modio_client.models import ModProfile, RequestPage
from modio_client.responses import (
    AccessTokenDecoder,
    JsonDecoder,
    ModelDecoder,
    PageDecoder,
    classify_result,
    parse_error_envelope,
)
from modio_client.transport import ExchangeResult


def test_network_error_is_transport_error() -> None:
    """network_error があれば TransportError になること。"""
    cause = TimeoutError("timed out")
    body, error = classify_result(ExchangeResult(network_error=cause))
    assert body == ""
    assert isinstance(error, TransportError)
    assert error.__cause__ is cause
    assert str(error).startswith("TRANSPORT_ERROR: ")


def test_success_body_is_decoded() -> None:
    """2xx の本文が UTF-8 文字列として返ること。"""
    body, error = classify_result(ExchangeResult(status_code=200, body="ゲーム".encode()))
    assert error is None
    assert body == "ゲーム"


def test_empty_success_body() -> None:
    """204 の空本文も成功になること。"""
    assert classify_result(ExchangeResult(status_code=204)) == ("", None)


def test_redirect_status_is_not_an_error() -> None:
    """400 未満のステータスはエラーにならないこと。"""
    _, error = classify_result(ExchangeResult(status_code=304))
    assert error is None


def test_undecodable_body_is_deserialization_error() -> None:
    """UTF-8 として読めない成功本文は DeserializationError になること。"""
    body, error = classify_result(ExchangeResult(status_code=200, body=b"\xff\xfe\xfa"))
    assert body == ""
    assert isinstance(error, DeserializationError)
    assert error.code == ModioErrorCodes.DESERIALIZATION_ERROR
    assert isinstance(error.__cause__, UnicodeDecodeError)


def test_error_envelope_is_parsed() -> None:
    """mod.io のエラーエンベロープから詳細が取り出されること。"""
    body = (
        b'{"error": {"code": 422, "error_ref": 13009, "message": "Validation Failed.",'
        b' "errors": {"name": "The name field is required."}}}'
    )
    _, error = classify_result(ExchangeResult(status_code=422, body=body))
    assert isinstance(error, HttpError)
    assert error.code == ModioErrorCodes.HTTP_ERROR
    assert error.status_code == 422
    assert error.error_code == 422
    assert error.error_ref == 13009
    assert error.message == "Validation Failed."
    assert error.field_errors == {"name": "The name field is required."}
    assert str(error) == "HTTP_ERROR: HTTP 422: Validation Failed."


def test_error_without_envelope_uses_reason_phrase() -> None:
    """エンベロープがなければ HTTP の理由句がメッセージになること。"""
    _, error = classify_result(ExchangeResult(status_code=500, body=b"<html></html>"))
    assert isinstance(error, HttpError)
    assert error.message == "Internal Server Error"
    assert error.is_server_error
    assert error.field_errors == {}


def test_rate_limit_retry_after_header() -> None:
    """X-RateLimit-RetryAfter が retry_after に入ること。"""
    _, error = classify_result(
        ExchangeResult(status_code=429, headers={"X-RateLimit-RetryAfter": "60"})
    )
    assert isinstance(error, HttpError)
    assert error.is_rate_limited
    assert error.retry_after == 60


def test_retry_after_falls_back_to_standard_header() -> None:
    """Retry-After も読み取られ、不正な値は無視されること。"""
    _, error = classify_result(
        ExchangeResult(
            status_code=503,
            headers={"X-RateLimit-RetryAfter": "soon", "retry-after": "5"},
        )
    )
    assert error.retry_after == 5


def test_unauthorized_flag() -> None:
    """401 で is_authentication_invalid が True になること。"""
    _, error = classify_result(ExchangeResult(status_code=401))
    assert error.is_authentication_invalid


@pytest.mark.parametrize("body", [b"", b"[]", b'{"error": "nope"}', b"not json"])
def test_parse_error_envelope_rejects_other_shapes(body: bytes) -> None:
    """エンベロープ形式でない本文は None になること。"""
    assert parse_error_envelope(body) is None


# ---- decoders ----


def test_json_decoder() -> None:
    """JsonDecoder が JSON を読み込むこと。"""
    assert JsonDecoder()('{"a": [1, 2]}') == {"a": [1, 2]}


def test_decoders_for_same_model_are_equal() -> None:
    """同じモデルのデコーダが等価・同一ハッシュであること。"""
    assert ModelDecoder(ModProfile) == ModelDecoder(ModProfile)
    assert hash(PageDecoder(ModProfile)) == hash(PageDecoder(ModProfile))
    assert ModelDecoder(ModProfile) != PageDecoder(ModProfile)


def test_model_decoder_requires_object() -> None:
    """JSON オブジェクト以外は ValueError になること。"""
    with pytest.raises(ValueError):
        ModelDecoder(ModProfile)("[1, 2, 3]")


def test_page_decoder_builds_request_page() -> None:
    """PageDecoder がページ情報付きの一覧を返すこと。"""
    body = (
        '{"data": [{"id": 1}, {"id": 2}], "result_count": 2,'
        ' "result_offset": 0, "result_limit": 2, "result_total": 5}'
    )
    page = PageDecoder(ModProfile)(body)
    assert isinstance(page, RequestPage)
    assert [m.id for m in page.items] == [1, 2]
    assert page.total == 5
    assert page.has_more


def test_access_token_decoder() -> None:
    """access_token が取り出されること。"""
    body = '{"code": 200, "access_token": "eyJ0eXAi", "date_expires": 1570673249}'
    assert AccessTokenDecoder()(body) == "eyJ0eXAi"


def test_access_token_decoder_missing_token() -> None:
    """access_token がなければ ValueError になること。"""
    with pytest.raises(ValueError):
        AccessTokenDecoder()('{"code": 200}')
