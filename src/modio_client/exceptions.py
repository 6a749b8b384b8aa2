"""modio_client の例外型定義"""

from __future__ import annotations

from typing import Any


class ModioError(Exception):
    """modio_client のエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class ModioErrorCodes:
    """ModioError のエラーコード定数。"""

    TRANSPORT_ERROR: str = "TRANSPORT_ERROR"
    HTTP_ERROR: str = "HTTP_ERROR"
    LOCAL_VALIDATION: str = "LOCAL_VALIDATION_ERROR"
    DESERIALIZATION_ERROR: str = "DESERIALIZATION_ERROR"
    ORPHAN_COMPLETION: str = "ORPHAN_COMPLETION"
    CALLBACK_FAILED: str = "CALLBACK_FAILED"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"


class TransportError(ModioError):
    """ネットワーク層で通信が完了しなかった場合のエラー。HTTP ステータスを持たない。"""

    status_code = None

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ModioErrorCodes.TRANSPORT_ERROR, message, cause)


class HttpError(ModioError):
    """サーバーが失敗ステータスを返した場合のエラー。"""

    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: int | None = None,
        error_ref: int | None = None,
        field_errors: dict[str, Any] | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(ModioErrorCodes.HTTP_ERROR, message)
        self.status_code = status_code
        self.error_code = error_code
        self.error_ref = error_ref
        self.field_errors = field_errors or {}
        self.retry_after = retry_after

    def __str__(self) -> str:
        return f"{self.code}: HTTP {self.status_code}: {self.message}"

    @property
    def is_authentication_invalid(self) -> bool:
        """トークンが拒否されたか (401)。"""
        return self.status_code == 401

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


class LocalValidationError(ModioError):
    """通信を開始する前に前提条件を満たさなかった場合のエラー。"""

    status_code = None

    def __init__(self, message: str) -> None:
        super().__init__(ModioErrorCodes.LOCAL_VALIDATION, message)


class DeserializationError(ModioError):
    """成功レスポンスを期待する型に変換できなかった場合のエラー。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ModioErrorCodes.DESERIALIZATION_ERROR, message, cause)


class SettingsError(ModioError):
    """設定ファイルの読み込み・検証エラー。"""
