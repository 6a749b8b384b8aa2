"""mod.io リクエストのクエリ・フォームパラメータ"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MIN_LIMIT = 1
MAX_LIMIT = 100


class PaginationValidationError(ValueError):
    """limit または offset が範囲外の場合のエラー。"""

    def __init__(self, name: str, value: int) -> None:
        super().__init__(
            f"invalid {name}: {value} (limit must be between {MIN_LIMIT} and {MAX_LIMIT},"
            " offset must not be negative)"
        )
        self.name = name
        self.value = value


@dataclass
class PaginationParameters:
    """オフセット方式のページング (`_limit` / `_offset`)。"""

    limit: int = MAX_LIMIT
    offset: int = 0

    def __post_init__(self) -> None:
        if self.limit < MIN_LIMIT or self.limit > MAX_LIMIT:
            raise PaginationValidationError("limit", self.limit)
        if self.offset < 0:
            raise PaginationValidationError("offset", self.offset)

    def to_params(self) -> list[tuple[str, str]]:
        return [("_limit", str(self.limit)), ("_offset", str(self.offset))]


class FilterMethod(str, Enum):
    """mod.io のフィルタサフィックス。"""

    EQUAL = ""
    NOT_EQUAL = "-not"
    LIKE = "-lk"
    NOT_LIKE = "-not-lk"
    IN = "-in"
    NOT_IN = "-not-in"
    MINIMUM = "-min"
    MAXIMUM = "-max"
    BITWISE_AND = "-bitwise-and"


@dataclass
class FieldFilter:
    """1 フィールドのフィルタ。"""

    field_name: str
    value: Any
    method: FilterMethod = FilterMethod.EQUAL

    def to_param(self) -> tuple[str, str]:
        if isinstance(self.value, (list, tuple, set)):
            value = ",".join(_format_value(v) for v in self.value)
        else:
            value = _format_value(self.value)
        return (f"{self.field_name}{self.method.value}", value)


@dataclass
class RequestFilter:
    """一覧エンドポイントのソート・フィールドフィルタ・全文検索。"""

    sort_field_name: str = ""
    is_sort_ascending: bool = True
    field_filters: list[FieldFilter] = field(default_factory=list)
    full_text_search: str = ""

    def add(
        self, field_name: str, value: Any, method: FilterMethod = FilterMethod.EQUAL
    ) -> RequestFilter:
        self.field_filters.append(FieldFilter(field_name, value, method))
        return self

    def to_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.sort_field_name:
            prefix = "" if self.is_sort_ascending else "-"
            params.append(("_sort", f"{prefix}{self.sort_field_name}"))
        if self.full_text_search:
            params.append(("_q", self.full_text_search))
        params.extend(f.to_param() for f in self.field_filters)
        return params


@dataclass
class BinaryDataParameter:
    """multipart のファイルフィールドとして送る添付データ。"""

    key: str
    contents: bytes
    file_name: str
    mime_type: str = "application/octet-stream"


@dataclass
class FormParameters:
    """POST/PUT/DELETE リクエストのフォーム値と添付ファイル。"""

    string_values: list[tuple[str, str]] = field(default_factory=list)
    binary_data: list[BinaryDataParameter] = field(default_factory=list)

    def add(self, key: str, value: Any) -> FormParameters:
        self.string_values.append((key, _format_value(value)))
        return self

    def add_array(self, key: str, values: Iterable[Any]) -> FormParameters:
        array_key = key if key.endswith("[]") else f"{key}[]"
        for value in values:
            self.string_values.append((array_key, _format_value(value)))
        return self

    def add_file(
        self,
        key: str,
        contents: bytes,
        file_name: str,
        mime_type: str = "application/octet-stream",
    ) -> FormParameters:
        self.binary_data.append(BinaryDataParameter(key, contents, file_name, mime_type))
        return self


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
