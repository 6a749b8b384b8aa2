"""mod.io クライアントライブラリ"""

from .aio import call_async
from .client import ModioClient
from .coordinator import Diagnostic, PendingRequest, RequestCoordinator, deduplication_key, normalize_url
from .exceptions import (
    DeserializationError,
    HttpError,
    LocalValidationError,
    ModioError,
    ModioErrorCodes,
    SettingsError,
    TransportError,
)
from .httpx_transport import HttpxTransport, TransportConfig
from .logger import configure_from_settings, new_logger
from .memory import InMemoryTransport
from .models import (
    APIMessage,
    GameProfile,
    MetadataKVP,
    ModComment,
    ModDependency,
    ModEvent,
    Modfile,
    ModfileDownload,
    ModProfile,
    ModRating,
    ModStatistics,
    ModTag,
    ModTagCategory,
    ModTeamMember,
    RequestPage,
    ResourceType,
    UserEvent,
    UserProfile,
)
from .query import (
    BinaryDataParameter,
    FieldFilter,
    FilterMethod,
    FormParameters,
    PaginationParameters,
    PaginationValidationError,
    RequestFilter,
)
from .responses import AccessTokenDecoder, JsonDecoder, ModelDecoder, PageDecoder, classify_result
from .session import AuthenticationState, UserSession
from .settings import (
    LogSection,
    ModioSettings,
    RequestLoggingOptions,
    api_url_for,
    load_settings,
)
from .transport import ExchangeResult, Transport, TransportHandle, WebRequest

__all__ = [
    "ModioClient",
    "call_async",
    "RequestCoordinator",
    "PendingRequest",
    "Diagnostic",
    "deduplication_key",
    "normalize_url",
    "Transport",
    "TransportHandle",
    "WebRequest",
    "ExchangeResult",
    "HttpxTransport",
    "TransportConfig",
    "InMemoryTransport",
    "classify_result",
    "JsonDecoder",
    "ModelDecoder",
    "PageDecoder",
    "AccessTokenDecoder",
    "ModioError",
    "ModioErrorCodes",
    "TransportError",
    "HttpError",
    "LocalValidationError",
    "DeserializationError",
    "SettingsError",
    "ModioSettings",
    "RequestLoggingOptions",
    "LogSection",
    "load_settings",
    "api_url_for",
    "UserSession",
    "AuthenticationState",
    "new_logger",
    "configure_from_settings",
    "PaginationParameters",
    "PaginationValidationError",
    "RequestFilter",
    "FieldFilter",
    "FilterMethod",
    "FormParameters",
    "BinaryDataParameter",
    "APIMessage",
    "UserProfile",
    "GameProfile",
    "ModProfile",
    "Modfile",
    "ModfileDownload",
    "ModStatistics",
    "ModTag",
    "ModTagCategory",
    "MetadataKVP",
    "ModDependency",
    "ModTeamMember",
    "ModComment",
    "ModEvent",
    "UserEvent",
    "ModRating",
    "RequestPage",
    "ResourceType",
]
