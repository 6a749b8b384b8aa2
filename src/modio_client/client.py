"""mod.io REST API クライアント

各メソッドは 1 つのエンドポイントに対応し、リクエストを組み立てて
RequestCoordinator に渡す。結果は on_success / on_error コールバックで受け取る。
"""

from __future__ import annotations

import base64
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import structlog

from .coordinator import ErrorCallback, RequestCoordinator, ResponseDecoder, SuccessCallback
from .exceptions import HttpError, LocalValidationError, ModioError
from .httpx_transport import HttpxTransport, TransportConfig
from .models import (
    APIMessage,
    GameProfile,
    MetadataKVP,
    ModComment,
    ModDependency,
    ModEvent,
    Modfile,
    ModProfile,
    ModRating,
    ModStatistics,
    ModTag,
    ModTagCategory,
    ModTeamMember,
    ResourceType,
    UserEvent,
    UserProfile,
)
from .query import FormParameters, PaginationParameters, RequestFilter
from .responses import AccessTokenDecoder, ModelDecoder, PageDecoder
from .session import AuthenticationState, UserSession
from .settings import ModioSettings
from .transport import Transport, TransportHandle, WebRequest

logger = structlog.get_logger(__name__)

MAX_TICKET_BYTES = 1024

NoArgCallback = Callable[[], None]


class ModioClient:
    """mod.io API クライアント。

    設定とセッションはリクエスト生成のたびに読み込まれる（キャッシュしない）。
    前提条件を満たさない場合は通信を開始せず、on_error に
    LocalValidationError を即座に渡して None を返す。
    """

    def __init__(
        self,
        coordinator: RequestCoordinator,
        settings: ModioSettings,
        session: UserSession | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._settings = settings
        self._session = session if session is not None else UserSession()

    @classmethod
    def from_settings(
        cls,
        settings: ModioSettings,
        session: UserSession | None = None,
        transport: Transport | None = None,
    ) -> ModioClient:
        """設定からトランスポートとコーディネーターを組み立てる。

        transport を省略すると settings.timeout_seconds を使う HttpxTransport を作成する。
        リクエストのログ出力は settings.request_logging に従う。
        """
        if transport is None:
            transport = HttpxTransport(TransportConfig(timeout_seconds=settings.timeout_seconds))
        coordinator = RequestCoordinator(transport, settings.request_logging)
        return cls(coordinator, settings, session)

    @property
    def coordinator(self) -> RequestCoordinator:
        return self._coordinator

    @property
    def settings(self) -> ModioSettings:
        return self._settings

    @settings.setter
    def settings(self, value: ModioSettings) -> None:
        self._settings = value

    @property
    def session(self) -> UserSession:
        return self._session

    # ---------[ REQUEST GENERATION ]---------

    def assert_authorization_details(self, user_token_required: bool) -> None:
        """リクエストに必要な認証情報が揃っているか検証する。

        Raises:
            LocalValidationError: game_id / API キー、または必要なトークンがない場合
        """
        if self._settings.game_id <= 0 or not self._settings.game_api_key:
            raise LocalValidationError(
                "No API requests can be executed without a valid game id and game API key."
            )
        if not user_token_required:
            return
        if not self._session.oauth_token:
            raise LocalValidationError(
                "Requests to user-specific endpoints require an OAuth token in the user session."
            )
        if self._session.was_token_rejected:
            logger.warning(
                "request made with a token that was previously rejected",
                state=self._session.authentication_state.value,
            )

    def generate_query(
        self,
        endpoint_url: str,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
    ) -> WebRequest:
        """公開読み取り用の GET リクエストを生成する。

        有効なトークンがあれば Bearer 認証、なければ api_key クエリを付与する。
        """
        self.assert_authorization_details(False)
        params = _query_params(filter, pagination)
        token = None
        if self._session.authentication_state is AuthenticationState.VALID_TOKEN:
            token = self._session.oauth_token
        else:
            params.append(("api_key", self._settings.game_api_key))
        return WebRequest("GET", _with_query(endpoint_url, params), headers=self._headers(token))

    def generate_get_request(
        self,
        endpoint_url: str,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
    ) -> WebRequest:
        """ユーザー認証が必要な GET リクエストを生成する。"""
        self.assert_authorization_details(True)
        return WebRequest(
            "GET",
            _with_query(endpoint_url, _query_params(filter, pagination)),
            headers=self._headers(self._session.oauth_token),
        )

    def generate_post_request(
        self, endpoint_url: str, parameters: FormParameters | None = None
    ) -> WebRequest:
        return self._form_request("POST", endpoint_url, parameters)

    def generate_put_request(
        self, endpoint_url: str, parameters: FormParameters | None = None
    ) -> WebRequest:
        return self._form_request("PUT", endpoint_url, parameters)

    def generate_delete_request(
        self, endpoint_url: str, parameters: FormParameters | None = None
    ) -> WebRequest:
        return self._form_request("DELETE", endpoint_url, parameters)

    def generate_authentication_request(
        self, endpoint_url: str, auth_data: list[tuple[str, str]]
    ) -> WebRequest:
        """トークン取得用の POST リクエストを生成する。Bearer トークンは付与しない。"""
        self.assert_authorization_details(False)
        if not auth_data:
            raise LocalValidationError("Authentication data was empty.")
        return WebRequest(
            "POST",
            endpoint_url,
            headers=self._headers(None),
            form_fields=[("api_key", self._settings.game_api_key), *auth_data],
        )

    def _form_request(
        self, method: str, endpoint_url: str, parameters: FormParameters | None
    ) -> WebRequest:
        self.assert_authorization_details(True)
        parameters = parameters or FormParameters()
        return WebRequest(
            method,
            endpoint_url,
            headers=self._headers(self._session.oauth_token),
            form_fields=list(parameters.string_values),
            attachments=list(parameters.binary_data),
        )

    def _headers(self, token: str | None) -> dict[str, str]:
        headers = {
            "Accept-Language": self._settings.language_code,
            "User-Agent": self._settings.user_agent,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _endpoint(self, *parts: Any) -> str:
        return "/".join([self._settings.api_url, *(str(p) for p in parts)])

    def _game_endpoint(self, *parts: Any) -> str:
        return self._endpoint("games", self._settings.game_id, *parts)

    # ---------[ SENDING ]---------

    def _send(
        self,
        build: Callable[[], WebRequest],
        decoder: ResponseDecoder | None,
        on_success: SuccessCallback | None,
        on_error: ErrorCallback | None,
    ) -> TransportHandle | None:
        try:
            request = build()
        except LocalValidationError as e:
            logger.warning("request rejected before sending", error=e.message)
            if on_error is not None:
                on_error(e)
            return None
        return self._coordinator.dispatch(
            request,
            on_success=on_success,
            on_error=self._watch_token(request, on_error),
            decoder=decoder,
        )

    def _watch_token(
        self, request: WebRequest, on_error: ErrorCallback | None
    ) -> ErrorCallback | None:
        """401 を受けたら使用したトークンを拒否済みにするラッパーを返す。"""
        authorization = request.headers.get("Authorization", "")
        if not authorization.startswith("Bearer "):
            return on_error
        token = authorization[len("Bearer ") :]
        session = self._session

        def _on_error(error: ModioError) -> None:
            if (
                isinstance(error, HttpError)
                and error.is_authentication_invalid
                and session.oauth_token == token
            ):
                session.was_token_rejected = True
            if on_error is not None:
                on_error(error)

        return _on_error

    # ---------[ AUTHENTICATION ]---------

    def send_security_code(
        self,
        email_address: str,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        """ログイン用セキュリティコードをメールで送信するよう要求する。"""
        return self._send(
            lambda: self.generate_authentication_request(
                self._endpoint("oauth", "emailrequest"), [("email", email_address)]
            ),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def get_oauth_token(
        self,
        security_code: str,
        on_success: Callable[[str], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        """セキュリティコードを OAuth トークンと交換する。"""
        return self._send(
            lambda: self.generate_authentication_request(
                self._endpoint("oauth", "emailexchange"),
                [("security_code", _require(security_code, "Security code"))],
            ),
            AccessTokenDecoder(),
            on_success,
            on_error,
        )

    def request_steam_authentication(
        self,
        ticket: bytes | str,
        on_success: Callable[[str], None] | None = None,
        on_error: ErrorCallback | None = None,
        ticket_size: int | None = None,
    ) -> TransportHandle | None:
        """Steam の認証チケット（生バイト列または base64 文字列）でトークンを取得する。"""
        return self._send(
            lambda: self.generate_authentication_request(
                self._endpoint("external", "steamauth"),
                [("appdata", _encode_ticket(ticket, ticket_size, "Steam"))],
            ),
            AccessTokenDecoder(),
            on_success,
            on_error,
        )

    def request_gog_authentication(
        self,
        ticket: bytes | str,
        on_success: Callable[[str], None] | None = None,
        on_error: ErrorCallback | None = None,
        ticket_size: int | None = None,
    ) -> TransportHandle | None:
        """GOG Galaxy の暗号化アプリチケットでトークンを取得する。"""
        return self._send(
            lambda: self.generate_authentication_request(
                self._endpoint("external", "galaxyauth"),
                [("appdata", _encode_ticket(ticket, ticket_size, "GOG Galaxy"))],
            ),
            AccessTokenDecoder(),
            on_success,
            on_error,
        )

    def request_itchio_authentication(
        self,
        jwt_token: str,
        on_success: Callable[[str], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_authentication_request(
                self._endpoint("external", "itchioauth"),
                [("itchio_token", _require(jwt_token, "itch.io JWT token"))],
            ),
            AccessTokenDecoder(),
            on_success,
            on_error,
        )

    def request_oculus_authentication(
        self,
        nonce: str,
        user_id: int,
        access_token: str,
        on_success: Callable[[str], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_authentication_request(
                self._endpoint("external", "oculusauth"),
                [
                    ("nonce", _require(nonce, "Oculus user nonce")),
                    ("user_id", str(user_id)),
                    ("access_token", _require(access_token, "Oculus user access token")),
                ],
            ),
            AccessTokenDecoder(),
            on_success,
            on_error,
        )

    def request_xboxlive_authentication(
        self,
        xbox_token: str,
        on_success: Callable[[str], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_authentication_request(
                self._endpoint("external", "xboxauth"),
                [("xbox_token", _require(xbox_token, "Xbox Live token"))],
            ),
            AccessTokenDecoder(),
            on_success,
            on_error,
        )

    # ---------[ GAMES ]---------

    def get_all_games(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._endpoint("games"), filter, pagination),
            PageDecoder(GameProfile),
            on_success,
            on_error,
        )

    def get_game(
        self,
        on_success: Callable[[GameProfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._game_endpoint()),
            ModelDecoder(GameProfile),
            on_success,
            on_error,
        )

    def edit_game(
        self,
        parameters: FormParameters,
        on_success: Callable[[GameProfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_put_request(self._game_endpoint(), parameters),
            ModelDecoder(GameProfile),
            on_success,
            on_error,
        )

    # ---------[ MODS ]---------

    def get_all_mods(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._game_endpoint("mods"), filter, pagination),
            PageDecoder(ModProfile),
            on_success,
            on_error,
        )

    def get_mod(
        self,
        mod_id: int,
        on_success: Callable[[ModProfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._game_endpoint("mods", mod_id)),
            ModelDecoder(ModProfile),
            on_success,
            on_error,
        )

    def add_mod(
        self,
        parameters: FormParameters,
        on_success: Callable[[ModProfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(self._game_endpoint("mods"), parameters),
            ModelDecoder(ModProfile),
            on_success,
            on_error,
        )

    def edit_mod(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: Callable[[ModProfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_put_request(self._game_endpoint("mods", mod_id), parameters),
            ModelDecoder(ModProfile),
            on_success,
            on_error,
        )

    def delete_mod(
        self,
        mod_id: int,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(self._game_endpoint("mods", mod_id)),
            None,
            _ignore_body(on_success),
            on_error,
        )

    # ---------[ MODFILES ]---------

    def get_all_modfiles(
        self,
        mod_id: int,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(
                self._game_endpoint("mods", mod_id, "files"), filter, pagination
            ),
            PageDecoder(Modfile),
            on_success,
            on_error,
        )

    def get_modfile(
        self,
        mod_id: int,
        modfile_id: int,
        on_success: Callable[[Modfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._game_endpoint("mods", mod_id, "files", modfile_id)),
            ModelDecoder(Modfile),
            on_success,
            on_error,
        )

    def add_modfile(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: Callable[[Modfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(
                self._game_endpoint("mods", mod_id, "files"), parameters
            ),
            ModelDecoder(Modfile),
            on_success,
            on_error,
        )

    def edit_modfile(
        self,
        mod_id: int,
        modfile_id: int,
        parameters: FormParameters,
        on_success: Callable[[Modfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_put_request(
                self._game_endpoint("mods", mod_id, "files", modfile_id), parameters
            ),
            ModelDecoder(Modfile),
            on_success,
            on_error,
        )

    # ---------[ MEDIA ]---------

    def add_game_media(
        self,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(self._game_endpoint("media"), parameters),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def add_mod_media(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(
                self._game_endpoint("mods", mod_id, "media"), parameters
            ),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def delete_mod_media(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(
                self._game_endpoint("mods", mod_id, "media"), parameters
            ),
            None,
            _ignore_body(on_success),
            on_error,
        )

    # ---------[ SUBSCRIPTIONS ]---------

    def subscribe_to_mod(
        self,
        mod_id: int,
        on_success: Callable[[ModProfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(self._game_endpoint("mods", mod_id, "subscribe")),
            ModelDecoder(ModProfile),
            on_success,
            on_error,
        )

    def unsubscribe_from_mod(
        self,
        mod_id: int,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(self._game_endpoint("mods", mod_id, "subscribe")),
            None,
            _ignore_body(on_success),
            on_error,
        )

    # ---------[ EVENTS ]---------

    def get_mod_events(
        self,
        mod_id: int,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(
                self._game_endpoint("mods", mod_id, "events"), filter, pagination
            ),
            PageDecoder(ModEvent),
            on_success,
            on_error,
        )

    def get_all_mod_events(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._game_endpoint("mods", "events"), filter, pagination),
            PageDecoder(ModEvent),
            on_success,
            on_error,
        )

    # ---------[ STATS ]---------

    def get_all_mod_stats(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._game_endpoint("mods", "stats"), filter, pagination),
            PageDecoder(ModStatistics),
            on_success,
            on_error,
        )

    def get_mod_stats(
        self,
        mod_id: int,
        on_success: Callable[[ModStatistics], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._game_endpoint("mods", mod_id, "stats")),
            ModelDecoder(ModStatistics),
            on_success,
            on_error,
        )

    # ---------[ TAGS ]---------

    def get_game_tag_options(
        self,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(self._game_endpoint("tags")),
            PageDecoder(ModTagCategory),
            on_success,
            on_error,
        )

    def add_game_tag_option(
        self,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(self._game_endpoint("tags"), parameters),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def delete_game_tag_option(
        self,
        parameters: FormParameters,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(self._game_endpoint("tags"), parameters),
            None,
            _ignore_body(on_success),
            on_error,
        )

    def get_mod_tags(
        self,
        mod_id: int,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(
                self._game_endpoint("mods", mod_id, "tags"), filter, pagination
            ),
            PageDecoder(ModTag),
            on_success,
            on_error,
        )

    def add_mod_tags(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(
                self._game_endpoint("mods", mod_id, "tags"), parameters
            ),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def delete_mod_tags(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(
                self._game_endpoint("mods", mod_id, "tags"), parameters
            ),
            None,
            _ignore_body(on_success),
            on_error,
        )

    # ---------[ RATINGS ]---------

    def add_mod_rating(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(
                self._game_endpoint("mods", mod_id, "ratings"), parameters
            ),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    # ---------[ METADATA KVP ]---------

    def get_all_mod_kvp_metadata(
        self,
        mod_id: int,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(
                self._game_endpoint("mods", mod_id, "metadatakvp"), None, pagination
            ),
            PageDecoder(MetadataKVP),
            on_success,
            on_error,
        )

    def add_mod_kvp_metadata(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(
                self._game_endpoint("mods", mod_id, "metadatakvp"), parameters
            ),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def delete_mod_kvp_metadata(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(
                self._game_endpoint("mods", mod_id, "metadatakvp"), parameters
            ),
            None,
            _ignore_body(on_success),
            on_error,
        )

    # ---------[ DEPENDENCIES ]---------

    def get_all_mod_dependencies(
        self,
        mod_id: int,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(
                self._game_endpoint("mods", mod_id, "dependencies"), filter, pagination
            ),
            PageDecoder(ModDependency),
            on_success,
            on_error,
        )

    def add_mod_dependencies(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(
                self._game_endpoint("mods", mod_id, "dependencies"), parameters
            ),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def delete_mod_dependencies(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(
                self._game_endpoint("mods", mod_id, "dependencies"), parameters
            ),
            None,
            _ignore_body(on_success),
            on_error,
        )

    # ---------[ TEAM ]---------

    def get_all_mod_team_members(
        self,
        mod_id: int,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(
                self._game_endpoint("mods", mod_id, "team"), filter, pagination
            ),
            PageDecoder(ModTeamMember),
            on_success,
            on_error,
        )

    def add_mod_team_member(
        self,
        mod_id: int,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(
                self._game_endpoint("mods", mod_id, "team"), parameters
            ),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def update_mod_team_member(
        self,
        mod_id: int,
        team_member_id: int,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_put_request(
                self._game_endpoint("mods", mod_id, "team", team_member_id), parameters
            ),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    def delete_mod_team_member(
        self,
        mod_id: int,
        team_member_id: int,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(
                self._game_endpoint("mods", mod_id, "team", team_member_id)
            ),
            None,
            _ignore_body(on_success),
            on_error,
        )

    # ---------[ COMMENTS ]---------

    def get_all_mod_comments(
        self,
        mod_id: int,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(
                self._game_endpoint("mods", mod_id, "comments"), filter, pagination
            ),
            PageDecoder(ModComment),
            on_success,
            on_error,
        )

    def get_mod_comment(
        self,
        mod_id: int,
        comment_id: int,
        on_success: Callable[[ModComment], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_query(
                self._game_endpoint("mods", mod_id, "comments", comment_id)
            ),
            ModelDecoder(ModComment),
            on_success,
            on_error,
        )

    def delete_mod_comment(
        self,
        mod_id: int,
        comment_id: int,
        on_success: NoArgCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_delete_request(
                self._game_endpoint("mods", mod_id, "comments", comment_id)
            ),
            None,
            _ignore_body(on_success),
            on_error,
        )

    # ---------[ GENERAL ]---------

    def get_resource_owner(
        self,
        resource_type: ResourceType,
        resource_id: int,
        on_success: Callable[[UserProfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        parameters = (
            FormParameters().add("resource_type", resource_type).add("resource_id", resource_id)
        )
        return self._send(
            lambda: self.generate_post_request(self._endpoint("general", "owner"), parameters),
            ModelDecoder(UserProfile),
            on_success,
            on_error,
        )

    def submit_report(
        self,
        parameters: FormParameters,
        on_success: Callable[[APIMessage], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_post_request(self._endpoint("report"), parameters),
            ModelDecoder(APIMessage),
            on_success,
            on_error,
        )

    # ---------[ ME ]---------

    def get_authenticated_user(
        self,
        on_success: Callable[[UserProfile], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_get_request(self._endpoint("me")),
            ModelDecoder(UserProfile),
            on_success,
            on_error,
        )

    def get_user_subscriptions(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_get_request(self._endpoint("me", "subscribed"), filter, pagination),
            PageDecoder(ModProfile),
            on_success,
            on_error,
        )

    def get_user_events(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_get_request(self._endpoint("me", "events"), filter, pagination),
            PageDecoder(UserEvent),
            on_success,
            on_error,
        )

    def get_user_games(
        self,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_get_request(self._endpoint("me", "games")),
            PageDecoder(GameProfile),
            on_success,
            on_error,
        )

    def get_user_mods(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_get_request(self._endpoint("me", "mods"), filter, pagination),
            PageDecoder(ModProfile),
            on_success,
            on_error,
        )

    def get_user_modfiles(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_get_request(self._endpoint("me", "files"), filter, pagination),
            PageDecoder(Modfile),
            on_success,
            on_error,
        )

    def get_user_ratings(
        self,
        filter: RequestFilter | None = None,
        pagination: PaginationParameters | None = None,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> TransportHandle | None:
        return self._send(
            lambda: self.generate_get_request(self._endpoint("me", "ratings"), filter, pagination),
            PageDecoder(ModRating),
            on_success,
            on_error,
        )


def _query_params(
    filter: RequestFilter | None, pagination: PaginationParameters | None
) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    if filter is not None:
        params.extend(filter.to_params())
    if pagination is not None:
        params.extend(pagination.to_params())
    return params


def _with_query(url: str, params: list[tuple[str, str]]) -> str:
    if not params:
        return url
    return f"{url}?{urlencode(params)}"


def _ignore_body(callback: NoArgCallback | None) -> SuccessCallback | None:
    if callback is None:
        return None
    return lambda _body: callback()


def _require(value: str, name: str) -> str:
    if not value:
        raise LocalValidationError(f"{name} is invalid. Ensure that it is not empty.")
    return value


def _encode_ticket(ticket: bytes | str, ticket_size: int | None, platform: str) -> str:
    """認証チケットを base64 文字列にする。文字列はエンコード済みとみなす。"""
    if isinstance(ticket, str):
        return _require(ticket, f"Encoded {platform} ticket")
    data = bytes(ticket if ticket_size is None else ticket[:ticket_size])
    if not data or len(data) > MAX_TICKET_BYTES:
        raise LocalValidationError(
            f"{platform} ticket is invalid. Ensure that the ticket is not empty"
            f" and is no larger than {MAX_TICKET_BYTES} bytes."
        )
    return base64.b64encode(data).decode("ascii")
