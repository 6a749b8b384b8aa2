"""認証済みユーザーのセッション"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AuthenticationState(str, Enum):
    """保持している OAuth トークンの状態。"""

    NO_TOKEN = "no_token"
    VALID_TOKEN = "valid_token"
    REJECTED_TOKEN = "rejected_token"


@dataclass
class UserSession:
    """ユーザー認証付きリクエストに使う Bearer トークンを保持する。"""

    oauth_token: str = ""
    was_token_rejected: bool = False

    @property
    def authentication_state(self) -> AuthenticationState:
        if not self.oauth_token:
            return AuthenticationState.NO_TOKEN
        if self.was_token_rejected:
            return AuthenticationState.REJECTED_TOKEN
        return AuthenticationState.VALID_TOKEN

    def set_token(self, token: str) -> None:
        """新しいトークンを保存し、拒否フラグをクリアする。"""
        self.oauth_token = token
        self.was_token_rejected = False

    def clear(self) -> None:
        self.oauth_token = ""
        self.was_token_rejected = False
