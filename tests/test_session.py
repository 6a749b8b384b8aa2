"""UserSession のユニットテスト"""

from modio_client.session import AuthenticationState, UserSession


def test_no_token() -> None:
    """トークンがなければ NO_TOKEN であること。"""
    assert UserSession().authentication_state is AuthenticationState.NO_TOKEN


def test_rejected_token() -> None:
    """拒否されたトークンは REJECTED_TOKEN であること。"""
    session = UserSession(oauth_token="tok", was_token_rejected=True)
    assert session.authentication_state is AuthenticationState.REJECTED_TOKEN


def test_set_token_clears_rejection() -> None:
    """set_token で拒否フラグがクリアされること。"""
    session = UserSession(oauth_token="old", was_token_rejected=True)
    session.set_token("new")
    assert session.oauth_token == "new"
    assert session.authentication_state is AuthenticationState.VALID_TOKEN


def test_clear() -> None:
    """clear でトークンが破棄されること。"""
    session = UserSession(oauth_token="tok")
    session.clear()
    assert session.authentication_state is AuthenticationState.NO_TOKEN
