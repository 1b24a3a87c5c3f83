"""Unit tests for access token handling."""

import pytest

from app.services.jwt_service import JWTService
from app.utils.exceptions import InvalidTokenError, TokenExpiredError


@pytest.fixture
def jwt_service():
    return JWTService()


def test_token_carries_user_and_role(jwt_service):
    token = jwt_service.create_access_token(user_id=42, role="CONTRIBUTOR")

    payload = jwt_service.decode_access_token(token)

    assert payload["sub"] == "42"
    assert payload["role"] == "CONTRIBUTOR"
    assert jwt_service.get_user_id_from_token(token) == 42


def test_expired_token_is_rejected(jwt_service):
    jwt_service.access_token_expire_minutes = -1
    token = jwt_service.create_access_token(user_id=1, role="BEGINNER")

    with pytest.raises(TokenExpiredError):
        jwt_service.get_user_id_from_token(token)


def test_non_access_token_is_rejected(jwt_service):
    token = jwt_service.create_access_token(
        user_id=1, role="BEGINNER", extra_claims={"type": "refresh"}
    )

    with pytest.raises(InvalidTokenError) as exc_info:
        jwt_service.get_user_id_from_token(token)

    assert exc_info.value.message == "Invalid token type"


def test_tampered_token_is_rejected(jwt_service):
    token = jwt_service.create_access_token(user_id=1, role="BEGINNER")

    with pytest.raises(InvalidTokenError):
        jwt_service.get_user_id_from_token(token.rsplit(".", 1)[0] + ".bad-signature")
