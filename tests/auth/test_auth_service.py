from __future__ import annotations

import base64

import pytest

from club_points.auth.service import AuthService, StaticCredentialsProvider, parse_credentials
from club_points.core.exceptions import UnauthorizedError


def test_check_credentials(auth_service):
    assert auth_service.check_credentials("admin", "password")
    assert not auth_service.check_credentials("admin", "wrong")
    assert not auth_service.check_credentials("ghost", "password")
    assert not auth_service.check_credentials("", "")


def test_issued_token_is_accepted_in_header(auth_service):
    token = auth_service.issue_token("admin", "password")

    assert auth_service.verify_token(token) == "admin"
    assert auth_service.authorize_header(f"Bearer {token}") == "admin"


def test_issue_token_with_bad_credentials(auth_service):
    with pytest.raises(UnauthorizedError):
        auth_service.issue_token("admin", "nope")


def test_any_token_decoding_to_valid_pair_is_accepted(auth_service):
    forged = base64.b64encode(b"admin:password").decode("ascii")

    assert auth_service.verify_token(forged) == "admin"


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer !!!", "Bearer " + base64.b64encode(b"admin:x").decode()])
def test_authorize_header_rejects(auth_service, header):
    with pytest.raises(UnauthorizedError):
        auth_service.authorize_header(header)


def test_parse_credentials_ignores_malformed_items():
    assert parse_credentials(" admin:pw , broken, :x, GI11120:CSS12340 ") == [("admin", "pw"), ("GI11120", "CSS12340")]
    assert parse_credentials("") == []


def test_secret_may_contain_colon():
    service = AuthService(StaticCredentialsProvider.from_pairs(parse_credentials("boss:a:b")))

    assert service.verify_token(service.issue_token("boss", "a:b")) == "boss"


def test_authorize_header_requires_bearer_scheme(auth_service):
    token = auth_service.issue_token("admin", "password")

    with pytest.raises(UnauthorizedError):
        auth_service.authorize_header(token)
    with pytest.raises(UnauthorizedError):
        auth_service.authorize_header(f"Basic {token}")
    assert auth_service.authorize_header(f"bearer {token}") == "admin"
