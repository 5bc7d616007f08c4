# -*- coding: utf-8 -*-
import pytest

from extensions.jwt import TokenError, TokenSigner


class Clock:
    def __init__(self, now=1_700_000_000):
        self.now = now

    def __call__(self):
        return self.now


USER = {"id": 7, "email": "dev@example.com", "name": "Dev", "role": "developer"}


def test_issue_and_verify_round_trip():
    signer = TokenSigner("k", expires_seconds=3600, clock=Clock())
    payload = signer.verify(signer.issue(USER))
    assert payload["sub"] == 7
    assert payload["user"] == USER
    assert payload["exp"] - payload["iat"] == 3600
    assert payload["jti"]


def test_expired_token_is_rejected():
    clock = Clock()
    signer = TokenSigner("k", expires_seconds=3600, clock=clock)
    token = signer.issue(USER)
    clock.now += 3599
    signer.verify(token)
    clock.now += 1
    with pytest.raises(TokenError):
        signer.verify(token)


def test_token_signed_with_other_secret_is_rejected():
    token = TokenSigner("one", clock=Clock()).issue(USER)
    with pytest.raises(TokenError):
        TokenSigner("two", clock=Clock()).verify(token)


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c", "a.b.c.d"])
def test_malformed_tokens(token):
    with pytest.raises(TokenError):
        TokenSigner("k", clock=Clock()).verify(token)


def test_tampered_payload_is_rejected():
    signer = TokenSigner("k", clock=Clock())
    header, _payload, sig = signer.issue(USER).split(".")
    forged = TokenSigner("k", clock=Clock()).issue({**USER, "role": "admin"}).split(".")[1]
    with pytest.raises(TokenError):
        signer.verify(f"{header}.{forged}.{sig}")


def test_empty_secret_not_allowed():
    with pytest.raises(ValueError):
        TokenSigner("")
