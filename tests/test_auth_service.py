from datetime import timedelta

import pytest

from smsdesk.errors.exceptions import UnauthorizedException
from smsdesk.services.auth_service import (
    authenticate_user,
    change_password,
    create_session_token,
    decode_session_token,
    get_password_hash,
    get_user_by_username,
    revoke_sessions,
    verify_password,
)

PASSWORD = "secret123"


def test_password_hash_is_hex_key_dot_salt():
    stored = get_password_hash("hunter22")
    key, salt = stored.split(".")
    assert len(key) == 128
    assert len(salt) == 32
    int(key, 16)
    int(salt, 16)


def test_password_hash_uses_fresh_salt():
    assert get_password_hash("hunter22") != get_password_hash("hunter22")


def test_verify_password():
    stored = get_password_hash("hunter22")
    assert verify_password("hunter22", stored)
    assert not verify_password("hunter23", stored)


@pytest.mark.parametrize("stored", [None, "", "no-dot-here", "zz-not-hex.abcd"])
def test_verify_password_rejects_malformed_hash(stored):
    assert not verify_password("hunter22", stored)


def test_new_user_starts_with_five_credits(make_user):
    user = make_user()
    assert user.messages_remaining == 5
    assert user.messages_sent == 0
    assert user.is_active
    assert not user.is_admin


def test_username_lookup_ignores_case(db, make_user):
    user = make_user(username="Alice")
    assert get_user_by_username(db, "aLICE").id == user.id


def test_authenticate_user(db, make_user):
    user = make_user(username="carol")
    assert authenticate_user(db, "CAROL", PASSWORD).id == user.id
    assert user.last_activity is not None


def test_authenticate_user_wrong_password(db, make_user):
    make_user(username="carol")
    with pytest.raises(UnauthorizedException) as exc:
        authenticate_user(db, "carol", "wrong-password")
    assert exc.value.detail == "Invalid username or password"


def test_authenticate_unknown_user(db):
    with pytest.raises(UnauthorizedException) as exc:
        authenticate_user(db, "nobody", PASSWORD)
    assert exc.value.detail == "Invalid username or password"


def test_authenticate_disabled_user(db, make_user):
    make_user(username="carol", is_active=False)
    with pytest.raises(UnauthorizedException) as exc:
        authenticate_user(db, "carol", PASSWORD)
    assert exc.value.detail == "Account is disabled"


def test_session_token_round_trip(make_user):
    user = make_user()
    assert decode_session_token(create_session_token(user)) == (user.id, 0)


def test_expired_session_token_is_rejected(make_user):
    user = make_user()
    token = create_session_token(user, expires_delta=timedelta(minutes=-1))
    assert decode_session_token(token) is None


def test_garbage_session_token_is_rejected():
    assert decode_session_token("not-a-token") is None


def test_change_password(db, make_user):
    user = make_user()
    with pytest.raises(ValueError, match="Current password is incorrect"):
        change_password(db, user, "wrong-password", "newsecret")

    change_password(db, user, PASSWORD, "newsecret")
    assert verify_password("newsecret", user.password)
    assert user.session_version == 1


def test_revoke_sessions_bumps_token_version(db, make_user):
    user = make_user()
    old_token = create_session_token(user)
    revoke_sessions(db, user)
    assert user.session_version == 1
    assert decode_session_token(old_token) == (user.id, 0)
    assert decode_session_token(create_session_token(user)) == (user.id, 1)
