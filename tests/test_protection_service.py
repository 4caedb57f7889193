import pytest

from smsdesk.services import protection_service

PHONE = "5557770000"


def test_protect_and_unprotect(db):
    assert not protection_service.is_protected(db, PHONE)

    row = protection_service.protect(db, PHONE)
    assert row.is_admin_protected
    assert protection_service.is_protected(db, PHONE)

    protection_service.unprotect(db, PHONE)
    assert not protection_service.is_protected(db, PHONE)


def test_protect_twice_fails(db, make_user):
    user = make_user()
    row = protection_service.protect(db, PHONE, user_id=user.id)
    assert not row.is_admin_protected
    with pytest.raises(protection_service.AlreadyProtectedError):
        protection_service.protect(db, PHONE)


def test_unprotect_unknown_number_fails(db):
    with pytest.raises(protection_service.NotProtectedError):
        protection_service.unprotect(db, PHONE)


def test_list_protected_newest_first(db):
    protection_service.protect(db, "5550000001")
    protection_service.protect(db, "5550000002")
    phones = [row.phone for row in protection_service.list_protected(db)]
    assert phones == ["5550000002", "5550000001"]
