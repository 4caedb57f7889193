import pytest
from sqlalchemy import event

from smsdesk.services import ledger_service


def test_debit_charges_one_credit(db, make_user):
    user = make_user()
    ledger_service.debit(db, user)
    assert user.messages_remaining == 4
    assert user.messages_sent == 1


def test_debit_never_goes_negative(db, make_user):
    user = make_user(messages_remaining=0)
    ledger_service.debit(db, user)
    assert user.messages_remaining == 0
    assert user.messages_sent == 1


def test_add_credits_is_unbounded(db, make_user):
    user = make_user()
    ledger_service.add_credits(db, user, 10_000)
    assert user.messages_remaining == 10_005


def test_remove_credits_floors_at_zero(db, make_user):
    user = make_user()
    ledger_service.remove_credits(db, user, 50)
    assert user.messages_remaining == 0


@pytest.mark.parametrize("credits", [0, -3])
def test_credit_amount_must_be_positive(db, make_user, credits):
    user = make_user()
    with pytest.raises(ValueError):
        ledger_service.add_credits(db, user, credits)
    with pytest.raises(ValueError):
        ledger_service.remove_credits(db, user, credits)


def test_balance_stays_non_negative_over_mixed_operations(db, make_user):
    user = make_user()
    operations = [
        ("debit", None), ("remove", 3), ("debit", None), ("debit", None),
        ("add", 2), ("remove", 7), ("debit", None), ("add", 1), ("debit", None),
    ]
    for op, amount in operations:
        if op == "debit":
            ledger_service.debit(db, user)
        elif op == "add":
            ledger_service.add_credits(db, user, amount)
        else:
            ledger_service.remove_credits(db, user, amount)
        assert user.messages_remaining >= 0
    assert user.messages_remaining == 0


def test_bomber_debit_removes_repeat_but_counts_one_send(db, make_user):
    user = make_user(messages_remaining=10)
    ledger_service.debit_bomber(db, user, 4)
    assert user.messages_remaining == 6
    assert user.messages_sent == 1


def test_bomber_debit_commits_once(db, make_user):
    user = make_user(messages_remaining=10)
    commits = []

    def count_commit(session):
        commits.append(session)

    event.listen(db, "after_commit", count_commit)
    try:
        ledger_service.debit_bomber(db, user, 4)
    finally:
        event.remove(db, "after_commit", count_commit)
    assert len(commits) == 1
    db.refresh(user)
    assert (user.messages_remaining, user.messages_sent) == (6, 1)


def test_remove_credits_without_commit_leaves_the_change_pending(db, make_user):
    user = make_user()
    ledger_service.remove_credits(db, user, 2, commit=False)
    assert user.messages_remaining == 3
    db.rollback()
    assert user.messages_remaining == 5
