from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from smartkyzmet.core.enums import Role
from smartkyzmet.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from smartkyzmet.users.model import SessionUser
from smartkyzmet.users.service import INVALID_CREDENTIALS_MESSAGE


def admin_id(db) -> int:
    return next(u.user_id for u in db.users.values() if u.username == "admin")


def test_authenticate_returns_session_user(container):
    user = container.auth_service.authenticate(" admin ", "admin123")

    assert user.username == "admin"
    assert user.role == Role.ADMIN
    assert user.is_admin


@pytest.mark.parametrize("username,password", [("admin", "wrong"), ("ghost", "admin123"), ("", "")])
def test_authenticate_rejects_bad_credentials_with_one_message(container, username, password):
    with pytest.raises(AuthenticationError) as exc:
        container.auth_service.authenticate(username, password)

    assert str(exc.value) == INVALID_CREDENTIALS_MESSAGE


def test_placeholder_hash_never_authenticates(container, db):
    container.users_repo.create_user(username="legacy", password_hash="CHANGE_ME", role=Role.MANAGER)

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("legacy", "CHANGE_ME")


def test_session_user_round_trips_through_dict():
    user = SessionUser(user_id=3, username="aida", role=Role.MANAGER, employee_id=7)

    data = user.to_dict()

    assert data["role"] == "manager"
    assert SessionUser.from_dict(data) == user


def test_create_user_rejects_duplicate_username(container):
    with pytest.raises(ValidationError):
        container.user_service.create_user(username="admin", password="secret1")


def test_create_user_hashes_password(container, db):
    user_id = container.user_service.create_user(username="manager", password="secret1")

    stored = db.users[user_id]
    assert stored.role == Role.MANAGER
    assert stored.password_hash != "secret1"
    assert check_password_hash(stored.password_hash, "secret1")


def test_change_password(container, db):
    uid = admin_id(db)

    container.user_service.change_password(
        user_id=uid, current_password="admin123", new_password="newpass1", confirm_password="newpass1"
    )

    assert container.auth_service.authenticate("admin", "newpass1").user_id == uid


@pytest.mark.parametrize(
    "current,new,confirm",
    [
        ("wrong", "newpass1", "newpass1"),
        ("admin123", "short", "short"),
        ("admin123", "newpass1", "newpass2"),
    ],
)
def test_change_password_validation(container, db, current, new, confirm):
    with pytest.raises(ValidationError):
        container.user_service.change_password(
            user_id=admin_id(db), current_password=current, new_password=new, confirm_password=confirm
        )

    assert container.auth_service.authenticate("admin", "admin123")


def test_change_password_for_missing_user(container):
    with pytest.raises(NotFoundError):
        container.user_service.change_password(
            user_id=999, current_password="x", new_password="newpass1", confirm_password="newpass1"
        )
