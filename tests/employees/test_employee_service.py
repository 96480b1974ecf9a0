from __future__ import annotations

import io

import pytest
from werkzeug.datastructures import FileStorage

from smartkyzmet.core.exceptions import NotFoundError, ValidationError
from smartkyzmet.employees.qr import QR_TOKEN_PREFIX, generate_unique_qr_token, new_qr_token, render_qr_png


def test_create_employee_assigns_unique_qr_code(container, db, department_ids):
    svc = container.employee_service

    first = svc.create_employee(name="Erlan", department_id=department_ids["IT"])
    second = svc.create_employee(name="Farida", department_id=str(department_ids["IT"]))

    codes = [e.qr_code for e in db.employees.values()]
    assert len(codes) == len(set(codes))
    assert db.employees[first].qr_code.startswith(QR_TOKEN_PREFIX)
    assert db.employees[second].department_id == department_ids["IT"]


def test_qr_token_generation_retries_on_collision():
    taken = {"EMP1", "EMP2"}
    tokens = iter(["EMP1", "EMP2", "EMP1", "EMP3"])

    token = generate_unique_qr_token(taken.__contains__, token_factory=lambda: next(tokens))

    assert token == "EMP3"


def test_new_qr_tokens_differ():
    assert new_qr_token() != new_qr_token()


@pytest.mark.parametrize("name,department", [("", "1"), ("  ", "1"), ("Erlan", ""), ("Erlan", "0")])
def test_create_employee_requires_name_and_department(container, name, department):
    with pytest.raises(ValidationError):
        container.employee_service.create_employee(name=name, department_id=department)


def test_create_employee_rejects_unknown_department(container):
    with pytest.raises(ValidationError):
        container.employee_service.create_employee(name="Erlan", department_id=999)


def test_update_employee_keeps_qr_code(container, db, employee_ids, department_ids):
    employee_id = employee_ids["Aigerim"]

    container.employee_service.update_employee(
        employee_id=employee_id, name="Aigerim K.", department_id=department_ids["Accounting"]
    )

    updated = container.employee_service.get_employee(employee_id)
    assert updated.name == "Aigerim K."
    assert updated.department_name == "Accounting"
    assert updated.qr_code == "EMPAIGERIM"


def test_get_missing_employee_raises_not_found(container):
    with pytest.raises(NotFoundError):
        container.employee_service.get_employee(999)


def test_list_employees_by_department(container, department_ids):
    names = [e.name for e in container.employee_service.list_employees(department_id=department_ids["IT"])]

    assert names == ["Aigerim", "Bolat"]


def test_photo_upload_is_stored_under_photos_dir(container, db, department_ids):
    photo = FileStorage(stream=io.BytesIO(b"\x89PNG fake"), filename="me.png", content_type="image/png")

    employee_id = container.employee_service.create_employee(
        name="Erlan", department_id=department_ids["IT"], photo_file=photo
    )

    stored = db.employees[employee_id].photo
    assert stored.startswith("photos/") and stored.endswith("me.png")
    assert (container.photos.upload_dir / stored).exists()


def test_photo_with_unsupported_type_is_ignored(container, db, department_ids):
    doc = FileStorage(stream=io.BytesIO(b"text"), filename="notes.txt", content_type="text/plain")

    employee_id = container.employee_service.create_employee(
        name="Erlan", department_id=department_ids["IT"], photo_file=doc
    )

    assert db.employees[employee_id].photo is None


def test_render_qr_png_returns_png_bytes():
    assert render_qr_png("EMPAIGERIM").startswith(b"\x89PNG")
