# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP tests through the full application.

The app runs its real lifespan against a SQLite file; rows are inserted on
the application's event loop through the TestClient portal.
"""

from pathlib import Path
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from src.api.app import create_app
from src.core.config import clear_settings_cache, get_settings
from src.domains.auth.jwt import JWTManager
from src.domains.auth.password import PasswordHasher
from src.infrastructure.database.connection import get_session
from src.infrastructure.database.models import (
    Director,
    Institute,
    Role,
    Student,
    StudentSurvey,
    Teacher,
    TeacherSurvey,
    User,
)

PASSWORD = "s3cret-pass"

VALID_MATRIX = [[4, 3, 2, 1]] * 12


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """Application client on a fresh SQLite file."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("DATABASE_AUTO_CREATE_TABLES", "true")
    clear_settings_cache()

    with TestClient(create_app()) as test_client:
        yield test_client

    clear_settings_cache()


async def _insert_account(
    role: Role,
    email: str,
    institute_id: str | None,
    with_record: bool = True,
) -> dict[str, Any]:
    async with get_session() as session:
        user = User(
            first_name="Ana",
            last_name="Perez",
            email=email,
            password_hash=PasswordHasher(rounds=4).hash(PASSWORD),
            role=role.value,
            force_password_reset=False,
        )
        session.add(user)
        await session.flush()
        if with_record:
            if role == Role.STUDENT:
                session.add(Student(user_id=user.id, institute_id=institute_id, courses=[]))
            elif role == Role.TEACHER:
                session.add(Teacher(user_id=user.id, institute_id=institute_id, courses=[]))
            elif role == Role.DIRECTOR:
                session.add(Director(user_id=user.id, institute_id=institute_id))
        return {"id": user.id, "email": email, "role": role.value}


async def _count_surveys(user_id: str) -> tuple[int, int]:
    async with get_session() as session:
        students = await session.scalar(
            select(func.count()).select_from(StudentSurvey).where(StudentSurvey.user_id == user_id)
        )
        teachers = await session.scalar(
            select(func.count()).select_from(TeacherSurvey).where(TeacherSurvey.user_id == user_id)
        )
        return students, teachers


async def _insert_institute(name: str) -> str:
    async with get_session() as session:
        institute = Institute(name=name)
        session.add(institute)
        await session.flush()
        return institute.id


def account(
    client: TestClient,
    role: Role,
    email: str | None = None,
    institute_id: str | None = None,
    with_record: bool = True,
) -> dict[str, Any]:
    """Insert an account and return it with ready-made auth headers."""
    email = email or f"{role.value.lower()}@school.edu"
    created = client.portal.call(_insert_account, role, email, institute_id, with_record)
    token = JWTManager(get_settings().jwt).create_access_token(created["id"], role.value, email)
    created["headers"] = {"Authorization": f"Bearer {token}"}
    return created


class TestHealth:
    def test_liveness(self, client: TestClient) -> None:
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_health_reports_database(self, client: TestClient) -> None:
        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["environment"] == "test"
        assert body["components"]["database"]["status"] == "healthy"

    def test_readiness(self, client: TestClient) -> None:
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["ready"] is True


class TestAuth:
    def test_login_sets_cookie(self, client: TestClient) -> None:
        account(client, Role.TEACHER, email="teacher@school.edu")

        response = client.post(
            "/api/v1/auth", json={"email": "teacher@school.edu", "password": PASSWORD}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["tokenType"] == "bearer"
        assert body["requiresSurvey"] is True
        assert response.cookies.get("access_token") == body["accessToken"]

    def test_cookie_authenticates_follow_up_requests(self, client: TestClient) -> None:
        account(client, Role.STUDENT, email="student@school.edu")
        client.post("/api/v1/auth", json={"email": "student@school.edu", "password": PASSWORD})

        response = client.get("/api/v1/users/me")

        assert response.status_code == 200
        assert response.json()["email"] == "student@school.edu"

    @pytest.mark.parametrize(
        "email,password",
        [("teacher@school.edu", "wrong-pass1"), ("nobody@school.edu", PASSWORD)],
    )
    def test_invalid_credentials(self, client: TestClient, email: str, password: str) -> None:
        account(client, Role.TEACHER, email="teacher@school.edu")

        response = client.post("/api/v1/auth", json={"email": email, "password": password})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_password_recovery_never_reveals_accounts(self, client: TestClient) -> None:
        response = client.post("/api/v1/auth/passwordRecovery", json={"email": "ghost@school.edu"})

        assert response.status_code == 200

    def test_set_password_with_bad_token(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/auth/setPassword",
            params={"token": "garbage"},
            json={
                "email": "a@school.edu",
                "newPassword": "newpass123",
                "newPasswordConfirmation": "newpass123",
            },
        )

        assert response.status_code == 401

    def test_protected_route_without_token(self, client: TestClient) -> None:
        assert client.get("/api/v1/users/me").status_code == 401


class TestLearningTest:
    def test_student_gets_profile(self, client: TestClient) -> None:
        student = account(client, Role.STUDENT)

        response = client.post(
            "/api/v1/test", json={"answers": VALID_MATRIX}, headers=student["headers"]
        )

        assert response.status_code == 200
        assert response.json() == {"perfil": "DIVERGENT"}

        profile = client.get(
            f"/api/v1/students/{student['id']}/learning-profile", headers=student["headers"]
        )
        assert profile.json()["learningProfile"] == "DIVERGENT"

    def test_invalid_matrix_is_rejected(self, client: TestClient) -> None:
        student = account(client, Role.STUDENT)
        rows = [list(row) for row in VALID_MATRIX]
        rows[0] = [4, 4, 1, 1]

        response = client.post("/api/v1/test", json={"answers": rows}, headers=student["headers"])

        assert response.status_code == 422

    def test_teachers_cannot_submit(self, client: TestClient) -> None:
        teacher = account(client, Role.TEACHER)

        response = client.post(
            "/api/v1/test", json={"answers": VALID_MATRIX}, headers=teacher["headers"]
        )

        assert response.status_code == 403


class TestChangeRole:
    def test_admin_promotes_student(self, client: TestClient) -> None:
        admin = account(client, Role.ADMIN)
        student = account(client, Role.STUDENT)

        response = client.patch(
            f"/api/v1/users/{student['id']}/role",
            json={"newRole": "TEACHER"},
            headers=admin["headers"],
        )

        assert response.status_code == 200
        assert response.json()["role"] == "TEACHER"

    def test_disallowed_transition(self, client: TestClient) -> None:
        admin = account(client, Role.ADMIN)
        director = account(client, Role.DIRECTOR)

        response = client.patch(
            f"/api/v1/users/{director['id']}/role",
            json={"newRole": "TEACHER"},
            headers=admin["headers"],
        )

        assert response.status_code == 400

    def test_unknown_user(self, client: TestClient) -> None:
        admin = account(client, Role.ADMIN)

        response = client.patch(
            "/api/v1/users/missing/role", json={"newRole": "TEACHER"}, headers=admin["headers"]
        )

        assert response.status_code == 404

    def test_students_cannot_change_roles(self, client: TestClient) -> None:
        student = account(client, Role.STUDENT)

        response = client.patch(
            f"/api/v1/users/{student['id']}/role",
            json={"newRole": "TEACHER"},
            headers=student["headers"],
        )

        assert response.status_code == 403

    def test_director_limited_to_own_institute(self, client: TestClient) -> None:
        own = client.portal.call(_insert_institute, "Norte")
        other = client.portal.call(_insert_institute, "Sur")
        director = account(client, Role.DIRECTOR, institute_id=own)
        foreign_student = account(client, Role.STUDENT, institute_id=other)

        response = client.patch(
            f"/api/v1/users/{foreign_student['id']}/role",
            json={"newRole": "TEACHER"},
            headers=director["headers"],
        )

        assert response.status_code == 403

    def test_director_gets_not_found_for_unknown_user(self, client: TestClient) -> None:
        own = client.portal.call(_insert_institute, "Norte")
        director = account(client, Role.DIRECTOR, institute_id=own)

        response = client.patch(
            "/api/v1/users/does-not-exist/role",
            json={"newRole": "TEACHER"},
            headers=director["headers"],
        )

        assert response.status_code == 404

    def test_director_sees_missing_role_record(self, client: TestClient) -> None:
        own = client.portal.call(_insert_institute, "Norte")
        director = account(client, Role.DIRECTOR, institute_id=own)
        orphan = account(client, Role.STUDENT, with_record=False)

        response = client.patch(
            f"/api/v1/users/{orphan['id']}/role",
            json={"newRole": "TEACHER"},
            headers=director["headers"],
        )

        assert response.status_code == 409


class TestTokensAfterRoleChange:
    """Tokens issued before a role change act with the new role."""

    def _change_role(self, client: TestClient, user_id: str, new_role: str) -> None:
        admin = account(client, Role.ADMIN)
        response = client.patch(
            f"/api/v1/users/{user_id}/role", json={"newRole": new_role}, headers=admin["headers"]
        )
        assert response.status_code == 200

    def test_demoted_teacher_acts_as_student(self, client: TestClient) -> None:
        teacher = account(client, Role.TEACHER)
        self._change_role(client, teacher["id"], "STUDENT")

        course = client.post(
            "/api/v1/courses", json={"title": "Física"}, headers=teacher["headers"]
        )
        test = client.post(
            "/api/v1/test", json={"answers": VALID_MATRIX}, headers=teacher["headers"]
        )
        survey = client.post(
            "/api/v1/survey", json={"answers": [3, 3, 3, 3, 3]}, headers=teacher["headers"]
        )

        assert course.status_code == 403
        assert test.status_code == 200
        assert survey.status_code == 200
        assert client.portal.call(_count_surveys, teacher["id"]) == (1, 0)

    def test_promoted_student_acts_as_teacher(self, client: TestClient) -> None:
        student = account(client, Role.STUDENT)
        self._change_role(client, student["id"], "TEACHER")

        course = client.post(
            "/api/v1/courses", json={"title": "Física"}, headers=student["headers"]
        )
        test = client.post(
            "/api/v1/test", json={"answers": VALID_MATRIX}, headers=student["headers"]
        )

        assert course.status_code == 201
        assert test.status_code == 403

    def test_token_of_deleted_account_is_rejected(self, client: TestClient) -> None:
        token = JWTManager(get_settings().jwt).create_access_token(
            "gone-user", Role.ADMIN.value, "gone@school.edu"
        )

        response = client.get(
            "/api/v1/institutes", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401


class TestInstitutes:
    def test_create_and_duplicate(self, client: TestClient) -> None:
        admin = account(client, Role.ADMIN)

        first = client.post(
            "/api/v1/institutes", json={"name": "Colegio Nacional"}, headers=admin["headers"]
        )
        again = client.post(
            "/api/v1/institutes", json={"name": "Colegio Nacional"}, headers=admin["headers"]
        )

        assert first.status_code == 201
        assert again.status_code == 409

    def test_only_admins_create(self, client: TestClient) -> None:
        teacher = account(client, Role.TEACHER)

        response = client.post(
            "/api/v1/institutes", json={"name": "Otro"}, headers=teacher["headers"]
        )

        assert response.status_code == 403


class TestSurvey:
    def test_student_submits(self, client: TestClient) -> None:
        student = account(client, Role.STUDENT)

        response = client.post(
            "/api/v1/survey",
            json={"answers": [5, 4, 3, 2, 1], "free": "Muy bueno"},
            headers=student["headers"],
        )

        assert response.status_code == 200
        assert response.json()["answers"] == [5, 4, 3, 2, 1]

    def test_directors_do_not_answer(self, client: TestClient) -> None:
        director = account(client, Role.DIRECTOR)

        response = client.post(
            "/api/v1/survey", json={"answers": [5, 4, 3, 2, 1]}, headers=director["headers"]
        )

        assert response.status_code == 403

    def test_results_shape(self, client: TestClient) -> None:
        director = account(client, Role.DIRECTOR)

        response = client.get("/api/v1/survey/teacher-results", headers=director["headers"])

        assert response.status_code == 200
        assert response.json()["percentages"]["question1"] == [0.0] * 5
