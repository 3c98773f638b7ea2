"""
Form routes behind the panel capabilities: companies, users, resumes.

Each test signs in through the real login route and posts with the portal
session's CSRF token, as the rendered forms do.
"""
from __future__ import annotations

import httpx
import pytest
from httpx import ASGITransport

from portal.web import main


pytestmark = pytest.mark.anyio("asyncio")

PDF = b"%PDF-1.4\n% uploaded resume\n"

COMPANY = {
    "name": "Northwind Labs",
    "description": "Robotics research.",
    "location": "Austin, TX",
    "deadline": "2025-09-01",
    "positions": "Robotics Engineer",
    "requirements": "C++",
    "industry": "Robotics",
    "website": "https://northwind.example.com",
}


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=ASGITransport(app=main.app), base_url="https://test")


async def _signed_in(client: httpx.AsyncClient, email: str, password: str) -> str:
    resp = await client.post("/auth/login", data={"email": email, "password": password})
    assert resp.status_code == 303
    portal = main.SESSION_STORE.get(client.cookies.get(main.SESSION_COOKIE_NAME))
    assert portal is not None
    return portal.csrf_token


@pytest.mark.anyio
async def test_rendered_forms_embed_the_session_csrf_token():
    async with _client() as client:
        token = await _signed_in(client, "staff@example.com", "staff123")
        page = await client.get("/?tab=companies")

    assert f'name="csrf_token" value="{token}"' in page.text


@pytest.mark.anyio
async def test_post_without_csrf_token_is_forbidden():
    async with _client() as client:
        await _signed_in(client, "staff@example.com", "staff123")
        resp = await client.post("/companies", data=COMPANY)

    assert resp.status_code == 403
    assert main.SERVICES.companies.count() == 3


@pytest.mark.anyio
async def test_student_cannot_create_companies():
    async with _client() as client:
        token = await _signed_in(client, "student@example.com", "student123")
        resp = await client.post("/companies", data={**COMPANY, "csrf_token": token})

    assert resp.status_code == 403
    assert main.SERVICES.companies.count() == 3


@pytest.mark.anyio
async def test_staff_creates_company_and_sees_flash_once():
    async with _client() as client:
        token = await _signed_in(client, "staff@example.com", "staff123")
        resp = await client.post("/companies", data={**COMPANY, "csrf_token": token})
        first = await client.get(resp.headers["location"])
        second = await client.get(resp.headers["location"])

    assert resp.status_code == 303
    assert resp.headers["location"] == "/?tab=companies"
    assert "Company added successfully." in first.text
    assert "Northwind Labs" in first.text
    assert "Company added successfully." not in second.text
    assert main.SERVICES.companies.list()[0]["posted_by"] == "Staff User"


@pytest.mark.anyio
async def test_invalid_company_is_flashed_not_stored():
    async with _client() as client:
        token = await _signed_in(client, "admin@example.com", "admin123")
        resp = await client.post("/companies", data={**COMPANY, "website": "ftp://x", "csrf_token": token})
        page = await client.get(resp.headers["location"])

    assert "The website must start with http:// or https://." in page.text
    assert main.SERVICES.companies.count() == 3


@pytest.mark.anyio
async def test_companies_api_requires_read_capability():
    async with _client() as client:
        await _signed_in(client, "staff@example.com", "staff123")
        resp = await client.get("/api/companies")

    assert resp.status_code == 200
    assert {c["id"] for c in resp.json()} == {"c1", "c2", "c3"}
    assert resp.headers["Cache-Control"] == "private, no-store"


@pytest.mark.anyio
async def test_admin_manages_students_but_not_staff():
    student = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "role": "student",
        "registration_number": "CS2024099",
        "department": "Computer Science",
        "password": "secret1",
    }
    async with _client() as client:
        token = await _signed_in(client, "admin@example.com", "admin123")
        created = await client.post("/users", data={**student, "csrf_token": token})
        page = await client.get(created.headers["location"])
        staff = await client.post(
            "/users", data={**student, "email": "grace@example.com", "role": "staff", "csrf_token": token}
        )
        refused = await client.get(staff.headers["location"])
        delete_staff = await client.post("/users/2/delete", data={"csrf_token": token})

    assert created.headers["location"] == "/?tab=students"
    assert "User added successfully." in page.text
    assert "You are not allowed to manage users with this role." in refused.text
    assert delete_staff.status_code == 403
    assert main.SERVICES.profiles.get("2") is not None
    assert {p["email"] for p in main.SERVICES.profiles.list("student")} >= {"ada@example.com"}


@pytest.mark.anyio
async def test_super_admin_creates_staff_and_cannot_delete_self():
    async with _client() as client:
        token = await _signed_in(client, "superadmin@example.com", "superadmin123")
        await client.post(
            "/users",
            data={
                "name": "Grace Hopper",
                "email": "grace@example.com",
                "role": "staff",
                "department": "Placement Office",
                "password": "secret1",
                "return_tab": "staff",
                "csrf_token": token,
            },
        )
        own_id = main.SESSION_STORE.get(client.cookies.get(main.SESSION_COOKIE_NAME)).router.selection.subject_id
        self_delete = await client.post(f"/users/{own_id}/delete", data={"csrf_token": token, "return_tab": "admins"})
        page = await client.get(self_delete.headers["location"])

    assert "grace@example.com" in {p["email"] for p in main.SERVICES.profiles.list("staff")}
    assert "You cannot delete your own account." in page.text


@pytest.mark.anyio
async def test_resume_upload_review_and_apply():
    async with _client() as client:
        student_token = await _signed_in(client, "student@example.com", "student123")
        upload = await client.post(
            "/resume",
            data={"csrf_token": student_token},
            files={"resume": ("cv.pdf", PDF, "application/pdf")},
        )
        uploaded = await client.get(upload.headers["location"])

        staff_token = await _signed_in(client, "staff@example.com", "staff123")
        review = await client.post(
            "/resumes/3/review", data={"csrf_token": staff_token, "status": "approved", "notes": "Good"}
        )

        student_token = await _signed_in(client, "student@example.com", "student123")
        applied = await client.post("/companies/c1/apply", data={"csrf_token": student_token})
        page = await client.get(applied.headers["location"])

    assert upload.headers["location"] == "/?tab=resume"
    assert "Resume uploaded successfully." in uploaded.text
    assert review.status_code == 303
    assert main.SERVICES.resumes.status("3")["notes"] == "Good"
    assert "Application submitted." in page.text
    assert main.SERVICES.applications.applied_company_ids("3") == {"c1"}


@pytest.mark.anyio
async def test_resume_upload_rejects_non_pdf():
    async with _client() as client:
        token = await _signed_in(client, "student@example.com", "student123")
        resp = await client.post(
            "/resume",
            data={"csrf_token": token},
            files={"resume": ("notes.txt", b"plain text", "text/plain")},
        )
        page = await client.get(resp.headers["location"])

    assert "Please upload a PDF file." in page.text
    assert main.SERVICES.resumes.status("3")["url"] is None


@pytest.mark.anyio
async def test_student_cannot_review_resumes():
    async with _client() as client:
        token = await _signed_in(client, "student@example.com", "student123")
        resp = await client.post("/resumes/4/review", data={"csrf_token": token, "status": "approved"})

    assert resp.status_code == 403
