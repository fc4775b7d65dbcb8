"""
HTTP tests for the applications, files and admin cleanup routes
"""
from datetime import timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete, func, select

from core.clock import utc_now
from domain.value_objects import ApplicationStatus
from infrastructure.persistence.models import ChatModel
from infrastructure.security.jwt_service import JwtService
from main import app
from presentation.api.v1.container import get_file_store

from conftest import create_job, insert_application


@pytest_asyncio.fixture
async def client(database, file_store):
    app.dependency_overrides[get_file_store] = lambda: file_store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


def auth(actor) -> dict:
    return {"Authorization": f"Bearer {JwtService().create_access_token(actor.user_id)}"}


def apply_body(job_id, **overrides) -> dict:
    body = {
        "jobId": str(job_id),
        "fullName": "Dewi Lestari",
        "email": "Dewi@Example.com",
        "phone": "+62811111111",
        "coverLetter": "Keen to join",
        "experienceYears": 4,
        "skills": ["python"],
    }
    body.update(overrides)
    return body


async def submit(client, marketplace, **overrides) -> dict:
    response = await client.post(
        "/api/v1/applications", json=apply_body(marketplace.job_id, **overrides), headers=auth(marketplace.talent)
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestApplicationsApi:
    """Application routes"""

    @pytest.mark.asyncio
    async def test_upload_and_apply(self, client, marketplace):
        upload = await client.post(
            "/api/v1/files/upload",
            files={"cv": ("resume.pdf", b"%PDF-1.4 resume", "application/pdf")},
            headers=auth(marketplace.talent),
        )
        assert upload.status_code == 201
        uploaded = upload.json()["data"]
        assert uploaded["url"].startswith("/uploads/applications/resume-")
        assert uploaded["originalName"] == "resume.pdf"

        data = await submit(client, marketplace, resumeUrl=uploaded["url"])

        assert data["status"] == "pending"
        assert data["hasResume"] is True
        assert data["chatId"] is not None
        assert data["replacedApplicationId"] is None

    @pytest.mark.asyncio
    async def test_upload_rejects_bad_extension(self, client, marketplace):
        response = await client.post(
            "/api/v1/files/upload",
            files={"cv": ("run.sh", b"echo hi", "text/x-sh")},
            headers=auth(marketplace.talent),
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_duplicate_apply_conflicts(self, client, marketplace):
        await submit(client, marketplace)

        response = await client.post(
            "/api/v1/applications", json=apply_body(marketplace.job_id), headers=auth(marketplace.talent)
        )

        assert response.status_code == 409
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_requires_token(self, client, marketplace):
        response = await client.post("/api/v1/applications", json=apply_body(marketplace.job_id))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_company_cannot_apply(self, client, marketplace):
        response = await client.post(
            "/api/v1/applications", json=apply_body(marketplace.job_id), headers=auth(marketplace.company)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_malformed_body(self, client, marketplace):
        response = await client.post(
            "/api/v1/applications", json={"fullName": "No Job"}, headers=auth(marketplace.talent)
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_unknown_job(self, client, marketplace):
        response = await client.post(
            "/api/v1/applications", json=apply_body(uuid4()), headers=auth(marketplace.talent)
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_status_flow(self, client, marketplace):
        application_id = (await submit(client, marketplace))["id"]
        url = f"/api/v1/applications/{application_id}/status"

        invalid = await client.put(url, json={"status": "archived"}, headers=auth(marketplace.company))
        assert invalid.status_code == 400

        talent_hire = await client.put(url, json={"status": "hired"}, headers=auth(marketplace.talent))
        assert talent_hire.status_code == 403

        reviewed = await client.put(
            url, json={"status": "reviewed", "notes": "Strong profile"}, headers=auth(marketplace.company)
        )
        assert reviewed.status_code == 200
        data = reviewed.json()["data"]
        assert data["status"] == "reviewed"
        assert data["notes"] == "Strong profile"
        assert [entry["status"] for entry in data["statusHistory"]] == ["pending", "reviewed"]

        backwards = await client.put(url, json={"status": "pending"}, headers=auth(marketplace.company))
        assert backwards.status_code == 400

    @pytest.mark.asyncio
    async def test_listings(self, client, marketplace):
        await submit(client, marketplace)

        mine = await client.get("/api/v1/applications/me", headers=auth(marketplace.talent))
        assert mine.status_code == 200
        data = mine.json()["data"]
        assert len(data["applications"]) == 1
        assert data["applications"][0]["applicant"]["email"] == "dewi@example.com"
        assert data["statistics"]["total"] == 1

        received = await client.get(
            "/api/v1/applications/company",
            params={"status": "pending", "jobId": str(marketplace.job_id)},
            headers=auth(marketplace.company),
        )
        assert received.status_code == 200
        assert received.json()["data"]["applications"][0]["job"]["title"] == "Backend Engineer"

        hired = await client.get(
            "/api/v1/applications/company", params={"status": "hired"}, headers=auth(marketplace.company)
        )
        assert hired.json()["data"]["applications"] == []

    @pytest.mark.asyncio
    async def test_detail_and_cv_download(self, client, marketplace, file_store):
        cv = await file_store.save("cv.pdf", b"%PDF-1.4 body", "application/pdf")
        application_id = (await submit(client, marketplace, resumeUrl=cv.url))["id"]

        detail = await client.get(f"/api/v1/applications/{application_id}", headers=auth(marketplace.company))
        assert detail.status_code == 200
        assert detail.json()["data"]["talent"]["name"] == "Dewi Lestari"

        forbidden = await client.get(
            f"/api/v1/applications/{application_id}", headers=auth(marketplace.other_talent)
        )
        assert forbidden.status_code == 403

        download = await client.get(
            f"/api/v1/applications/{application_id}/cv", headers=auth(marketplace.company)
        )
        assert download.status_code == 200
        assert download.content == b"%PDF-1.4 body"

    @pytest.mark.asyncio
    async def test_chat_recreated_on_access(self, client, marketplace, session):
        data = await submit(client, marketplace)
        application_id = data["id"]

        existing = await client.get(f"/api/v1/applications/{application_id}/chat", headers=auth(marketplace.talent))
        assert existing.status_code == 200
        assert existing.json()["data"]["id"] == data["chatId"]

        await session.execute(delete(ChatModel))
        await session.commit()

        recreated = await client.get(
            f"/api/v1/applications/{application_id}/chat", headers=auth(marketplace.company)
        )
        assert recreated.status_code == 200
        chat = recreated.json()["data"]
        assert chat["applicationId"] == application_id
        assert chat["talentUnreadCount"] == 0
        assert await session.scalar(select(func.count()).select_from(ChatModel)) == 1

        forbidden = await client.get(
            f"/api/v1/applications/{application_id}/chat", headers=auth(marketplace.other_talent)
        )
        assert forbidden.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_semantics(self, client, marketplace):
        application_id = (await submit(client, marketplace))["id"]

        withdrawn = await client.delete(f"/api/v1/applications/{application_id}", headers=auth(marketplace.talent))
        assert withdrawn.status_code == 200
        assert withdrawn.json()["data"]["status"] == "cancelled"

        deleted = await client.delete(f"/api/v1/applications/{application_id}", headers=auth(marketplace.admin))
        assert deleted.status_code == 200

        gone = await client.get(f"/api/v1/applications/{application_id}", headers=auth(marketplace.admin))
        assert gone.status_code == 404


class TestAdminCleanupApi:
    """Admin cleanup routes"""

    @pytest_asyncio.fixture
    async def stale_application(self, session, marketplace):
        job = await create_job(session, marketplace.company.company_id)
        return await insert_application(
            session,
            marketplace.talent,
            job.id,
            marketplace.company.company_id,
            status=ApplicationStatus.PENDING,
            created_at=utc_now() - timedelta(days=3),
        )

    @pytest.mark.asyncio
    async def test_admin_only(self, client, marketplace):
        response = await client.get("/api/v1/admin/cleanup/status", headers=auth(marketplace.company))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_preview_then_run(self, client, marketplace, stale_application):
        preview = await client.get("/api/v1/admin/cleanup/preview", headers=auth(marketplace.admin))
        assert preview.status_code == 200
        candidates = preview.json()["data"]["candidates"]
        assert [c["id"] for c in candidates] == [str(stale_application.id)]
        assert candidates[0]["ageDays"] == 3

        run = await client.post("/api/v1/admin/cleanup/applications", headers=auth(marketplace.admin))
        assert run.status_code == 200
        assert run.json()["data"]["deletedApplications"] == 1

        again = await client.get("/api/v1/admin/cleanup/preview", headers=auth(marketplace.admin))
        assert again.json()["data"]["count"] == 0

    @pytest.mark.asyncio
    async def test_status(self, client, marketplace, stale_application):
        response = await client.get("/api/v1/admin/cleanup/status", headers=auth(marketplace.admin))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalApplications"] == 1
        assert data["countsByRule"]["stale"] == 1
        assert data["timezone"] == "Asia/Jakarta"
        assert data["schedulerStatus"]["running"] is False
        assert len(data["cleanupRules"]) == 2

    @pytest.mark.asyncio
    async def test_run_now(self, client, marketplace, stale_application):
        response = await client.post("/api/v1/admin/cleanup/run-now", headers=auth(marketplace.admin))

        assert response.status_code == 200
        assert response.json()["data"]["deletedApplications"] == 1


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["data"]["database"] is True
