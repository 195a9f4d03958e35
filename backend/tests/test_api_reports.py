"""
CampusCare Backend — Damage Report API Tests
==============================================

What:  Filing reports, the staff queue, the status lifecycle, the
       notifications it triggers and SLA/overdue statistics.
How:   Facility and priority ids are looked up from the seeded catalogue
       rather than assumed.
"""

from datetime import datetime, timedelta, timezone

import pytest

from campuscare.domain.entities import Report, ReportStatus
from campuscare.domain.roles import RoleName
from campuscare.repositories.facility_repository import SqlAlchemyFacilityRepository
from campuscare.repositories.report_repository import SqlAlchemyReportRepository


def _timestamp(value: str) -> datetime:
    # Python 3.10 fromisoformat does not accept a trailing "Z"
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _catalogue(client, headers):
    facilities = (await client.get("/api/facilities", headers=headers)).json()
    policies = (await client.get("/api/facilities/sla-policies", headers=headers)).json()
    return facilities[0]["id"], {p["priority"]: p["id"] for p in policies}


async def _file_report(client, headers, priority="high", description="Broken window in room 101"):
    facility_id, priorities = await _catalogue(client, headers)
    return await client.post(
        "/api/reports",
        json={
            "facilityId": facility_id,
            "priorityId": priorities[priority],
            "description": description,
        },
        headers=headers,
    )


class TestFileReport:
    @pytest.mark.asyncio
    async def test_student_files_pending_report_with_due_time(self, test_client, create_account):
        student = await create_account("student@campus.edu")

        response = await _file_report(test_client, student["headers"], priority="critical")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["userId"] == str(student["user"].id)
        created = _timestamp(data["createdAt"])
        due = _timestamp(data["dueAt"])
        assert due - created == timedelta(hours=4)

    @pytest.mark.asyncio
    async def test_maintenance_staff_notified(self, test_client, create_account):
        fixer = await create_account("fixer@campus.edu", RoleName.MAINTENANCE)
        student = await create_account("student@campus.edu")

        await _file_report(test_client, student["headers"])

        inbox = await test_client.get("/api/notifications", headers=fixer["headers"])
        assert [n["title"] for n in inbox.json()] == ["New damage report"]

    @pytest.mark.asyncio
    async def test_unknown_facility(self, test_client, create_account):
        student = await create_account("student@campus.edu")
        _, priorities = await _catalogue(test_client, student["headers"])

        response = await test_client.post(
            "/api/reports",
            json={"facilityId": 9999, "priorityId": priorities["low"], "description": "Leak"},
            headers=student["headers"],
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_blank_description(self, test_client, create_account):
        student = await create_account("student@campus.edu")
        response = await _file_report(test_client, student["headers"], description="   ")
        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["description"]

    @pytest.mark.asyncio
    async def test_cafeteria_staff_cannot_file(self, test_client, create_account):
        cook = await create_account("cook@campus.edu", RoleName.CAFETERIA)
        response = await _file_report(test_client, cook["headers"])
        assert response.status_code == 403


class TestReportAccess:
    @pytest.mark.asyncio
    async def test_mine_lists_only_own_reports(self, test_client, create_account):
        alice = await create_account("alice@campus.edu")
        bob = await create_account("bob@campus.edu", RoleName.TEACHER)
        await _file_report(test_client, alice["headers"])
        await _file_report(test_client, bob["headers"], description="Projector broken")

        mine = await test_client.get("/api/reports/mine", headers=bob["headers"])
        assert [r["description"] for r in mine.json()] == ["Projector broken"]

    @pytest.mark.asyncio
    async def test_other_student_cannot_read_report(self, test_client, create_account):
        alice = await create_account("alice@campus.edu")
        bob = await create_account("bob@campus.edu")
        report_id = (await _file_report(test_client, alice["headers"])).json()["id"]

        assert (await test_client.get(f"/api/reports/{report_id}", headers=alice["headers"])).status_code == 200
        assert (await test_client.get(f"/api/reports/{report_id}", headers=bob["headers"])).status_code == 403

    @pytest.mark.asyncio
    async def test_queue_is_staff_only(self, test_client, create_account):
        student = await create_account("student@campus.edu")
        response = await test_client.get("/api/reports", headers=student["headers"])
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_report(self, test_client, create_account):
        fixer = await create_account("fixer@campus.edu", RoleName.MAINTENANCE)
        response = await test_client.get(
            "/api/reports/00000000-0000-0000-0000-000000000000",
            headers=fixer["headers"],
        )
        assert response.status_code == 404


class TestStatusLifecycle:
    @pytest.mark.asyncio
    async def test_full_lifecycle_notifies_reporter(self, test_client, create_account):
        fixer = await create_account("fixer@campus.edu", RoleName.MAINTENANCE)
        student = await create_account("student@campus.edu")
        report_id = (await _file_report(test_client, student["headers"])).json()["id"]

        for status in ("in_progress", "resolved", "verified"):
            response = await test_client.patch(
                f"/api/reports/{report_id}/status",
                json={"status": status},
                headers=fixer["headers"],
            )
            assert response.status_code == 200
            assert response.json()["status"] == status

        inbox = await test_client.get("/api/notifications", headers=student["headers"])
        assert len(inbox.json()) == 3
        assert all(n["title"] == "Report status updated" for n in inbox.json())

    @pytest.mark.asyncio
    async def test_pending_report_can_be_resolved_directly(self, test_client, create_account):
        fixer = await create_account("fixer@campus.edu", RoleName.MAINTENANCE)
        student = await create_account("student@campus.edu")
        report_id = (await _file_report(test_client, student["headers"])).json()["id"]

        response = await test_client.patch(
            f"/api/reports/{report_id}/status",
            json={"status": "resolved"},
            headers=fixer["headers"],
        )

        assert response.status_code == 200
        assert response.json()["status"] == "resolved"

    @pytest.mark.asyncio
    async def test_illegal_move_rejected(self, test_client, create_account):
        fixer = await create_account("fixer@campus.edu", RoleName.MAINTENANCE)
        student = await create_account("student@campus.edu")
        report_id = (await _file_report(test_client, student["headers"])).json()["id"]
        await test_client.patch(
            f"/api/reports/{report_id}/status",
            json={"status": "resolved"},
            headers=fixer["headers"],
        )

        response = await test_client.patch(
            f"/api/reports/{report_id}/status",
            json={"status": "in_progress"},
            headers=fixer["headers"],
        )

        assert response.status_code == 400
        details = response.json()["details"]
        assert details["fields"] == ["status"]
        assert details["current"] == "resolved"
        assert details["allowed"] == ["verified"]

        current = await test_client.get(f"/api/reports/{report_id}", headers=student["headers"])
        assert current.json()["status"] == "resolved"

    @pytest.mark.asyncio
    async def test_reporter_cannot_change_status(self, test_client, create_account):
        student = await create_account("student@campus.edu")
        report_id = (await _file_report(test_client, student["headers"])).json()["id"]

        response = await test_client.patch(
            f"/api/reports/{report_id}/status",
            json={"status": "in_progress"},
            headers=student["headers"],
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_queue_filters_by_status(self, test_client, create_account):
        fixer = await create_account("fixer@campus.edu", RoleName.MAINTENANCE)
        student = await create_account("student@campus.edu")
        first = (await _file_report(test_client, student["headers"])).json()["id"]
        await _file_report(test_client, student["headers"], description="Door handle loose")

        await test_client.patch(
            f"/api/reports/{first}/status",
            json={"status": "escalated"},
            headers=fixer["headers"],
        )

        escalated = await test_client.get("/api/reports?status=escalated", headers=fixer["headers"])
        assert [r["id"] for r in escalated.json()] == [first]

        bad = await test_client.get("/api/reports?status=lost", headers=fixer["headers"])
        assert bad.status_code == 400


class TestStats:
    @pytest.mark.asyncio
    async def test_stats_count_per_status(self, test_client, create_account):
        admin = await create_account("admin@campus.edu", RoleName.ADMIN)
        student = await create_account("student@campus.edu")
        await _file_report(test_client, student["headers"])
        await _file_report(test_client, student["headers"], description="Flickering lights")

        response = await test_client.get("/api/reports/stats", headers=admin["headers"])

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["byStatus"]["pending"] == 2
        assert data["byStatus"]["verified"] == 0
        assert data["overdue"] == 0

    @pytest.mark.asyncio
    async def test_overdue_counts_open_reports_past_due(self, test_app, create_account):
        student = await create_account("student@campus.edu")

        async with test_app.state.database.session() as session:
            repo = SqlAlchemyReportRepository(session)
            policies = {
                p.priority: p.id for p in await SqlAlchemyFacilityRepository(session).list_sla_policies()
            }
            open_report = await repo.create(
                Report(facility_id=1, user_id=student["user"].id, priority_id=policies["critical"], description="Gas smell")
            )
            closed = await repo.create(
                Report(facility_id=1, user_id=student["user"].id, priority_id=policies["critical"], description="Loose tile")
            )
            await repo.update_status(closed.id, ReportStatus.RESOLVED)

            later = datetime.now(timezone.utc) + timedelta(hours=5)
            stats = await repo.stats(later)
            assert stats.total == 2
            assert stats.overdue == 1
            assert stats.by_status["resolved"] == 1

            assert (await repo.stats(datetime.now(timezone.utc))).overdue == 0
            assert open_report.status is ReportStatus.PENDING
