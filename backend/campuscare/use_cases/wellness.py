"""
CampusCare Backend — Wellness Use Cases
=========================================

Students log personal check-ins; wellness staff and admins read them and an
aggregate summary. Bounds (stress 0–5, sleep 0–24) are enforced by the
WellnessRecord entity before the repository is called.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from campuscare.domain.entities import WellnessRecord, WellnessSummary
from campuscare.repositories.ports import WellnessRepository


class CreateWellnessRecord:
    def __init__(self, wellness: WellnessRepository):
        self.wellness = wellness

    async def execute(
        self,
        user_id: UUID,
        stress_level: int,
        sleep_hours: float,
        diet_quality: str,
        comments: Optional[str] = None,
    ) -> WellnessRecord:
        record = WellnessRecord(
            user_id=user_id,
            stress_level=stress_level,
            sleep_hours=sleep_hours,
            diet_quality=diet_quality,
            comments=comments,
        )
        return await self.wellness.create(record)


class ListMyWellnessRecords:
    def __init__(self, wellness: WellnessRepository):
        self.wellness = wellness

    async def execute(self, user_id: UUID, limit: int = 50, offset: int = 0) -> List[WellnessRecord]:
        return await self.wellness.list_by_user(user_id, limit=limit, offset=offset)


class ListWellnessRecords:
    def __init__(self, wellness: WellnessRepository):
        self.wellness = wellness

    async def execute(
        self,
        user_id: Optional[UUID] = None,
        since: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[WellnessRecord]:
        return await self.wellness.list_records(
            user_id=user_id, since=since, limit=limit, offset=offset
        )


class GetWellnessSummary:
    def __init__(self, wellness: WellnessRepository):
        self.wellness = wellness

    async def execute(self, since: Optional[datetime] = None) -> WellnessSummary:
        return await self.wellness.summary(since=since)
