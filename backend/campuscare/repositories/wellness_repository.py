"""CampusCare Backend — Wellness record repository (SQLAlchemy adapter)."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select

from campuscare.domain.entities import WellnessRecord, WellnessSummary
from campuscare.models.wellness import WellnessRecordModel
from campuscare.repositories.base import SqlAlchemyRepository
from campuscare.repositories.ports import WellnessRepository


def to_entity(row: WellnessRecordModel) -> WellnessRecord:
    return WellnessRecord(
        id=row.id,
        user_id=row.user_id,
        stress_level=row.stress_level,
        sleep_hours=row.sleep_hours,
        diet_quality=row.diet_quality,
        comments=row.comments,
        created_at=row.created_at,
    )


class SqlAlchemyWellnessRepository(SqlAlchemyRepository, WellnessRepository):

    async def create(self, record: WellnessRecord) -> WellnessRecord:
        row = WellnessRecordModel(
            user_id=record.user_id,
            stress_level=record.stress_level,
            sleep_hours=record.sleep_hours,
            diet_quality=record.diet_quality,
            comments=record.comments,
        )
        self.session.add(row)
        await self._flush("wellness record")
        return to_entity(row)

    async def list_by_user(
        self, user_id: UUID, limit: int = 50, offset: int = 0
    ) -> List[WellnessRecord]:
        return await self.list_records(user_id=user_id, limit=limit, offset=offset)

    async def list_records(
        self,
        user_id: Optional[UUID] = None,
        since: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[WellnessRecord]:
        query = select(WellnessRecordModel)
        if user_id is not None:
            query = query.where(WellnessRecordModel.user_id == user_id)
        if since is not None:
            query = query.where(WellnessRecordModel.created_at >= since)
        query = query.order_by(WellnessRecordModel.created_at.desc()).limit(limit).offset(offset)

        result = await self._execute(query, "wellness record")
        return [to_entity(row) for row in result.scalars().all()]

    async def summary(self, since: Optional[datetime] = None) -> WellnessSummary:
        averages = select(
            func.count(WellnessRecordModel.id),
            func.avg(WellnessRecordModel.stress_level),
            func.avg(WellnessRecordModel.sleep_hours),
        )
        diet = select(
            WellnessRecordModel.diet_quality, func.count(WellnessRecordModel.id)
        ).group_by(WellnessRecordModel.diet_quality)
        if since is not None:
            averages = averages.where(WellnessRecordModel.created_at >= since)
            diet = diet.where(WellnessRecordModel.created_at >= since)

        count, avg_stress, avg_sleep = (await self._execute(averages, "wellness record")).one()
        diet_counts = {quality: n for quality, n in (await self._execute(diet, "wellness record")).all()}

        return WellnessSummary(
            record_count=count or 0,
            average_stress_level=round(float(avg_stress), 2) if avg_stress is not None else None,
            average_sleep_hours=round(float(avg_sleep), 2) if avg_sleep is not None else None,
            diet_quality_counts=diet_counts,
        )
