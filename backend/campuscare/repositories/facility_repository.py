"""CampusCare Backend — Facility & SLA policy repository (SQLAlchemy adapter)."""

from typing import List

from sqlalchemy import select

from campuscare.domain.entities import Facility, SlaPolicy
from campuscare.models.facility import FacilityModel, SlaPolicyModel
from campuscare.repositories.base import SqlAlchemyRepository
from campuscare.repositories.ports import FacilityRepository


def to_facility(row: FacilityModel) -> Facility:
    return Facility(id=row.id, name=row.name, location=row.location)


def to_sla_policy(row: SlaPolicyModel) -> SlaPolicy:
    return SlaPolicy(id=row.id, priority=row.priority, response_hours=row.response_hours)


class SqlAlchemyFacilityRepository(SqlAlchemyRepository, FacilityRepository):

    async def create(self, facility: Facility) -> Facility:
        row = FacilityModel(name=facility.name, location=facility.location)
        self.session.add(row)
        await self._flush(
            "facility",
            unique_field="name",
            duplicate_message=f"A facility named '{facility.name}' already exists",
        )
        return to_facility(row)

    async def list_facilities(self) -> List[Facility]:
        result = await self._execute(select(FacilityModel).order_by(FacilityModel.name), "facility")
        return [to_facility(row) for row in result.scalars().all()]

    async def list_sla_policies(self) -> List[SlaPolicy]:
        result = await self._execute(
            select(SlaPolicyModel).order_by(SlaPolicyModel.response_hours),
            "sla_policy",
        )
        return [to_sla_policy(row) for row in result.scalars().all()]
