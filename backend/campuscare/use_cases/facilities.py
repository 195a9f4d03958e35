"""CampusCare Backend — Facility and SLA policy use cases."""

from typing import List, Optional

from campuscare.domain.entities import Facility, SlaPolicy
from campuscare.repositories.ports import FacilityRepository


class ListFacilities:
    def __init__(self, facilities: FacilityRepository):
        self.facilities = facilities

    async def execute(self) -> List[Facility]:
        return await self.facilities.list_facilities()


class CreateFacility:
    def __init__(self, facilities: FacilityRepository):
        self.facilities = facilities

    async def execute(self, name: str, location: Optional[str] = None) -> Facility:
        return await self.facilities.create(Facility(name=name, location=location))


class ListSlaPolicies:
    def __init__(self, facilities: FacilityRepository):
        self.facilities = facilities

    async def execute(self) -> List[SlaPolicy]:
        return await self.facilities.list_sla_policies()
