"""
CampusCare Backend — ORM Models
=================================

Importing this package registers every table on `Base.metadata`
(used by Alembic autogenerate and `Database.create_all`).
"""

from campuscare.models.user import Role, UserModel, user_roles
from campuscare.models.facility import FacilityModel, SlaPolicyModel
from campuscare.models.report import ReportModel
from campuscare.models.wellness import WellnessRecordModel
from campuscare.models.menu import MenuModel, MenuRatingModel
from campuscare.models.notification import NotificationModel

__all__ = [
    "Role",
    "UserModel",
    "user_roles",
    "FacilityModel",
    "SlaPolicyModel",
    "ReportModel",
    "WellnessRecordModel",
    "MenuModel",
    "MenuRatingModel",
    "NotificationModel",
]
