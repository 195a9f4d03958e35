"""CampusCare Backend — Notification schemas."""

import uuid
from datetime import datetime
from typing import Optional

from campuscare.schemas.common import CamelModel


class NotificationResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    body: str
    is_read: bool
    created_at: Optional[datetime] = None
