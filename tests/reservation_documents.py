from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from docrepo.models import BaseDocument

RESERVATIONS_COLLECTION = "reservations"


class ReservationDocument(BaseDocument):
    """Reservation shape used to exercise the generic repository."""

    timestamp: Optional[datetime] = None
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    user_id: str = Field(alias="userId")
    invoice_id: Optional[str] = Field(default=None, alias="invoiceId")
