from pydantic import BaseModel
from datetime import datetime
from typing import List


class TopEntry(BaseModel):
    id: int
    name: str
    count: int


class TopLists(BaseModel):
    technicians: List[TopEntry]
    units: List[TopEntry]
    companies: List[TopEntry]
    bays: List[TopEntry]


class DashboardSummary(BaseModel):
    open_bookings: int
    today_bookings: int
    bays: int
    timestamp: datetime
    top: TopLists
