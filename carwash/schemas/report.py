from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List

from carwash.schemas.booking import BookingResponse

class ReportGroup(BaseModel):
    id: int
    name: str
    count: int
    revenue: int

class ReportSummary(BaseModel):
    total_revenue: int
    total_bookings: int
    average_booking_value: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class ReportResponse(BaseModel):
    summary: ReportSummary
    service_stats: List[ReportGroup]
    branch_stats: List[ReportGroup]
    bookings: List[BookingResponse] = []

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
