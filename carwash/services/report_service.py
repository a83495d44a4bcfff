import logging
import math
from datetime import date
from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from carwash.models.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)

def _add_to_group(groups: Dict[int, dict], key: int, name: str, revenue: int):
    group = groups.get(key)
    if group is None:
        group = {"id": key, "name": name, "count": 0, "revenue": 0}
        groups[key] = group
    group["count"] += 1
    group["revenue"] += revenue

def aggregate_report(bookings: Iterable[Booking]) -> dict:
    """Summarize bookings by service and by branch in a single pass.

    Groups keep the order in which they were first seen. The average is
    rounded half up to the nearest rupiah and is 0 for an empty input.
    """
    service_stats: Dict[int, dict] = {}
    branch_stats: Dict[int, dict] = {}
    total_revenue = 0
    total_bookings = 0

    for booking in bookings:
        revenue = booking.total_price or 0
        total_revenue += revenue
        total_bookings += 1

        service_name = booking.service.name if booking.service else f"Service #{booking.service_id}"
        branch_name = booking.branch.name if booking.branch else f"Branch #{booking.branch_id}"
        _add_to_group(service_stats, booking.service_id, service_name, revenue)
        _add_to_group(branch_stats, booking.branch_id, branch_name, revenue)

    average = math.floor(total_revenue / total_bookings + 0.5) if total_bookings else 0
    return {
        "summary": {
            "total_revenue": total_revenue,
            "total_bookings": total_bookings,
            "average_booking_value": average,
        },
        "service_stats": list(service_stats.values()),
        "branch_stats": list(branch_stats.values()),
    }

class ReportService:
    @staticmethod
    def completed_bookings(
        db: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        branch_id: Optional[int] = None,
    ):
        query = db.query(Booking).options(
            joinedload(Booking.service),
            joinedload(Booking.branch)
        ).filter(Booking.status == BookingStatus.COMPLETED)

        if start_date:
            query = query.filter(Booking.booking_date >= start_date)
        if end_date:
            query = query.filter(Booking.booking_date <= end_date)
        if branch_id:
            query = query.filter(Booking.branch_id == branch_id)

        return query.order_by(Booking.booking_date.asc(), Booking.id.asc()).all()

    @staticmethod
    def build_report(
        db: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        branch_id: Optional[int] = None,
    ) -> dict:
        bookings = ReportService.completed_bookings(db, start_date, end_date, branch_id)
        report = aggregate_report(bookings)
        report["bookings"] = bookings
        logger.info(
            f"Report {start_date or '*'}..{end_date or '*'} branch={branch_id or 'all'}: "
            f"{report['summary']['total_bookings']} bookings"
        )
        return report

    @staticmethod
    def dashboard_stats(db: Session, branch_id: Optional[int] = None) -> dict:
        """Headline numbers for the admin dashboard"""
        query = db.query(Booking.status, func.count(Booking.id))
        if branch_id:
            query = query.filter(Booking.branch_id == branch_id)
        counts = {row[0]: row[1] for row in query.group_by(Booking.status).all()}

        completed = ReportService.completed_bookings(db, branch_id=branch_id)
        summary = aggregate_report(completed)["summary"]

        return {
            "total_bookings": sum(counts.values()),
            "total_revenue": summary["total_revenue"],
            "completed_bookings": summary["total_bookings"],
            "status_counts": {s.value: counts.get(s, 0) for s in BookingStatus},
        }
