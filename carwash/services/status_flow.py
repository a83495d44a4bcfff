"""Booking status lifecycle.

pending -> confirmed -> (picked-up ->) in-progress -> completed, with
cancellation allowed from pending and confirmed. ``picked-up`` only exists
for pickup bookings and is mandatory for them; non-pickup bookings go
straight from confirmed to in-progress.
"""
from typing import List, Union

from carwash.models.booking import BookingStatus

TRANSITIONS = {
    BookingStatus.PENDING: (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    BookingStatus.CONFIRMED: (BookingStatus.PICKED_UP, BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED),
    BookingStatus.PICKED_UP: (BookingStatus.IN_PROGRESS,),
    BookingStatus.IN_PROGRESS: (BookingStatus.COMPLETED,),
    BookingStatus.COMPLETED: (),
    BookingStatus.CANCELLED: (),
}

TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})
DELETABLE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CANCELLED})

def allowed_next_statuses(current: Union[BookingStatus, str], is_pickup: bool) -> List[BookingStatus]:
    current = BookingStatus(current)
    options = []
    for candidate in TRANSITIONS[current]:
        if current == BookingStatus.CONFIRMED:
            if candidate == BookingStatus.PICKED_UP and not is_pickup:
                continue
            if candidate == BookingStatus.IN_PROGRESS and is_pickup:
                continue
        options.append(candidate)
    return options

def can_transition(current: Union[BookingStatus, str], target: Union[BookingStatus, str], is_pickup: bool) -> bool:
    return BookingStatus(target) in allowed_next_statuses(current, is_pickup)

def is_terminal(status: Union[BookingStatus, str]) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES

def can_delete(status: Union[BookingStatus, str]) -> bool:
    return BookingStatus(status) in DELETABLE_STATUSES
