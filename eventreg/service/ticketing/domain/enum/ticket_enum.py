from enum import StrEnum


class TicketStatus(StrEnum):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    CANCELLED = 'CANCELLED'


class BookingStage(StrEnum):
    SELECTING = 'SELECTING'
    SUBMITTING = 'SUBMITTING'
    CONFIRMED = 'CONFIRMED'
    FAILED = 'FAILED'


class OpenOutcome(StrEnum):
    OPENED = 'OPENED'
    SOLD_OUT = 'SOLD_OUT'
    LOGIN_REQUIRED = 'LOGIN_REQUIRED'
