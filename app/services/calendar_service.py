from datetime import date, datetime
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from database.models import Apartment, Building, Payment, Tenant, User, VisitRequest
from enums.payment_status import PaymentStatus
from utils.clock import Clock, system_clock

UNPAID_COLOR = "#f97316"
SETTLED_COLOR = "#10b981"
VISIT_COLOR = "#3b82f6"


def resolve_window(
    start: Optional[date], end: Optional[date], clock: Clock = system_clock
) -> Tuple[date, date]:
    today = clock.today()
    return (
        start or today - relativedelta(months=1),
        end or today + relativedelta(months=3),
    )


def payment_event(payment: Payment, title: str) -> dict:
    return {
        "id": f"payment-{payment.id}",
        "title": title,
        "start": payment.due_date.isoformat(),
        "allDay": True,
        "color": UNPAID_COLOR if payment.status == PaymentStatus.UNPAID else SETTLED_COLOR,
    }


def visit_event(visit: VisitRequest, title: str) -> dict:
    return {
        "id": f"visit-{visit.id}",
        "title": title,
        "start": datetime.combine(visit.requested_date, visit.requested_time).isoformat(),
        "allDay": False,
        "color": VISIT_COLOR,
    }


def owner_events(
    db: Session, owner: User, start: Optional[date] = None, end: Optional[date] = None,
    clock: Clock = system_clock,
) -> List[dict]:
    window_start, window_end = resolve_window(start, end, clock)

    payments = (
        db.query(Payment)
        .join(Tenant, Payment.tenant_id == Tenant.id)
        .join(Apartment, Tenant.apartment_id == Apartment.id)
        .join(Building, Apartment.building_id == Building.id)
        .filter(
            Building.owner_id == owner.id,
            Payment.due_date >= window_start,
            Payment.due_date <= window_end,
        )
        .all()
    )
    visits = (
        db.query(VisitRequest)
        .join(Apartment, VisitRequest.apartment_id == Apartment.id)
        .join(Building, Apartment.building_id == Building.id)
        .filter(
            Building.owner_id == owner.id,
            VisitRequest.requested_date >= window_start,
            VisitRequest.requested_date <= window_end,
        )
        .all()
    )

    events = [
        payment_event(p, f"Due: Rs. {p.amount:,.0f} ({p.tenant.apartment.number})")
        for p in payments
    ]
    events += [
        visit_event(v, f"Visit: Unit {v.apartment.number} - {v.user.name if v.user else 'Unknown'}")
        for v in visits
    ]
    return events


def tenant_events(
    db: Session, user: User, tenant: Optional[Tenant], start: Optional[date] = None,
    end: Optional[date] = None, clock: Clock = system_clock,
) -> List[dict]:
    window_start, window_end = resolve_window(start, end, clock)
    events = []

    if tenant is not None:
        payments = (
            db.query(Payment)
            .filter(
                Payment.tenant_id == tenant.id,
                Payment.due_date >= window_start,
                Payment.due_date <= window_end,
            )
            .all()
        )
        events += [payment_event(p, f"Payment Due: Rs. {p.amount:,.0f}") for p in payments]

    visits = (
        db.query(VisitRequest)
        .filter(
            VisitRequest.user_id == user.id,
            VisitRequest.requested_date >= window_start,
            VisitRequest.requested_date <= window_end,
        )
        .all()
    )
    events += [visit_event(v, f"Visit: {v.requested_time:%H:%M}") for v in visits]
    return events
