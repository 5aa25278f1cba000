from datetime import date

from database.models import Payment
from enums.payment_status import PaymentStatus
from enums.payment_type import PaymentType


def add_payment(db, tenant, due, status=PaymentStatus.UNPAID, amount=50000):
    payment = Payment(
        tenant_id=tenant.id,
        bill_date=due,
        due_date=due,
        month=due.replace(day=1),
        type=PaymentType.RENT,
        amount=amount,
        status=status,
    )
    db.add(payment)
    db.commit()
    return payment


def test_owner_calendar(client, db, owner, tenant, prospect, make_apartment, make_visit, headers_for):
    unpaid = add_payment(db, tenant, date(2024, 5, 30))
    paid = add_payment(db, tenant, date(2024, 4, 30), status=PaymentStatus.PAID)
    add_payment(db, tenant, date(2024, 12, 30))
    visit = make_visit(prospect, make_apartment(number="102"))

    events = client.get("/calendar/owner", headers=headers_for(owner)).json()["data"]
    by_id = {event["id"]: event for event in events}

    assert set(by_id) == {f"payment-{unpaid.id}", f"payment-{paid.id}", f"visit-{visit.id}"}
    assert by_id[f"payment-{unpaid.id}"] == {
        "id": f"payment-{unpaid.id}",
        "title": "Due: Rs. 50,000 (101)",
        "start": "2024-05-30",
        "allDay": True,
        "color": "#f97316",
    }
    assert by_id[f"payment-{paid.id}"]["color"] == "#10b981"
    assert by_id[f"visit-{visit.id}"]["color"] == "#3b82f6"
    assert by_id[f"visit-{visit.id}"]["start"] == "2024-05-23T11:00:00"
    assert by_id[f"visit-{visit.id}"]["allDay"] is False


def test_tenant_calendar_window(client, db, tenant, headers_for):
    add_payment(db, tenant, date(2024, 5, 30))
    add_payment(db, tenant, date(2024, 7, 15))

    headers = headers_for(tenant.user)
    everything = client.get("/calendar/tenant", headers=headers).json()["data"]
    june_on = client.get(
        "/calendar/tenant", params={"start": "2024-06-01", "end": "2024-08-01"}, headers=headers
    ).json()["data"]

    assert len(everything) == 2
    assert [event["start"] for event in june_on] == ["2024-07-15"]
    assert june_on[0]["title"] == "Payment Due: Rs. 50,000"
