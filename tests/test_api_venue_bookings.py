def book(client, headers, start, end):
    return client.post(
        "/venue_bookings/",
        json={
            "venue_type": "garden_hall",
            "booking_date": "2024-06-01",
            "booking_time": start,
            "end_time": end,
            "purpose": "Birthday",
        },
        headers=headers,
    )


def test_garden_hall_scenario(client, owner, tenant, headers_for):
    tenant_headers = headers_for(tenant.user)
    owner_headers = headers_for(owner)

    first = book(client, tenant_headers, "14:00:00", "16:00:00")
    assert first.status_code == 201
    booking_id = first.json()["data"]["id"]

    pending = client.get("/venue_bookings/", params={"status": "pending"}, headers=owner_headers)
    assert [b["id"] for b in pending.json()["data"]] == [booking_id]

    approved = client.post(
        f"/venue_bookings/{booking_id}/approve",
        json={"cleaning_scheduled": True},
        headers=owner_headers,
    )
    assert approved.status_code == 200
    data = approved.json()["data"]
    assert data["booking"]["status"] == "approved"
    assert data["notice"] == (
        "NOTICE: The Garden Hall is unavailable on Jun 01 from 01:00 PM to "
        "05:00 PM due to a private event and cleaning."
    )

    clash = book(client, tenant_headers, "15:00:00", "17:00:00")
    assert clash.status_code == 409
    assert clash.json()["message"] == "This time slot is already booked."

    adjacent = book(client, tenant_headers, "16:00:00", "18:00:00")
    assert adjacent.status_code == 201

    mine = client.get("/venue_bookings/mine", headers=tenant_headers).json()["data"]
    assert len(mine) == 2


def test_reject_booking(client, owner, tenant, headers_for):
    booking_id = book(client, headers_for(tenant.user), "10:00:00", "12:00:00").json()["data"]["id"]

    rejected = client.post(
        f"/venue_bookings/{booking_id}/reject",
        json={"admin_notes": "Hall closed"},
        headers=headers_for(owner),
    )

    assert rejected.json()["data"]["status"] == "rejected"
    assert rejected.json()["data"]["admin_notes"] == "Hall closed"


def test_other_owner_cannot_approve(client, make_user, tenant, headers_for):
    stranger = make_user("Sam", "sam@example.com", "Owner")
    booking_id = book(client, headers_for(tenant.user), "10:00:00", "12:00:00").json()["data"]["id"]

    response = client.post(f"/venue_bookings/{booking_id}/approve", json={}, headers=headers_for(stranger))

    assert response.status_code == 403
