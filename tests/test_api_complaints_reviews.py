def test_complaint_flow(client, owner, tenant, headers_for):
    tenant_headers = headers_for(tenant.user)
    owner_headers = headers_for(owner)

    created = client.post(
        "/complaints/",
        data={"title": "Leaking tap", "description": "Kitchen tap drips all night"},
        files={"image": ("tap.jpg", b"\xff\xd8\xff", "image/jpeg")},
        headers=tenant_headers,
    )
    assert created.status_code == 201
    complaint = created.json()["data"]
    assert complaint["complaint_date"] == "2024-05-20"
    assert complaint["status"] == "pending"
    assert complaint["image_path"].startswith("/uploads/complaints/")

    edited = client.patch(
        f"/complaints/{complaint['id']}", data={"title": "Leaking kitchen tap"}, headers=tenant_headers
    )
    assert edited.json()["data"]["title"] == "Leaking kitchen tap"
    assert edited.json()["data"]["description"] == "Kitchen tap drips all night"

    listed = client.get("/complaints/", headers=owner_headers).json()["data"]
    assert [c["id"] for c in listed] == [complaint["id"]]

    resolved = client.patch(
        f"/complaints/{complaint['id']}/status",
        json={"status": "resolved", "admin_response": "Plumber replaced the washer"},
        headers=owner_headers,
    ).json()["data"]
    assert resolved["status"] == "resolved"
    assert resolved["resolved_at"] == "2024-05-20T10:00:00"

    assert client.delete(f"/complaints/{complaint['id']}", headers=tenant_headers).status_code == 200
    assert client.get("/complaints/mine", headers=tenant_headers).json()["data"] == []


def test_complaints_are_private(client, tenant, make_user, make_apartment, make_tenant, headers_for):
    neighbour = make_tenant(make_user("Nadia", "nadia@example.com"), make_apartment(number="102"))
    complaint_id = client.post(
        "/complaints/",
        data={"title": "Noise", "description": "Loud music"},
        headers=headers_for(neighbour.user),
    ).json()["data"]["id"]

    response = client.delete(f"/complaints/{complaint_id}", headers=headers_for(tenant.user))

    assert response.status_code == 404


def test_second_review_updates_the_first(client, tenant, headers_for):
    headers = headers_for(tenant.user)

    first = client.post(
        "/reviews/", json={"title": "Nice", "comment": "Quiet building", "rating": 4}, headers=headers
    ).json()["data"]
    second = client.post(
        "/reviews/", json={"title": "Great", "comment": "Even better now", "rating": 5}, headers=headers
    ).json()["data"]

    assert second["id"] == first["id"]
    public = client.get("/reviews/").json()["data"]
    assert len(public) == 1
    assert public[0]["rating"] == 5
    assert public[0]["reviewer_name"] == "Tara Tenant"
    assert public[0]["apartment"]["number"] == "101"


def test_review_rating_bounds(client, tenant, headers_for):
    response = client.post(
        "/reviews/", json={"title": "Bad", "comment": "x", "rating": 6}, headers=headers_for(tenant.user)
    )

    assert response.status_code == 422


def test_edit_and_delete_review(client, tenant, headers_for):
    headers = headers_for(tenant.user)
    review = client.post(
        "/reviews/", json={"title": "Ok", "comment": "Fine", "rating": 3}, headers=headers
    ).json()["data"]

    edited = client.patch(f"/reviews/{review['id']}", json={"rating": 2}, headers=headers)
    assert edited.json()["data"]["rating"] == 2
    assert edited.json()["data"]["title"] == "Ok"

    assert client.delete(f"/reviews/{review['id']}", headers=headers).status_code == 200
    assert client.get("/reviews/mine", headers=headers).json()["data"] == []
