from enums.apartment_status import ApartmentStatus
from enums.role_name import RoleName
from services import role_service
from routes import visit_request_routes


def test_visit_to_tenancy_flow(client, db, owner, prospect, apartment, headers_for):
    owner_headers = headers_for(owner)
    prospect_headers = headers_for(prospect)

    created = client.post(
        "/visit_requests/",
        json={"apartment_id": apartment.id, "requested_date": "2024-05-22", "requested_time": "11:00:00"},
        headers=prospect_headers,
    )
    assert created.status_code == 201
    visit_id = created.json()["data"]["id"]

    mine = client.get("/visit_requests/mine", headers=prospect_headers).json()["data"]
    assert [v["id"] for v in mine] == [visit_id]

    pending = client.get("/visit_requests/", params={"status": "pending"}, headers=owner_headers)
    assert [v["id"] for v in pending.json()["data"]] == [visit_id]

    approved = client.post(f"/visit_requests/{visit_id}/approve", headers=owner_headers)
    assert approved.json()["data"]["status"] == "approved"

    premature = client.post(f"/visit_requests/{visit_id}/convert", data={"contract_start": "2024-06-01"}, headers=owner_headers)
    assert premature.status_code == 400

    visited = client.post(f"/visit_requests/{visit_id}/visited", headers=owner_headers)
    assert visited.json()["data"]["status"] == "visited"

    defaults = client.get(f"/visit_requests/{visit_id}/conversion", headers=owner_headers).json()["data"]
    assert defaults["contract_start"] == "2024-05-20"
    assert defaults["contract_end"] == "2025-05-20"
    assert defaults["monthly_rent"] == apartment.base_rent

    converted = client.post(
        f"/visit_requests/{visit_id}/convert",
        data={"contract_start": "2024-06-01", "rent_plan_months": "6", "cnic": "35202-1111111-1"},
        files={"agreement": ("lease.pdf", b"%PDF-1.4", "application/pdf")},
        headers=owner_headers,
    )
    assert converted.status_code == 201
    tenant = converted.json()["data"]
    assert tenant["contract_end"] == "2024-12-01"
    assert tenant["is_active"] is True
    assert tenant["agreement_document_path"].startswith("/uploads/agreements/")

    db.expire_all()
    assert apartment.status == ApartmentStatus.RENTED
    assert role_service.has_role(prospect, RoleName.TENANT)

    dashboard = client.get("/tenants/me/dashboard", headers=prospect_headers)
    assert dashboard.status_code == 200
    assert dashboard.json()["data"]["tenant"]["id"] == tenant["id"]


def test_suggest_and_reject(client, owner, prospect, apartment, make_visit, headers_for):
    headers = headers_for(owner)
    visit = make_visit(prospect, apartment)

    suggested = client.post(
        f"/visit_requests/{visit.id}/suggest",
        json={"suggested_date": "2024-05-27", "suggested_time": "16:30:00"},
        headers=headers,
    )
    assert suggested.json()["data"]["status"] == "rescheduled"
    assert suggested.json()["data"]["suggested_time"] == "16:30:00"

    rejected = client.post(
        f"/visit_requests/{visit.id}/reject", json={"reason": "Unit under repair"}, headers=headers
    )
    assert rejected.json()["data"]["status"] == "rejected"
    assert rejected.json()["data"]["notes"] == "Unit under repair"

    again = client.post(f"/visit_requests/{visit.id}/approve", headers=headers)
    assert again.status_code == 400
    assert again.json()["message"] == "Cannot approve a visit request that is rejected."


def test_unknown_visit_is_not_found(client, owner, headers_for):
    response = client.post("/visit_requests/404/approve", headers=headers_for(owner))

    assert response.status_code == 404
    assert response.json()["message"] == "Visit request with ID 404 not found."


def test_tenant_management_routes(client, owner, tenant, apartment, headers_for):
    headers = headers_for(owner)

    listed = client.get("/tenants/", params={"status": "active"}, headers=headers).json()["data"]
    assert [t["tenant_code"] for t in listed] == [f"TEN-{tenant.id:04d}"]

    lookup = client.get(f"/tenants/by_apartment/{apartment.id}", headers=headers).json()["data"]
    assert lookup == {"tenant_id": tenant.id, "tenant_name": "Tara Tenant"}

    patched = client.patch(f"/tenants/{tenant.id}", json={"notes": "Pays early"}, headers=headers)
    assert patched.json()["data"]["notes"] == "Pays early"

    terminated = client.delete(f"/tenants/{tenant.id}", headers=headers)
    assert terminated.status_code == 200
    assert terminated.json()["data"]["contract_end"] == "2024-05-19"
    assert terminated.json()["data"]["is_active"] is False

    assert client.get("/tenants/", params={"status": "active"}, headers=headers).json()["data"] == []
    assert client.get(f"/tenants/by_apartment/{apartment.id}", headers=headers).status_code == 404


def test_conversion_form_reports_unexpected_errors(client, owner, prospect, apartment, make_visit, headers_for, monkeypatch):
    visit = make_visit(prospect, apartment)

    def broken_defaults(db, visit_id, owner, clock):
        raise RuntimeError("database went away")

    monkeypatch.setattr(visit_request_routes.visit_request_service, "conversion_defaults", broken_defaults)
    response = client.get(f"/visit_requests/{visit.id}/conversion", headers=headers_for(owner))

    assert response.status_code == 500
    assert response.json()["error"] == "internal_server_error"
    assert response.json()["message"] == "database went away"
