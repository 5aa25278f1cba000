import os

from enums.apartment_status import ApartmentStatus
from utils.errors import StorageError

FORM = {
    "number": "A-12",
    "type": "two_bedroom",
    "floor": "3",
    "size": "1100",
    "base_rent": "85000",
    "description": "Corner unit",
}


def photo(name="front.jpg", content=b"\xff\xd8\xff", mime="image/jpeg"):
    return ("photos", (name, content, mime))


def test_building_crud(client, owner, headers_for):
    headers = headers_for(owner)

    created = client.post(
        "/buildings/",
        json={"name": "Cedar House", "address": "4 Mall Road", "city": "Lahore"},
        headers=headers,
    )
    assert created.status_code == 201
    building_id = created.json()["data"]["id"]

    listed = client.get("/buildings/", headers=headers).json()["data"]
    assert [b["name"] for b in listed] == ["Cedar House"]

    updated = client.patch(f"/buildings/{building_id}", json={"city": "Islamabad"}, headers=headers)
    assert updated.json()["data"]["city"] == "Islamabad"

    assert client.delete(f"/buildings/{building_id}", headers=headers).status_code == 200
    assert client.get(f"/buildings/{building_id}", headers=headers).status_code == 404


def test_create_apartment_with_photos(client, owner, building, headers_for, storage):
    response = client.post(
        "/apartments/",
        data={**FORM, "building_id": str(building.id)},
        files=[photo(), photo("back.png", b"\x89PNG", "image/png"), photo("raw.heic")],
        headers=headers_for(owner),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["apartment_code"] == f"APT-{data['id']:04d}"
    assert data["photos"] == [
        f"/uploads/apartments/{data['id']}/photo1.jpg",
        f"/uploads/apartments/{data['id']}/photo2.png",
    ]
    assert data["status"] == "available"


def test_create_apartment_rejects_non_images(client, owner, building, headers_for):
    response = client.post(
        "/apartments/",
        data={**FORM, "building_id": str(building.id)},
        files=[photo("notes.txt", b"hello", "text/plain")],
        headers=headers_for(owner),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Only image files are allowed."


def test_create_apartment_in_foreign_building(client, make_user, building, headers_for):
    stranger = make_user("Sam", "sam@example.com", "Owner")

    response = client.post(
        "/apartments/",
        data={**FORM, "building_id": str(building.id)},
        files=[photo()],
        headers=headers_for(stranger),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid building."


def test_public_listing_hides_rented(client, make_apartment):
    make_apartment(number="1")
    make_apartment(number="2", status=ApartmentStatus.RENTED)
    make_apartment(number="3", base_rent=30000)

    listed = client.get("/apartments/").json()["data"]
    assert sorted(a["number"] for a in listed) == ["1", "3"]

    cheap = client.get("/apartments/", params={"max_rent": 40000}).json()["data"]
    assert [a["number"] for a in cheap] == ["3"]

    assert client.get("/apartments/999").status_code == 404


def test_update_apartment_photos(client, owner, building, headers_for, storage, tmp_path):
    headers = headers_for(owner)
    created = client.post(
        "/apartments/",
        data={**FORM, "building_id": str(building.id)},
        files=[photo(), photo("back.jpg")],
        headers=headers,
    ).json()["data"]
    keep = created["photos"][0]

    response = client.patch(
        f"/apartments/{created['id']}",
        data={"base_rent": "90000", "photos_to_keep": [keep]},
        headers=headers,
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["base_rent"] == 90000
    assert data["photos"] == [keep]
    assert data["warnings"] == []
    assert not (tmp_path / "apartments" / str(created["id"]) / "photo2.jpg").exists()


def test_failed_photo_update_leaves_no_files(client, owner, building, headers_for, storage, tmp_path, monkeypatch):
    headers = headers_for(owner)
    created = client.post(
        "/apartments/",
        data={**FORM, "building_id": str(building.id)},
        files=[photo()],
        headers=headers,
    ).json()["data"]

    real_store = storage.store
    calls = []

    def store_once(content, filename, folder, name=None):
        calls.append(filename)
        if len(calls) > 1:
            raise StorageError(f"Could not save file {filename}")
        return real_store(content, filename, folder, name=name)

    monkeypatch.setattr(storage, "store", store_once)
    response = client.patch(
        f"/apartments/{created['id']}",
        data={"base_rent": "90000", "photos_to_keep": created["photos"]},
        files=[photo("a.jpg"), photo("b.jpg")],
        headers=headers,
    )

    assert response.status_code == 500
    assert sorted(os.listdir(tmp_path / "apartments" / str(created["id"]))) == ["photo1.jpg"]
    current = client.get(f"/apartments/{created['id']}").json()["data"]
    assert current["photos"] == created["photos"]
    assert current["base_rent"] == 85000


def test_occupied_apartment_cannot_be_deleted(client, owner, tenant, apartment, headers_for):
    response = client.delete(f"/apartments/{apartment.id}", headers=headers_for(owner))

    assert response.status_code == 409
    assert response.json()["message"] == (
        "Cannot delete an occupied apartment. Please remove the tenant first."
    )


def test_building_with_tenancies_cannot_be_deleted(client, owner, tenant, building, headers_for):
    response = client.delete(f"/buildings/{building.id}", headers=headers_for(owner))

    assert response.status_code == 409


def test_delete_reports_photo_cleanup_failure(client, owner, make_apartment, headers_for, storage, monkeypatch):
    vacant = make_apartment(number="9")

    def failing_delete_folder(folder):
        raise StorageError(f"Could not delete folder {folder}")

    monkeypatch.setattr(storage, "delete_folder", failing_delete_folder)
    response = client.delete(f"/apartments/{vacant.id}", headers=headers_for(owner))

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["warnings"] == [f"Could not delete folder apartments/{vacant.id}"]
    assert "could not be removed" in body["message"]
    assert client.get(f"/apartments/{vacant.id}").status_code == 404
