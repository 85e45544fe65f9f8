from datetime import datetime, timezone

from parkease.domain.models import BookingStatus


def test_profile_read_and_update(client, signed_in):
    user, headers = signed_in()

    response = client.get("/api/user/profile", headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == "driver@example.com"

    response = client.put(
        "/api/user/profile",
        json={"first_name": "Danielle", "avatar": "https://cdn.example.com/d.png"},
        headers=headers,
    )
    assert response.status_code == 200
    profile = response.json()
    assert profile["first_name"] == "Danielle"
    assert profile["last_name"] == "Driver"
    assert profile["avatar"] == "https://cdn.example.com/d.png"

    response = client.put("/api/user/profile", json={"last_name": "  "}, headers=headers)
    assert response.status_code == 400


def test_profile_requires_session(client):
    assert client.get("/api/user/profile").status_code == 401


def test_change_password(client, signed_in):
    _, headers = signed_in()

    response = client.post(
        "/api/user/password",
        json={"current_password": "wrong-pass", "new_password": "another-pass"},
        headers=headers,
    )
    assert response.status_code == 400
    response = client.post(
        "/api/user/password",
        json={"current_password": "s3cret-pass", "new_password": "another-pass"},
        headers=headers,
    )
    assert response.status_code == 204
    response = client.post("/api/auth/login", json={"email": "driver@example.com", "password": "another-pass"})
    assert response.status_code == 200


def test_vehicle_lifecycle(client, signed_in):
    _, headers = signed_in()

    first = client.post(
        "/api/vehicles",
        json={"make": "Toyota", "model": "Corolla", "license_plate": "abc-123", "year": 2019},
        headers=headers,
    ).json()
    assert first["is_default"] is True
    assert first["license_plate"] == "ABC-123"

    second = client.post(
        "/api/vehicles",
        json={"make": "Honda", "model": "Civic", "license_plate": "XYZ-9"},
        headers=headers,
    ).json()
    assert second["is_default"] is False

    response = client.post(f"/api/vehicles/{second['id']}/default", headers=headers)
    assert response.json()["is_default"] is True
    vehicles = client.get("/api/vehicles", headers=headers).json()
    assert [v["id"] for v in vehicles] == [second["id"], first["id"]]
    assert [v["is_default"] for v in vehicles] == [True, False]

    response = client.put(f"/api/vehicles/{first['id']}", json={"color": "Blue"}, headers=headers)
    assert response.json()["color"] == "Blue"
    assert response.json()["make"] == "Toyota"

    for blank in ({"make": "  "}, {"model": ""}, {"license_plate": " "}):
        response = client.put(f"/api/vehicles/{first['id']}", json=blank, headers=headers)
        assert response.status_code == 400
    response = client.put(f"/api/vehicles/{first['id']}", json={"model": " Camry ", "license_plate": "new-1"}, headers=headers)
    assert response.json()["model"] == "Camry"
    assert response.json()["license_plate"] == "NEW-1"
    assert client.get(f"/api/vehicles/{first['id']}", headers=headers).json()["make"] == "Toyota"

    assert client.delete(f"/api/vehicles/{first['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/vehicles/{first['id']}", headers=headers).status_code == 404


def test_other_users_vehicle_looks_missing(client, signed_in):
    _, owner_headers = signed_in("owner@example.com")
    _, other_headers = signed_in("other@example.com")
    vehicle = client.post(
        "/api/vehicles",
        json={"make": "Ford", "model": "Focus", "license_plate": "F-1"},
        headers=owner_headers,
    ).json()

    foreign = client.get(f"/api/vehicles/{vehicle['id']}", headers=other_headers)
    missing = client.get("/api/vehicles/99999", headers=other_headers)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()

    assert client.put(f"/api/vehicles/{vehicle['id']}", json={"color": "Red"}, headers=other_headers).status_code == 404
    assert client.delete(f"/api/vehicles/{vehicle['id']}", headers=other_headers).status_code == 404
    assert client.post(f"/api/vehicles/{vehicle['id']}/default", headers=other_headers).status_code == 404
    assert client.get(f"/api/vehicles/{vehicle['id']}", headers=owner_headers).json()["color"] is None


def test_payment_methods(client, signed_in):
    _, headers = signed_in()
    card = {"brand": "Visa", "last4": "4242", "expiry_month": 12, "expiry_year": 2030}

    first = client.post("/api/payment-methods", json=card, headers=headers)
    assert first.status_code == 201
    assert first.json()["is_default"] is True
    assert first.json()["brand"] == "visa"

    duplicate = client.post("/api/payment-methods", json=card, headers=headers)
    assert duplicate.status_code == 400

    bad_month = client.post("/api/payment-methods", json={**card, "last4": "1111", "expiry_month": 13}, headers=headers)
    assert bad_month.status_code == 400

    second = client.post(
        "/api/payment-methods",
        json={**card, "last4": "0005", "set_as_default": True},
        headers=headers,
    ).json()
    methods = client.get("/api/payment-methods", headers=headers).json()
    assert methods[0]["id"] == second["id"]
    assert [m["is_default"] for m in methods] == [True, False]

    _, other_headers = signed_in("other@example.com")
    assert client.delete(f"/api/payment-methods/{second['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/payment-methods/{second['id']}", headers=headers).status_code == 204
    assert len(client.get("/api/payment-methods", headers=headers).json()) == 1


def test_bookings_are_scoped_and_cancellable(client, container, signed_in):
    user, headers = signed_in()
    _, other_headers = signed_in("other@example.com")
    persistence = container.persistence
    earlier = persistence.create_booking(
        user_id=user["id"],
        location_name="Airport Lot A",
        check_in=datetime(2025, 5, 1, 8, tzinfo=timezone.utc),
        check_out=datetime(2025, 5, 3, 8, tzinfo=timezone.utc),
        total_price=42.5,
        confirmation_code="PK-AAA111",
    )
    later = persistence.create_booking(
        user_id=user["id"],
        location_name="Downtown Garage",
        check_in=datetime(2025, 6, 1, 8, tzinfo=timezone.utc),
        check_out=datetime(2025, 6, 2, 8, tzinfo=timezone.utc),
        total_price=18.0,
        confirmation_code="PK-BBB222",
        vehicle_plate="ABC-123",
    )

    bookings = client.get("/api/bookings", headers=headers).json()
    assert [b["id"] for b in bookings] == [later.id, earlier.id]
    assert bookings[0]["status"] == "confirmed"

    assert client.get(f"/api/bookings/{earlier.id}", headers=other_headers).status_code == 404
    assert client.post(f"/api/bookings/{earlier.id}/cancel", headers=other_headers).status_code == 404

    response = client.post(f"/api/bookings/{earlier.id}/cancel", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"

    again = client.post(f"/api/bookings/{earlier.id}/cancel", headers=headers)
    assert again.status_code == 409


def test_completed_booking_cannot_be_cancelled(client, container, signed_in):
    user, headers = signed_in()
    done = container.persistence.create_booking(
        user_id=user["id"],
        location_name="Airport Lot A",
        check_in=datetime(2025, 1, 1, 8, tzinfo=timezone.utc),
        check_out=datetime(2025, 1, 2, 8, tzinfo=timezone.utc),
        total_price=20.0,
        confirmation_code="PK-DONE01",
        status=BookingStatus.COMPLETED,
    )
    assert done.is_cancellable() is False

    response = client.post(f"/api/bookings/{done.id}/cancel", headers=headers)

    assert response.status_code == 409
    assert "completed" in response.json()["detail"]
    assert client.get(f"/api/bookings/{done.id}", headers=headers).json()["status"] == "completed"
