"""API-key protected write endpoints under /api/admin."""

import pytest

from conftest import activity_data, destination_data


@pytest.mark.parametrize("headers", [{}, {"X-API-Key": "wrong"}])
def test_writes_require_api_key(client, headers):
    response = client.post("/api/admin/destinations", json=destination_data(), headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid or missing API key"}
    assert client.get("/api/destinations").json() == []


class TestDestinationAdmin:

    def test_create_update_delete(self, client, admin_headers):
        created = client.post("/api/admin/destinations", json=destination_data(), headers=admin_headers)
        assert created.status_code == 201
        destination = created.json()
        assert destination["slug"] == "pokhara"
        assert destination["featured"] is True

        updated = client.put(
            f"/api/admin/destinations/{destination['id']}",
            json={"rating": 4.1, "featured": False},
            headers=admin_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["rating"] == 4.1
        assert updated.json()["featured"] is False
        assert updated.json()["name"] == "Pokhara"

        deleted = client.delete(f"/api/admin/destinations/{destination['id']}", headers=admin_headers)
        assert deleted.json() == {"message": "Destination deleted successfully"}
        assert client.get("/api/destinations/pokhara").status_code == 404

    def test_duplicate_slug_is_400(self, client, admin_headers):
        client.post("/api/admin/destinations", json=destination_data(), headers=admin_headers)
        response = client.post("/api/admin/destinations", json=destination_data(), headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "A destination with this slug already exists"}

    def test_unknown_ids_404(self, client, admin_headers):
        assert client.put("/api/admin/destinations/999", json={"rating": 1}, headers=admin_headers).status_code == 404
        assert client.delete("/api/admin/destinations/999", headers=admin_headers).status_code == 404

    def test_invalid_payload_is_400(self, client, admin_headers):
        payload = destination_data(rating=9)
        response = client.post("/api/admin/destinations", json=payload, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid rating")


class TestTourAdmin:

    def test_create_with_children(self, client, admin_headers, seeded):
        payload = {
            "title": "Sarangkot Sunrise",
            "slug": "sarangkot-sunrise",
            "category": "Sightseeing",
            "description": "Early drive to the viewpoint",
            "image": "sarangkot.jpg",
            "price": 35,
            "duration": "4 hours",
            "difficulty": "Easy",
            "rating": 4.7,
            "location": "Pokhara, Nepal",
            "destination_id": seeded["destination_id"],
            "highlights": ["Machhapuchhre at dawn"],
            "inclusions": ["Transport"],
            "activity_ids": [seeded["activity_id"]],
        }
        response = client.post("/api/admin/tours", json=payload, headers=admin_headers)
        assert response.status_code == 201

        tour = response.json()
        assert tour["destination_name"] == "Pokhara"
        assert tour["highlights"] == ["Machhapuchhre at dawn"]
        assert [a["slug"] for a in tour["activities"]] == ["paragliding"]
        assert tour["featured"] is False
        assert tour["reviews"] == 0

    def test_unknown_activity_is_rejected_whole(self, client, admin_headers, seeded):
        payload = {
            "title": "Ghost Tour",
            "slug": "ghost-tour",
            "category": "Cultural",
            "description": "-",
            "image": "g.jpg",
            "price": 10,
            "duration": "1 day",
            "difficulty": "Easy",
            "rating": 4.0,
            "location": "Nepal",
            "activity_ids": [9999],
        }
        response = client.post("/api/admin/tours", json=payload, headers=admin_headers)
        assert response.status_code == 400
        assert client.get("/api/tours/slug/ghost-tour").status_code == 404

    def test_update_replaces_highlights(self, client, admin_headers, seeded):
        response = client.put(
            f"/api/admin/tours/{seeded['tour_id']}",
            json={"highlights": ["Begnas Lake"], "price": 150},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["highlights"] == ["Begnas Lake"]
        assert response.json()["inclusions"] == ["Hotel pickup"]
        assert response.json()["price"] == 150

    def test_delete(self, client, admin_headers, seeded):
        response = client.delete(f"/api/admin/tours/{seeded['tour_id']}", headers=admin_headers)
        assert response.json() == {"message": "Tour deleted successfully"}
        assert client.get("/api/destinations/pokhara/tours").json() == []


class TestActivityAndSliderAdmin:

    def test_activity_crud(self, client, admin_headers):
        created = client.post(
            "/api/admin/activities", json=activity_data(slug="rafting", name="Rafting"), headers=admin_headers
        ).json()
        renamed = client.put(
            f"/api/admin/activities/{created['id']}", json={"icon": "waves"}, headers=admin_headers
        ).json()
        assert renamed["icon"] == "waves"
        assert client.delete(f"/api/admin/activities/{created['id']}", headers=admin_headers).status_code == 200

    def test_admin_slider_listing_includes_inactive(self, client, admin_headers):
        client.post("/api/admin/sliders", json={"title": "On", "image": "on.jpg"}, headers=admin_headers)
        off = client.post(
            "/api/admin/sliders", json={"title": "Off", "image": "off.jpg", "is_active": False}, headers=admin_headers
        )
        assert off.status_code == 201
        assert off.json()["is_active"] is False

        assert [s["title"] for s in client.get("/api/sliders").json()] == ["On"]
        admin_list = client.get("/api/admin/sliders", headers=admin_headers).json()
        assert sorted(s["title"] for s in admin_list) == ["Off", "On"]

        assert client.put("/api/admin/sliders/999", json={"title": "x"}, headers=admin_headers).status_code == 404
