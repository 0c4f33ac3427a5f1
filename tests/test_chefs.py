"""
Tests for chef profiles
"""

from conftest import client, register, create_chef


class TestChefProfiles:
    """Test cases for creating and reading chef profiles"""

    def test_create_profile(self, chef_headers):
        chef = create_chef(chef_headers)
        assert chef["display_name"] == "Asha's Kitchen"
        assert chef["price_per_meal"] == 300
        assert chef["weekly_capacity"] == 50
        assert chef["rating"] == 5.0
        assert chef["meals_delivered"] == 0
        assert chef["is_available"] is True

    def test_one_profile_per_chef(self, chef_headers, chef):
        response = client.post("/api/chefs/", headers=chef_headers, json={
            "display_name": "Second Kitchen",
            "location": "Mysuru",
        })
        assert response.status_code == 400

    def test_customer_cannot_create_profile(self, customer_headers):
        response = client.post("/api/chefs/", headers=customer_headers, json={
            "display_name": "Not A Chef",
            "location": "Chennai",
        })
        assert response.status_code == 403

    def test_unknown_cuisine_rejected(self, chef_headers):
        response = client.post("/api/chefs/", headers=chef_headers, json={
            "display_name": "Fusion Lab",
            "location": "Pune",
            "cuisines": ["Martian"],
        })
        assert response.status_code == 400

    def test_get_profile(self, customer_headers, chef_headers, chef):
        response = client.get(f"/api/chefs/{chef['id']}", headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["id"] == chef["id"]

        response = client.get("/api/chefs/me", headers=chef_headers)
        assert response.status_code == 200
        assert response.json()["id"] == chef["id"]

    def test_missing_profile(self, customer_headers):
        response = client.get("/api/chefs/4040", headers=customer_headers)
        assert response.status_code == 404

        response = client.get("/api/chefs/me", headers=register("chef", "New Chef"))
        assert response.status_code == 404


class TestChefListing:
    """Test cases for browsing chefs"""

    def test_filters(self, customer_headers):
        create_chef(register("chef", "Asha"), display_name="Asha's Kitchen")
        other = register("chef", "Kabir")
        response = client.post("/api/chefs/", headers=other, json={
            "display_name": "Kabir Keto",
            "location": "Mumbai",
            "cuisines": ["Keto"],
        })
        assert response.status_code == 201

        names = [c["display_name"] for c in client.get("/api/chefs/", headers=customer_headers).json()]
        assert sorted(names) == ["Asha's Kitchen", "Kabir Keto"]

        response = client.get("/api/chefs/?location=mumbai", headers=customer_headers)
        assert [c["display_name"] for c in response.json()] == ["Kabir Keto"]

        response = client.get("/api/chefs/?cuisine=Indian", headers=customer_headers)
        assert [c["display_name"] for c in response.json()] == ["Asha's Kitchen"]
