"""
Body-metric profile: all-or-nothing updates and the derived profileCompleted flag.
"""

import pytest
from fastapi import status


class TestProfileUpdate:

    def test_update_completes_profile(self, client, auth_headers, sample_profile_data):
        response = client.put("/api/profile", json=sample_profile_data, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        user = response.json()["user"]
        assert user["bodyWeightKg"] == 82.5
        assert user["heightCm"] == 180
        assert user["muscleWeightKg"] == 38.2
        assert user["fatPercentage"] == 18.4
        assert user["profileCompleted"] is True

        me = client.get("/api/me", headers=auth_headers).json()["user"]
        assert me == user

    @pytest.mark.parametrize("missing", ["bodyWeightKg", "heightCm", "muscleWeightKg", "fatPercentage"])
    def test_missing_metric_rejected(self, client, auth_headers, sample_profile_data, missing):
        payload = {k: v for k, v in sample_profile_data.items() if k != missing}

        response = client.put("/api/profile", json=payload, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "required" in response.json()["message"]
        me = client.get("/api/me", headers=auth_headers).json()["user"]
        assert me["profileCompleted"] is False
        assert me["bodyWeightKg"] is None

    def test_null_metric_rejected(self, client, auth_headers, sample_profile_data):
        payload = dict(sample_profile_data, heightCm=None)

        response = client.put("/api/profile", json=payload, headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_numeric_metric_rejected(self, client, auth_headers, sample_profile_data):
        payload = dict(sample_profile_data, fatPercentage="lots")

        response = client.put("/api/profile", json=payload, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "fatPercentage" in response.json()["message"]

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_metric_rejected(self, client, auth_headers, literal):
        body = f'{{"bodyWeightKg": {literal}, "heightCm": 180, "muscleWeightKg": 30, "fatPercentage": 10}}'

        response = client.put(
            "/api/profile",
            content=body,
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "bodyWeightKg" in response.json()["message"]
        me = client.get("/api/me", headers=auth_headers).json()["user"]
        assert me["profileCompleted"] is False
        assert me["bodyWeightKg"] is None

    def test_overwrites_all_fields(self, client, auth_headers, sample_profile_data):
        client.put("/api/profile", json=sample_profile_data, headers=auth_headers)
        second = {"bodyWeightKg": 80, "heightCm": 181, "muscleWeightKg": 39, "fatPercentage": 17}

        user = client.put("/api/profile", json=second, headers=auth_headers).json()["user"]

        assert [user[k] for k in second] == [80, 181, 39, 17]

    def test_requires_auth(self, client, sample_profile_data):
        response = client.put("/api/profile", json=sample_profile_data)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
