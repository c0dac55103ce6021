"""
Request validation tests that never reach the database.
"""

import runpy
import warnings
from unittest.mock import AsyncMock

import pytest
from conftest import auth_header
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from cinema.core.db import get_session
from cinema.core.exceptions import ValidationFailedError
from cinema.main import create_app


@pytest.fixture
def mock_session():
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def client(test_settings, mock_session):
    """Test client whose session fails the test if a query is issued."""
    app = create_app(test_settings)

    async def mock_get_session():
        yield mock_session

    app.dependency_overrides[get_session] = mock_get_session
    return TestClient(app)


class TestPayloadValidation:
    @pytest.mark.parametrize(
        "payload",
        [
            {"release_date": "2000-01-01", "rating": 5},
            {"title": "", "release_date": "2000-01-01", "rating": 5},
            {"title": "   ", "release_date": "2000-01-01", "rating": 5},
            {"title": "x" * 151, "release_date": "2000-01-01", "rating": 5},
            {"title": "Ok", "release_date": "not-a-date", "rating": 5},
            {"title": "Ok", "release_date": "2000-01-01", "rating": -0.5},
            {"title": "Ok", "release_date": "2000-01-01", "rating": 5, "actor_ids": ["x"]},
        ],
    )
    def test_invalid_movie_payload(self, client, mock_session, payload):
        response = client.post("/api/movies", json=payload, headers=auth_header())

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]
        mock_session.execute.assert_not_called()

    def test_error_details_name_the_field(self, client):
        response = client.post(
            "/api/actors",
            json={"name": "Someone", "gender": "female"},
            headers=auth_header(),
        )

        assert response.status_code == 422
        fields = [d["field"] for d in response.json()["error"]["details"]]
        assert "body.date_of_birth" in fields

    def test_relation_payload_requires_actor_ids(self, client, mock_session):
        response = client.put(
            "/api/movies/6f1c0b52-1f1e-4a4e-9d55-0d8e1b2f3a4c/actors",
            json={},
            headers=auth_header(),
        )

        assert response.status_code == 422
        mock_session.execute.assert_not_called()


def test_validation_status_is_422_without_deprecated_constants():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        runpy.run_module("cinema.core.exceptions")

    assert ValidationFailedError.status_code == 422
