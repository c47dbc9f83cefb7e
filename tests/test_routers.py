from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from freelance_api.main import app
from freelance_api.core.database import get_db
from freelance_api.core.security import get_current_freelancer
from freelance_api.routers import freelancer_router, search_router
from conftest import make_freelancer, make_experience


async def override_get_db():
    yield MagicMock()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def search_service(monkeypatch):
    service = MagicMock()
    service.search_freelancers = AsyncMock(return_value={
        "freelancers": [],
        "total_freelancers": 0,
        "nb_pages": 0,
    })
    monkeypatch.setattr(search_router, "SearchService", lambda db: service)
    return service


@pytest.fixture
def freelancer_service(monkeypatch):
    service = MagicMock()
    monkeypatch.setattr(freelancer_router, "FreelancerService", lambda db: service)
    return service


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "success"


def test_search_requires_query(client, search_service):
    assert client.get("/search/freelancer").status_code == 422
    assert client.get("/search/freelancer", params={"query": "   "}).status_code == 422
    search_service.search_freelancers.assert_not_called()


def test_search_rejects_invalid_page(client, search_service):
    response = client.get("/search/freelancer", params={"query": "dev", "page": 0})
    assert response.status_code == 422


def test_search_empty_result_shape(client, search_service):
    response = client.get("/search/freelancer", params={"query": "dev"})
    assert response.status_code == 200
    assert response.json() == {"freelancers": [], "totalFreelancers": 0, "nbPages": 0}


def test_search_passes_facets(client, search_service):
    search_service.search_freelancers.return_value = {
        "freelancers": [{
            "freelancer_id": "f-1",
            "image": None,
            "first_name": "Tom",
            "last_name": "Jedusor",
            "title": "Dev",
            "presentation_text": "Hi",
            "hourly_rate": 40,
            "location": {"country_code": "FR"},
            "skills": ["python"],
        }],
        "total_freelancers": 1,
        "nb_pages": 1,
    }
    response = client.get("/search/freelancer", params={
        "query": "python",
        "page": 2,
        "locations": "FR,BE",
        "minHourlyRate": 10,
        "maxHourlyRate": 50,
        "languages": "fr",
    })

    assert response.status_code == 200
    item = response.json()["freelancers"][0]
    assert item["id"] == "f-1"
    assert item["firstName"] == "Tom"
    assert item["location"] == {"countryCode": "FR"}

    kwargs = search_service.search_freelancers.call_args.kwargs
    assert kwargs["page"] == 2
    assert kwargs["locations"] == "FR,BE"
    assert kwargs["min_hourly_rate"] == 10
    assert kwargs["max_hourly_rate"] == 50
    assert kwargs["languages"] == "fr"


def test_public_profile_not_found(client, freelancer_service):
    freelancer_service.get_public_freelancer = AsyncMock(
        side_effect=HTTPException(status_code=404, detail="工作者不存在")
    )
    response = client.get("/freelancer/unknown")
    assert response.status_code == 404


def test_public_profile_hides_account_data(client, freelancer_service):
    freelancer = make_freelancer(experiences=[
        make_experience("old", date(2018, 1, 1)),
        make_experience("current", None),
    ])
    freelancer_service.get_public_freelancer = AsyncMock(return_value=freelancer)

    response = client.get("/freelancer/f-1")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "f-1"
    assert body["hourlyRate"] == 40.0
    assert body["location"] == {"town": "Paris", "countryCode": "FR"}
    assert body["contact"]["email"] == "a@b.com"
    assert [e["id"] for e in body["experiences"]] == ["current", "old"]
    assert "email" not in body
    assert "passwordHash" not in body
    assert "tokens" not in body


def test_visibility_endpoint(client, freelancer_service):
    freelancer_service.get_freelancer_visibility = AsyncMock(
        return_value={"visible": False, "missing": {"hourlyRate": True}}
    )
    response = client.get("/freelancer/f-1/visibility")
    assert response.status_code == 200
    assert response.json() == {"visible": False, "missing": {"hourlyRate": True}}


def test_owner_routes_require_login(client):
    assert client.get("/freelancer").status_code == 401
    assert client.put("/freelancer/profile/skills", json={"skills": []}).status_code == 401


def test_update_skills(client, freelancer_service):
    freelancer = make_freelancer()
    app.dependency_overrides[get_current_freelancer] = lambda: freelancer
    freelancer_service.update_skills = AsyncMock(return_value=make_freelancer(skills=["python", "sql"]))

    response = client.put("/freelancer/profile/skills", json={"skills": ["Python", "SQL", "python"]})

    assert response.status_code == 200
    assert response.json() == {"skills": ["python", "sql"]}
    _, data = freelancer_service.update_skills.call_args.args
    assert data.skills == ["python", "sql"]


def test_general_update_rejects_out_of_range_rate(client, freelancer_service):
    app.dependency_overrides[get_current_freelancer] = lambda: make_freelancer()
    response = client.put("/freelancer/profile/general", json={"hourlyRate": 500})
    assert response.status_code == 422
