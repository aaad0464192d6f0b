from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from scholarstream.schemas import ScholarshipQuery
from scholarstream.services.scholarships import build_search_filter


def _posted(days_ago):
    return datetime.now(timezone.utc) - timedelta(days=days_ago)


@pytest.fixture()
def catalog(make_scholarship):
    return [
        make_scholarship(scholarshipName="Global Engineering Grant", applicationFees=50,
                         subjectCategory="Engineering", degree="Masters", postDate=_posted(3)),
        make_scholarship(scholarshipName="Arts Fellowship", universityName="Engineering Institute of Art",
                         applicationFees=10, subjectCategory="Arts", degree="Bachelor", postDate=_posted(1)),
        make_scholarship(scholarshipName="Medical Bursary", applicationFees=30,
                         subjectCategory="Medicine", degree="Diploma", postDate=_posted(2)),
    ]


def test_admin_adds_scholarship(client, auth, admin, store):
    resp = client.post(
        "/add-scholarship",
        json={
            "scholarshipName": "Open Data Scholarship",
            "universityName": "Example University",
            "subjectCategory": "Engineering",
            "scholarshipCategory": "Partial",
            "degree": "Masters",
            "applicationFees": 15,
            "universityCountry": "Canada",
        },
        headers=auth(admin["email"]),
    )

    assert resp.status_code == 201
    inserted_id = resp.get_json()["insertedId"]
    stored = store.scholarships.find_one({"_id": ObjectId(inserted_id)})
    assert stored["universityCountry"] == "Canada"
    assert stored["postDate"] is not None


def test_add_scholarship_requires_admin(client, auth, moderator):
    resp = client.post("/add-scholarship", json={"scholarshipName": "x"}, headers=auth(moderator["email"]))

    assert resp.status_code == 403


def test_add_scholarship_validates_body(client, auth, admin):
    resp = client.post(
        "/add-scholarship",
        json={"scholarshipName": "Missing fields", "applicationFees": -5},
        headers=auth(admin["email"]),
    )

    assert resp.status_code == 400
    fields = {d["field"] for d in resp.get_json()["details"]}
    assert "applicationFees" in fields
    assert "universityName" in fields


def test_admin_updates_scholarship(client, auth, admin, scholarship, store):
    resp = client.patch(
        f"/scholarships/{scholarship['_id']}",
        json={"applicationFees": 99, "deadline": "2030-01-01"},
        headers=auth(admin["email"]),
    )

    assert resp.status_code == 200
    stored = store.scholarships.find_one({"_id": scholarship["_id"]})
    assert stored["applicationFees"] == 99
    assert stored["deadline"] == "2030-01-01"
    assert stored["scholarshipName"] == scholarship["scholarshipName"]


def test_update_missing_scholarship(client, auth, admin):
    resp = client.patch(f"/scholarships/{ObjectId()}", json={"degree": "PhD"}, headers=auth(admin["email"]))

    assert resp.status_code == 404


def test_admin_deletes_scholarship(client, auth, admin, scholarship, store):
    resp = client.delete(f"/scholarships/{scholarship['_id']}", headers=auth(admin["email"]))

    assert resp.status_code == 200
    assert store.scholarships.count_documents({}) == 0


def test_all_scholarships_is_public(client, catalog):
    resp = client.get("/all-scholarships")

    assert resp.status_code == 200
    assert len(resp.get_json()["data"]) == 3


def test_search_filters_case_insensitively_and_sorts_by_fee(client, catalog):
    resp = client.get("/scholarships?search=engineering&sortField=applicationFees&sortOrder=asc")

    assert resp.status_code == 200
    names = [s["scholarshipName"] for s in resp.get_json()["data"]]
    assert names == ["Arts Fellowship", "Global Engineering Grant"]


def test_search_defaults_to_newest_first(client, catalog):
    resp = client.get("/scholarships")

    names = [s["scholarshipName"] for s in resp.get_json()["data"]]
    assert names == ["Arts Fellowship", "Medical Bursary", "Global Engineering Grant"]


def test_search_exact_filters(client, catalog):
    resp = client.get("/scholarships?subjectCategory=Medicine&degree=Diploma")

    names = [s["scholarshipName"] for s in resp.get_json()["data"]]
    assert names == ["Medical Bursary"]


def test_search_treats_text_literally(client, catalog):
    resp = client.get("/scholarships?search=.*")

    assert resp.status_code == 200
    assert resp.get_json()["data"] == []


@pytest.mark.parametrize("query", ["sortField=deadline", "sortOrder=sideways"])
def test_search_rejects_invalid_sort(client, query):
    resp = client.get(f"/scholarships?{query}")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_build_search_filter_ignores_blank_values():
    query = ScholarshipQuery.model_validate({"search": "  ", "degree": "", "subjectCategory": "Arts"})

    assert build_search_filter(query) == {"subjectCategory": "Arts"}


def test_latest_scholarships_uses_configured_limit(client, make_scholarship):
    for i in range(10):
        make_scholarship(scholarshipName=f"Scholarship {i}", postDate=_posted(i))

    resp = client.get("/latest-scholarships")

    names = [s["scholarshipName"] for s in resp.get_json()["data"]]
    assert len(names) == 8
    assert names[0] == "Scholarship 0"


def test_latest_scholarships_limit_parameter(client, catalog):
    resp = client.get("/latest-scholarships?limit=2")

    names = [s["scholarshipName"] for s in resp.get_json()["data"]]
    assert names == ["Arts Fellowship", "Medical Bursary"]


def test_latest_scholarships_rejects_non_integer_limit(client):
    resp = client.get("/latest-scholarships?limit=many")

    assert resp.status_code == 400


@pytest.mark.parametrize("prefix", ["/scholarship", "/scholarship-details"])
def test_get_single_scholarship(client, scholarship, prefix):
    resp = client.get(f"{prefix}/{scholarship['_id']}")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["id"] == str(scholarship["_id"])


def test_get_missing_scholarship(client):
    resp = client.get(f"/scholarship/{ObjectId()}")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_add_scholarship_ignores_client_id(client, auth, admin, store):
    resp = client.post(
        "/add-scholarship",
        json={
            "_id": "hijack",
            "scholarshipName": "Open Data Scholarship",
            "universityName": "Example University",
            "subjectCategory": "Engineering",
            "scholarshipCategory": "Partial",
            "degree": "Masters",
            "applicationFees": 15,
        },
        headers=auth(admin["email"]),
    )

    inserted_id = resp.get_json()["insertedId"]
    assert ObjectId.is_valid(inserted_id)
    assert client.delete(f"/scholarships/{inserted_id}", headers=auth(admin["email"])).status_code == 200
    assert store.scholarships.count_documents({}) == 0
