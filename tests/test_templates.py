from fastapi import status

from appraisal_hub.models.template import CURRENT_SCHEMA_VERSION, Template
from appraisal_hub.services.template_migration import migrate_template_payload, questions_to_categories
from appraisal_hub.services.template_service import TemplateService

LEGACY_QUESTIONS = [
    {"id": "l1", "text": "Communicates clearly", "category_name": "Collaboration", "type": "rating-1-5", "weight": 50, "order": 0},
    {"id": "l2", "text": "Any other comments?", "type": "text", "weight": 20, "order": 2},
    {"id": "l3", "text": "Helps teammates", "category_name": "Collaboration", "type": "rating-1-10", "weight": 30, "order": 1},
]


def _payload(weights=(60, 40), template_type="leader-to-member"):
    return {
        "name": "Leader review",
        "type": template_type,
        "categories": [{
            "category_name": "Delivery",
            "items": [
                {"text": f"Question {n}", "type": "rating-1-5", "weight": w}
                for n, w in enumerate(weights)
            ],
        }],
    }


def test_questions_are_grouped_by_category_in_order():
    categories = questions_to_categories(LEGACY_QUESTIONS)
    assert [c["category_name"] for c in categories] == ["Collaboration", "Category"]
    assert [i["id"] for i in categories[0]["items"]] == ["l1", "l3"]
    assert categories[0]["items"][1]["type"] == "rating-1-5"


def test_migrated_payload_is_current_schema():
    migrated = migrate_template_payload({"name": "Old", "questions": LEGACY_QUESTIONS})
    assert migrated["schema_version"] == CURRENT_SCHEMA_VERSION
    assert migrated["questions"] is None
    assert all(c["id"] for c in migrated["categories"])
    assert [c["order"] for c in migrated["categories"]] == [0, 1]


def test_legacy_row_is_migrated_once_on_read(db_session):
    row = Template(name="Legacy", type="member-to-leader", categories=[], questions=LEGACY_QUESTIONS, schema_version=1)
    db_session.add(row)
    db_session.commit()

    service = TemplateService(db_session)
    template = service.get(row.id)
    assert template.schema_version == CURRENT_SCHEMA_VERSION
    assert template.questions is None
    first_ids = [c["id"] for c in template.categories]

    again = service.get(row.id)
    assert [c["id"] for c in again.categories] == first_ids


def test_create_template(client):
    response = client.post("/api/templates/", json=_payload())
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["total_weight"] == 100
    assert data["item_count"] == 2
    assert data["version"] == 1
    assert all(item["id"] for item in data["categories"][0]["items"])


def test_create_template_rejects_bad_weights(client):
    response = client.post("/api/templates/", json=_payload(weights=(60, 30)))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    error = response.json()["errors"][0]
    assert error["code"] == "TEMPLATE_WEIGHT_INVALID"
    assert error["details"]["total_weight"] == 90


def test_create_template_rejects_custom_type(client):
    response = client.post("/api/templates/", json=_payload(template_type="custom"))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_multiple_choice_needs_options(client):
    payload = _payload(weights=(100,))
    payload["categories"][0]["items"][0]["type"] = "multiple-choice"
    response = client.post("/api/templates/", json=payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_from_legacy_questions(client):
    response = client.post("/api/templates/", json={
        "name": "Imported", "type": "hr-to-all", "questions": LEGACY_QUESTIONS,
    })
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["schema_version"] == CURRENT_SCHEMA_VERSION
    assert [c["category_name"] for c in data["categories"]] == ["Collaboration", "Category"]


def test_update_bumps_version_and_revalidates(client):
    template_id = client.post("/api/templates/", json=_payload()).json()["id"]

    bad = client.patch(f"/api/templates/{template_id}", json={"categories": _payload(weights=(10,))["categories"]})
    assert bad.status_code == status.HTTP_400_BAD_REQUEST

    good = client.patch(f"/api/templates/{template_id}", json={"categories": _payload(weights=(25, 75))["categories"]})
    assert good.status_code == status.HTTP_200_OK
    assert good.json()["version"] == 2


def test_duplicate_gets_fresh_item_ids(client):
    original = client.post("/api/templates/", json=_payload()).json()
    copy = client.post(f"/api/templates/{original['id']}/duplicate").json()
    assert copy["name"] == "Leader review (Copy)"
    original_ids = {i["id"] for i in original["categories"][0]["items"]}
    copy_ids = {i["id"] for i in copy["categories"][0]["items"]}
    assert original_ids.isdisjoint(copy_ids)


def test_check_weights_endpoint(client):
    response = client.post("/api/templates/check-weights", json=_payload(weights=(70, 20))["categories"])
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["valid"] is False
    assert response.json()["difference"] == -10
