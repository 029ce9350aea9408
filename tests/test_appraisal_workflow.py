from datetime import datetime, timedelta, timezone

from fastapi import status

from appraisal_hub.models.assignment import AppraisalAssignment
from appraisal_hub.models.link import AppraisalLink

ANSWERS = [
    {"question_id": "q-rating", "value": 4},
    {"question_id": "q-text", "value": "good job"},
]


def _org(make_team, make_employee):
    team = make_team("Platform")
    lead = make_employee("Lena", "leader", team_id=team.id)
    ana = make_employee("Ana", reports_to=lead.id, team_id=team.id)
    ben = make_employee("Ben", team_id=team.id)
    return lead, ana, ben


def _link(client, employee, appraiser, template, period, **extra):
    payload = {
        "employee_id": employee.id,
        "appraiser_id": appraiser.id,
        "template_id": template.id,
        "review_period_id": period.id,
        **extra,
    }
    return client.post("/api/links/", json=payload)


def test_preview_reports_pairs_and_existing_count(client, make_team, make_employee, period):
    _org(make_team, make_employee)
    response = client.post("/api/assignments/auto/preview", json={"review_period_id": period.id})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total"] == 4
    assert data["existing_count"] == 0
    assert {r["employee_name"] for r in data["preview"]["leader_to_member"]} == {"Ana", "Ben"}


def test_build_persists_pending_assignments(client, make_team, make_employee, make_template, period):
    _org(make_team, make_employee)
    lm = make_template("leader-to-member")
    ml = make_template("member-to-leader", name="Upward")

    response = client.post("/api/assignments/auto/build", json={
        "review_period_id": period.id,
        "template_mapping": {"leader_to_member": lm.id, "member_to_leader": ml.id},
        "due_date": "2025-03-31",
    })
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["created"] == 4
    assert all(a["status"] == "pending" and a["assignment_type"] == "auto" for a in data["assignments"])
    assert all(a["due_date"] == "2025-03-31" for a in data["assignments"])

    listed = client.get("/api/assignments/", params={"review_period_id": period.id}).json()
    assert len(listed) == 4
    preview = client.post("/api/assignments/auto/preview", json={"review_period_id": period.id}).json()
    assert preview["existing_count"] == 4


def test_build_without_template_fails_and_creates_nothing(client, make_employee, period):
    make_employee("A", "leader")
    make_employee("B", "leader")
    response = client.post("/api/assignments/auto/build", json={
        "review_period_id": period.id,
        "options": {"include_leader_to_member": False, "include_member_to_leader": False, "include_leader_to_leader": True},
        "template_mapping": {"leader_to_leader": ""},
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    error = response.json()["errors"][0]
    assert error["code"] == "TEMPLATE_MAPPING_MISSING"
    assert error["details"]["categories"] == ["leader-to-leader"]
    assert client.get("/api/assignments/").json() == []


def test_build_rejects_unknown_template(client, make_team, make_employee, period):
    _org(make_team, make_employee)
    response = client.post("/api/assignments/auto/build", json={
        "review_period_id": period.id,
        "template_mapping": {"leader_to_member": "missing", "member_to_leader": "missing"},
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_link_submission_scores_and_closes_link(client, make_team, make_employee, make_template, period):
    lead, ana, _ = _org(make_team, make_employee)
    template = make_template()
    link = _link(client, ana, lead, template, period, relationship_type="leader-to-member")
    assert link.status_code == status.HTTP_201_CREATED
    token = link.json()["token"]

    form = client.get(f"/api/links/token/{token}").json()
    assert form["employee_name"] == "Ana"
    assert form["appraiser_name"] == "Lena"
    assert form["template"]["id"] == template.id

    manual = client.get("/api/assignments/", params={"appraiser_id": lead.id}).json()
    assert len(manual) == 1
    assert manual[0]["assignment_type"] == "manual"
    assert manual[0]["link_token"] == token

    submitted = client.post(f"/api/links/token/{token}/submit", json={"responses": ANSWERS})
    assert submitted.status_code == status.HTTP_201_CREATED
    data = submitted.json()
    assert data["score"] == 440
    assert data["max_score"] == 500
    assert data["percentage"] == 88
    assert data["relationship_type"] == "leader-to-member"

    assert client.get(f"/api/assignments/{manual[0]['id']}").json()["status"] == "completed"
    again = client.post(f"/api/links/token/{token}/submit", json={"responses": ANSWERS})
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["errors"][0]["code"] == "LINK_USED"
    assert client.get(f"/api/links/token/{token}").status_code == status.HTTP_409_CONFLICT


def test_expired_link_is_rejected(client, db_session, make_team, make_employee, make_template, period):
    lead, ana, _ = _org(make_team, make_employee)
    token = _link(client, ana, lead, make_template(), period, expiration_days=3).json()["token"]

    link = db_session.query(AppraisalLink).filter(AppraisalLink.token == token).one()
    link.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db_session.commit()

    response = client.get(f"/api/links/token/{token}")
    assert response.status_code == status.HTTP_410_GONE
    assert response.json()["errors"][0]["code"] == "LINK_EXPIRED"
    assert client.get("/api/links/", params={"active_only": True}).json() == []


def test_unknown_token_is_not_found(client):
    assert client.get("/api/links/token/nope").status_code == status.HTTP_404_NOT_FOUND


def test_link_needs_two_different_active_people(client, make_team, make_employee, make_template, period):
    lead, ana, _ = _org(make_team, make_employee)
    template = make_template()
    same = _link(client, ana, ana, template, period)
    assert same.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    gone = make_employee("Gone", status="terminated")
    inactive = _link(client, gone, lead, template, period)
    assert inactive.status_code == status.HTTP_400_BAD_REQUEST


def test_submission_validates_answers(client, make_team, make_employee, make_template, period):
    lead, ana, _ = _org(make_team, make_employee)
    token = _link(client, ana, lead, make_template(), period).json()["token"]

    missing = client.post(f"/api/links/token/{token}/submit", json={"responses": ANSWERS[:1]})
    assert missing.status_code == status.HTTP_400_BAD_REQUEST
    problems = missing.json()["errors"][0]["details"]["questions"]
    assert problems == [{"question_id": "q-text", "msg": "This question is required"}]

    out_of_range = client.post(f"/api/links/token/{token}/submit", json={
        "responses": [{"question_id": "q-rating", "value": 7}, ANSWERS[1]],
    })
    assert out_of_range.status_code == status.HTTP_400_BAD_REQUEST

    unknown = client.post(f"/api/links/token/{token}/submit", json={
        "responses": ANSWERS + [{"question_id": "extra", "value": 3}],
    })
    assert unknown.status_code == status.HTTP_400_BAD_REQUEST

    # Rejected submissions leave the link open
    assert client.get(f"/api/links/token/{token}").status_code == status.HTTP_200_OK


def test_submit_by_assignment(client, make_team, make_employee, make_template, period):
    _org(make_team, make_employee)
    lm = make_template("leader-to-member")
    ml = make_template("member-to-leader", name="Upward")
    built = client.post("/api/assignments/auto/build", json={
        "review_period_id": period.id,
        "template_mapping": {"leader_to_member": lm.id, "member_to_leader": ml.id},
    }).json()["assignments"]
    assignment_id = built[0]["id"]

    started = client.post(f"/api/assignments/{assignment_id}/start")
    assert started.json()["status"] == "in-progress"

    response = client.post(f"/api/assignments/{assignment_id}/submit", json={"responses": ANSWERS})
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["review_period_name"] == "Q1 2025"

    again = client.post(f"/api/assignments/{assignment_id}/submit", json={"responses": ANSWERS})
    assert again.status_code == status.HTTP_409_CONFLICT
    reopen = client.patch(f"/api/assignments/{assignment_id}/status", json={"status": "pending"})
    assert reopen.status_code == status.HTTP_409_CONFLICT


def test_deleting_period_removes_its_assignments(client, make_team, make_employee, make_template, period):
    _org(make_team, make_employee)
    client.post("/api/assignments/auto/build", json={
        "review_period_id": period.id,
        "template_mapping": {"leader_to_member": make_template().id, "member_to_leader": make_template("member-to-leader").id},
    })
    assert client.delete(f"/api/periods/{period.id}").status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/assignments/").json() == []


def test_template_in_use_cannot_be_deleted(client, make_team, make_employee, make_template, period):
    lead, ana, _ = _org(make_team, make_employee)
    template = make_template()
    _link(client, ana, lead, template, period)
    response = client.delete(f"/api/templates/{template.id}")
    assert response.status_code == status.HTTP_409_CONFLICT


def test_status_change_cannot_complete_an_assignment(client, make_team, make_employee, make_template, period):
    _org(make_team, make_employee)
    built = client.post("/api/assignments/auto/build", json={
        "review_period_id": period.id,
        "options": {"include_member_to_leader": False},
        "template_mapping": {"leader_to_member": make_template().id},
    }).json()["assignments"]
    assignment_id = built[0]["id"]

    response = client.patch(f"/api/assignments/{assignment_id}/status", json={"status": "completed"})
    assert response.status_code == status.HTTP_409_CONFLICT
    assert client.get(f"/api/assignments/{assignment_id}").json()["status"] == "pending"

    client.post(f"/api/assignments/{assignment_id}/start")
    response = client.patch(f"/api/assignments/{assignment_id}/status", json={"status": "completed"})
    assert response.status_code == status.HTTP_409_CONFLICT

    submitted = client.post(f"/api/assignments/{assignment_id}/submit", json={"responses": ANSWERS})
    assert submitted.status_code == status.HTTP_201_CREATED
    assert len(client.get("/api/appraisals/", params={"review_period_id": period.id}).json()) == 1


def test_expired_link_blocks_submission_by_assignment(client, db_session, make_team, make_employee, make_template, period):
    lead, ana, _ = _org(make_team, make_employee)
    token = _link(client, ana, lead, make_template(), period, expiration_days=3).json()["token"]
    assignment_id = client.get("/api/assignments/", params={"appraiser_id": lead.id}).json()[0]["id"]

    link = db_session.query(AppraisalLink).filter(AppraisalLink.token == token).one()
    link.expires_at = datetime.now(timezone.utc) - timedelta(days=1)
    db_session.commit()

    by_token = client.post(f"/api/links/token/{token}/submit", json={"responses": ANSWERS})
    assert by_token.status_code == status.HTTP_410_GONE
    by_assignment = client.post(f"/api/assignments/{assignment_id}/submit", json={"responses": ANSWERS})
    assert by_assignment.status_code == status.HTTP_410_GONE
    assert by_assignment.json()["errors"][0]["code"] == "LINK_EXPIRED"
    assert client.get("/api/appraisals/").json() == []
    assert client.get(f"/api/assignments/{assignment_id}").json()["status"] == "pending"


def test_submitting_a_link_assignment_closes_the_link(client, make_team, make_employee, make_template, period):
    lead, ana, _ = _org(make_team, make_employee)
    token = _link(client, ana, lead, make_template(), period).json()["token"]
    assignment_id = client.get("/api/assignments/", params={"appraiser_id": lead.id}).json()[0]["id"]

    response = client.post(f"/api/assignments/{assignment_id}/submit", json={"responses": ANSWERS})
    assert response.status_code == status.HTTP_201_CREATED

    again = client.post(f"/api/links/token/{token}/submit", json={"responses": ANSWERS})
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["errors"][0]["code"] == "LINK_USED"
    assert len(client.get("/api/appraisals/").json()) == 1


def test_token_submission_refused_once_assignment_is_completed(
    client, db_session, make_team, make_employee, make_template, period
):
    lead, ana, _ = _org(make_team, make_employee)
    token = _link(client, ana, lead, make_template(), period).json()["token"]
    assignment = db_session.query(AppraisalAssignment).filter(AppraisalAssignment.link_token == token).one()
    assignment.status = "completed"
    db_session.commit()

    response = client.post(f"/api/links/token/{token}/submit", json={"responses": ANSWERS})
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["errors"][0]["code"] == "CONFLICT"
    assert client.get("/api/appraisals/").json() == []
