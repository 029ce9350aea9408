from fastapi import status

from appraisal_hub.models.appraisal import Appraisal
from appraisal_hub.models.assignment import AppraisalAssignment
from appraisal_hub.models.employee import Employee


def test_create_and_list_employees(client):
    team = client.post("/api/teams/", json={"name": "Platform"}).json()
    lead = client.post("/api/employees/", json={"name": "Lena", "hierarchy": "leader", "team_id": team["id"]})
    assert lead.status_code == status.HTTP_201_CREATED

    member = client.post("/api/employees/", json={
        "name": "Ana", "hierarchy": "member", "team_id": team["id"], "reports_to": lead.json()["id"],
    })
    assert member.status_code == status.HTTP_201_CREATED
    assert member.json()["employment_status"] == "permanent"

    listed = client.get("/api/employees/", params={"team_id": team["id"]}).json()
    assert [e["name"] for e in listed] == ["Ana", "Lena"]
    assert client.get("/api/teams/").json()[0]["member_count"] == 2


def test_unknown_manager_is_rejected(client):
    response = client.post("/api/employees/", json={"name": "Ana", "reports_to": "nobody"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["code"] == "VALIDATION_FAILED"


def test_reporting_cycle_is_rejected(client, make_employee):
    boss = make_employee("Boss", "executive")
    lead = make_employee("Lead", "leader", reports_to=boss.id)
    response = client.patch(f"/api/employees/{boss.id}", json={"reports_to": lead.id})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "cycle" in response.json()["errors"][0]["msg"]


def test_inactive_employees_drop_out_of_active_list(client, make_employee):
    make_employee("Stays")
    make_employee("Gone", status="resigned")
    names = [e["name"] for e in client.get("/api/employees/", params={"active_only": True}).json()]
    assert names == ["Stays"]


def test_reporting_chain(client, make_employee):
    ceo = make_employee("Ceo", "executive")
    lead = make_employee("Lead", "leader", reports_to=ceo.id)
    member = make_employee("Member", reports_to=lead.id)

    data = client.get(f"/api/employees/{member.id}/reporting-chain").json()
    assert [e["name"] for e in data["chain"]] == ["Lead", "Ceo"]
    assert client.get(f"/api/employees/{lead.id}/reporting-chain").json()["direct_reports"][0]["id"] == member.id


def test_delete_employee_cascades(client, db_session, make_employee, make_template, period):
    lead = make_employee("Lead", "leader")
    member = make_employee("Member", reports_to=lead.id)
    template = make_template()
    db_session.add(AppraisalAssignment(
        review_period_id=period.id, appraiser_id=lead.id, appraiser_name=lead.name,
        employee_id=member.id, employee_name=member.name, relationship_type="leader-to-member",
        template_id=template.id,
    ))
    db_session.add(Appraisal(
        template_id=template.id, employee_id=member.id, appraiser_id=lead.id,
        review_period_id=period.id, review_period_name=period.name, responses=[], score=1, max_score=1,
    ))
    db_session.commit()

    response = client.delete(f"/api/employees/{lead.id}")
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert db_session.query(AppraisalAssignment).count() == 0
    assert db_session.query(Appraisal).count() == 0
    db_session.expire_all()
    assert db_session.get(Employee, member.id).reports_to is None


def test_deleting_team_keeps_members(client, make_team, make_employee, db_session):
    team = make_team("Ops")
    member = make_employee("Member", team_id=team.id)
    assert client.delete(f"/api/teams/{team.id}").status_code == status.HTTP_204_NO_CONTENT
    db_session.expire_all()
    assert db_session.get(Employee, member.id).team_id is None


def test_period_dates_and_name_are_derived(client):
    response = client.post("/api/periods/", json={"type": "Q2", "year": 2025})
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Q2 2025"
    assert data["start_date"] == "2025-04-01"
    assert data["end_date"] == "2025-06-30"
    assert data["status"] == "planning"


def test_custom_period_needs_dates(client):
    response = client.post("/api/periods/", json={"type": "Custom", "year": 2025})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_period_end_cannot_precede_start(client):
    response = client.post("/api/periods/", json={
        "type": "Custom", "year": 2025, "start_date": "2025-05-01", "end_date": "2025-04-01",
    })
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    period = client.post("/api/periods/", json={"type": "H1", "year": 2025}).json()
    update = client.patch(f"/api/periods/{period['id']}", json={"end_date": "2024-12-31"})
    assert update.status_code == status.HTTP_400_BAD_REQUEST


def test_profile_upsert(client, make_employee):
    employee = make_employee("Ana")
    assert client.get(f"/api/profiles/{employee.id}").json()["skills"] == []

    response = client.put(f"/api/profiles/{employee.id}", json={"position": "Engineer", "skills": ["SQL", " sql ", "SQL", "Go"]})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["skills"] == ["SQL", "sql", "Go"]
    assert client.get(f"/api/profiles/{employee.id}").json()["position"] == "Engineer"
