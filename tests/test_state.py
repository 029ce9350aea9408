from appraisal_hub.core.state import AppState
from appraisal_hub.main import app
from appraisal_hub.models.employee import Employee
from appraisal_hub.models.template import Template
from appraisal_hub.schemas.team import TeamCreate
from appraisal_hub.services.team_service import TeamService


def test_writes_notify_subscribers(db_session):
    store = AppState()
    seen = []
    unsubscribe = store.subscribe(seen.append)

    TeamService(db_session, store).create(TeamCreate(name="Platform"))
    assert seen == ["teams"]

    unsubscribe()
    TeamService(db_session, store).create(TeamCreate(name="Data"))
    assert seen == ["teams"]


def test_snapshot_is_cached_until_invalidated(db_session, make_team):
    store = AppState()
    make_team("Platform")
    assert [t.name for t in store.get("teams", db_session)] == ["Platform"]

    make_team("Data")
    assert len(store.get("teams", db_session)) == 1

    store.invalidate("teams")
    assert [t.name for t in store.get("teams", db_session)] == ["Data", "Platform"]


def test_failing_subscriber_does_not_block_others(db_session):
    store = AppState()
    seen = []

    def broken(collection):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(seen.append)
    store.publish("employees")
    assert seen == ["employees"]


def test_template_snapshot_is_migrated(db_session):
    db_session.add(Template(
        name="Legacy", type="hr-to-all", categories=[], schema_version=1,
        questions=[{"id": "x", "text": "Overall", "type": "rating-1-5", "weight": 100}],
    ))
    db_session.commit()

    store = AppState()
    templates = store.get("templates", db_session)
    assert templates[0].schema_version == 2
    assert templates[0].total_weight == 100


def test_api_writes_invalidate_app_store(client, db_session):
    store = app.state.store
    store.refresh(db_session)
    assert store.get("employees", db_session) == []

    client.post("/api/employees/", json={"name": "Ana"})
    assert [e.name for e in store.get("employees", db_session)] == ["Ana"]


def test_preview_reads_roster_from_app_store(client, db_session, make_team, make_employee, period):
    team = make_team("Platform")
    lead = make_employee("Lena", "leader", team_id=team.id)
    make_employee("Ana", reports_to=lead.id, team_id=team.id)
    payload = {"review_period_id": period.id}
    assert client.post("/api/assignments/auto/preview", json=payload).json()["total"] == 2

    # Not published, so the cached roster still applies
    db_session.add(Employee(name="Ben", role="Member", hierarchy="member", team_id=team.id))
    db_session.commit()
    assert client.post("/api/assignments/auto/preview", json=payload).json()["total"] == 2

    app.state.store.publish("employees")
    assert client.post("/api/assignments/auto/preview", json=payload).json()["total"] == 4


def test_link_form_reads_from_app_store(client, db_session, make_employee, make_template, period):
    lead = make_employee("Lena", "leader")
    ana = make_employee("Ana", reports_to=lead.id)
    token = client.post("/api/links/", json={
        "employee_id": ana.id,
        "appraiser_id": lead.id,
        "template_id": make_template().id,
        "review_period_id": period.id,
    }).json()["token"]

    form = client.get(f"/api/links/token/{token}").json()
    assert form["employee_name"] == "Ana"
    assert form["appraiser_name"] == "Lena"
    assert form["template"]["name"] == "Quarterly Review"

    ana.name = "Ana Silva"
    db_session.commit()
    assert client.get(f"/api/links/token/{token}").json()["employee_name"] == "Ana"

    app.state.store.publish("employees")
    assert client.get(f"/api/links/token/{token}").json()["employee_name"] == "Ana Silva"
