import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from appraisal_hub.database import Base, get_db
from appraisal_hub.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        # Startup warmed the store from the app engine, not the test session
        app.state.store.invalidate()
        yield c
    app.dependency_overrides.clear()
    app.state.store.invalidate()


@pytest.fixture(scope="function")
def make_employee(db_session):
    """Factory for roster rows; returns the stored Employee."""
    from appraisal_hub.models.employee import Employee

    def _make(name, hierarchy="member", reports_to=None, team_id=None, status="permanent"):
        employee = Employee(
            name=name,
            role=hierarchy.title(),
            hierarchy=hierarchy,
            reports_to=reports_to,
            team_id=team_id,
            employment_status=status,
        )
        db_session.add(employee)
        db_session.commit()
        app.state.store.publish("employees")
        return employee
    return _make


@pytest.fixture(scope="function")
def make_team(db_session):
    from appraisal_hub.models.team import Team

    def _make(name):
        team = Team(name=name, leader_ids=[])
        db_session.add(team)
        db_session.commit()
        app.state.store.publish("teams")
        return team
    return _make


@pytest.fixture(scope="function")
def period(db_session):
    """An active Q1 review period."""
    from appraisal_hub.models.review_period import PeriodType
    from appraisal_hub.schemas.period import ReviewPeriodCreate
    from appraisal_hub.services.period_service import PeriodService

    return PeriodService(db_session, app.state.store).create(
        ReviewPeriodCreate(type=PeriodType.Q1, year=2025, status="active")
    )


@pytest.fixture(scope="function")
def make_template(db_session):
    """
    Factory for a two-item template: a 60-weight rating question and a
    40-weight text question.
    """
    from appraisal_hub.schemas.template import TemplateCreate
    from appraisal_hub.services.template_service import TemplateService

    def _make(template_type="leader-to-member", name="Quarterly Review"):
        return TemplateService(db_session, app.state.store).create(TemplateCreate(
            name=name,
            type=template_type,
            categories=[{
                "category_name": "Performance",
                "items": [
                    {"id": "q-rating", "text": "Delivers on commitments", "type": "rating-1-5", "weight": 60},
                    {"id": "q-text", "text": "What went well?", "type": "text", "weight": 40},
                ],
            }],
        ))
    return _make
