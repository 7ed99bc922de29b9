from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from salonhub.db import get_session, make_engine
from salonhub.main import app
from salonhub.models import StaffMember
from salonhub.schedule import DaySchedule, Shift, Weekday, WeeklySchedule

# Far enough ahead that bookings are never "in the past"
MONDAY = date(2031, 1, 6)


def nine_to_five_mondays() -> WeeklySchedule:
    return WeeklySchedule.empty().with_day(
        Weekday.monday,
        DaySchedule(enabled=True, shifts=(Shift(start=time(9, 0), end=time(17, 0)),)),
    )


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def staff(session):
    member = StaffMember(title="Senior Stylist", schedule=nine_to_five_mondays().to_document())
    session.add(member)
    session.commit()
    session.refresh(member)
    return member


@pytest.fixture
def client(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client: TestClient, email: str, role: str) -> dict:
    r = client.post("/users", json={"email": email, "password": "correct-horse", "role": role})
    assert r.status_code == 201, r.text
    r = client.post("/auth/login", data={"username": email, "password": "correct-horse"})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def vendor_headers(client):
    return register_and_login(client, "owner@salon.test", "vendor")


@pytest.fixture
def client_headers(client):
    return register_and_login(client, "ana@example.test", "client")
