"""Pytest fixtures: per-test SQLite database and helpers for seeding rosters."""
from datetime import datetime
from typing import Optional

import pytest
import pytz
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from attendance_tracker.database import Base, get_db
from attendance_tracker.main import app

# Import all models so they register with Base.metadata
from attendance_tracker.models.user import User                                   # noqa: F401
from attendance_tracker.models.event import Event, EventType                      # noqa: F401
from attendance_tracker.models.registration import Registration, Team, TeamMember  # noqa: F401
from attendance_tracker.models.attendance import AttendanceRecord                 # noqa: F401
from attendance_tracker.view.models import (
    AttendanceRecord as RecordView,
    AttendanceStatus,
    EventInfo,
    EventType as ViewEventType,
    Group,
    Participant,
    RecordUser,
)

T_ENTRY = datetime(2026, 3, 14, 10, 0, tzinfo=pytz.utc)
T_EXIT = datetime(2026, 3, 14, 11, 0, tzinfo=pytz.utc)


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: seed the database directly (registration is not part of the API)
# ---------------------------------------------------------------------------
def create_test_user(db, name: str, email: str, enrollment_no: Optional[str] = None,
                     phone_number: Optional[str] = None) -> User:
    user = User(name=name, email=email, enrollment_no=enrollment_no, phone_number=phone_number)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_test_event(db, name: str = "Aavishkar", event_type: EventType = EventType.solo,
                      min_member: Optional[int] = None, max_member: Optional[int] = None) -> Event:
    ev = Event(name=name, event_type=event_type, min_member=min_member, max_member=max_member)
    db.add(ev)
    db.commit()
    db.refresh(ev)
    return ev


def register_solo(db, ev: Event, users: list) -> None:
    for position, user in enumerate(users):
        db.add(Registration(event_id=ev.event_id, user_id=user.user_id, position=position))
    db.commit()


def create_test_team(db, ev: Event, leader: User, members: list, position: int = 0) -> Team:
    team = Team(event_id=ev.event_id, leader_id=leader.user_id, position=position)
    db.add(team)
    db.flush()
    for idx, member in enumerate(members):
        db.add(TeamMember(team_id=team.team_id, user_id=member.user_id, position=idx))
    db.commit()
    db.refresh(team)
    return team


# ---------------------------------------------------------------------------
# Helpers: view-layer value objects
# ---------------------------------------------------------------------------
def person(name: str, email: str, pid: Optional[str] = None, **kwargs) -> Participant:
    return Participant(id=pid or f"id-{email.lower()}", name=name, email=email, **kwargs)


def group(group_id: str, leader: Participant, *members: Participant) -> Group:
    return Group(group_id=group_id, leader=leader, members=tuple(members))


def record(p: Participant, status: AttendanceStatus = AttendanceStatus.PRESENT,
           entry_time: Optional[datetime] = T_ENTRY, exit_time: Optional[datetime] = None,
           created_at: Optional[datetime] = T_ENTRY, rid: Optional[str] = None) -> RecordView:
    return RecordView(
        id=rid or f"rec-{p.email.lower()}",
        user=RecordUser(id=p.id, name=p.name, email=p.email),
        event_id="ev-1",
        entry_time=entry_time,
        exit_time=exit_time,
        status=status,
        created_at=created_at,
        updated_at=created_at,
    )


def solo_event(name: str = "Aavishkar") -> EventInfo:
    return EventInfo(id="ev-1", name=name, event_type=ViewEventType.SOLO)


def group_event(name: str = "Code Relay", min_member: int = 2, max_member: int = 4) -> EventInfo:
    return EventInfo(id="ev-1", name=name, event_type=ViewEventType.GROUP,
                     min_member=min_member, max_member=max_member)
