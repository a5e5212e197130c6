import datetime
import os
from types import SimpleNamespace

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from squad import auth, models
from squad.db import Base, get_db
from squad.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session_factory():
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def bearer(user_id: int) -> dict:
    return {"Authorization": f"Bearer {auth.create_access_token({'sub': str(user_id)})}"}


@pytest.fixture
def world(session_factory):
    """Two coached batches, one orphan batch, two players with records, and spare users."""
    db = session_factory()
    try:
        def user(email, role):
            u = models.AppUser(email=email, full_name=email.split("@")[0], role=role)
            db.add(u)
            db.flush()
            return u

        admin = user("admin@squadclub.org", "admin")
        coach1_user = user("coach1@squadclub.org", "coach")
        coach2_user = user("coach2@squadclub.org", "coach")
        lone_coach_user = user("lone@squadclub.org", "coach")
        player1_user = user("p1@squadclub.org", "player")
        player2_user = user("p2@squadclub.org", "player")
        ghost_player_user = user("ghost@squadclub.org", "player")

        coach1 = models.Coach(user_id=coach1_user.id)
        coach2 = models.Coach(user_id=coach2_user.id)
        db.add_all([coach1, coach2])
        db.flush()

        player1 = models.Player(user_id=player1_user.id, first_name="Asha", last_name="Rao", position="Forward")
        player2 = models.Player(user_id=player2_user.id, first_name="Ben", last_name="Okafor", position="Keeper")
        db.add_all([player1, player2])
        db.flush()

        batch1 = models.Batch(name="Under 16", coach_id=coach1.id)
        batch2 = models.Batch(name="Under 18", coach_id=coach2.id)
        orphan_batch = models.Batch(name="Holiday camp", coach_id=None)
        db.add_all([batch1, batch2, orphan_batch])
        db.flush()

        session1 = models.TrainingSession(batch_id=batch1.id, title="Drills", session_date=datetime.date(2024, 1, 1))
        session2 = models.TrainingSession(batch_id=batch2.id, title="Match prep", session_date=datetime.date(2024, 1, 2))
        orphan_session = models.TrainingSession(batch_id=orphan_batch.id, title="Camp", session_date=datetime.date(2024, 1, 3))
        db.add_all([session1, session2, orphan_session])
        db.flush()

        att1 = models.SessionAttendance(session_id=session1.id, player_id=player1.id, status="present")
        att2 = models.SessionAttendance(session_id=session2.id, player_id=player2.id, status="absent")
        att3 = models.SessionAttendance(session_id=orphan_session.id, player_id=player1.id, status="excused")
        db.add_all([att1, att2, att3])
        db.flush()

        note1 = models.PerformanceNote(player_id=player1.id, coach_id=coach1.id, date=datetime.date(2024, 2, 1), note="Great first touch")
        note2 = models.PerformanceNote(player_id=player2.id, coach_id=coach2.id, date=datetime.date(2024, 2, 2), note="Work on distribution")
        db.add_all([note1, note2])
        db.flush()

        football = models.Game(name="Football")
        cricket = models.Game(name="Cricket")
        tennis = models.Game(name="Tennis")
        db.add_all([football, cricket, tennis])
        db.flush()
        db.add(models.PlayerGame(player_id=player1.id, game_id=football.id))
        db.commit()

        return SimpleNamespace(
            admin=admin.id,
            coach1_user=coach1_user.id, coach1=coach1.id,
            coach2_user=coach2_user.id, coach2=coach2.id,
            lone_coach_user=lone_coach_user.id,
            player1_user=player1_user.id, player1=player1.id,
            player2_user=player2_user.id, player2=player2.id,
            ghost_player_user=ghost_player_user.id,
            session1=session1.id, session2=session2.id, orphan_session=orphan_session.id,
            att1=att1.id, att2=att2.id, att3=att3.id,
            note1=note1.id, note2=note2.id,
            football=football.id, cricket=cricket.id, tennis=tennis.id,
        )
    finally:
        db.close()
