from datetime import timedelta

from squad import auth, models

from conftest import bearer


def test_register_player_creates_profile_and_token(client, session_factory):
    resp = client.post(
        "/api/auth/register",
        json={"email": "new@squadclub.org", "password": "s3cret-pass", "fullName": "New Player", "firstName": "New"},
    )
    assert resp.status_code == 201
    token = resp.json()["data"]["access_token"]

    db = session_factory()
    try:
        user = db.query(models.AppUser).filter(models.AppUser.email == "new@squadclub.org").one()
        assert user.role == "player"
        assert user.password_hash != "s3cret-pass"
        player = db.query(models.Player).filter(models.Player.user_id == user.id).one()
        assert player.first_name == "New"
    finally:
        db.close()

    resp = client.get(f"/players?id={player.id}", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


def test_register_coach_creates_coach_profile(client, session_factory):
    resp = client.post(
        "/api/auth/register",
        json={"email": "c@squadclub.org", "password": "s3cret-pass", "fullName": "Coach C", "role": "coach"},
    )
    assert resp.status_code == 201

    db = session_factory()
    try:
        user = db.query(models.AppUser).filter(models.AppUser.email == "c@squadclub.org").one()
        assert db.query(models.Coach).filter(models.Coach.user_id == user.id).count() == 1
    finally:
        db.close()


def test_register_rejects_admin_and_duplicates(client, world):
    resp = client.post(
        "/api/auth/register",
        json={"email": "boss@squadclub.org", "password": "s3cret-pass", "fullName": "Boss", "role": "admin"},
    )
    assert resp.status_code == 400

    resp = client.post(
        "/api/auth/register",
        json={"email": "p1@squadclub.org", "password": "s3cret-pass", "fullName": "Dup"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "User already exists"


def test_login(client, session_factory):
    client.post(
        "/api/auth/register",
        json={"email": "login@squadclub.org", "password": "s3cret-pass", "fullName": "Log In"},
    )

    resp = client.post("/api/auth/login", json={"email": "login@squadclub.org", "password": "s3cret-pass"})
    assert resp.status_code == 200
    assert resp.json()["data"]["token_type"] == "bearer"

    resp = client.post("/api/auth/login", json={"email": "login@squadclub.org", "password": "wrong-pass"})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Invalid credentials"}


def test_bad_and_expired_tokens_are_rejected(client, world):
    resp = client.get("/players", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Could not validate credentials"

    expired = auth.create_access_token({"sub": str(world.admin)}, expires_delta=timedelta(minutes=-5))
    resp = client.get("/players", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401


def test_inactive_user_is_rejected(client, world, session_factory):
    db = session_factory()
    try:
        db.get(models.AppUser, world.coach1_user).is_active = False
        db.commit()
    finally:
        db.close()

    resp = client.get("/players", headers=bearer(world.coach1_user))
    assert resp.status_code == 401


def test_unknown_role_is_stopped_at_the_route(client, session_factory):
    db = session_factory()
    try:
        parent = models.AppUser(email="parent@squadclub.org", full_name="Parent", role="parent")
        db.add(parent)
        db.commit()
        parent_id = parent.id
    finally:
        db.close()

    resp = client.get("/attendance", headers=bearer(parent_id))
    assert resp.status_code == 403
    assert resp.json()["error"] == "Forbidden: Insufficient role"


def test_register_race_on_same_email_is_400(client, session_factory, monkeypatch):
    real_hash = auth.hash_password

    def hash_after_competing_signup(password):
        # Another request registers the same email after the existence check
        db = session_factory()
        try:
            db.add(models.AppUser(email="race@squadclub.org", full_name="First", role="player"))
            db.commit()
        finally:
            db.close()
        return real_hash(password)

    monkeypatch.setattr(auth, "hash_password", hash_after_competing_signup)
    resp = client.post(
        "/api/auth/register",
        json={"email": "race@squadclub.org", "password": "s3cret-pass", "fullName": "Second"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "User already exists"}

    db = session_factory()
    try:
        assert db.query(models.AppUser).filter(models.AppUser.email == "race@squadclub.org").count() == 1
        assert db.query(models.Player).count() == 0
    finally:
        db.close()
