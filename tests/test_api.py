"""HTTP tests for the JSON API."""

import pytest
from fastapi.testclient import TestClient

from fit_tracker.config import Settings
from fit_tracker.web import create_app


def _as(user_id: int) -> dict:
    return {"X-User-Id": str(user_id)}


@pytest.fixture
def owner(make_user):
    return make_user("owner", name="Olive Owner")


@pytest.fixture
def friend(make_user):
    return make_user("friend")


@pytest.fixture
def challenge_id(client, owner):
    """Past three-day challenge with a weight target and the sample weights."""
    response = client.post(
        "/api/challenges",
        json={
            "name": "January cut",
            "startDate": "2024-01-01",
            "endDate": "2024-01-03",
            "targetWeight": 70,
        },
        headers=_as(owner),
    )
    assert response.status_code == 201, response.text
    for day, weight in (("2024-01-01", 72), ("2024-01-03", 69)):
        saved = client.post(
            "/api/exercise-records",
            json={"recordDate": day, "weight": weight},
            headers=_as(owner),
        )
        assert saved.status_code == 200, saved.text
    return response.json()["id"]


def _share(client, owner, friend, challenge_id):
    return client.post(
        "/api/challenge-shares",
        json={"toUserId": friend, "challengeId": challenge_id},
        headers=_as(owner),
    )


class TestAuth:
    """Tests for signup, login and identity."""

    def test_signup_and_login(self, client, make_user):
        """Test that a new account can log in and gets its public info back."""
        user_id = make_user("kim", password="pw-kim", name="Kim")

        response = client.post("/api/auth/login", json={"username": "kim", "password": "pw-kim"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["token"]
        assert body["user"] == {"id": user_id, "username": "kim", "email": None, "name": "Kim"}

    def test_login_wrong_password(self, client, make_user):
        """Test that a wrong password is a 401 with success false."""
        make_user("kim", password="pw-kim")

        response = client.post("/api/auth/login", json={"username": "kim", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_duplicate_username(self, client, make_user):
        """Test that a taken username is a 409."""
        make_user("kim")

        response = client.post("/api/auth/signup", json={"username": "kim", "password": "x"})
        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_blank_password_is_rejected(self, client):
        """Test that a whitespace-only password is a bad request."""
        response = client.post("/api/auth/signup", json={"username": "kim", "password": "  "})
        assert response.status_code == 400

    def test_validate_token(self, client):
        """Test the presence-only bearer token check."""
        assert client.get("/api/auth/validate", headers={"Authorization": "Bearer abc"}).json() is True
        assert client.get("/api/auth/validate").json() is False

    def test_missing_identity(self, client):
        """Test that requests without X-User-Id are unauthorized."""
        assert client.get("/api/challenges").status_code == 401

    def test_unknown_or_malformed_identity(self, client):
        """Test that unknown and non-numeric ids are unauthorized."""
        assert client.get("/api/challenges", headers=_as(999)).status_code == 401
        assert client.get("/api/challenges", headers={"X-User-Id": "abc"}).status_code == 401

    def test_health(self, client):
        """Test the health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestExerciseRecords:
    """Tests for record endpoints."""

    def test_upsert_and_fetch_by_date(self, client, owner):
        """Test that posting the same day twice keeps one updated record."""
        client.post("/api/exercise-records", json={"recordDate": "2024-05-01", "weight": 80}, headers=_as(owner))
        client.post(
            "/api/exercise-records",
            json={"recordDate": "2024-05-01", "weight": 79.5, "exerciseDuration": 40},
            headers=_as(owner),
        )

        response = client.get("/api/exercise-records/date/2024-05-01", headers=_as(owner))
        assert response.status_code == 200
        assert response.json()["weight"] == 79.5
        assert response.json()["exerciseDuration"] == 40
        assert len(client.get("/api/exercise-records", headers=_as(owner)).json()) == 1

    def test_missing_day(self, client, owner):
        """Test that a day without a record is a 404."""
        response = client.get("/api/exercise-records/date/2024-05-02", headers=_as(owner))
        assert response.status_code == 404

    def test_bad_date(self, client, owner):
        """Test that an unparsable date is a bad request."""
        response = client.get("/api/exercise-records/date/yesterday", headers=_as(owner))
        assert response.status_code == 400

    def test_range(self, client, owner, challenge_id):
        """Test the inclusive date range query."""
        response = client.get(
            "/api/exercise-records/range",
            params={"startDate": "2024-01-02", "endDate": "2024-01-31"},
            headers=_as(owner),
        )
        assert response.status_code == 200
        assert [r["recordDate"] for r in response.json()] == ["2024-01-03"]

    def test_records_are_private(self, client, owner, friend, challenge_id):
        """Test that users only see their own records."""
        assert client.get("/api/exercise-records", headers=_as(friend)).json() == []

    def test_upload_and_serve_image(self, client, owner):
        """Test uploading a photo and fetching it back by URL."""
        response = client.post(
            "/api/exercise-records/upload",
            files={"file": ("meal.jpg", b"jpeg-bytes", "image/jpeg")},
            headers=_as(owner),
        )
        assert response.status_code == 200
        url = response.text
        assert url.startswith("/api/exercise-records/images/")
        assert url.endswith(".jpg")

        image = client.get(url)
        assert image.status_code == 200
        assert image.content == b"jpeg-bytes"

    def test_upload_empty_file(self, client, owner):
        """Test that an empty upload is a bad request."""
        response = client.post(
            "/api/exercise-records/upload",
            files={"file": ("empty.png", b"", "image/png")},
            headers=_as(owner),
        )
        assert response.status_code == 400

    def test_upload_multiple(self, client, owner):
        """Test that each non-empty part of a multi upload gets a URL."""
        response = client.post(
            "/api/exercise-records/upload-multiple",
            files=[
                ("files", ("a.png", b"a", "image/png")),
                ("files", ("b.png", b"b", "image/png")),
            ],
            headers=_as(owner),
        )
        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_unknown_image(self, client):
        """Test that a missing image is a 404."""
        assert client.get("/api/exercise-records/images/nothing.png").status_code == 404


class TestChallenges:
    """Tests for owner challenge endpoints."""

    def test_create_and_list(self, client, owner, challenge_id):
        """Test creating a challenge and listing it with isActive."""
        challenges = client.get("/api/challenges", headers=_as(owner)).json()

        assert [c["id"] for c in challenges] == [challenge_id]
        assert challenges[0]["targetWeight"] == 70
        assert challenges[0]["isActive"] is False

    def test_end_before_start(self, client, owner):
        """Test that an end date before the start date is refused."""
        response = client.post(
            "/api/challenges",
            json={"name": "Backwards", "startDate": "2024-02-01", "endDate": "2024-01-01"},
            headers=_as(owner),
        )
        assert response.status_code == 400

    def test_owner_detail(self, client, owner, challenge_id):
        """Test the owner view of recorded days and the summary."""
        response = client.get(f"/api/challenges/{challenge_id}", headers=_as(owner))
        assert response.status_code == 200
        body = response.json()

        assert [d["date"] for d in body["dailyProgress"]] == ["2024-01-01", "2024-01-03"]
        assert body["dailyProgress"][1]["weight"] == 69
        overall = body["overallProgress"]
        assert overall["totalDays"] == 2
        assert overall["weightSuccessCount"] == 1
        assert overall["weightSuccessRate"] == pytest.approx(69 / 70 * 100)

    def test_other_users_challenge_is_hidden(self, client, friend, challenge_id):
        """Test that another user's challenge looks missing."""
        assert client.get(f"/api/challenges/{challenge_id}", headers=_as(friend)).status_code == 404

    def test_update_targets(self, client, owner, challenge_id):
        """Test that new targets are stored and shown in the detail."""
        response = client.put(
            f"/api/challenges/{challenge_id}/targets",
            json={"targetWeight": 71, "targetExerciseDuration": 120},
            headers=_as(owner),
        )
        assert response.status_code == 200
        assert response.json()["targetWeight"] == 71
        assert response.json()["targetExerciseDuration"] == 120

        detail = client.get(f"/api/challenges/{challenge_id}", headers=_as(owner)).json()
        assert detail["challenge"]["targetWeight"] == 71

    def test_update_targets_of_other_user(self, client, friend, challenge_id):
        """Test that only the owner can change targets."""
        response = client.put(
            f"/api/challenges/{challenge_id}/targets",
            json={"targetWeight": 50},
            headers=_as(friend),
        )
        assert response.status_code == 404


class TestShares:
    """Tests for the share lifecycle."""

    def test_share_accept_and_view(self, client, owner, friend, challenge_id):
        """Test the full share flow up to the shared progress view."""
        created = _share(client, owner, friend, challenge_id)
        assert created.status_code == 200
        share = created.json()
        assert share["status"] == "PENDING"
        assert share["fromUserName"] == "Olive Owner"
        assert share["challengeName"] == "January cut"

        received = client.get("/api/challenge-shares/received", headers=_as(friend)).json()
        assert [s["id"] for s in received] == [share["id"]]

        answered = client.put(
            f"/api/challenge-shares/{share['id']}/status",
            params={"status": "accepted"},
            headers=_as(friend),
        )
        assert answered.status_code == 200
        assert answered.json()["status"] == "ACCEPTED"

        assert client.get("/api/challenge-shares/received", headers=_as(friend)).json() == []
        accepted = client.get("/api/challenge-shares/accepted", headers=_as(friend)).json()
        assert [s["id"] for s in accepted] == [share["id"]]
        sent = client.get("/api/challenge-shares/sent", headers=_as(owner)).json()
        assert [s["status"] for s in sent] == ["ACCEPTED"]

        detail = client.get(f"/api/challenge-shares/accepted/{share['id']}/detail", headers=_as(friend))
        assert detail.status_code == 200
        body = detail.json()
        assert [d["date"] for d in body["dailyProgress"]] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert body["dailyProgress"][0]["weightDiff"] == pytest.approx(2)
        assert body["dailyProgress"][1]["weightDiff"] is None
        assert "weight" not in body["dailyProgress"][0]
        overall = body["overallProgress"]
        assert overall["weightRecordedDays"] == 2
        assert overall["weightSuccessCount"] == 1
        assert overall["weightSuccessRate"] == pytest.approx(50.0)

    def test_duplicate_pending_share(self, client, owner, friend, challenge_id):
        """Test that a second pending share to the same user conflicts."""
        assert _share(client, owner, friend, challenge_id).status_code == 200
        assert _share(client, owner, friend, challenge_id).status_code == 409

    def test_rejected_share_cannot_be_viewed(self, client, owner, friend, challenge_id):
        """Test that a rejected share gives no access to progress."""
        share_id = _share(client, owner, friend, challenge_id).json()["id"]
        client.put(f"/api/challenge-shares/{share_id}/status", params={"status": "REJECTED"}, headers=_as(friend))

        response = client.get(f"/api/challenge-shares/accepted/{share_id}/detail", headers=_as(friend))
        assert response.status_code == 403

    def test_pending_share_cannot_be_viewed(self, client, owner, friend, challenge_id):
        """Test that an unanswered share gives no access to progress."""
        share_id = _share(client, owner, friend, challenge_id).json()["id"]

        response = client.get(f"/api/challenge-shares/accepted/{share_id}/detail", headers=_as(friend))
        assert response.status_code == 403

    def test_answered_share_is_final(self, client, owner, friend, challenge_id):
        """Test that an answered share cannot be answered again."""
        share_id = _share(client, owner, friend, challenge_id).json()["id"]
        url = f"/api/challenge-shares/{share_id}/status"
        client.put(url, params={"status": "REJECTED"}, headers=_as(friend))

        response = client.put(url, params={"status": "ACCEPTED"}, headers=_as(friend))
        assert response.status_code == 400

    def test_only_recipient_answers(self, client, owner, friend, challenge_id):
        """Test that the sender cannot accept their own share."""
        share_id = _share(client, owner, friend, challenge_id).json()["id"]

        response = client.put(
            f"/api/challenge-shares/{share_id}/status",
            params={"status": "ACCEPTED"},
            headers=_as(owner),
        )
        assert response.status_code == 403

    def test_unknown_status(self, client, owner, friend, challenge_id):
        """Test that an unknown status value is a bad request."""
        share_id = _share(client, owner, friend, challenge_id).json()["id"]

        response = client.put(
            f"/api/challenge-shares/{share_id}/status",
            params={"status": "MAYBE"},
            headers=_as(friend),
        )
        assert response.status_code == 400

    def test_only_owner_shares(self, client, make_user, owner, friend, challenge_id):
        """Test that a non-owner cannot share a challenge."""
        other = make_user("other")
        assert _share(client, friend, other, challenge_id).status_code == 403

    def test_cannot_share_with_self(self, client, owner, challenge_id):
        """Test that sharing with yourself is a bad request."""
        assert _share(client, owner, owner, challenge_id).status_code == 400

    def test_unknown_recipient_or_challenge(self, client, owner, friend, challenge_id):
        """Test that missing recipients and challenges are 404s."""
        assert _share(client, owner, 999, challenge_id).status_code == 404
        assert _share(client, owner, friend, 999).status_code == 404

    def test_user_search(self, client, make_user, owner, friend):
        """Test searching by name fragment, by id and with no query."""
        make_user("frieda")

        found = client.get("/api/challenge-shares/users/search", params={"query": "FRI"}, headers=_as(owner))
        assert sorted(u["username"] for u in found.json()) == ["frieda", "friend"]

        by_id = client.get("/api/challenge-shares/users/search", params={"query": str(friend)}, headers=_as(owner))
        assert [u["id"] for u in by_id.json()] == [friend]

        everyone = client.get("/api/challenge-shares/users/search", headers=_as(owner)).json()
        assert owner not in [u["id"] for u in everyone]

    def test_shared_detail_includes_routines(self, client, owner, friend, challenge_id):
        """Test that the shared view carries the owner's routine completion."""
        client.post(
            "/api/routines",
            json={"routineType": "MORNING", "routineItems": ["stretch", "water"]},
            headers=_as(owner),
        )
        client.post(
            "/api/routines/checks",
            json={"routineType": "MORNING", "checkDate": "2024-01-01", "checkedItems": ["stretch", "water"]},
            headers=_as(owner),
        )
        share_id = _share(client, owner, friend, challenge_id).json()["id"]
        client.put(f"/api/challenge-shares/{share_id}/status", params={"status": "ACCEPTED"}, headers=_as(friend))

        body = client.get(f"/api/challenge-shares/accepted/{share_id}/detail", headers=_as(friend)).json()

        assert body["dailyProgress"][0]["morningRoutineChecked"] == 2
        assert body["dailyProgress"][0]["morningRoutineTotal"] == 2
        assert body["dailyProgress"][1]["morningRoutineChecked"] == 0
        assert body["overallProgress"]["morningRoutineSuccessDays"] == 1
        assert body["overallProgress"]["morningRoutineRecordedDays"] == 3
        assert body["overallProgress"]["eveningRoutineRecordedDays"] == 0


class TestRoutines:
    """Tests for routine endpoints."""

    def test_save_and_get_routine(self, client, owner):
        """Test saving a routine and reading it back by type."""
        response = client.post(
            "/api/routines",
            json={"routineType": "morning", "routineItems": ["water", "stretch"]},
            headers=_as(owner),
        )
        assert response.status_code == 200
        assert response.json()["routineType"] == "MORNING"

        fetched = client.get("/api/routines/Morning", headers=_as(owner))
        assert fetched.status_code == 200
        assert fetched.json()["routineItems"] == ["water", "stretch"]
        assert len(client.get("/api/routines", headers=_as(owner)).json()) == 1

    def test_missing_routine(self, client, owner):
        """Test that an unconfigured routine type is a 404."""
        assert client.get("/api/routines/EVENING", headers=_as(owner)).status_code == 404

    def test_unknown_routine_type(self, client, owner):
        """Test that an unknown routine type is a bad request."""
        assert client.get("/api/routines/NOON", headers=_as(owner)).status_code == 400
        response = client.post(
            "/api/routines",
            json={"routineType": "NOON", "routineItems": []},
            headers=_as(owner),
        )
        assert response.status_code == 400

    def test_checks(self, client, owner):
        """Test that routine checks are replaced per day and type."""
        for items in (["water"], ["water", "stretch"]):
            response = client.post(
                "/api/routines/checks",
                json={"routineType": "MORNING", "checkDate": "2024-05-01", "checkedItems": items},
                headers=_as(owner),
            )
            assert response.status_code == 200

        checks = client.get("/api/routines/checks/2024-05-01", headers=_as(owner)).json()
        assert len(checks) == 1
        assert checks[0]["checkedItems"] == ["water", "stretch"]
        assert client.get("/api/routines/checks/2024-05-02", headers=_as(owner)).json() == []


HUGE_ID = "99999999999999999999"


class TestInputBounds:
    """Tests for values the store cannot hold."""

    def test_infinite_weight_is_rejected(self, client, owner):
        """Test that an overflowing float is refused before anything is stored."""
        response = client.post(
            "/api/exercise-records",
            content='{"recordDate": "2024-01-01", "weight": 1e999}',
            headers={**_as(owner), "Content-Type": "application/json"},
        )
        assert response.status_code == 400

        listed = client.get("/api/exercise-records", headers=_as(owner))
        assert listed.status_code == 200
        assert listed.json() == []

    def test_nan_target_is_rejected(self, client, owner):
        """Test that NaN targets are refused and no challenge is created."""
        response = client.post(
            "/api/challenges",
            content=(
                '{"name": "Bad", "startDate": "2024-01-01", "endDate": "2024-01-02",'
                ' "targetMuscleMass": NaN}'
            ),
            headers={**_as(owner), "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert client.get("/api/challenges", headers=_as(owner)).json() == []

    def test_oversized_duration_is_rejected(self, client, owner):
        """Test that an integer beyond 64 bits is a bad request."""
        response = client.post(
            "/api/exercise-records",
            content=f'{{"recordDate": "2024-01-01", "exerciseDuration": {HUGE_ID}}}',
            headers={**_as(owner), "Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_oversized_identity_is_unauthorized(self, client):
        """Test that an X-User-Id beyond 64 bits is treated as unknown."""
        response = client.get("/api/challenges", headers={"X-User-Id": HUGE_ID})
        assert response.status_code == 401

    def test_non_positive_identity_is_unauthorized(self, client):
        """Test that zero and negative ids never resolve to a user."""
        assert client.get("/api/challenges", headers={"X-User-Id": "0"}).status_code == 401
        assert client.get("/api/challenges", headers={"X-User-Id": "-1"}).status_code == 401

    def test_oversized_path_ids(self, client, owner):
        """Test that oversized ids in paths are bad requests."""
        assert client.get(f"/api/challenges/{HUGE_ID}", headers=_as(owner)).status_code == 400
        assert client.put(
            f"/api/challenges/{HUGE_ID}/targets", json={}, headers=_as(owner)
        ).status_code == 400
        assert client.get(
            f"/api/challenge-shares/accepted/{HUGE_ID}/detail", headers=_as(owner)
        ).status_code == 400
        assert client.put(
            f"/api/challenge-shares/{HUGE_ID}/status",
            params={"status": "ACCEPTED"},
            headers=_as(owner),
        ).status_code == 400

    def test_oversized_share_body_ids(self, client, owner, challenge_id):
        """Test that oversized ids in a share request are bad requests."""
        response = client.post(
            "/api/challenge-shares",
            content=f'{{"toUserId": {HUGE_ID}, "challengeId": {challenge_id}}}',
            headers={**_as(owner), "Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_oversized_search_id_finds_nobody(self, client, owner, friend):
        """Test that a numeric search beyond 64 bits matches no user."""
        response = client.get(
            "/api/challenge-shares/users/search",
            params={"query": HUGE_ID},
            headers=_as(owner),
        )
        assert response.status_code == 200
        assert response.json() == []


class TestDevDefaultUser:
    """Tests for the development identity fallback."""

    def test_missing_header_acts_as_default_user(self, temp_data_dir):
        """Test that header-less requests run as the configured user."""
        settings = Settings(data_dir=temp_data_dir, dev_default_user=1)
        with TestClient(create_app(settings)) as client:
            first = client.post("/api/auth/signup", json={"username": "dev", "password": "pw"})
            second = client.post("/api/auth/signup", json={"username": "other", "password": "pw"})
            assert first.json()["userId"] == 1

            saved = client.post("/api/exercise-records", json={"recordDate": "2024-01-01", "weight": 80})
            assert saved.status_code == 200
            assert saved.json()["userId"] == 1

            assert len(client.get("/api/exercise-records").json()) == 1
            other_id = second.json()["userId"]
            assert client.get("/api/exercise-records", headers=_as(other_id)).json() == []

    def test_default_user_must_exist(self, temp_data_dir):
        """Test that a fallback id naming no user is still refused."""
        settings = Settings(data_dir=temp_data_dir, dev_default_user=42)
        with TestClient(create_app(settings)) as client:
            assert client.get("/api/challenges").status_code == 401
