from cafe_app.extensions import db
from cafe_app.models.user import User
from cafe_app.services import result_service
from conftest import EVENING, TODAY, SAMPLE_OPTIONS, login, post_sample_menu


def _post_menu(client, headers, menu_date="2025-01-02"):
    r = client.post("/api/cafe/menu", json={"menu_date": menu_date, "options": SAMPLE_OPTIONS}, headers=headers)
    assert r.status_code == 201, r.data
    return [o["id"] for o in r.get_json()["options"]]


def _vote(client, email, option_id):
    return client.post("/api/cafe/vote", json={"option_id": option_id}, headers=login(client, email))


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}


def test_register_creates_voter(client):
    r = client.post("/api/auth/register", json={"name": "Dan", "email": "Dan@Example.com", "password": "secret1"})
    assert r.status_code == 201, r.data
    body = r.get_json()
    assert body["user"]["role"] == "USER"
    assert body["user"]["email"] == "dan@example.com"

    r = client.post("/api/auth/register", json={"email": "dan@example.com", "password": "secret1"})
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "EMAIL_IN_USE"


def test_login_rejects_bad_password(client):
    r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope"})
    assert r.status_code == 401
    assert r.get_json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_requires_token(client):
    r = client.get("/api/cafe/tomorrow")
    assert r.status_code == 401
    assert r.get_json()["error"]["code"] == "UNAUTHORIZED"

    r = client.get("/api/cafe/tomorrow", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_chef_endpoints_forbidden_for_voters(client):
    h = login(client, "alice@example.com")
    r = client.post("/api/cafe/menu", json={"menu_date": "2025-01-02", "options": SAMPLE_OPTIONS}, headers=h)
    assert r.status_code == 403
    assert r.get_json()["error"]["code"] == "FORBIDDEN"

    assert client.get("/api/cafe/votes/count", headers=h).status_code == 403
    assert client.post("/api/cafe/close-voting", json={}, headers=h).status_code == 403
    assert client.post("/api/cafe/suggestions/open", headers=h).status_code == 403


def test_post_menu_validation(client):
    h = login(client, "chef@example.com")
    r = client.post("/api/cafe/menu", json={"menu_date": "2025-01-02", "options": SAMPLE_OPTIONS[:2]}, headers=h)
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "VALIDATION_ERROR"

    r = client.post("/api/cafe/menu", json={"menu_date": "02/01/2025", "options": SAMPLE_OPTIONS}, headers=h)
    assert r.status_code == 400

    r = client.post("/api/cafe/menu", json={"menu_date": "2025-01-02", "options": [{"dish_name": ""}] * 3}, headers=h)
    assert r.status_code == 400


def test_vote_validation(client):
    h = login(client, "alice@example.com")
    r = client.post("/api/cafe/vote", json={"option_id": "2"}, headers=h)
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "VALIDATION_ERROR"

    r = client.post("/api/cafe/vote", json={}, headers=h)
    assert r.status_code == 400


def test_vote_for_unknown_option(client):
    r = _vote(client, "alice@example.com", 9999)
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "INVALID_OPTION"


def test_upload_image_not_implemented(client):
    r = client.post("/api/cafe/menu/upload-image", headers=login(client, "chef@example.com"))
    assert r.status_code == 501
    assert r.get_json()["error"]["code"] == "NOT_IMPLEMENTED"


def test_tomorrow_hides_tally_until_cutoff(client, clock):
    ids = _post_menu(client, login(client, "chef@example.com"))
    assert _vote(client, "alice@example.com", ids[1]).status_code == 200

    h = login(client, "alice@example.com")
    body = client.get("/api/cafe/tomorrow", headers=h).get_json()
    assert body["menu_date"] == "2025-01-02"
    assert [o["vote_count"] for o in body["options"]] == [0, 0, 0]
    assert body["user_vote"] == ids[1]
    assert body["has_voted"] is True
    assert body["voting_closed"] is False
    assert body["time_remaining"] == {"hours": 8, "minutes": 0}
    assert body["total_voters"] == 1

    clock.set_time(EVENING)
    body = client.get("/api/cafe/tomorrow", headers=h).get_json()
    assert [o["vote_count"] for o in body["options"]] == [0, 1, 0]
    assert body["voting_closed"] is True
    assert body["time_remaining"] is None


def test_my_vote_and_change(client):
    ids = _post_menu(client, login(client, "chef@example.com"))
    h = login(client, "bob@example.com")

    assert client.get("/api/cafe/my-vote", headers=h).get_json()["vote"] is None

    client.post("/api/cafe/vote", json={"option_id": ids[0]}, headers=h)
    client.post("/api/cafe/vote", json={"option_id": ids[2]}, headers=h)

    vote = client.get("/api/cafe/my-vote", headers=h).get_json()["vote"]
    assert vote["option_id"] == ids[2]
    assert vote["option_number"] == 3
    assert vote["dish_name"] == "Falafel Wrap"


def test_vote_after_cutoff_rejected(client, clock):
    ids = _post_menu(client, login(client, "chef@example.com"))
    clock.set_time(EVENING)
    r = _vote(client, "alice@example.com", ids[0])
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "VOTING_CLOSED"


def test_repost_after_votes_conflicts(client):
    chef = login(client, "chef@example.com")
    ids = _post_menu(client, chef)
    _vote(client, "alice@example.com", ids[0])

    r = client.post("/api/cafe/menu", json={"menu_date": "2025-01-02", "options": SAMPLE_OPTIONS}, headers=chef)
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "MENU_HAS_VOTES"


def test_update_and_delete_option(client):
    chef = login(client, "chef@example.com")
    ids = _post_menu(client, chef)

    r = client.put(f"/api/cafe/menu/{ids[0]}", json={"dish_name": "Lamb Kabsa"}, headers=chef)
    assert r.status_code == 200, r.data
    assert r.get_json()["option"]["dish_name"] == "Lamb Kabsa"
    assert r.get_json()["option"]["option_number"] == 1

    assert client.put(f"/api/cafe/menu/{ids[0]}", json={}, headers=chef).status_code == 400
    assert client.put("/api/cafe/menu/9999", json={"dish_name": "x"}, headers=chef).status_code == 404

    assert client.delete(f"/api/cafe/menu/{ids[2]}", headers=chef).status_code == 200
    r = client.delete(f"/api/cafe/menu/{ids[2]}", headers=chef)
    assert r.status_code == 404
    assert r.get_json()["error"]["code"] == "NOT_FOUND"


def test_vote_counts_for_chef(client):
    chef = login(client, "chef@example.com")
    ids = _post_menu(client, chef)
    _vote(client, "alice@example.com", ids[2])
    _vote(client, "bob@example.com", ids[2])

    body = client.get("/api/cafe/votes/count", headers=chef).get_json()
    assert [o["vote_count"] for o in body["options"]] == [0, 0, 2]
    assert body["total_votes"] == 2
    assert body["voting_closed"] is False


def test_full_voting_day(client, clock):
    admin = login(client, "admin@example.com")
    ids = _post_menu(client, admin)

    assert _vote(client, "alice@example.com", ids[1]).status_code == 200
    assert _vote(client, "bob@example.com", ids[1]).status_code == 200
    assert _vote(client, "carol@example.com", ids[0]).status_code == 200

    clock.set_time(EVENING)
    chef = login(client, "chef@example.com")
    r = client.post("/api/cafe/close-voting", json={}, headers=chef)
    assert r.status_code == 200, r.data
    body = r.get_json()
    assert body["success"] is True
    assert body["is_tie"] is False
    assert body["winner"]["id"] == ids[1]
    assert body["winner"]["option_number"] == 2
    assert body["total_votes"] == 2
    assert body["votes_cast"] == 3

    history = client.get("/api/cafe/history", headers=chef).get_json()
    assert history["total"] == 1
    entry = history["history"][0]
    assert entry["menu_date"] == "2025-01-02"
    assert entry["dish_name"] == "Beef Lasagna"
    assert entry["total_votes"] == 2
    assert entry["was_tie"] is False

    decisions = client.get("/api/cafe/decisions/2025-01-02", headers=chef).get_json()["decisions"]
    assert len(decisions) == 1
    assert decisions[0]["source"] == "auto"


def test_tie_then_chef_decides(client, clock):
    chef = login(client, "chef@example.com")
    ids = _post_menu(client, chef)
    _vote(client, "alice@example.com", ids[0])
    _vote(client, "bob@example.com", ids[2])

    clock.set_time(EVENING)
    body = client.post("/api/cafe/close-voting", json={}, headers=chef).get_json()
    assert body["success"] is False
    assert body["is_tie"] is True
    assert body["no_votes"] is False
    assert sorted(o["id"] for o in body["tied_options"]) == [ids[0], ids[2]]

    status = client.get("/api/cafe/status", headers=login(client, "alice@example.com")).get_json()
    assert status["has_tie"] is True
    assert status["result_finalized"] is False
    assert status["voting_open"] is False

    r = client.post(
        "/api/cafe/decide-tie",
        json={"menu_date": "2025-01-02", "winning_option_id": ids[2]},
        headers=chef,
    )
    assert r.status_code == 200, r.data
    body = r.get_json()
    assert body["winner"] == {"id": ids[2], "dish_name": "Falafel Wrap"}
    assert body["result"]["was_tie"] is True
    assert body["result"]["total_votes"] == 1
    assert body["decided_by_chef"] is True

    status = client.get("/api/cafe/status", headers=chef).get_json()
    assert status["has_tie"] is False
    assert status["result_finalized"] is True


def test_decide_tie_validation(client):
    chef = login(client, "chef@example.com")
    _post_menu(client, chef)

    r = client.post("/api/cafe/decide-tie", json={"menu_date": "2025-01-02"}, headers=chef)
    assert r.status_code == 400

    r = client.post("/api/cafe/decide-tie", json={"menu_date": "2025-01-02", "winning_option_id": 9999}, headers=chef)
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "INVALID_OPTION"


def test_close_voting_without_menu(client):
    r = client.post("/api/cafe/close-voting", json={"menu_date": "2025-03-01"}, headers=login(client, "chef@example.com"))
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "NO_OPTIONS"


def test_status_before_any_menu(client):
    body = client.get("/api/cafe/status", headers=login(client, "alice@example.com")).get_json()
    assert body["today_menu"] is None
    assert body["has_tomorrow_options"] is False
    assert body["tomorrow_options_count"] == 0
    assert body["voting_open"] is False
    assert body["voting_closed"] is False
    assert body["has_tie"] is False
    assert body["suggestions_open"] is False


def test_today_menu(client, app):
    h = login(client, "alice@example.com")
    body = client.get("/api/cafe/today", headers=h).get_json()
    assert body["menu"] is None

    with app.app_context():
        ids = post_sample_menu(TODAY)
        result_service.finalize(TODAY, ids[0], 3)

    body = client.get("/api/cafe/today", headers=h).get_json()
    assert body["menu"]["dish_name"] == "Chicken Kabsa"
    assert body["menu"]["total_votes"] == 3


def test_decisions_bad_date(client):
    r = client.get("/api/cafe/decisions/not-a-date", headers=login(client, "chef@example.com"))
    assert r.status_code == 400


def test_suggestion_flow(client):
    chef = login(client, "chef@example.com")
    alice = login(client, "alice@example.com")
    bob = login(client, "bob@example.com")

    r = client.post("/api/cafe/suggestions", json={"suggestion_text": "Sushi"}, headers=alice)
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "SUGGESTIONS_CLOSED"

    assert client.post("/api/cafe/suggestions/open", headers=chef).status_code == 200

    r = client.post("/api/cafe/suggestions", json={"suggestion_text": "x"}, headers=alice)
    assert r.status_code == 400

    r = client.post("/api/cafe/suggestions", json={"suggestion_text": "Sushi"}, headers=alice)
    assert r.status_code == 201, r.data
    sid = r.get_json()["suggestion"]["id"]

    assert client.post(f"/api/cafe/suggestions/{sid}/upvote", headers=bob).status_code == 200
    assert client.post(f"/api/cafe/suggestions/{sid}/upvote", headers=bob).status_code == 200

    body = client.get("/api/cafe/suggestions", headers=bob).get_json()
    assert body["suggestions_open"] is True
    assert body["suggestions"][0]["upvote_count"] == 1
    assert body["suggestions"][0]["user_upvoted"] is True

    assert client.delete(f"/api/cafe/suggestions/{sid}/upvote", headers=bob).status_code == 200
    assert client.delete(f"/api/cafe/suggestions/{sid}/upvote", headers=bob).status_code == 200

    r = client.post("/api/cafe/suggestions/close", headers=chef)
    assert r.get_json()["deactivated"] == 1
    assert client.get("/api/cafe/suggestions", headers=alice).get_json()["suggestions"] == []

    r = client.post(f"/api/cafe/suggestions/{sid}/upvote", headers=bob)
    assert r.status_code == 404


def test_delete_suggestion(client):
    chef = login(client, "chef@example.com")
    client.post("/api/cafe/suggestions/open", headers=chef)
    sid = client.post(
        "/api/cafe/suggestions", json={"suggestion_text": "Tacos"}, headers=login(client, "alice@example.com")
    ).get_json()["suggestion"]["id"]

    assert client.delete(f"/api/cafe/suggestions/{sid}", headers=chef).status_code == 200
    assert client.delete("/api/cafe/suggestions/9999", headers=chef).status_code == 404


def test_finalized_menu_is_locked(client, clock):
    chef = login(client, "chef@example.com")
    ids = _post_menu(client, chef)
    _vote(client, "alice@example.com", ids[0])

    clock.set_time(EVENING)
    assert client.post("/api/cafe/close-voting", json={}, headers=chef).get_json()["success"] is True

    r = client.delete(f"/api/cafe/menu/{ids[0]}", headers=chef)
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "MENU_FINALIZED"

    r = client.post("/api/cafe/menu", json={"menu_date": "2025-01-02", "options": SAMPLE_OPTIONS}, headers=chef)
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "MENU_FINALIZED"

    entry = client.get("/api/cafe/history", headers=chef).get_json()["history"][0]
    assert entry["dish_name"] == "Chicken Kabsa"


def test_decide_tie_overrides_a_clear_winner(client, clock):
    chef = login(client, "chef@example.com")
    ids = _post_menu(client, chef)
    _vote(client, "alice@example.com", ids[0])

    clock.set_time(EVENING)
    client.post("/api/cafe/close-voting", json={}, headers=chef)

    r = client.post(
        "/api/cafe/decide-tie",
        json={"menu_date": "2025-01-02", "winning_option_id": ids[1]},
        headers=chef,
    )
    assert r.status_code == 200, r.data
    assert r.get_json()["result"]["winning_option_id"] == ids[1]
    assert r.get_json()["result"]["was_tie"] is True

    decisions = client.get("/api/cafe/decisions/2025-01-02", headers=chef).get_json()["decisions"]
    assert [d["source"] for d in decisions] == ["auto", "manual"]
    assert [d["winning_option_id"] for d in decisions] == [ids[0], ids[1]]


def test_deactivated_user_token_is_rejected(client, app):
    h = login(client, "bob@example.com")
    assert client.get("/api/cafe/status", headers=h).status_code == 200

    with app.app_context():
        user = User.query.filter_by(email="bob@example.com").first()
        user.is_active = False
        db.session.commit()

    r = client.get("/api/cafe/status", headers=h)
    assert r.status_code == 401
    assert r.get_json()["error"]["code"] == "UNAUTHORIZED"
    assert client.post("/api/cafe/vote", json={"option_id": 1}, headers=h).status_code == 401
