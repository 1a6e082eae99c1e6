"""
API tests for admin sign-in, listings and deletes (/api/admin).
"""

import pytest

from fbscore.accounts.tokens import ROLE_ADMIN, ROLE_USER
from fbscore.db.models import AdminUser, Goal, Match, Player, PlayerStats, TeamRequest, User
from fbscore.match_statuses import FULL_TIME
from fbscore.services import stats

from conftest import DEFAULT_PASSWORD, auth_headers


@pytest.fixture
def admin_headers(api_db, api_factory):
    admin = api_factory.admin()
    api_db.commit()
    return auth_headers(ROLE_ADMIN, admin.id)


def test_admin_signin(client, api_db, api_factory):
    api_factory.admin(username="root")
    api_db.commit()

    ok = client.post("/api/admin/adminSignin", json={"adminId": "ROOT", "password": DEFAULT_PASSWORD})
    bad = client.post("/api/admin/adminSignin", json={"adminId": "root", "password": "nope"})

    assert ok.status_code == 200
    assert "admintoken" in ok.json()
    assert bad.status_code == 400
    assert bad.json() == {"message": "Invalid credentials"}
    api_db.expire_all()
    assert api_db.query(AdminUser).one().last_login_at is not None


def test_admin_routes_need_admin_token(client, api_db, api_factory):
    user = api_factory.user()
    api_db.commit()

    assert client.get("/api/admin/counts").status_code == 401
    assert client.get("/api/admin/counts", headers={"admin-token": auth_headers(ROLE_USER, user.id)["auth-token"]}).status_code == 401


def test_counts_and_listings(client, api_db, api_factory, admin_headers):
    official = api_factory.official()
    team, rival = api_factory.team(), api_factory.team()
    api_factory.player(team)
    loner = api_factory.user()
    api_factory.match(official, team, rival, status=FULL_TIME, score_team_a=3, score_team_b=0)
    api_db.commit()

    counts = client.get("/api/admin/counts", headers=admin_headers).json()
    assert counts["totalUsers"] == 2
    assert counts["totalPlayers"] == 1
    assert counts["totalAdmins"] == 1

    users = client.get("/api/admin/users", headers=admin_headers).json()
    assert (users["totalUsers"], users["playersCount"], users["nonPlayersCount"]) == (2, 1, 1)

    without_team = client.get("/api/admin/usersWithoutTeam", headers=admin_headers).json()
    assert [u["userId"] for u in without_team["response"]["users"]] == [loner.id]

    teams = client.get("/api/admin/teams", headers=admin_headers).json()["response"]["teams"]
    records = {t["teamId"]: t["stats"] for t in teams}
    assert records[team.id]["wins"] == 1
    assert records[rival.id]["losses"] == 1

    officials = client.get("/api/admin/matchOfficials", headers=admin_headers).json()["response"]
    assert officials["totalOfficials"] == 1
    assert officials["totalMatches"] == 1


def test_delete_user(client, api_db, api_factory, admin_headers):
    user = api_factory.user()
    api_db.commit()
    user_id = user.id

    deleted = client.delete(f"/api/admin/delete/user/{user_id}", headers=admin_headers)
    unknown = client.delete("/api/admin/delete/referee/1", headers=admin_headers)
    again = client.delete(f"/api/admin/delete/user/{user_id}", headers=admin_headers)

    assert deleted.status_code == 200
    assert deleted.json()["deletedData"]["userId"] == user_id
    assert unknown.status_code == 400
    assert unknown.json() == {"message": "Invalid entity type specified!"}
    assert again.status_code == 404
    api_db.expire_all()
    assert api_db.query(User).count() == 0


def test_reject_team_request(client, api_db, api_factory, admin_headers, mailer):
    request = TeamRequest(
        teamname="Latecomers",
        country="Chile",
        created_by="Ana",
        email="ana@example.com",
        password_hash="x",
    )
    api_db.add(request)
    api_db.commit()

    bad = client.post(f"/api/admin/teamRequests/{request.id}", json={"action": "maybe"}, headers=admin_headers)
    rejected = client.post(f"/api/admin/teamRequests/{request.id}", json={"action": "reject"}, headers=admin_headers)

    assert bad.status_code == 400
    assert rejected.json() == {"message": "Request rejected."}
    assert mailer.subjects_to("ana@example.com") == ["Team registration"]


def test_delete_user_on_a_team(client, api_db, api_factory, admin_headers):
    team, rival = api_factory.team(), api_factory.team()
    player = api_factory.player(team)
    match = api_factory.match(api_factory.official(), team, rival, status=FULL_TIME, mvp_user_id=player.user_id)
    api_db.add(Goal(match_id=match.id, scorer_id=player.id, team_id=team.id))
    stats.credit(api_db, player, match.id, goals=1)
    api_db.commit()
    user_id, player_id, match_id = player.user_id, player.id, match.id

    response = client.delete(f"/api/admin/delete/user/{user_id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["deletedData"]["playerId"] == player_id
    assert response.json()["deletedData"]["statsDeleted"] == 1
    api_db.expire_all()
    assert api_db.get(User, user_id) is None
    assert api_db.query(Player).count() == 0
    assert api_db.query(PlayerStats).count() == 0
    assert api_db.query(Goal).one().scorer_id is None
    assert api_db.get(Match, match_id).mvp_user_id is None
