"""
API tests for team registration and rosters (/api/team, /api/player).
"""

from fbscore.accounts.tokens import ROLE_ADMIN, ROLE_TEAM, ROLE_USER
from fbscore.db.models import OtpCode, Player, PlayerRequest, TeamRequest

from conftest import DEFAULT_PASSWORD, auth_headers

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _team_form(otp, teamname="Harbour FC", email="owner@example.com"):
    return {
        "teamname": teamname,
        "country": "Portugal",
        "createdBy": "Rui",
        "email": email,
        "password": "teampass",
        "otp": otp,
    }


def test_team_registration_approval_and_signin(client, api_db, api_factory):
    owner = api_factory.user()
    admin = api_factory.admin()
    api_db.commit()

    client.post("/api/team/sendotp", json={"email": "owner@example.com"})
    code = api_db.get(OtpCode, ("team", "owner@example.com")).code
    created = client.post(
        "/api/team/createTeam",
        data=_team_form(code),
        files={"teamlogo": ("crest.png", PNG_BYTES, "image/png")},
        headers=auth_headers(ROLE_USER, owner.id),
    )
    assert created.status_code == 200
    request_id = created.json()["request"]["requestId"]
    assert created.json()["request"]["teamlogo"].endswith(".png")

    pending = client.get("/api/admin/teamRequests", headers=auth_headers(ROLE_ADMIN, admin.id))
    assert [r["requestId"] for r in pending.json()["response"]["requests"]] == [request_id]

    accepted = client.post(
        f"/api/admin/teamRequests/{request_id}",
        json={"action": "accept"},
        headers=auth_headers(ROLE_ADMIN, admin.id),
    )
    assert accepted.status_code == 200
    assert accepted.json()["team"]["teamname"] == "Harbour FC"

    signin = client.post("/api/team/teamSignin", json={"email": "owner@example.com", "password": "teampass"})
    wrong = client.post("/api/team/teamSignin", json={"email": "owner@example.com", "password": "nope"})
    assert signin.status_code == 200
    assert "teamtoken" in signin.json()
    assert wrong.status_code == 400
    assert wrong.json() == {"message": "Invalid email or password.!"}


def test_create_team_requires_user_token(client):
    response = client.post("/api/team/createTeam", data=_team_form("1234"))

    assert response.status_code == 401


def test_create_team_duplicate_name(client, api_db, api_factory):
    owner = api_factory.user()
    api_factory.team(teamname="Harbour FC")
    api_db.commit()
    client.post("/api/team/sendotp", json={"email": "owner@example.com"})
    code = api_db.get(OtpCode, ("team", "owner@example.com")).code

    response = client.post(
        "/api/team/createTeam",
        data=_team_form(code, teamname="harbour fc"),
        headers=auth_headers(ROLE_USER, owner.id),
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Team already exist..!"}
    assert api_db.query(TeamRequest).count() == 0


def test_invitation_accept_flow(client, api_db, api_factory, mailer):
    team = api_factory.team()
    other_team = api_factory.team()
    user = api_factory.user()
    api_db.commit()

    invited = client.post(
        "/api/team/playerRequest",
        json={"userId": user.id, "playerNo": 9},
        headers=auth_headers(ROLE_TEAM, team.id),
    )
    client.post(
        "/api/team/playerRequest",
        json={"userId": user.id, "playerNo": "4"},
        headers=auth_headers(ROLE_TEAM, other_team.id),
    )
    assert invited.status_code == 200
    request_id = invited.json()["request"]["requestId"]

    mine = client.get("/api/auth/playerRequests", headers=auth_headers(ROLE_USER, user.id))
    assert len(mine.json()["requests"]) == 2

    team_view = client.get("/api/team/playerRequests", headers=auth_headers(ROLE_TEAM, team.id))
    assert team_view.json()["requests"][0]["user"]["userId"] == user.id

    accepted = client.post(
        f"/api/auth/playerRequests/{request_id}",
        json={"action": "accept"},
        headers=auth_headers(ROLE_USER, user.id),
    )
    assert accepted.status_code == 200
    assert accepted.json()["player"]["playerNo"] == "9"

    api_db.expire_all()
    assert api_db.query(PlayerRequest).count() == 0

    details = client.get(f"/api/team/getTeamDetails/{team.id}", headers=auth_headers(ROLE_TEAM, team.id))
    assert [p["users"]["userId"] for p in details.json()["players"]] == [user.id]


def test_invitation_for_someone_else(client, api_db, api_factory):
    team = api_factory.team()
    invitee, intruder = api_factory.user(), api_factory.user()
    api_db.commit()
    invited = client.post(
        "/api/team/playerRequest",
        json={"userId": invitee.id, "playerNo": "9"},
        headers=auth_headers(ROLE_TEAM, team.id),
    )

    response = client.post(
        f"/api/auth/playerRequests/{invited.json()['request']['requestId']}",
        json={"action": "accept"},
        headers=auth_headers(ROLE_USER, intruder.id),
    )

    assert response.status_code == 403


def test_add_and_remove_player(client, api_db, api_factory, mailer):
    team, other = api_factory.team(), api_factory.team()
    user = api_factory.user()
    api_db.commit()

    added = client.post(
        "/api/player/addPlayer",
        json={"userId": user.id, "playerNo": "10"},
        headers=auth_headers(ROLE_TEAM, team.id),
    )
    assert added.status_code == 200
    player_id = added.json()["player"]["playerId"]

    again = client.post(
        "/api/player/addPlayer",
        json={"userId": user.id, "playerNo": "11"},
        headers=auth_headers(ROLE_TEAM, other.id),
    )
    assert again.status_code == 400

    details = client.get(f"/api/player/getPlayerDetails/{player_id}", headers=auth_headers(ROLE_USER, user.id))
    assert details.json()["player"]["playerNo"] == "10"

    forbidden = client.delete(f"/api/player/removePlayer/{player_id}", headers=auth_headers(ROLE_TEAM, other.id))
    assert forbidden.status_code == 403

    removed = client.delete(f"/api/player/removePlayer/{player_id}", headers=auth_headers(ROLE_TEAM, team.id))
    assert removed.status_code == 200
    api_db.expire_all()
    assert api_db.query(Player).count() == 0
    assert mailer.subjects_to(user.email) == ["Removed from team"]


def test_search(client, api_db, api_factory):
    api_factory.team(teamname="Riverside")
    api_factory.user(name="River Phoenix")
    api_db.commit()

    found = client.get("/api/team/search", params={"searchquery": "river"})
    empty = client.get("/api/team/search")

    assert found.status_code == 200
    assert [t["teamname"] for t in found.json()["teams_result"]] == ["Riverside"]
    assert [u["name"] for u in found.json()["user_result"]] == ["River Phoenix"]
    assert empty.status_code == 400


def test_team_signin_default_password(client, api_db, api_factory):
    api_factory.team(email="club@example.com")
    api_db.commit()

    response = client.post("/api/team/teamSignin", json={"email": "club@example.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 200


def test_accept_invitation_when_already_on_a_team(client, api_db, api_factory):
    team, other = api_factory.team(), api_factory.team()
    user = api_factory.user()
    api_db.commit()
    invited = client.post(
        "/api/team/playerRequest",
        json={"userId": user.id, "playerNo": "9"},
        headers=auth_headers(ROLE_TEAM, team.id),
    )
    client.post(
        "/api/player/addPlayer",
        json={"userId": user.id, "playerNo": "5"},
        headers=auth_headers(ROLE_TEAM, other.id),
    )

    response = client.post(
        f"/api/auth/playerRequests/{invited.json()['request']['requestId']}",
        json={"action": "accept"},
        headers=auth_headers(ROLE_USER, user.id),
    )

    assert response.status_code == 400
    assert response.json() == {"message": "You are already part of a team"}
