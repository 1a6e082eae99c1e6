"""
Unit tests for the admin listings and cascading deletes.
"""

import pytest

from fbscore.db.models import (
    Goal,
    Match,
    MatchOfficial,
    Player,
    PlayerRequest,
    PlayerStats,
    Post,
    PostComment,
    PostLike,
    Team,
    User,
)
from fbscore.errors import NotFound, ValidationFailed
from fbscore.match_statuses import FULL_TIME
from fbscore.services import stats
from fbscore.services.admin import AdminService


@pytest.fixture
def service(db_session):
    return AdminService(db_session)


def test_counts(service, factory):
    factory.admin()
    team = factory.team()
    factory.player(team)
    factory.user()
    factory.official()

    assert service.counts() == {
        "totalAdmins": 1,
        "totalMatchOfficials": 1,
        "totalTeams": 1,
        "totalUsers": 2,
        "totalPlayers": 1,
        "usersWhoBecamePlayers": 1,
    }


def test_users_overview_and_without_team(service, factory):
    loner = factory.user()
    player = factory.player(factory.team())

    overview = {item.user.id: item for item in service.users_overview()}
    assert overview[loner.id].player is None
    assert overview[player.user_id].player.id == player.id
    assert overview[player.user_id].career.totalgoals == 0
    assert [u.id for u in service.users_without_team()] == [loner.id]


def test_officials_overview_limits_recent_matches(service, factory):
    official = factory.official()
    team_a, team_b = factory.team(), factory.team()
    for _ in range(7):
        factory.match(official, team_a, team_b)

    (item,) = service.officials_overview()
    assert item.total_matches == 7
    assert len(item.recent_matches) == 5


def test_delete_unknown_type(service):
    with pytest.raises(ValidationFailed) as excinfo:
        service.delete_entity("stadium", 1)
    assert excinfo.value.message == "Invalid entity type specified!"


def test_delete_missing_records(service):
    for kind in ("user", "team", "matchofficial"):
        with pytest.raises(NotFound):
            service.delete_entity(kind, 9999)


def test_delete_user_cascades(db_session, service, factory):
    team, rival = factory.team(), factory.team()
    player = factory.player(team)
    user_id, player_id = player.user_id, player.id
    bystander = factory.user()
    match = factory.match(factory.official(), team, rival, status=FULL_TIME, mvp_user_id=user_id)
    db_session.add(Goal(match_id=match.id, scorer_id=player.id, team_id=team.id))
    stats.credit(db_session, player, match.id, goals=1)
    db_session.add(PlayerStats(player_id=None, user_id=user_id, total_goals=2, total_assists=0))
    db_session.add(PlayerRequest(team_id=rival.id, teamname=rival.teamname, user_id=user_id, email="x@example.com", player_no="3"))
    own_post = Post(user_id=user_id, description="mine")
    other_post = Post(user_id=bystander.id, description="theirs")
    db_session.add_all([own_post, other_post])
    db_session.flush()
    db_session.add_all([
        PostLike(post_id=other_post.id, user_id=user_id),
        PostComment(post_id=other_post.id, user_id=user_id, comment="hi"),
        PostLike(post_id=own_post.id, user_id=bystander.id),
    ])
    db_session.flush()

    summary = service.delete_entity("user", user_id)

    assert summary == {"userId": user_id, "playerId": player_id, "statsDeleted": 2, "postsDeleted": 1}
    assert db_session.get(User, user_id) is None
    assert db_session.query(Player).filter(Player.user_id == user_id).count() == 0
    assert db_session.query(PlayerStats).filter(PlayerStats.user_id == user_id).count() == 0
    assert db_session.query(PlayerRequest).count() == 0
    assert db_session.query(PostLike).count() == 0
    assert db_session.query(PostComment).count() == 0
    assert [p.id for p in db_session.query(Post)] == [other_post.id]
    goal = db_session.query(Goal).one()
    assert goal.scorer_id is None
    assert db_session.get(Match, match.id).mvp_user_id is None


def test_delete_user_leaves_other_detached_stats(db_session, service, factory):
    user, other = factory.user(), factory.user()
    db_session.add(PlayerStats(player_id=None, user_id=other.id, total_goals=4, total_assists=1))
    db_session.flush()

    summary = service.delete_entity("user", user.id)

    assert summary["statsDeleted"] == 0
    assert db_session.query(PlayerStats).filter(PlayerStats.user_id == other.id).count() == 1


def test_delete_team_purges_matches_and_rebuilds_rival_stats(db_session, service, factory):
    team, rival, third = factory.team(), factory.team(), factory.team()
    official = factory.official()
    doomed_player = factory.player(team)
    rival_player = factory.player(rival)
    shared = factory.match(official, team, rival, status=FULL_TIME)
    other = factory.match(official, rival, third, status=FULL_TIME)
    stats.credit(db_session, rival_player, shared.id, goals=2)
    stats.credit(db_session, rival_player, other.id, goals=1)
    db_session.add(Post(team_id=team.id, description="bye"))
    db_session.flush()
    team_id, doomed_player_id = team.id, doomed_player.id

    summary = service.delete_entity("team", team_id)

    assert summary["matchesDeleted"] == 1
    assert summary["playersAffected"] == 1
    assert summary["postsDeleted"] == 1
    assert db_session.get(Team, team_id) is None
    assert db_session.get(Player, doomed_player_id) is None
    assert [m.id for m in db_session.query(Match)] == [other.id]
    rival_stats = db_session.query(PlayerStats).filter(PlayerStats.player_id == rival_player.id).one()
    assert rival_stats.total_goals == 1


def test_delete_official_purges_their_matches(db_session, service, factory):
    official, keeper = factory.official(), factory.official()
    team_a, team_b = factory.team(), factory.team()
    factory.match(official, team_a, team_b)
    kept = factory.match(keeper, team_a, team_b)
    official_id = official.id

    summary = service.delete_entity("matchofficial", official_id)

    assert summary == {"officialId": official_id, "matchesDeleted": 1}
    assert db_session.get(MatchOfficial, official_id) is None
    assert [m.id for m in db_session.query(Match)] == [kept.id]
