"""
Unit tests for MatchService: fixtures, status changes and live scoring.
"""

from datetime import date, datetime

import pytest

from fbscore.db.models import Goal, PlayerStats, PlayerStatsEntry
from fbscore.errors import NotFound, PermissionDenied, ValidationFailed
from fbscore.match_statuses import DELAYED, FULL_TIME, HALF_TIME, LIVE, UPCOMING
from fbscore.services.matches import MatchService, parse_match_date, parse_match_time

NOW = datetime(2026, 5, 1, 12, 0)


@pytest.fixture
def setup(factory):
    """Two teams with two players each and an official."""
    official = factory.official()
    team_a = factory.team(teamname="Alpha")
    team_b = factory.team(teamname="Bravo")
    return {
        "official": official,
        "team_a": team_a,
        "team_b": team_b,
        "a1": factory.player(team_a, player_no=9),
        "a2": factory.player(team_a, player_no=10),
        "b1": factory.player(team_b, player_no=7),
        "b2": factory.player(team_b, player_no=4),
    }


def _live_match(factory, setup):
    return factory.match(setup["official"], setup["team_a"], setup["team_b"], status=LIVE)


# =============================================================================
# Parsing
# =============================================================================

def test_parse_match_date():
    assert parse_match_date("2026-05-02") == date(2026, 5, 2)
    with pytest.raises(ValidationFailed) as excinfo:
        parse_match_date("02/05/2026")
    assert excinfo.value.message == "Invalid match_date format! Use YYYY-MM-DD."


@pytest.mark.parametrize("value", ["00:00", "09:30", "23:59"])
def test_parse_match_time_accepts_24h(value):
    assert parse_match_time(value) == value


@pytest.mark.parametrize("value", ["24:00", "9:30", "12:60", "noon"])
def test_parse_match_time_rejects(value):
    with pytest.raises(ValidationFailed):
        parse_match_time(value)


# =============================================================================
# Creation
# =============================================================================

def test_create_match_seeds_empty_stats_rows(db_session, setup):
    service = MatchService(db_session)
    match = service.create_match(
        setup["official"].id, setup["team_a"].id, setup["team_b"].id,
        "2026-05-02", "18:30", now=NOW,
    )

    assert match.status == UPCOMING
    assert (match.score_team_a, match.score_team_b) == (0, 0)
    assert match.created_by_id == setup["official"].id

    entries = db_session.query(PlayerStatsEntry).filter(PlayerStatsEntry.match_id == match.id).all()
    assert len(entries) == 4
    assert all(entry.goals == 0 and entry.assists == 0 for entry in entries)
    assert db_session.query(PlayerStats).count() == 4


def test_create_match_in_the_past(db_session, setup):
    with pytest.raises(ValidationFailed) as excinfo:
        MatchService(db_session).create_match(
            setup["official"].id, setup["team_a"].id, setup["team_b"].id,
            "2026-05-01", "11:59", now=NOW,
        )
    assert excinfo.value.message == "Match date and time cannot be in the past!"


def test_create_match_unknown_team(db_session, setup):
    service = MatchService(db_session)
    with pytest.raises(NotFound) as excinfo:
        service.create_match(setup["official"].id, 999, setup["team_b"].id, "2026-05-02", "18:30", now=NOW)
    assert excinfo.value.message == "TeamA does not exist!"

    with pytest.raises(NotFound) as excinfo:
        service.create_match(setup["official"].id, setup["team_a"].id, 999, "2026-05-02", "18:30", now=NOW)
    assert excinfo.value.message == "TeamB does not exist!"


def test_create_match_same_team(db_session, setup):
    with pytest.raises(ValidationFailed):
        MatchService(db_session).create_match(
            setup["official"].id, setup["team_a"].id, setup["team_a"].id,
            "2026-05-02", "18:30", now=NOW,
        )


# =============================================================================
# Status
# =============================================================================

def test_update_status(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"], match_date=date(2026, 5, 2))

    updated, auto_delayed = MatchService(db_session).update_status(
        match.id, setup["official"].id, LIVE, now=NOW
    )

    assert updated.status == LIVE
    assert auto_delayed is False


def test_update_status_sets_delayed_after_kickoff(db_session, factory, setup):
    match = factory.match(
        setup["official"], setup["team_a"], setup["team_b"],
        match_date=date(2026, 5, 1), match_time="11:00",
    )

    updated, auto_delayed = MatchService(db_session).update_status(
        match.id, setup["official"].id, LIVE, now=NOW
    )

    assert auto_delayed is True
    assert updated.status == DELAYED


def test_update_status_allows_any_transition(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"], status=FULL_TIME)

    updated, _ = MatchService(db_session).update_status(
        match.id, setup["official"].id, HALF_TIME, now=NOW
    )
    assert updated.status == HALF_TIME


def test_update_status_rejects_unknown_status(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"])

    with pytest.raises(ValidationFailed) as excinfo:
        MatchService(db_session).update_status(match.id, setup["official"].id, "Finished", now=NOW)
    assert excinfo.value.message == "Invalid status provided!"


def test_update_status_by_other_official(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"])
    intruder = factory.official()

    with pytest.raises(PermissionDenied):
        MatchService(db_session).update_status(match.id, intruder.id, LIVE, now=NOW)


def test_update_status_missing_match(db_session, setup):
    with pytest.raises(NotFound):
        MatchService(db_session).update_status(12345, setup["official"].id, LIVE, now=NOW)


# =============================================================================
# Goals
# =============================================================================

def test_record_goal_updates_score_events_and_stats(db_session, factory, setup):
    match = _live_match(factory, setup)
    service = MatchService(db_session)

    result = service.record_goal(
        setup["official"].id, match.id, setup["a1"].id, setup["team_a"].id,
        assist_id=setup["a2"].id,
    )

    assert (result.score_team_a, result.score_team_b) == (1, 0)
    goals = db_session.query(Goal).filter(Goal.match_id == match.id).all()
    assert len(goals) == 1
    assert goals[0].scorer_id == setup["a1"].id
    assert goals[0].assist_id == setup["a2"].id

    scorer_stats = db_session.query(PlayerStats).filter(PlayerStats.player_id == setup["a1"].id).one()
    assister_stats = db_session.query(PlayerStats).filter(PlayerStats.player_id == setup["a2"].id).one()
    db_session.refresh(scorer_stats)
    db_session.refresh(assister_stats)
    assert (scorer_stats.total_goals, scorer_stats.total_assists) == (1, 0)
    assert (assister_stats.total_goals, assister_stats.total_assists) == (0, 1)


def test_two_goals_by_same_player_append_two_rows(db_session, factory, setup):
    match = _live_match(factory, setup)
    service = MatchService(db_session)

    service.record_goal(setup["official"].id, match.id, setup["b1"].id, setup["team_b"].id)
    result = service.record_goal(setup["official"].id, match.id, setup["b1"].id, setup["team_b"].id)

    assert (result.score_team_a, result.score_team_b) == (0, 2)
    stats = db_session.query(PlayerStats).filter(PlayerStats.player_id == setup["b1"].id).one()
    db_session.refresh(stats)
    assert stats.total_goals == 2
    assert [entry.goals for entry in stats.entries] == [1, 1]


def test_score_matches_goal_events(db_session, factory, setup):
    match = _live_match(factory, setup)
    service = MatchService(db_session)

    service.record_goal(setup["official"].id, match.id, setup["a1"].id, setup["team_a"].id)
    service.record_goal(setup["official"].id, match.id, setup["b2"].id, setup["team_b"].id)
    result = service.record_goal(setup["official"].id, match.id, setup["a2"].id, setup["team_a"].id)

    by_team = {}
    for goal in db_session.query(Goal).filter(Goal.match_id == match.id):
        by_team[goal.team_id] = by_team.get(goal.team_id, 0) + 1
    assert result.score_team_a == by_team[setup["team_a"].id] == 2
    assert result.score_team_b == by_team[setup["team_b"].id] == 1


def test_record_goal_requires_ids(db_session, factory, setup):
    match = _live_match(factory, setup)

    with pytest.raises(ValidationFailed) as excinfo:
        MatchService(db_session).record_goal(setup["official"].id, match.id, None, setup["team_a"].id)
    assert excinfo.value.message == "Match ID, scorer ID, and team ID are required!"


def test_record_goal_requires_live(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"], status=HALF_TIME)

    with pytest.raises(PermissionDenied) as excinfo:
        MatchService(db_session).record_goal(
            setup["official"].id, match.id, setup["a1"].id, setup["team_a"].id
        )
    assert excinfo.value.message == "Match status must be 'Live'!"


def test_record_goal_team_not_in_match(db_session, factory, setup):
    match = _live_match(factory, setup)
    outsider = factory.team()

    with pytest.raises(ValidationFailed) as excinfo:
        MatchService(db_session).record_goal(setup["official"].id, match.id, setup["a1"].id, outsider.id)
    assert excinfo.value.message == "The team is not part of this match!"


def test_record_goal_scorer_not_on_either_roster(db_session, factory, setup):
    match = _live_match(factory, setup)
    stranger = factory.player(factory.team())

    with pytest.raises(ValidationFailed) as excinfo:
        MatchService(db_session).record_goal(
            setup["official"].id, match.id, stranger.id, setup["team_a"].id
        )
    assert excinfo.value.message == "Scorer must be part of one of the teams!"

    with pytest.raises(ValidationFailed) as excinfo:
        MatchService(db_session).record_goal(
            setup["official"].id, match.id, setup["a1"].id, setup["team_a"].id,
            assist_id=stranger.id,
        )
    assert excinfo.value.message == "Assister must be part of one of the teams!"
    # Nothing was written by the rejected calls
    assert db_session.query(Goal).count() == 0


def test_record_goal_by_other_official(db_session, factory, setup):
    match = _live_match(factory, setup)

    with pytest.raises(PermissionDenied):
        MatchService(db_session).record_goal(
            factory.official().id, match.id, setup["a1"].id, setup["team_a"].id
        )


# =============================================================================
# MVP and reads
# =============================================================================

def test_assign_mvp_after_full_time(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"], status=FULL_TIME)
    user = factory.user()

    result = MatchService(db_session).assign_mvp(match.id, setup["official"].id, user.id)
    assert result.mvp_user_id == user.id


def test_assign_mvp_before_full_time(db_session, factory, setup):
    match = _live_match(factory, setup)

    with pytest.raises(PermissionDenied):
        MatchService(db_session).assign_mvp(match.id, setup["official"].id, setup["a1"].user_id)


def test_assign_mvp_by_other_official(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"], status=FULL_TIME)
    intruder = factory.official()

    with pytest.raises(PermissionDenied):
        MatchService(db_session).assign_mvp(match.id, intruder.id, setup["a1"].user_id)
    assert match.mvp_user_id is None


def test_assign_mvp_unknown_user(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"], status=FULL_TIME)

    with pytest.raises(NotFound):
        MatchService(db_session).assign_mvp(match.id, setup["official"].id, 9999)


def test_search_by_team_name(db_session, factory, setup):
    match = factory.match(setup["official"], setup["team_a"], setup["team_b"])
    service = MatchService(db_session)

    assert [m.id for m in service.search_by_team_name("alp")] == [match.id]
    with pytest.raises(ValidationFailed):
        service.search_by_team_name("  ")
    with pytest.raises(NotFound) as excinfo:
        service.search_by_team_name("zulu")
    assert excinfo.value.message == "No teams found matching 'zulu'!"


def test_search_by_team_name_without_matches(db_session, factory, setup):
    factory.team(teamname="Charlie")

    with pytest.raises(NotFound) as excinfo:
        MatchService(db_session).search_by_team_name("charlie")
    assert excinfo.value.message == "No matches found for 'charlie'!"


def test_team_matches_lists_finished_first(db_session, factory, setup):
    args = (setup["official"], setup["team_a"], setup["team_b"])
    upcoming = factory.match(*args, match_date=date(2030, 1, 1))
    finished = factory.match(*args, status=FULL_TIME, match_date=date(2030, 2, 1))

    ids = [m.id for m in MatchService(db_session).team_matches(setup["team_a"].id)]
    assert ids == [finished.id, upcoming.id]
    assert MatchService(db_session).team_matches(None) == []
