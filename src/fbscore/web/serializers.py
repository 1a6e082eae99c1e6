"""
Response shaping shared by every router.

All functions take ORM rows (or service read models) and return plain dicts;
FastAPI's JSON encoder takes care of dates and datetimes.
"""

from datetime import date
from typing import Any, Optional

from fbscore.config import Settings, settings as default_settings
from fbscore.db.models import (
    Goal,
    Match,
    MatchOfficial,
    MatchOfficialRequest,
    Player,
    PlayerRequest,
    Post,
    Team,
    TeamRequest,
    User,
)
from fbscore.services.admin import OfficialOverview, UserOverview
from fbscore.services.profiles import PlayerProfile, UserProfile
from fbscore.services.stats import CareerStats, TeamRecord


def media_url(reference: Optional[str], config: Optional[Settings] = None) -> Optional[str]:
    """Absolute URL for a stored upload; data URIs and absolute URLs pass through."""
    if not reference:
        return None
    if reference.startswith(("data:", "http://", "https://")):
        return reference
    config = config or default_settings
    return f"{config.base_url.rstrip('/')}/uploads/{reference.lstrip('/')}"


def calculate_age(dob: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Whole years since ``dob``, counting a birthday only once it has passed."""
    if dob is None:
        return None
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


# =============================================================================
# Accounts
# =============================================================================

def user_public(user: User) -> dict[str, Any]:
    return {
        "userId": user.id,
        "name": user.name,
        "pic": media_url(user.pic),
        "email": user.email,
        "country": user.country,
        "gender": user.gender,
        "dob": user.dob,
        "position": user.position,
        "foot": user.foot,
    }


def user_account(user: User) -> dict[str, Any]:
    data = user_public(user)
    data.update(
        {
            "id": user.id,
            "age": calculate_age(user.dob),
            "createdAt": user.created_at,
            "updatedAt": user.updated_at,
        }
    )
    return data


def team_brief(team: Optional[Team]) -> Optional[dict[str, Any]]:
    if team is None:
        return None
    return {
        "id": team.id,
        "teamname": team.teamname,
        "teamlogo": media_url(team.teamlogo),
    }


def team_public(team: Team) -> dict[str, Any]:
    return {
        "teamId": team.id,
        "teamname": team.teamname,
        "teamlogo": media_url(team.teamlogo),
        "country": team.country,
        "createdBy": team.created_by,
        "email": team.email,
    }


def official_public(official: MatchOfficial) -> dict[str, Any]:
    return {
        "officialId": official.id,
        "name": official.name,
        "email": official.email,
        "createdAt": official.created_at,
    }


def career(stats: CareerStats) -> dict[str, Any]:
    return stats.to_dict()


# =============================================================================
# Players and teams
# =============================================================================

def roster_entry(player: Player) -> dict[str, Any]:
    return {
        "playerId": player.id,
        "playerNo": player.player_no,
        "users": user_public(player.user),
    }


def team_detail(team: Team, players: list[Player]) -> dict[str, Any]:
    return {
        "team": team_public(team),
        "players": [roster_entry(player) for player in players],
    }


def player_detail(profile: PlayerProfile) -> dict[str, Any]:
    player = profile.player
    user = player.user
    return {
        "playerId": player.id,
        "playerNo": player.player_no,
        "team": {
            "teamId": player.team.id,
            "teamname": player.team.teamname,
            "teamemail": player.team.email,
            "teamlogo": media_url(player.team.teamlogo),
            "country": player.team.country,
            "owner": player.team.created_by,
        },
        "user": {
            "userId": user.id,
            "name": user.name,
            "pic": media_url(user.pic),
            "country": user.country,
            "gender": user.gender,
            "position": user.position,
            "foot": user.foot,
            "dob": user.dob,
            "age": calculate_age(user.dob),
            "email": user.email,
        },
        "stats": career(profile.career),
    }


def user_profile(profile: UserProfile) -> dict[str, Any]:
    data = user_account(profile.user)
    player = profile.player
    data["playerDetails"] = (
        {
            "playerId": player.id,
            "teamId": player.team.id,
            "teamname": player.team.teamname,
            "teamlogo": media_url(player.team.teamlogo),
            "jerseyNo": player.player_no,
            "teamcountry": player.team.country,
            "teamowner": player.team.created_by,
            "teamemail": player.team.email,
        }
        if player is not None
        else None
    )
    data["stats"] = career(profile.career)
    data["teammates"] = [
        {
            "playerId": mate.id,
            "jerseyNo": mate.player_no,
            **user_public(mate.user),
        }
        for mate in profile.teammates
    ]
    data["matches"] = [match_summary(match) for match in profile.matches]
    return data


# =============================================================================
# Matches
# =============================================================================

def match_summary(match: Match) -> dict[str, Any]:
    return {
        "matchId": match.id,
        "teamA": team_brief(match.team_a),
        "teamB": team_brief(match.team_b),
        "score": {"teamA": match.score_team_a, "teamB": match.score_team_b},
        "status": match.status,
        "matchDate": match.match_date,
        "matchTime": match.match_time,
        "mvp": match.mvp_user_id,
    }


def _goal_player(player: Optional[Player]) -> Optional[dict[str, Any]]:
    if player is None:
        return None
    return {
        "id": player.id,
        "name": player.user.name,
        "pic": media_url(player.user.pic),
    }


def goal_event(goal: Goal) -> dict[str, Any]:
    return {
        "id": goal.id,
        "timestamp": goal.timestamp,
        "team": team_brief(goal.team),
        "scorer": _goal_player(goal.scorer),
        "assist": _goal_player(goal.assist),
    }


def _lineup(players: list[Player]) -> list[dict[str, Any]]:
    return [
        {
            "id": player.id,
            "playerNo": player.player_no,
            "name": player.user.name,
            "pic": media_url(player.user.pic),
            "position": player.user.position,
        }
        for player in players
    ]


def match_detail(
    match: Match,
    team_a_players: list[Player],
    team_b_players: list[Player],
) -> dict[str, Any]:
    team_a = team_brief(match.team_a)
    team_a["players"] = _lineup(team_a_players)
    team_b = team_brief(match.team_b)
    team_b["players"] = _lineup(team_b_players)
    return {
        "matchId": match.id,
        "matchDate": match.match_date,
        "matchTime": match.match_time,
        "status": match.status,
        "createdBy": match.created_by.name if match.created_by else None,
        "mvp": (
            {"userId": match.mvp.id, "name": match.mvp.name, "pic": media_url(match.mvp.pic)}
            if match.mvp
            else None
        ),
        "teams": {"teamA": team_a, "teamB": team_b},
        "score": {"teamA": match.score_team_a, "teamB": match.score_team_b},
        "goals": [goal_event(goal) for goal in match.goals],
    }


# =============================================================================
# Requests
# =============================================================================

def team_request(request: TeamRequest) -> dict[str, Any]:
    return {
        "requestId": request.id,
        "teamname": request.teamname,
        "teamlogo": media_url(request.teamlogo),
        "owner": request.created_by,
        "country": request.country,
        "email": request.email,
        "createdAt": request.created_at,
        "updatedAt": request.updated_at,
    }


def official_request(request: MatchOfficialRequest) -> dict[str, Any]:
    return {
        "reqId": request.id,
        "name": request.name,
        "email": request.email,
        "createdAt": request.created_at,
    }


def player_request(request: PlayerRequest) -> dict[str, Any]:
    data = {
        "requestId": request.id,
        "teamId": request.team_id,
        "teamname": request.teamname,
        "userId": request.user_id,
        "email": request.email,
        "playerNo": request.player_no,
        "createdAt": request.created_at,
    }
    if request.team is not None:
        data["teamlogo"] = media_url(request.team.teamlogo)
    return data


# =============================================================================
# Feed
# =============================================================================

def post(item: Post) -> dict[str, Any]:
    if item.team is not None:
        author_name, author_pic, author_type = item.team.teamname, item.team.teamlogo, "team"
    elif item.user is not None:
        author_name, author_pic, author_type = item.user.name, item.user.pic, "user"
    else:
        author_name, author_pic, author_type = "Unknown User", None, None
    return {
        "id": item.id,
        "image": media_url(item.image),
        "description": item.description,
        "uploadedBy_type": author_type,
        "uploadedBy_name": author_name,
        "uploadedBy_pic": media_url(author_pic),
        "likes": len(item.likes),
        "comment": [
            {
                "id": comment.id,
                "user_name": comment.user.name if comment.user else "Unknown User",
                "user_pic": media_url(comment.user.pic) if comment.user else None,
                "comments": comment.comment,
                "date": comment.date,
            }
            for comment in item.comments
        ],
        "date": item.date,
    }


# =============================================================================
# Admin
# =============================================================================

def team_with_record(team: Team, record: TeamRecord) -> dict[str, Any]:
    data = team_public(team)
    data.update(
        {
            "stats": record.to_dict(),
            "createdAt": team.created_at,
            "updatedAt": team.updated_at,
        }
    )
    return data


def user_overview(item: UserOverview) -> dict[str, Any]:
    data = user_public(item.user)
    data.update({"age": calculate_age(item.user.dob), "createdAt": item.user.created_at})
    if item.player is None:
        data.update({"isPlayer": False, "player": None, "stats": None})
        return data
    data.update(
        {
            "isPlayer": True,
            "player": {
                "playerId": item.player.id,
                "playerNo": item.player.player_no,
                "team": team_public(item.player.team),
            },
            "stats": career(item.career) if item.career else None,
        }
    )
    return data


def official_overview(item: OfficialOverview) -> dict[str, Any]:
    data = official_public(item.official)
    data["stats"] = {
        "totalMatches": item.total_matches,
        "recentMatches": [
            {
                "matchId": match.id,
                "teamA": match.team_a.teamname,
                "teamB": match.team_b.teamname,
                "date": match.match_date,
                "status": match.status,
            }
            for match in item.recent_matches
        ],
    }
    return data
