"""Admin sign-in, approvals, listings and moderation (/api/admin)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fbscore.accounts.tokens import ROLE_ADMIN, Principal, issue_token
from fbscore.db.session import get_db
from fbscore.errors import ValidationFailed
from fbscore.notifications.email import Mailer, get_mailer
from fbscore.services import accounts
from fbscore.services.admin import AdminService
from fbscore.services.feed import FeedService
from fbscore.services.matches import MatchService
from fbscore.services.profiles import ProfileService
from fbscore.services.registrations import RegistrationService
from fbscore.web import serializers
from fbscore.web.dependencies import require_admin
from fbscore.web.schemas import ActionRequest, AdminSigninRequest

router = APIRouter()


@router.post("/adminSignin")
async def admin_signin(body: AdminSigninRequest, db: Session = Depends(get_db)):
    admin = accounts.authenticate_admin(db, body.admin_id, body.password)
    if admin is None:
        raise ValidationFailed("Invalid credentials")
    accounts.mark_admin_login(db, admin)
    db.commit()
    return {"admintoken": issue_token(admin.id, ROLE_ADMIN)}


# =============================================================================
# Approvals
# =============================================================================

@router.get("/teamRequests")
async def team_requests(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    requests = RegistrationService(db, mailer).list_team_requests()
    return {"response": {"requests": [serializers.team_request(r) for r in requests]}}


@router.post("/teamRequests/{request_id}")
async def resolve_team_request(
    request_id: int,
    body: ActionRequest,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    team = RegistrationService(db, mailer).resolve_team_request(request_id, body.action)
    db.commit()
    if team is None:
        return {"message": "Request rejected."}
    return {"message": "Request accepted.", "team": serializers.team_public(team)}


@router.get("/matchOfficialRequests")
async def match_official_requests(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    requests = RegistrationService(db, mailer).list_official_requests()
    return {"response": {"requests": [serializers.official_request(r) for r in requests]}}


@router.post("/matchOfficialRequests/{request_id}")
async def resolve_match_official_request(
    request_id: int,
    body: ActionRequest,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    official = RegistrationService(db, mailer).resolve_official_request(request_id, body.action)
    db.commit()
    if official is None:
        return {"message": "Request rejected."}
    return {"message": "Request accepted successfully.", "official": serializers.official_public(official)}


# =============================================================================
# Listings
# =============================================================================

@router.get("/teams")
async def teams(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    rows = AdminService(db).teams_with_records()
    return {"response": {"teams": [serializers.team_with_record(t, r) for t, r in rows]}}


@router.get("/getTeamDetails/{team_id}")
async def get_team_details(
    team_id: int,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    team, players = ProfileService(db).team_with_roster(team_id)
    return {"message": "Team details fetched.", **serializers.team_detail(team, players)}


@router.get("/getPlayerDetails/{player_id}")
async def get_player_details(
    player_id: int,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    profile = ProfileService(db).player_profile(player_id)
    return {"message": "Details fetched successfully!", "player": serializers.player_detail(profile)}


@router.get("/users")
async def users(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    overview = [serializers.user_overview(item) for item in AdminService(db).users_overview()]
    players_count = sum(1 for item in overview if item["isPlayer"])
    return {
        "message": "Users fetched successfully!",
        "totalUsers": len(overview),
        "playersCount": players_count,
        "nonPlayersCount": len(overview) - players_count,
        "users": overview,
    }


@router.get("/usersWithoutTeam")
async def users_without_team(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    users = AdminService(db).users_without_team()
    return {"response": {"users": [serializers.user_public(u) for u in users]}}


@router.get("/matchOfficials")
async def match_officials(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    overview = AdminService(db).officials_overview()
    return {
        "response": {
            "totalOfficials": len(overview),
            "totalMatches": sum(item.total_matches for item in overview),
            "matchofficial": [serializers.official_overview(item) for item in overview],
        }
    }


@router.get("/matchDetails/{match_id}")
async def match_details(
    match_id: int,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = MatchService(db)
    match = service.get_match(match_id)
    return {
        "message": "Data fetched successfully",
        "data": serializers.match_detail(
            match, service.roster(match.team_a_id), service.roster(match.team_b_id)
        ),
    }


@router.get("/counts")
async def counts(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AdminService(db).counts()


# =============================================================================
# Moderation
# =============================================================================

@router.delete("/delete/{entity_type}/{entity_id}")
async def delete_entity(
    entity_type: str,
    entity_id: int,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    summary = AdminService(db).delete_entity(entity_type, entity_id)
    db.commit()
    return {"message": f"{entity_type.capitalize()} and associated data deleted successfully", "deletedData": summary}


@router.delete("/deletePost/{post_id}")
async def delete_post(
    post_id: int,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    FeedService(db).delete_post(post_id)
    db.commit()
    return {"message": "Post deleted successfully."}
