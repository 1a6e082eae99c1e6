"""Direct roster changes by a team and player lookups (/api/player)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fbscore.accounts.tokens import Principal
from fbscore.db.session import get_db
from fbscore.notifications.email import Mailer, get_mailer
from fbscore.services.profiles import ProfileService
from fbscore.services.roster import RosterService
from fbscore.web import serializers
from fbscore.web.dependencies import require_team, require_user
from fbscore.web.schemas import PlayerInviteRequest

router = APIRouter()


@router.post("/addPlayer")
async def add_player(
    body: PlayerInviteRequest,
    principal: Principal = Depends(require_team),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    player = RosterService(db, mailer).add_player(principal.id, body.user_id, body.player_no)
    db.commit()
    return {
        "message": "Player added successfully..!",
        "player": {"playerId": player.id, "teamId": player.team_id, "userId": player.user_id, "playerNo": player.player_no},
    }


@router.get("/getPlayerDetails/{player_id}")
async def get_player_details(
    player_id: int,
    principal: Principal = Depends(require_user),
    db: Session = Depends(get_db),
):
    profile = ProfileService(db).player_profile(player_id)
    return {"message": "Details fetched successfully!", "player": serializers.player_detail(profile)}


@router.delete("/removePlayer/{player_id}")
async def remove_player(
    player_id: int,
    principal: Principal = Depends(require_team),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    RosterService(db, mailer).remove_player(principal.id, player_id)
    db.commit()
    return {"message": "Player removed successfully!"}
