"""
Player and team statistics.

PlayerStats rows are maintained incrementally as goals are recorded
(``credit``). Reads come in two flavours that can legitimately differ:

- career totals: the sum over every PlayerStats row of a user, i.e. across
  every team they have played for;
- current totals: the single row belonging to the user's current roster
  entry.

When matches are removed (``purge_matches``) the affected rows are rebuilt
from their remaining per-match entries, which is the one place totals are
recomputed instead of incremented.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Iterable, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from fbscore.db.models import Goal, Match, Player, PlayerStats, PlayerStatsEntry
from fbscore.match_statuses import FULL_TIME

logger = logging.getLogger(__name__)


@dataclass
class CareerStats:
    totalgoals: int = 0
    totalassists: int = 0
    currentgoals: int = 0
    currentassists: int = 0
    totalmatches: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TeamRecord:
    totalMatches: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    totalPlayers: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# Writes
# =============================================================================

def get_or_create_stats(db: Session, player: Player) -> PlayerStats:
    """Return the player's stats row, creating (and flushing) it if missing."""
    stats = db.query(PlayerStats).filter(PlayerStats.player_id == player.id).first()
    if stats is None:
        stats = PlayerStats(
            player_id=player.id,
            user_id=player.user_id,
            total_goals=0,
            total_assists=0,
        )
        db.add(stats)
        db.flush()
    return stats


def credit(
    db: Session,
    player: Player,
    match_id: int,
    goals: int = 0,
    assists: int = 0,
) -> PlayerStats:
    """
    Add a goal and/or assist to a player's totals and append a per-match row.

    The per-match row is always appended, never merged into an existing row
    for the same match.
    """
    stats = get_or_create_stats(db, player)
    if goals:
        stats.total_goals = PlayerStats.total_goals + goals
    if assists:
        stats.total_assists = PlayerStats.total_assists + assists
    db.add(PlayerStatsEntry(stats_id=stats.id, match_id=match_id, goals=goals, assists=assists))
    db.flush()
    return stats


def recompute_totals(stats: PlayerStats) -> None:
    """Rebuild total_goals/total_assists from the row's per-match entries."""
    stats.total_goals = sum(entry.goals or 0 for entry in stats.entries)
    stats.total_assists = sum(entry.assists or 0 for entry in stats.entries)


def purge_matches(db: Session, match_ids: Iterable[int]) -> int:
    """
    Delete matches together with their goals and stats entries.

    Stats rows that had entries for these matches get their totals rebuilt
    from what remains. Returns the number of matches deleted.
    """
    ids = list(match_ids)
    if not ids:
        return 0

    affected_stats_ids = [
        row.stats_id
        for row in db.query(PlayerStatsEntry.stats_id)
        .filter(PlayerStatsEntry.match_id.in_(ids))
        .distinct()
    ]

    db.query(PlayerStatsEntry).filter(PlayerStatsEntry.match_id.in_(ids)).delete(
        synchronize_session=False
    )
    db.query(Goal).filter(Goal.match_id.in_(ids)).delete(synchronize_session=False)
    deleted = db.query(Match).filter(Match.id.in_(ids)).delete(synchronize_session=False)
    db.flush()
    # Bulk deletes bypass the identity map
    db.expire_all()

    if affected_stats_ids:
        affected = db.query(PlayerStats).filter(PlayerStats.id.in_(affected_stats_ids)).all()
        for stats in affected:
            recompute_totals(stats)
        db.flush()

    logger.info(
        "Purged %d match(es); rebuilt totals for %d stats row(s)",
        deleted,
        len(affected_stats_ids),
    )
    return deleted


# =============================================================================
# Reads
# =============================================================================

def completed_match_count(db: Session, team_id: Optional[int]) -> int:
    if team_id is None:
        return 0
    return (
        db.query(func.count(Match.id))
        .filter(
            or_(Match.team_a_id == team_id, Match.team_b_id == team_id),
            Match.status == FULL_TIME,
        )
        .scalar()
        or 0
    )


def career_stats(db: Session, user_id: int, player: Optional[Player]) -> CareerStats:
    """
    Career and current-team figures for a user.

    ``totalmatches`` counts Full Time matches of the current team only.
    """
    totals = (
        db.query(
            func.coalesce(func.sum(PlayerStats.total_goals), 0),
            func.coalesce(func.sum(PlayerStats.total_assists), 0),
        )
        .filter(PlayerStats.user_id == user_id)
        .one()
    )
    result = CareerStats(totalgoals=int(totals[0]), totalassists=int(totals[1]))

    if player is not None:
        current = db.query(PlayerStats).filter(PlayerStats.player_id == player.id).first()
        if current is not None:
            result.currentgoals = current.total_goals
            result.currentassists = current.total_assists
        result.totalmatches = completed_match_count(db, player.team_id)

    return result


def team_record(db: Session, team_id: int) -> TeamRecord:
    """
    Win/draw/loss record over Full Time matches, plus roster size.

    ``totalMatches`` counts every match involving the team, finished or not.
    """
    matches = (
        db.query(Match)
        .filter(or_(Match.team_a_id == team_id, Match.team_b_id == team_id))
        .all()
    )
    record = TeamRecord(totalMatches=len(matches))

    for match in matches:
        if match.status != FULL_TIME:
            continue
        is_team_a = match.team_a_id == team_id
        own = match.score_team_a if is_team_a else match.score_team_b
        other = match.score_team_b if is_team_a else match.score_team_a
        if own > other:
            record.wins += 1
        elif own < other:
            record.losses += 1
        else:
            record.draws += 1

    record.totalPlayers = (
        db.query(func.count(Player.id)).filter(Player.team_id == team_id).scalar() or 0
    )
    return record
