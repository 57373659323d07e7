"""Ledger domain services: play sessions, score submission and ranking.

HTTP routes reach these through the ``Services`` container stored on the
Flask app, keeping transport concerns separated from the ledger rules.
"""

from dataclasses import dataclass
from datetime import timedelta

from washboard.services.leaderboard import LeaderboardQuery
from washboard.services.ledger import ScoreLedger
from washboard.services.sessions import SessionAuthority


@dataclass
class Services:
    store: object
    sessions: SessionAuthority
    ledger: ScoreLedger
    leaderboard: LeaderboardQuery


def build_services(store, session_ttl_sec: int = 600) -> Services:
    authority = SessionAuthority(store, ttl=timedelta(seconds=session_ttl_sec))
    return Services(
        store=store,
        sessions=authority,
        ledger=ScoreLedger(store, authority),
        leaderboard=LeaderboardQuery(store),
    )
