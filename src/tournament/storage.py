"""
Storage backend for tournament winners.

Uses SQLite for tournament metadata and the top placings of each tournament,
so that earlier winners can be fed back into later populations.
"""

import json
import sqlite3
from pathlib import Path
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass, field

from src.blotto.strategy import Strategy


@dataclass
class TournamentResult:
    """Complete results of a tournament."""
    tournament_id: str
    created_at: str
    completed_at: Optional[str]
    status: str
    mode: str
    population_size: int
    placings: List[Strategy] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)
    arbitrary_tie_breaks: int = 0
    elapsed: float = 0.0

    @property
    def winner(self) -> Optional[Strategy]:
        """Overall winner, or None if nothing has been placed yet."""
        return self.placings[0] if self.placings else None


def _encode_strategy(strategy: Strategy) -> str:
    return json.dumps(list(strategy.troops))


def _decode_strategy(troops: str, scale: int) -> Strategy:
    return Strategy(tuple(json.loads(troops)), scale)


class TournamentStorage:
    """
    Handles persistent storage of tournament winners.

    Uses SQLite tables in the blotto.db database.
    """

    def __init__(self, data_dir: str = "data"):
        """
        Initialize storage backend.

        Args:
            data_dir: Base directory for data storage
        """
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / "blotto.db"

        # Ensure directory exists
        self.data_dir.mkdir(parents=True, exist_ok=True)

        # Initialize database tables
        self._init_db()

    def _init_db(self):
        """Initialize SQLite database schema for tournaments."""
        with sqlite3.connect(self.db_path) as conn:
            # Tournament metadata
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tournaments (
                    tournament_id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    completed_at TEXT,
                    status TEXT DEFAULT 'in_progress',
                    mode TEXT NOT NULL,
                    population_size INTEGER NOT NULL,
                    arbitrary_tie_breaks INTEGER DEFAULT 0,
                    elapsed REAL DEFAULT 0,
                    config TEXT
                )
            """)

            # Top placings, place 1 is the winner
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tournament_winners (
                    tournament_id TEXT NOT NULL,
                    place INTEGER NOT NULL,
                    troops TEXT NOT NULL,
                    scale INTEGER NOT NULL DEFAULT 1,
                    PRIMARY KEY (tournament_id, place),
                    FOREIGN KEY (tournament_id) REFERENCES tournaments(tournament_id)
                )
            """)

            # Indexes
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tournaments_status ON tournaments(status)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_winners_tournament ON tournament_winners(tournament_id)")

            conn.commit()

    def create_tournament(
        self,
        tournament_id: str,
        mode: str,
        population_size: int,
        config: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Create a new tournament record.

        Args:
            tournament_id: Unique tournament identifier
            mode: Tournament mode ('relegation' or 'bracket')
            population_size: Number of strategies entered
            config: Optional configuration dict

        Returns:
            tournament_id
        """
        created_at = datetime.now(timezone.utc).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO tournaments (tournament_id, created_at, status, mode, population_size, config)
                VALUES (?, ?, 'in_progress', ?, ?, ?)
            """, (tournament_id, created_at, mode, population_size, json.dumps(config or {})))
            conn.commit()

        return tournament_id

    def complete_tournament(
        self,
        tournament_id: str,
        placings: List[Strategy],
        arbitrary_tie_breaks: int = 0,
        elapsed: float = 0.0
    ):
        """Mark tournament as completed and save its placings, best first."""
        completed_at = datetime.now(timezone.utc).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                UPDATE tournaments
                SET status = 'completed', completed_at = ?, arbitrary_tie_breaks = ?, elapsed = ?
                WHERE tournament_id = ?
            """, (completed_at, arbitrary_tie_breaks, elapsed, tournament_id))

            conn.executemany("""
                INSERT OR REPLACE INTO tournament_winners (tournament_id, place, troops, scale)
                VALUES (?, ?, ?, ?)
            """, [
                (tournament_id, place, _encode_strategy(strategy), strategy.scale)
                for place, strategy in enumerate(placings, 1)
            ])

            conn.commit()

    def load_tournament(self, tournament_id: str) -> Optional[TournamentResult]:
        """Load a tournament by ID."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row

            cursor = conn.execute(
                "SELECT * FROM tournaments WHERE tournament_id = ?",
                (tournament_id,)
            )
            row = cursor.fetchone()
            if not row:
                return None

            cursor = conn.execute(
                "SELECT troops, scale FROM tournament_winners WHERE tournament_id = ? ORDER BY place",
                (tournament_id,)
            )
            placings = [_decode_strategy(r['troops'], r['scale']) for r in cursor.fetchall()]

            return TournamentResult(
                tournament_id=row['tournament_id'],
                created_at=row['created_at'],
                completed_at=row['completed_at'],
                status=row['status'],
                mode=row['mode'],
                population_size=row['population_size'],
                placings=placings,
                config=json.loads(row['config'] or '{}'),
                arbitrary_tie_breaks=row['arbitrary_tie_breaks'] or 0,
                elapsed=row['elapsed'] or 0.0
            )

    def list_tournaments(self, limit: int = 20) -> List[Dict[str, Any]]:
        """List recent tournaments."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute("""
                SELECT tournament_id, created_at, completed_at, status, mode, population_size
                FROM tournaments
                ORDER BY created_at DESC
                LIMIT ?
            """, (limit,))

            return [dict(row) for row in cursor.fetchall()]

    def recent_winners(self, limit: int = 10) -> List[Strategy]:
        """
        Winners of the most recently completed tournaments.

        Args:
            limit: Maximum number of winners to return

        Returns:
            Distinct winning strategies, most recent first
        """
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute("""
                SELECT w.troops, w.scale
                FROM tournament_winners w
                JOIN tournaments t ON t.tournament_id = w.tournament_id
                WHERE w.place = 1 AND t.status = 'completed'
                ORDER BY t.completed_at DESC, t.rowid DESC
            """)

            winners = []
            for r in cursor.fetchall():
                strategy = _decode_strategy(r['troops'], r['scale'])
                if strategy not in winners:
                    winners.append(strategy)
                if len(winners) >= limit:
                    break
            return winners
