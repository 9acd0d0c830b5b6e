"""SQLite vote store implementation."""

import sqlite3
import time
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

import structlog

from talkvote.config.constants import COMPONENT_STORE, MAX_TOPICS_TO_QUERY
from talkvote.store.errors import (
    StoreConnectionError,
    TopicQueryError,
    VoteWriteError,
)
from talkvote.store.identity import identity_for
from talkvote.store.metrics import StoreMetrics, TransactionContext
from talkvote.store.migrations import CURRENT_VERSION, MigrationManager
from talkvote.store.models import (
    StoredVote,
    TopicBucket,
    VoteEventType,
    VoteRecord,
    VoteWriteResult,
)


logger = structlog.get_logger()


class VoteStore:
    """SQLite store for topic votes.

    Every vote is keyed by ``identity_for(topic, user)``, so writing a vote
    for a pair that already has one replaces its points. Topics have no
    table of their own: the set of topics is whatever titles have votes.
    """

    def __init__(
        self,
        db_path: Path | str,
        session_id: str | None = None,
        metrics: StoreMetrics | None = None,
    ) -> None:
        """Initialize the vote store.

        Args:
            db_path: Path to SQLite database file.
            session_id: Optional session ID for logging context.
            metrics: Optional metrics instance.
        """
        self._db_path = Path(db_path) if isinstance(db_path, str) else db_path
        self._session_id = session_id or str(uuid.uuid4())
        self._conn: sqlite3.Connection | None = None
        self._metrics = metrics or StoreMetrics.get_instance()
        self._log = logger.bind(
            component=COMPONENT_STORE,
            session_id=self._session_id,
            db_path=str(self._db_path),
        )

    @property
    def db_path(self) -> Path:
        """Get the database path."""
        return self._db_path

    @property
    def is_connected(self) -> bool:
        """Check if connected to database."""
        return self._conn is not None

    def connect(self) -> None:
        """Open connection to database and apply migrations.

        Creates the database file and parent directories if they don't exist.

        Raises:
            StoreConnectionError: If the database cannot be opened.
        """
        if self._conn is not None:
            return

        self._log.debug("connecting_to_database")

        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=NORMAL")
        except (OSError, sqlite3.Error) as e:
            self._log.error("database_connect_failed", error=str(e))
            self._conn = None
            raise StoreConnectionError(
                f"Cannot open vote database at {self._db_path}: {e}"
            ) from e

        migration_mgr = MigrationManager(self._conn)
        old_version = migration_mgr.get_current_version()
        applied = migration_mgr.apply_migrations()

        self._log.info(
            "database_connected",
            old_version=old_version,
            new_version=CURRENT_VERSION,
            migrations_applied=applied,
        )

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._log.debug("database_closed")

    def __enter__(self) -> "VoteStore":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()

    def _ensure_connected(self) -> sqlite3.Connection:
        """Ensure database is connected.

        Returns:
            The database connection.

        Raises:
            StoreConnectionError: If not connected.
        """
        if self._conn is None:
            raise StoreConnectionError("Database not connected. Call connect() first.")
        return self._conn

    @contextmanager
    def _transaction(self, operation: str) -> Generator[TransactionContext]:
        """Context manager for transactions with timing and logging.

        Args:
            operation: Name of the operation for logging.

        Yields:
            Transaction context with timing information.
        """
        conn = self._ensure_connected()
        tx_id = str(uuid.uuid4())[:8]
        start_ns = time.perf_counter_ns()
        ctx = TransactionContext(
            tx_id=tx_id, start_time_ns=start_ns, operation=operation
        )

        try:
            yield ctx
            conn.commit()
        except Exception:
            conn.rollback()
            duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
            self._log.error(
                "transaction_failed",
                tx_id=tx_id,
                op=operation,
                duration_ms=round(duration_ms, 2),
            )
            raise

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        self._metrics.record_tx_duration(duration_ms)
        self._log.debug(
            "transaction_complete",
            tx_id=tx_id,
            op=operation,
            affected_rows=ctx.affected_rows,
            duration_ms=round(duration_ms, 2),
        )

    def get_schema_version(self) -> int:
        """Get the applied schema version."""
        return MigrationManager(self._ensure_connected()).get_current_version()

    # ===== Topics =====

    def topic_buckets(self, limit: int = MAX_TOPICS_TO_QUERY) -> list[TopicBucket]:
        """Aggregate votes by topic title.

        Ordered like a terms aggregation: most votes first, ties by title.

        Args:
            limit: Maximum number of topics returned.

        Returns:
            One bucket per distinct title.

        Raises:
            TopicQueryError: If the query fails.
        """
        conn = self._ensure_connected()
        try:
            cursor = conn.execute(
                """
                SELECT title, COUNT(*) AS vote_count,
                       SUM(interest_points) AS total_points
                FROM votes
                GROUP BY title
                ORDER BY vote_count DESC, title ASC
                LIMIT ?
                """,
                (limit,),
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            self._log.error("topic_query_failed", error=str(e))
            raise TopicQueryError(str(e)) from e

        return [
            TopicBucket(
                title=row["title"],
                vote_count=row["vote_count"],
                total_points=row["total_points"],
            )
            for row in rows
        ]

    def list_topics(self, limit: int = MAX_TOPICS_TO_QUERY) -> list[str]:
        """List distinct topic titles.

        Args:
            limit: Maximum number of topics returned.

        Returns:
            Topic titles, most voted first.
        """
        return [bucket.title for bucket in self.topic_buckets(limit)]

    # ===== Votes =====

    def record_vote(self, user: str, topic: str, points: int) -> VoteWriteResult:
        """Upsert a user's vote on a topic.

        - No vote for (topic, user): insert as NEW
        - Vote exists with the same points: touch last_voted_at (UNCHANGED)
        - Vote exists with different points: overwrite points (UPDATED)

        Args:
            user: Voting user.
            topic: Topic label.
            points: Interest points.

        Returns:
            Result indicating what happened.

        Raises:
            VoteWriteError: If the database write fails.
        """
        record = VoteRecord(user=user, topic=topic, points=points)
        vote_id = identity_for(topic, user)
        now = datetime.now(UTC)

        try:
            with self._transaction("record_vote") as ctx:
                conn = self._ensure_connected()
                existing = conn.execute(
                    "SELECT interest_points, first_voted_at FROM votes "
                    "WHERE vote_id = ?",
                    (vote_id,),
                ).fetchone()

                if existing is None:
                    conn.execute(
                        """
                        INSERT INTO votes (
                            vote_id, user, title, interest_points,
                            first_voted_at, last_voted_at
                        ) VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (
                            vote_id,
                            user,
                            topic,
                            points,
                            now.isoformat(),
                            now.isoformat(),
                        ),
                    )
                    event_type = VoteEventType.NEW
                    first_voted_at = now
                else:
                    conn.execute(
                        """
                        UPDATE votes SET
                            user = ?, title = ?, interest_points = ?,
                            last_voted_at = ?
                        WHERE vote_id = ?
                        """,
                        (user, topic, points, now.isoformat(), vote_id),
                    )
                    event_type = (
                        VoteEventType.UNCHANGED
                        if existing["interest_points"] == points
                        else VoteEventType.UPDATED
                    )
                    first_voted_at = datetime.fromisoformat(existing["first_voted_at"])
                ctx.add_affected_rows(1)
        except sqlite3.Error as e:
            self._metrics.record_write_failure()
            raise VoteWriteError(vote_id, topic, str(e)) from e

        if event_type == VoteEventType.NEW:
            self._metrics.record_new()
        elif event_type == VoteEventType.UPDATED:
            self._metrics.record_update()
        else:
            self._metrics.record_unchanged()

        self._log.info(
            "vote_recorded",
            vote_id=vote_id,
            topic=topic,
            points=points,
            event_type=event_type.value,
        )

        return VoteWriteResult(
            event_type=event_type,
            vote=StoredVote(
                vote_id=vote_id,
                record=record,
                first_voted_at=first_voted_at,
                last_voted_at=now,
            ),
        )

    def get_vote(self, topic: str, user: str) -> StoredVote | None:
        """Get a user's vote on a topic.

        Args:
            topic: Topic label.
            user: Voting user.

        Returns:
            The stored vote, or None if the user never voted on the topic.
        """
        conn = self._ensure_connected()
        row = conn.execute(
            "SELECT * FROM votes WHERE vote_id = ?",
            (identity_for(topic, user),),
        ).fetchone()

        if row is None:
            return None

        return StoredVote(
            vote_id=row["vote_id"],
            record=VoteRecord(
                user=row["user"],
                topic=row["title"],
                points=row["interest_points"],
            ),
            first_voted_at=datetime.fromisoformat(row["first_voted_at"]),
            last_voted_at=datetime.fromisoformat(row["last_voted_at"]),
        )

    def count_votes(self) -> int:
        """Count stored vote rows."""
        conn = self._ensure_connected()
        row = conn.execute("SELECT COUNT(*) FROM votes").fetchone()
        return int(row[0])
