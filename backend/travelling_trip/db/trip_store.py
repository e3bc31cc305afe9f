# backend/travelling_trip/db/trip_store.py

import json
import sqlite3
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


# Retry configuration
MAX_RETRIES = 5
RETRY_DELAY = 0.1  # 100ms


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _trip_from_row(row: sqlite3.Row) -> Dict[str, Any]:
    item = dict(row)
    item["data"] = json.loads(item.pop("data_json"))
    return item


class SQLiteStore:
    """
    Trips and subscription records.

    Trip documents are stored opaque (JSON text); writes are last-writer-wins.
    """

    def __init__(self, db_path: str):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=30.0  # 30 seconds timeout
        )
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA synchronous=NORMAL")
        self.conn.execute("PRAGMA busy_timeout=30000")
        self._init_tables()

    def _execute_with_retry(self, operation, *args, **kwargs):
        """Run a write, backing off while another connection holds the lock."""
        for attempt in range(MAX_RETRIES):
            try:
                return operation(*args, **kwargs)
            except sqlite3.OperationalError as e:
                if "locked" in str(e).lower() and attempt < MAX_RETRIES - 1:
                    time.sleep(RETRY_DELAY * (attempt + 1))
                    continue
                raise

    def close(self):
        self.conn.close()

    # ----------------------------------------------------------------------
    # CREATE TABLES
    # ----------------------------------------------------------------------
    def _init_tables(self):
        cur = self.conn.cursor()

        cur.execute("""
        CREATE TABLE IF NOT EXISTS trips (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            trip_title TEXT NOT NULL,
            destination TEXT NOT NULL,
            data_json TEXT NOT NULL,
            public_url_id TEXT UNIQUE NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """)

        # one row per user; session id unique so a replayed payment is a no-op
        cur.execute("""
        CREATE TABLE IF NOT EXISTS user_subscriptions (
            user_id TEXT PRIMARY KEY,
            stripe_session_id TEXT UNIQUE,
            stripe_subscription_id TEXT,
            subscription_status TEXT NOT NULL,
            expires_at TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """)

        # paid checkouts that have not been linked to an account yet
        cur.execute("""
        CREATE TABLE IF NOT EXISTS pending_subscriptions (
            stripe_session_id TEXT PRIMARY KEY,
            customer_email TEXT,
            stripe_subscription_id TEXT,
            created_at TEXT NOT NULL
        );
        """)

        cur.execute("CREATE INDEX IF NOT EXISTS idx_trips_user ON trips(user_id);")
        cur.execute("CREATE INDEX IF NOT EXISTS idx_sub_stripe ON user_subscriptions(stripe_subscription_id);")

        self.conn.commit()

    # ----------------------------------------------------------------------
    # TRIPS
    # ----------------------------------------------------------------------
    def save_trip(self, user_id: str, trip_title: str, destination: str, data: dict) -> Dict[str, Any]:
        trip_id = str(uuid.uuid4())

        def _save_trip():
            now = utc_now_iso()
            self.conn.execute("""
            INSERT INTO trips (id, user_id, trip_title, destination, data_json, public_url_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                trip_id, user_id, trip_title, destination,
                json.dumps(data, ensure_ascii=False),
                uuid.uuid4().hex,
                now, now,
            ))
            self.conn.commit()

        self._execute_with_retry(_save_trip)
        return self.get_trip(trip_id)

    def update_trip(
        self,
        trip_id: str,
        trip_title: Optional[str] = None,
        destination: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> Optional[Dict[str, Any]]:
        updates = {}
        if trip_title is not None:
            updates["trip_title"] = trip_title
        if destination is not None:
            updates["destination"] = destination
        if data is not None:
            updates["data_json"] = json.dumps(data, ensure_ascii=False)

        def _update_trip():
            updates["updated_at"] = utc_now_iso()
            assignments = ", ".join(f"{column}=?" for column in updates)
            self.conn.execute(
                f"UPDATE trips SET {assignments} WHERE id = ?",
                (*updates.values(), trip_id),
            )
            self.conn.commit()

        self._execute_with_retry(_update_trip)
        return self.get_trip(trip_id)

    def list_user_trips(self, user_id: str) -> List[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("""
        SELECT * FROM trips
        WHERE user_id = ?
        ORDER BY created_at DESC, rowid DESC
        """, (user_id,))
        return [_trip_from_row(r) for r in cur.fetchall()]

    def get_trip(self, trip_id: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM trips WHERE id = ?", (trip_id,))
        row = cur.fetchone()
        return _trip_from_row(row) if row else None

    def get_trip_by_public_id(self, public_url_id: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM trips WHERE public_url_id = ?", (public_url_id,))
        row = cur.fetchone()
        return _trip_from_row(row) if row else None

    def delete_trip(self, trip_id: str) -> bool:
        def _delete_trip():
            cur = self.conn.cursor()
            cur.execute("DELETE FROM trips WHERE id = ?", (trip_id,))
            self.conn.commit()
            return cur.rowcount > 0

        return self._execute_with_retry(_delete_trip)

    # ----------------------------------------------------------------------
    # SUBSCRIPTIONS
    # ----------------------------------------------------------------------
    def get_subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM user_subscriptions WHERE user_id = ?", (user_id,))
        row = cur.fetchone()
        return dict(row) if row else None

    def get_subscription_by_session(self, stripe_session_id: str) -> Optional[Dict[str, Any]]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM user_subscriptions WHERE stripe_session_id = ?", (stripe_session_id,))
        row = cur.fetchone()
        return dict(row) if row else None

    def upsert_subscription(
        self,
        user_id: str,
        stripe_session_id: str,
        status: str,
        expires_at: str,
        stripe_subscription_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        def _upsert():
            now = utc_now_iso()
            self.conn.execute("""
            INSERT INTO user_subscriptions
                (user_id, stripe_session_id, stripe_subscription_id, subscription_status, expires_at, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                stripe_session_id=excluded.stripe_session_id,
                stripe_subscription_id=COALESCE(excluded.stripe_subscription_id, stripe_subscription_id),
                subscription_status=excluded.subscription_status,
                expires_at=excluded.expires_at,
                updated_at=excluded.updated_at
            """, (user_id, stripe_session_id, stripe_subscription_id, status, expires_at, now, now))
            self.conn.commit()

        self._execute_with_retry(_upsert)
        return self.get_subscription(user_id)

    def update_subscription_status(
        self,
        stripe_subscription_id: str,
        status: str,
        expires_at: Optional[str] = None,
    ) -> int:
        def _update_status():
            cur = self.conn.cursor()
            cur.execute("""
            UPDATE user_subscriptions
            SET subscription_status=?, expires_at=COALESCE(?, expires_at), updated_at=?
            WHERE stripe_subscription_id = ?
            """, (status, expires_at, utc_now_iso(), stripe_subscription_id))
            self.conn.commit()
            return cur.rowcount

        return self._execute_with_retry(_update_status)

    # ----------------------------------------------------------------------
    # PENDING SUBSCRIPTIONS
    # ----------------------------------------------------------------------
    def add_pending_subscription(
        self,
        stripe_session_id: str,
        customer_email: Optional[str] = None,
        stripe_subscription_id: Optional[str] = None,
    ):
        def _add_pending():
            self.conn.execute("""
            REPLACE INTO pending_subscriptions (stripe_session_id, customer_email, stripe_subscription_id, created_at)
            VALUES (?, ?, ?, ?)
            """, (stripe_session_id, customer_email, stripe_subscription_id, utc_now_iso()))
            self.conn.commit()

        self._execute_with_retry(_add_pending)

    def pop_pending_subscription(self, stripe_session_id: str) -> Optional[Dict[str, Any]]:
        def _pop_pending():
            cur = self.conn.cursor()
            cur.execute("SELECT * FROM pending_subscriptions WHERE stripe_session_id = ?", (stripe_session_id,))
            row = cur.fetchone()
            if row is None:
                return None
            cur.execute("DELETE FROM pending_subscriptions WHERE stripe_session_id = ?", (stripe_session_id,))
            self.conn.commit()
            return dict(row)

        return self._execute_with_retry(_pop_pending)
