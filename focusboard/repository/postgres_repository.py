import logging
from contextlib import contextmanager

import psycopg
from psycopg.rows import dict_row

from flask import g

from focusboard.errors import DuplicateRecordError


logger = logging.getLogger(__name__)


class PostgresRepository:
    def __init__(self, database_url):
        self.database_url = database_url

    def _get_db(self):
        if "db" not in g:
            g.db = psycopg.connect(self.database_url, row_factory=dict_row)
        return g.db

    def close_db(self, exception=None):
        db = g.pop("db", None)
        if db is not None:
            db.close()

    @contextmanager
    def transaction(self):
        """Commit on success, roll back and re-raise on any error."""
        db = self._get_db()
        try:
            yield db
        except psycopg.errors.UniqueViolation as exc:
            logger.warning("rolling back transaction", extra={"reason": str(exc)})
            db.rollback()
            raise DuplicateRecordError(str(exc)) from exc
        except Exception as exc:
            logger.warning("rolling back transaction", extra={"reason": str(exc)})
            db.rollback()
            raise
        else:
            db.commit()

    def init_db(self):
        db = self._get_db()
        statements = [
            """
            CREATE TABLE IF NOT EXISTS users (
                id SERIAL PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                password TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS tasks (
                id SERIAL PRIMARY KEY,
                user_id INTEGER NOT NULL,
                client_id INTEGER NOT NULL,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                completed BOOLEAN NOT NULL DEFAULT FALSE,
                favorited BOOLEAN NOT NULL DEFAULT FALSE,
                task_date TEXT,
                task_time TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT,
                UNIQUE (user_id, client_id),
                FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS goals (
                id SERIAL PRIMARY KEY,
                user_id INTEGER NOT NULL,
                client_id INTEGER NOT NULL,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                category TEXT NOT NULL DEFAULT 'short',
                target_date TEXT,
                completed BOOLEAN NOT NULL DEFAULT FALSE,
                created_at TEXT NOT NULL,
                updated_at TEXT,
                UNIQUE (user_id, client_id),
                FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS pomodoro_sessions (
                id SERIAL PRIMARY KEY,
                user_id INTEGER NOT NULL,
                session_date TEXT NOT NULL,
                duration INTEGER NOT NULL,
                session_type TEXT NOT NULL
                    CHECK (session_type IN ('work', 'short_break', 'long_break')),
                FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS pomodoro_statistics (
                id SERIAL PRIMARY KEY,
                user_id INTEGER NOT NULL UNIQUE,
                total_sessions INTEGER NOT NULL DEFAULT 0,
                total_focus_time INTEGER NOT NULL DEFAULT 0,
                sessions_today INTEGER NOT NULL DEFAULT 0,
                sessions_this_week INTEGER NOT NULL DEFAULT 0,
                last_session_date TEXT,
                last_week_number INTEGER,
                updated_at TEXT,
                FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS user_statistics (
                id SERIAL PRIMARY KEY,
                user_id INTEGER NOT NULL UNIQUE,
                current_streak INTEGER NOT NULL DEFAULT 0,
                longest_streak INTEGER NOT NULL DEFAULT 0,
                last_active_date TEXT,
                activity_logs TEXT NOT NULL DEFAULT '[]',
                time_of_day_stats TEXT NOT NULL DEFAULT '[]',
                updated_at TEXT,
                FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
            )
            """,
        ]
        for statement in statements:
            db.execute(statement)

        db.execute("ALTER TABLE tasks ADD COLUMN IF NOT EXISTS updated_at TEXT")
        db.execute("ALTER TABLE goals ADD COLUMN IF NOT EXISTS updated_at TEXT")
        db.commit()

    # users

    def fetch_user_by_email(self, email):
        db = self._get_db()
        return db.execute(
            "SELECT id, name, email, password, created_at FROM users WHERE email = %s",
            (email,),
        ).fetchone()

    def create_user(self, name, email, password_hash, created_at):
        db = self._get_db()
        row = db.execute(
            """
            INSERT INTO users (name, email, password, created_at)
            VALUES (%s, %s, %s, %s)
            RETURNING id
            """,
            (name, email, password_hash, created_at),
        ).fetchone()
        return row["id"] if row else None

    # tasks

    def fetch_tasks(self, user_id):
        db = self._get_db()
        return db.execute(
            """
            SELECT id, client_id, title, description, completed, favorited,
                   task_date, task_time
            FROM tasks
            WHERE user_id = %s
            ORDER BY id DESC
            """,
            (user_id,),
        ).fetchall()

    def fetch_task(self, user_id, client_id):
        db = self._get_db()
        return db.execute(
            "SELECT id FROM tasks WHERE client_id = %s AND user_id = %s",
            (client_id, user_id),
        ).fetchone()

    def create_task(
        self, user_id, client_id, title, description, completed, favorited,
        task_date, task_time, created_at,
    ):
        db = self._get_db()
        row = db.execute(
            """
            INSERT INTO tasks (
                user_id, client_id, title, description, completed, favorited,
                task_date, task_time, created_at
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id
            """,
            (
                user_id,
                client_id,
                title,
                description,
                bool(completed),
                bool(favorited),
                task_date,
                task_time,
                created_at,
            ),
        ).fetchone()
        return row["id"] if row else None

    def update_task(
        self, user_id, client_id, title, description, completed, favorited,
        task_date, task_time, updated_at,
    ):
        db = self._get_db()
        db.execute(
            """
            UPDATE tasks
            SET title = %s, description = %s, completed = %s, favorited = %s,
                task_date = %s, task_time = %s, updated_at = %s
            WHERE client_id = %s AND user_id = %s
            """,
            (
                title,
                description,
                bool(completed),
                bool(favorited),
                task_date,
                task_time,
                updated_at,
                client_id,
                user_id,
            ),
        )

    def delete_task(self, user_id, client_id):
        db = self._get_db()
        db.execute(
            "DELETE FROM tasks WHERE client_id = %s AND user_id = %s",
            (client_id, user_id),
        )

    # goals

    def fetch_goals(self, user_id):
        db = self._get_db()
        return db.execute(
            """
            SELECT id, client_id, title, description, category, target_date,
                   completed, created_at
            FROM goals
            WHERE user_id = %s
            ORDER BY created_at DESC, id DESC
            """,
            (user_id,),
        ).fetchall()

    def fetch_goal(self, user_id, client_id):
        db = self._get_db()
        return db.execute(
            "SELECT id FROM goals WHERE client_id = %s AND user_id = %s",
            (client_id, user_id),
        ).fetchone()

    def create_goal(
        self, user_id, client_id, title, description, category, target_date,
        completed, created_at,
    ):
        db = self._get_db()
        row = db.execute(
            """
            INSERT INTO goals (
                user_id, client_id, title, description, category, target_date,
                completed, created_at
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id
            """,
            (
                user_id,
                client_id,
                title,
                description,
                category,
                target_date,
                bool(completed),
                created_at,
            ),
        ).fetchone()
        return row["id"] if row else None

    def update_goal(
        self, user_id, client_id, title, description, category, target_date,
        completed, updated_at,
    ):
        db = self._get_db()
        db.execute(
            """
            UPDATE goals
            SET title = %s, description = %s, category = %s, target_date = %s,
                completed = %s, updated_at = %s
            WHERE client_id = %s AND user_id = %s
            """,
            (
                title,
                description,
                category,
                target_date,
                bool(completed),
                updated_at,
                client_id,
                user_id,
            ),
        )

    def delete_goal(self, user_id, client_id):
        db = self._get_db()
        db.execute(
            "DELETE FROM goals WHERE client_id = %s AND user_id = %s",
            (client_id, user_id),
        )

    # pomodoro

    def create_pomodoro_session(self, user_id, session_date, duration, session_type):
        db = self._get_db()
        row = db.execute(
            """
            INSERT INTO pomodoro_sessions (user_id, session_date, duration, session_type)
            VALUES (%s, %s, %s, %s)
            RETURNING id
            """,
            (user_id, session_date, duration, session_type),
        ).fetchone()
        return row["id"] if row else None

    def fetch_recent_work_sessions(self, user_id, limit=100):
        db = self._get_db()
        return db.execute(
            """
            SELECT session_date, duration, session_type
            FROM pomodoro_sessions
            WHERE user_id = %s AND session_type = 'work'
            ORDER BY session_date DESC, id DESC
            LIMIT %s
            """,
            (user_id, limit),
        ).fetchall()

    def fetch_pomodoro_statistics(self, user_id):
        db = self._get_db()
        return db.execute(
            """
            SELECT total_sessions, total_focus_time, sessions_today,
                   sessions_this_week, last_session_date, last_week_number
            FROM pomodoro_statistics
            WHERE user_id = %s
            """,
            (user_id,),
        ).fetchone()

    def record_work_session_statistics(
        self, user_id, duration, session_day, week_start, week_number, updated_at,
    ):
        """Bump the aggregate in one statement; day and week counters restart on rollover."""
        db = self._get_db()
        db.execute(
            """
            INSERT INTO pomodoro_statistics (
                user_id, total_sessions, total_focus_time, sessions_today,
                sessions_this_week, last_session_date, last_week_number, updated_at
            ) VALUES (%s, 1, %s, 1, 1, %s, %s, %s)
            ON CONFLICT (user_id) DO UPDATE SET
                total_sessions = pomodoro_statistics.total_sessions + 1,
                total_focus_time = pomodoro_statistics.total_focus_time
                    + excluded.total_focus_time,
                sessions_today = CASE
                    WHEN pomodoro_statistics.last_session_date = excluded.last_session_date
                    THEN pomodoro_statistics.sessions_today + 1
                    ELSE 1
                END,
                sessions_this_week = CASE
                    WHEN pomodoro_statistics.last_session_date >= %s
                    THEN pomodoro_statistics.sessions_this_week + 1
                    ELSE 1
                END,
                last_session_date = excluded.last_session_date,
                last_week_number = excluded.last_week_number,
                updated_at = excluded.updated_at
            """,
            (user_id, duration, session_day, week_number, updated_at, week_start),
        )

    # user statistics

    def fetch_user_statistics(self, user_id):
        db = self._get_db()
        return db.execute(
            """
            SELECT id, current_streak, longest_streak, last_active_date,
                   activity_logs, time_of_day_stats
            FROM user_statistics
            WHERE user_id = %s
            LIMIT 1
            """,
            (user_id,),
        ).fetchone()

    def create_user_statistics(
        self, user_id, current_streak, longest_streak, last_active_date,
        activity_logs, time_of_day_stats, updated_at,
    ):
        db = self._get_db()
        db.execute(
            """
            INSERT INTO user_statistics (
                user_id, current_streak, longest_streak, last_active_date,
                activity_logs, time_of_day_stats, updated_at
            ) VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            (
                user_id,
                current_streak,
                longest_streak,
                last_active_date,
                activity_logs,
                time_of_day_stats,
                updated_at,
            ),
        )

    def update_user_statistics(
        self, user_id, current_streak, longest_streak, last_active_date,
        activity_logs, time_of_day_stats, updated_at,
    ):
        db = self._get_db()
        db.execute(
            """
            UPDATE user_statistics
            SET current_streak = %s, longest_streak = %s, last_active_date = %s,
                activity_logs = %s, time_of_day_stats = %s, updated_at = %s
            WHERE user_id = %s
            """,
            (
                current_streak,
                longest_streak,
                last_active_date,
                activity_logs,
                time_of_day_stats,
                updated_at,
                user_id,
            ),
        )
