"""Anonymous engagement tables.

Creates anonymous_personas, user_streaks, leaderboard_entries, bookmarks and
secret_admirers, plus the minimal content tables bookmarks resolve against.

Revision ID: 001_engagement_tables
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_engagement_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Personas ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS anonymous_personas (
            id BIGSERIAL PRIMARY KEY,
            session_id VARCHAR(128) UNIQUE NOT NULL,
            avatar VARCHAR(16) NOT NULL,
            alias VARCHAR(64) NOT NULL,
            color VARCHAR(16) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Streaks ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_streaks (
            session_id VARCHAR(128) PRIMARY KEY,
            current_streak INTEGER NOT NULL DEFAULT 0 CHECK (current_streak >= 0),
            longest_streak INTEGER NOT NULL DEFAULT 0,
            last_post_date DATE,
            total_posts INTEGER NOT NULL DEFAULT 0 CHECK (total_posts >= 0),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CHECK (longest_streak >= current_streak)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_streaks_current
        ON user_streaks (current_streak DESC, session_id)
    """)

    # --- Leaderboard ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS leaderboard_entries (
            id BIGSERIAL PRIMARY KEY,
            session_id VARCHAR(128) NOT NULL,
            category VARCHAR(32) NOT NULL
                CHECK (category IN ('top_poster', 'funniest', 'most_helpful', 'streak_master')),
            period VARCHAR(16) NOT NULL
                CHECK (period IN ('weekly', 'monthly', 'alltime')),
            period_start DATE NOT NULL,
            score DOUBLE PRECISION NOT NULL DEFAULT 0,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT leaderboard_entries_bucket_key
                UNIQUE (session_id, category, period, period_start)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_leaderboard_bucket_score
        ON leaderboard_entries (category, period, period_start, score DESC)
    """)

    # --- Content (owned by posting features) ---
    for table, body_column in (
        ("confessions", "content"),
        ("crushes", "content"),
        ("spotted_posts", "content"),
        ("polls", "question"),
    ):
        op.execute(f"""
            CREATE TABLE IF NOT EXISTS {table} (
                id VARCHAR(64) PRIMARY KEY,
                {body_column} TEXT NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)  # noqa: S608

    # --- Bookmarks ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS bookmarks (
            id BIGSERIAL PRIMARY KEY,
            session_id VARCHAR(128) NOT NULL,
            content_type VARCHAR(16) NOT NULL
                CHECK (content_type IN ('confession', 'crush', 'spotted', 'poll')),
            content_id VARCHAR(64) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT bookmarks_session_content_key
                UNIQUE (session_id, content_type, content_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_bookmarks_session_created
        ON bookmarks (session_id, created_at DESC)
    """)

    # --- Secret admirers ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS secret_admirers (
            id BIGSERIAL PRIMARY KEY,
            session_id VARCHAR(128) NOT NULL,
            target_code VARCHAR(64) NOT NULL,
            message VARCHAR(500),
            revealed BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            revealed_at TIMESTAMPTZ,
            CONSTRAINT secret_admirers_session_target_key
                UNIQUE (session_id, target_code)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_secret_admirers_target
        ON secret_admirers (target_code, created_at DESC)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_secret_admirers_pending
        ON secret_admirers (target_code)
        WHERE revealed = FALSE
    """)


def downgrade() -> None:
    for table in (
        "secret_admirers",
        "bookmarks",
        "polls",
        "spotted_posts",
        "crushes",
        "confessions",
        "leaderboard_entries",
        "user_streaks",
        "anonymous_personas",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")  # noqa: S608
