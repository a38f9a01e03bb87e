"""001 create github sync and skill profile tables

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # github_users - Linked GitHub accounts; updated_at is the last sync time
    op.create_table(
        "github_users",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("github_id", sa.BigInteger(), nullable=False, unique=True),
        sa.Column("username", sa.String(39), nullable=False),
        sa.Column("avatar_url", sa.Text()),
        sa.Column("bio", sa.Text()),
        sa.Column("public_repos", sa.Integer(), server_default="0"),
        sa.Column("followers", sa.Integer(), server_default="0"),
        sa.Column("following", sa.Integer(), server_default="0"),
        sa.Column("html_url", sa.Text()),
        *_timestamps(),
    )

    # github_repositories - Repository snapshots keyed by GitHub repo id
    op.create_table(
        "github_repositories",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "github_user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("github_users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("repo_id", sa.BigInteger(), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("html_url", sa.Text()),
        sa.Column("stargazers_count", sa.Integer(), server_default="0"),
        sa.Column("forks_count", sa.Integer(), server_default="0"),
        sa.Column("language", sa.String(50)),
        sa.Column("languages", postgresql.JSONB(), server_default="{}"),
        sa.Column("topics", postgresql.ARRAY(sa.String(50)), server_default="{}"),
        sa.Column("is_fork", sa.Boolean(), server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("pushed_at", sa.DateTime(timezone=True)),
        sa.Column(
            "last_synced",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_github_repositories_stars",
        "github_repositories",
        ["github_user_id", "stargazers_count"],
    )

    # github_contributions - Weekly commit totals per account and repository
    op.create_table(
        "github_contributions",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "github_user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("github_users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("repo_id", sa.BigInteger(), nullable=False),
        sa.Column("commit_count", sa.Integer(), server_default="0"),
        sa.Column("additions", sa.Integer(), server_default="0"),
        sa.Column("deletions", sa.Integer(), server_default="0"),
        sa.Column("contribution_period", sa.Date(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "github_user_id", "repo_id", "contribution_period", name="uq_contribution_week"
        ),
    )

    # user_knowledge_profiles - One skill profile per application user
    op.create_table(
        "user_knowledge_profiles",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column("skills", postgresql.ARRAY(sa.Text()), server_default="{}"),
        sa.Column("interests", postgresql.ARRAY(sa.Text()), server_default="{}"),
        sa.Column("experience_level", sa.String(20)),
        sa.Column("career_goals", postgresql.ARRAY(sa.Text()), server_default="{}"),
        sa.Column("learning_goals", postgresql.ARRAY(sa.Text()), server_default="{}"),
        *_timestamps(),
    )

    # user_learning_progress - At most one row per (user, skill)
    op.create_table(
        "user_learning_progress",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("skill_name", sa.String(100), nullable=False),
        sa.Column("skill_id", sa.String(100), nullable=False),
        sa.Column("proficiency_level", sa.String(20), nullable=False),
        sa.Column("learning_status", sa.String(20), nullable=False),
        sa.Column("learning_resources", postgresql.JSONB(), server_default="{}"),
        sa.Column("progress_notes", sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "skill_name", name="uq_user_learning_skill"),
    )


def downgrade() -> None:
    op.drop_table("user_learning_progress")
    op.drop_table("user_knowledge_profiles")
    op.drop_table("github_contributions")
    op.drop_index("ix_github_repositories_stars", table_name="github_repositories")
    op.drop_table("github_repositories")
    op.drop_table("github_users")
