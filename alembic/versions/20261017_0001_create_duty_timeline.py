# mypy: ignore-errors
"""
Migration Alembic pour créer les tables person, astronaut_duty et astronaut_detail.

Inclut l'index unique partiel garantissant une seule affectation ouverte par personne.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Crée les trois tables et leurs contraintes."""
    op.create_table(
        "person",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "astronaut_duty",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("person_id", sa.Integer(), sa.ForeignKey("person.id"), nullable=False),
        sa.Column("rank", sa.String(length=64), nullable=False),
        sa.Column("duty_title", sa.String(length=128), nullable=False),
        sa.Column("duty_start_date", sa.Date(), nullable=False),
        sa.Column("duty_end_date", sa.Date(), nullable=True),
        sa.UniqueConstraint(
            "person_id", "duty_title", "duty_start_date", name="uq_duty_person_title_start"
        ),
    )
    op.create_index("ix_astronaut_duty_person_id", "astronaut_duty", ["person_id"])
    op.create_index(
        "uq_duty_one_open_per_person",
        "astronaut_duty",
        ["person_id"],
        unique=True,
        sqlite_where=sa.text("duty_end_date IS NULL"),
        postgresql_where=sa.text("duty_end_date IS NULL"),
    )
    op.create_table(
        "astronaut_detail",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("person_id", sa.Integer(), sa.ForeignKey("person.id"), nullable=False),
        sa.Column("current_duty_title", sa.String(length=128), nullable=False),
        sa.Column("current_rank", sa.String(length=64), nullable=False),
        sa.Column("career_start_date", sa.Date(), nullable=False),
        sa.Column("career_end_date", sa.Date(), nullable=True),
        sa.UniqueConstraint("person_id"),
    )


def downgrade() -> None:
    """Supprime les tables (ordre inverse des dépendances)."""
    op.drop_table("astronaut_detail")
    op.drop_index("uq_duty_one_open_per_person", table_name="astronaut_duty")
    op.drop_index("ix_astronaut_duty_person_id", table_name="astronaut_duty")
    op.drop_table("astronaut_duty")
    op.drop_table("person")
