"""Initial schema – companies, company_locations

Revision ID: 0001_initial
Revises:
Create Date: 2025-01-01 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- companies ---
    op.create_table(
        "companies",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("industry", sa.String(50), nullable=False),
        sa.Column("founded_year", sa.Integer),
        sa.Column("website", sa.String(255)),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32)),
        sa.Column("employees", sa.Integer),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("logo", sa.String(500)),
        sa.Column("headquarters", sa.String(200)),
        sa.Column("revenue", sa.Float),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("name", name="uq_companies_name"),
        sa.UniqueConstraint("email", name="uq_companies_email"),
    )
    op.create_index("ix_companies_industry", "companies", ["industry"])
    op.create_index("ix_companies_is_active", "companies", ["is_active"])
    op.create_index("ix_companies_created_at", "companies", ["created_at"])
    op.create_index("ix_companies_employees", "companies", ["employees"])

    # --- company_locations ---
    op.create_table(
        "company_locations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "company_id",
            sa.Uuid,
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("value", sa.String(200), nullable=False),
    )
    op.create_index("ix_company_locations_company_id", "company_locations", ["company_id"])


def downgrade() -> None:
    op.drop_table("company_locations")
    op.drop_table("companies")
