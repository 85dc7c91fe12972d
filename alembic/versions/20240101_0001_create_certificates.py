"""create certificates table

Revision ID: 0001
Revises:
Create Date: 2024-01-01 00:00:00
"""

import sqlalchemy as sa
from alembic import op


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "certificates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("cert_id", sa.String(length=32), nullable=False),
        sa.Column("candidate_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("position", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("hours", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("start_date", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("end_date", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("issue_date", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("image_url", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("valid", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_certificates_cert_id", "certificates", ["cert_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_certificates_cert_id", table_name="certificates")
    op.drop_table("certificates")
