"""create_readings_and_summaries

Revision ID: 3f1c9a7e2b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c9a7e2b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "sensor_readings",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("right_level", sa.Float(), nullable=False),
        sa.Column("left_level", sa.Float(), nullable=False),
        sa.Column("right_flow", sa.Float(), nullable=False),
        sa.Column("left_flow", sa.Float(), nullable=False),
        sa.Column("captured_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_reading_captured_at", "sensor_readings", ["captured_at"])

    op.create_table(
        "daily_summaries",
        sa.Column("summary_date", sa.Date(), primary_key=True),
        sa.Column("avg_right_level", sa.Float(), nullable=False, server_default="0"),
        sa.Column("avg_left_level", sa.Float(), nullable=False, server_default="0"),
        sa.Column("avg_right_flow", sa.Float(), nullable=False, server_default="0"),
        sa.Column("avg_left_flow", sa.Float(), nullable=False, server_default="0"),
        sa.Column("sample_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="SAFE"),
        sa.Column("flood_flag", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_status", sa.String(length=20), nullable=False, server_default="SAFE"),
        sa.Column("last_flood_flag", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("computed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_summary_flood_flag", "daily_summaries", ["flood_flag"])


def downgrade() -> None:
    op.drop_index("idx_summary_flood_flag", table_name="daily_summaries")
    op.drop_table("daily_summaries")
    op.drop_index("idx_reading_captured_at", table_name="sensor_readings")
    op.drop_table("sensor_readings")
