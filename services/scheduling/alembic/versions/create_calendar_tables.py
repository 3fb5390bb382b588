"""create_calendar_tables

Revision ID: 3e1f0c9a7b52
Revises:
Create Date: 2025-09-02 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3e1f0c9a7b52"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "meetings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["employees.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_meetings_start_time", "meetings", ["start_time"])
    op.create_index("ix_meetings_end_time", "meetings", ["end_time"])
    op.create_index("ix_meetings_owner_id", "meetings", ["owner_id"])

    op.create_table(
        "meeting_participants",
        sa.Column("meeting_id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["meeting_id"], ["meetings.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["employee_id"], ["employees.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("meeting_id", "employee_id"),
    )


def downgrade() -> None:
    op.drop_table("meeting_participants")
    op.drop_index("ix_meetings_owner_id", table_name="meetings")
    op.drop_index("ix_meetings_end_time", table_name="meetings")
    op.drop_index("ix_meetings_start_time", table_name="meetings")
    op.drop_table("meetings")
    op.drop_table("employees")
