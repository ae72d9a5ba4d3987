"""Create schedule items and instances

Revision ID: 5e1a7c2d9b40
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5e1a7c2d9b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "schedule_items",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("detail", sa.String(), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("recurrence_rule", sa.JSON(), nullable=True),
    )
    op.create_index(op.f("ix_schedule_items_kind"), "schedule_items", ["kind"], unique=False)
    op.create_index(op.f("ix_schedule_items_is_archived"), "schedule_items", ["is_archived"], unique=False)

    op.create_table(
        "instances",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("item_id", sa.String(), sa.ForeignKey("schedule_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_kind", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("note", sa.String(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("item_id", "date", name="uq_instance_item_date"),
    )
    op.create_index(op.f("ix_instances_item_id"), "instances", ["item_id"], unique=False)
    op.create_index(op.f("ix_instances_date"), "instances", ["date"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_instances_date"), table_name="instances")
    op.drop_index(op.f("ix_instances_item_id"), table_name="instances")
    op.drop_table("instances")

    op.drop_index(op.f("ix_schedule_items_is_archived"), table_name="schedule_items")
    op.drop_index(op.f("ix_schedule_items_kind"), table_name="schedule_items")
    op.drop_table("schedule_items")
