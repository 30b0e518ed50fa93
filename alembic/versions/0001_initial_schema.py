"""Initial TaskHub schema."""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create tasks, notes and activities."""
    bind = op.get_bind()

    activityaction = sa.Enum(
        "TaskCreated",
        "TaskUpdated",
        "TaskDeleted",
        "TaskCompleted",
        "TaskUncompleted",
        "NoteCreated",
        "NoteUpdated",
        "NoteDeleted",
        name="activityaction",
    )
    entitytype = sa.Enum("Task", "Note", name="entitytype")

    activityaction.create(bind, checkfirst=True)
    entitytype.create(bind, checkfirst=True)

    op.create_table(
        "tasks",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_tasks_created", "tasks", ["created_at"])
    op.create_index("idx_tasks_completed", "tasks", ["is_completed"])

    op.create_table(
        "notes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "task_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_notes_task", "notes", ["task_id", "created_at"])

    op.create_table(
        "activities",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "action",
            postgresql.ENUM(name="activityaction", create_type=False),
            nullable=False,
        ),
        sa.Column(
            "entity_type",
            postgresql.ENUM(name="entitytype", create_type=False),
            nullable=False,
        ),
        sa.Column("entity_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("entity_title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("additional_data", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_activities_created", "activities", ["created_at"])
    op.create_index("idx_activities_entity", "activities", ["entity_type", "entity_id"])


def downgrade() -> None:
    """Drop all tables and enums."""
    op.drop_index("idx_activities_entity", table_name="activities")
    op.drop_index("idx_activities_created", table_name="activities")
    op.drop_table("activities")

    op.drop_index("idx_notes_task", table_name="notes")
    op.drop_table("notes")

    op.drop_index("idx_tasks_completed", table_name="tasks")
    op.drop_index("idx_tasks_created", table_name="tasks")
    op.drop_table("tasks")

    bind = op.get_bind()
    sa.Enum(name="entitytype").drop(bind, checkfirst=True)
    sa.Enum(name="activityaction").drop(bind, checkfirst=True)
