"""init

Revision ID: 4f1c2a9b7d10
Revises:
Create Date: 2026-10-19 10:12:41.518204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4f1c2a9b7d10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("guid", sa.String(512), primary_key=True),
        sa.Column("login", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("is_admin", sa.Boolean, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_users_login", "users", ["login"], unique=True)
    op.create_index("idx_users_email", "users", ["email"])

    op.create_table(
        "user_meta",
        sa.Column("guid", sa.String(512), primary_key=True),
        sa.Column(
            "user_guid",
            sa.String(512),
            sa.ForeignKey("users.guid", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("meta_key", sa.String(64), nullable=False),
        sa.Column("meta_value", sa.String(512), nullable=False),
    )
    op.create_index(
        "idx_user_meta_user_key", "user_meta", ["user_guid", "meta_key"], unique=True
    )


def downgrade() -> None:
    op.drop_index("idx_user_meta_user_key", table_name="user_meta")
    op.drop_table("user_meta")

    op.drop_index("idx_users_email", table_name="users")
    op.drop_index("idx_users_login", table_name="users")
    op.drop_table("users")
