from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "player",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("handicap", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index(
        "uq_player_name_lower",
        "player",
        [sa.text("lower(name)")],
        unique=True,
    )
    op.create_table(
        "course",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("hole_data", _json(), nullable=False),
    )
    op.create_table(
        "wager",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("carry_over", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_table(
        "round",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("status", sa.String(), nullable=False, server_default="Active"),
        sa.Column("course_id", sa.String(), sa.ForeignKey("course.id"), nullable=True),
        sa.Column("course_name", sa.String(), nullable=True),
        sa.Column("players", _json(), nullable=False),
        sa.Column("team_mode", sa.String(), nullable=False, server_default="individual"),
        sa.Column("teams", _json(), nullable=False),
        sa.Column("hole_data", _json(), nullable=False),
        sa.Column("scores", _json(), nullable=False),
        sa.Column("wagers", _json(), nullable=False),
        sa.Column("bet_selections", _json(), nullable=False),
        sa.Column("round_bets", _json(), nullable=False),
        sa.Column("selected_junk_types", _json(), nullable=False),
        sa.Column("junk_point_values", _json(), nullable=False),
        sa.Column("junk_events", _json(), nullable=False),
        sa.Column("handicap_mode", sa.String(), nullable=False, server_default="lowest"),
        sa.Column("results", _json(), nullable=True),
        sa.Column("created_at", sa.String(), nullable=False),
        sa.Column("ended_at", sa.String(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_round_status", "round", ["status"])
    op.create_table(
        "round_share",
        sa.Column("code", sa.String(), primary_key=True),
        sa.Column(
            "round_id",
            sa.String(),
            sa.ForeignKey("round.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )


def downgrade():
    op.drop_table("round_share")
    op.drop_index("ix_round_status", table_name="round")
    op.drop_table("round")
    op.drop_table("wager")
    op.drop_table("course")
    op.drop_index("uq_player_name_lower", table_name="player")
    op.drop_table("player")
