"""initial incentive program schema

Revision ID: 1a2b3c4d5e6f
Revises: 
Create Date: 2026-10-17 09:12:41.208311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '1a2b3c4d5e6f'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid():
    return postgresql.UUID(as_uuid=True)


def _timestamps():
    return [
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("rewards"):
        op.create_table(
            "rewards",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("points_cost", sa.Integer(), nullable=False),
            sa.Column("category", sa.String(length=100), nullable=False),
            sa.Column("region", sa.String(length=20), nullable=True),
            sa.Column("stock_quantity", sa.Integer(), nullable=True),
            sa.Column("image_url", sa.String(length=500), nullable=True),
            sa.Column("estimated_delivery_days", sa.Integer(), nullable=False, server_default="15"),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
        )

    if not inspector.has_table("region_configs"):
        op.create_table(
            "region_configs",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("region", sa.String(length=20), nullable=False),
            sa.Column("category", sa.String(length=50), nullable=False),
            sa.Column("subcategory", sa.String(length=100), nullable=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("reward_id", _uuid(), sa.ForeignKey("rewards.id"), nullable=True),
            sa.Column("new_customer_goal_rate", sa.Integer(), nullable=False, server_default="1000"),
            sa.Column("renewal_goal_rate", sa.Integer(), nullable=False, server_default="2000"),
            sa.Column("monthly_goal_target", sa.Integer(), nullable=False, server_default="10"),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("expiration_date", sa.TIMESTAMP(), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint("region", "category", "subcategory", name="uq_region_configs_triple"),
        )

    if not inspector.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("username", sa.String(length=100), nullable=False, unique=True),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("password_hash", sa.String(length=255), nullable=True),
            sa.Column("first_name", sa.String(length=100), nullable=False),
            sa.Column("last_name", sa.String(length=100), nullable=False),
            sa.Column("company_name", sa.String(length=200), nullable=True),
            sa.Column("country", sa.String(length=100), nullable=False),
            sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
            sa.Column("region", sa.String(length=20), nullable=True),
            sa.Column("region_category", sa.String(length=50), nullable=True),
            sa.Column("region_subcategory", sa.String(length=100), nullable=True),
            sa.Column("admin_region_id", _uuid(), sa.ForeignKey("region_configs.id"), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("is_passwordless", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("approved_by", _uuid(), nullable=True),
            sa.Column("approved_at", sa.TIMESTAMP(), nullable=True),
            sa.Column("login_token", sa.String(length=64), nullable=True, unique=True),
            sa.Column("login_token_expiry", sa.TIMESTAMP(), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint("email", "region", name="uq_users_email_region"),
        )

    if not inspector.has_table("deals"):
        op.create_table(
            "deals",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("region_config_id", _uuid(), sa.ForeignKey("region_configs.id"), nullable=True),
            sa.Column("product_type", sa.String(length=20), nullable=False),
            sa.Column("product_name", sa.String(length=200), nullable=False),
            sa.Column("deal_value", sa.Numeric(12, 2), nullable=False),
            sa.Column("deal_type", sa.String(length=20), nullable=False, server_default="new_customer"),
            sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("close_date", sa.TIMESTAMP(), nullable=False),
            sa.Column("client_info", sa.Text(), nullable=True),
            sa.Column("license_agreement_number", sa.String(length=100), nullable=True, unique=True),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
            sa.Column("points_earned", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("goals_earned", sa.Numeric(10, 2), nullable=False, server_default="0"),
            sa.Column("approved_by", _uuid(), nullable=True),
            sa.Column("approved_at", sa.TIMESTAMP(), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_deals_user_id", "deals", ["user_id"])

    if not inspector.has_table("user_rewards"):
        op.create_table(
            "user_rewards",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("reward_id", _uuid(), sa.ForeignKey("rewards.id"), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
            sa.Column("shipment_status", sa.String(length=20), nullable=False, server_default="pending"),
            sa.Column("approved_by", _uuid(), nullable=True),
            sa.Column("approved_at", sa.TIMESTAMP(), nullable=True),
            sa.Column("rejection_reason", sa.Text(), nullable=True),
            sa.Column("delivery_address", sa.Text(), nullable=True),
            sa.Column("shipped_by", _uuid(), nullable=True),
            sa.Column("shipped_at", sa.TIMESTAMP(), nullable=True),
            sa.Column("delivered_at", sa.TIMESTAMP(), nullable=True),
            sa.Column("redeemed_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_user_rewards_user_id", "user_rewards", ["user_id"])

    if not inspector.has_table("points_history"):
        op.create_table(
            "points_history",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("deal_id", _uuid(), sa.ForeignKey("deals.id"), nullable=True),
            sa.Column("reward_id", _uuid(), sa.ForeignKey("rewards.id"), nullable=True),
            sa.Column("points", sa.Integer(), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_points_history_user_id", "points_history", ["user_id"])

    if not inspector.has_table("goals_history"):
        op.create_table(
            "goals_history",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("deal_id", _uuid(), sa.ForeignKey("deals.id"), nullable=True),
            sa.Column("region_config_id", _uuid(), sa.ForeignKey("region_configs.id"), nullable=True),
            sa.Column("goals", sa.Numeric(10, 2), nullable=False),
            sa.Column("month", sa.Integer(), nullable=False),
            sa.Column("year", sa.Integer(), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_goals_history_user_id", "goals_history", ["user_id"])

    if not inspector.has_table("points_configs"):
        op.create_table(
            "points_configs",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("region", sa.String(length=20), nullable=False, unique=True),
            sa.Column("new_customer_rate", sa.Integer(), nullable=False, server_default="1000"),
            sa.Column("renewal_rate", sa.Integer(), nullable=False, server_default="2000"),
            sa.Column("default_new_customer_goal_rate", sa.Integer(), nullable=False, server_default="1000"),
            sa.Column("default_renewal_goal_rate", sa.Integer(), nullable=False, server_default="2000"),
            sa.Column("grand_prize_threshold", sa.Integer(), nullable=False, server_default="50000"),
            sa.Column("updated_by", _uuid(), nullable=True),
            sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )

    if not inspector.has_table("monthly_region_prizes"):
        op.create_table(
            "monthly_region_prizes",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("region_config_id", _uuid(), sa.ForeignKey("region_configs.id"), nullable=False),
            sa.Column("month", sa.Integer(), nullable=False),
            sa.Column("year", sa.Integer(), nullable=False),
            sa.Column("rank", sa.Integer(), nullable=False),
            sa.Column("prize_name", sa.String(length=200), nullable=False),
            sa.Column("prize_description", sa.Text(), nullable=True),
            sa.Column("prize_value", sa.Integer(), nullable=True),
            sa.Column("goal_target", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("redemption_start_date", sa.TIMESTAMP(), nullable=True),
            sa.Column("redemption_end_date", sa.TIMESTAMP(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
            sa.UniqueConstraint(
                "region_config_id", "month", "year", "rank", name="uq_monthly_region_prizes_period_rank"
            ),
        )

    if not inspector.has_table("grand_prize_criteria"):
        op.create_table(
            "grand_prize_criteria",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("prize_description", sa.Text(), nullable=True),
            sa.Column("criteria_type", sa.String(length=20), nullable=False, server_default="combined"),
            sa.Column("min_points", sa.Integer(), nullable=True),
            sa.Column("min_deals", sa.Integer(), nullable=True),
            sa.Column("points_weight", sa.Integer(), nullable=False, server_default="60"),
            sa.Column("deals_weight", sa.Integer(), nullable=False, server_default="40"),
            sa.Column("top_n", sa.Integer(), nullable=False, server_default="1"),
            sa.Column("region", sa.String(length=20), nullable=False, server_default="all"),
            sa.Column("market_segment", sa.String(length=50), nullable=True),
            sa.Column("subregion", sa.String(length=100), nullable=True),
            sa.Column("start_date", sa.TIMESTAMP(), nullable=False),
            sa.Column("end_date", sa.TIMESTAMP(), nullable=False),
            sa.Column("redemption_start_date", sa.TIMESTAMP(), nullable=True),
            sa.Column("redemption_end_date", sa.TIMESTAMP(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
        )

    if not inspector.has_table("grand_prize_winners"):
        op.create_table(
            "grand_prize_winners",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("criteria_id", _uuid(), sa.ForeignKey("grand_prize_criteria.id"), nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("run_id", _uuid(), nullable=False),
            sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("deals", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("goals", sa.Numeric(12, 2), nullable=False, server_default="0"),
            sa.Column("score", sa.Float(), nullable=False),
            sa.Column("rank", sa.Integer(), nullable=False),
            sa.Column("awarded_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_grand_prize_winners_criteria_id", "grand_prize_winners", ["criteria_id"])
        op.create_index("ix_grand_prize_winners_run_id", "grand_prize_winners", ["run_id"])

    if not inspector.has_table("support_tickets"):
        op.create_table(
            "support_tickets",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("subject", sa.String(length=255), nullable=False),
            sa.Column("message", sa.Text(), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="open"),
            sa.Column("priority", sa.String(length=10), nullable=False, server_default="medium"),
            sa.Column("assigned_to", _uuid(), sa.ForeignKey("users.id"), nullable=True),
            sa.Column("admin_response", sa.Text(), nullable=True),
            sa.Column("responded_by", _uuid(), nullable=True),
            sa.Column("responded_at", sa.TIMESTAMP(), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_support_tickets_user_id", "support_tickets", ["user_id"])

    if not inspector.has_table("categories_master"):
        op.create_table(
            "categories_master",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False, unique=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("type", sa.String(length=50), nullable=False, server_default="segment"),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
        )

    if not inspector.has_table("region_categories"):
        op.create_table(
            "region_categories",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("region", sa.String(length=20), nullable=False),
            sa.Column("category", sa.String(length=50), nullable=False),
            sa.Column("subcategory", sa.String(length=100), nullable=True),
            sa.Column("level", sa.String(length=50), nullable=True),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
        )

    if not inspector.has_table("prize_templates"):
        op.create_table(
            "prize_templates",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("image_url", sa.String(length=500), nullable=True),
            sa.Column("prize_rule", sa.Text(), nullable=True),
            sa.Column("prize_rule_kind", sa.String(length=20), nullable=True),
            sa.Column("size", sa.String(length=50), nullable=True),
            sa.Column("valid_from", sa.TIMESTAMP(), nullable=True),
            sa.Column("valid_to", sa.TIMESTAMP(), nullable=True),
            sa.Column("type", sa.String(length=20), nullable=False, server_default="recurring"),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
        )

    if not inspector.has_table("product_types"):
        op.create_table(
            "product_types",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("category", sa.String(length=50), nullable=False, server_default="software"),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
        )

    if not inspector.has_table("notifications"):
        op.create_table(
            "notifications",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", _uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("message", sa.Text(), nullable=False),
            sa.Column("type", sa.String(length=20), nullable=False, server_default="info"),
            sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    if not inspector.has_table("audit_logs"):
        op.create_table(
            "audit_logs",
            sa.Column("id", _uuid(), primary_key=True, nullable=False),
            sa.Column("action", sa.String(length=50), nullable=False),
            sa.Column("entity_type", sa.String(length=50), nullable=False),
            sa.Column("entity_id", _uuid(), nullable=False),
            sa.Column("entity_data", sa.JSON(), nullable=True),
            sa.Column("performed_by_user_id", _uuid(), nullable=False),
            sa.Column("performed_by_username", sa.String(length=100), nullable=True),
            sa.Column("performed_by_email", sa.String(length=255), nullable=True),
            sa.Column("ip_address", sa.String(length=64), nullable=True),
            sa.Column("user_agent", sa.String(length=500), nullable=True),
            sa.Column("performed_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"])


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "audit_logs",
        "notifications",
        "product_types",
        "prize_templates",
        "region_categories",
        "categories_master",
        "support_tickets",
        "grand_prize_winners",
        "grand_prize_criteria",
        "monthly_region_prizes",
        "points_configs",
        "goals_history",
        "points_history",
        "user_rewards",
        "deals",
        "users",
        "region_configs",
        "rewards",
    ):
        op.drop_table(table)
