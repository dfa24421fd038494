"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for EventFlow:
users, events, guests, announcements, messages, reports, penalties,
notifications, push_subscriptions.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member names.
user_role = sa.Enum("user", "admin", name="userrole")
event_visibility = sa.Enum("public", "private", name="eventvisibility")
event_state = sa.Enum("draft", "published", "cancelled", "completed", "archived", name="eventstate")
event_category = sa.Enum(
    "conferencia", "workshop", "palestra", "festa", "esportivo", "cultural",
    "educacional", "networking", "corporativo", "beneficente", "outro",
    name="eventcategory",
)
event_type = sa.Enum("presencial", "online", "hibrido", name="eventtype")
rsvp_status = sa.Enum("pending", "yes", "no", "maybe", "waitlisted", name="rsvpstatus")
report_reason = sa.Enum(
    "spam", "inappropriate", "fraud", "scam", "misleading", "harassment", "other", name="reportreason",
)
report_status = sa.Enum("pending", "accepted", "rejected", name="reportstatus")
penalty_type = sa.Enum("warning", "suspension", "ban", name="penaltytype")
notification_type = sa.Enum(
    "event_invite", "event_reminder", "event_update", "event_cancelled",
    "rsvp_response", "new_message", "announcement", "system",
    name="notificationtype",
)


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("role", user_role, nullable=False, server_default="user"),
        sa.Column("is_banned", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("banned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("banned_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ban_reason", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"])

    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("time", sa.String(10), nullable=False, server_default=""),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.String(10), nullable=True),
        sa.Column("location", sa.String(500), nullable=False, server_default=""),
        sa.Column("timezone", sa.String(50), nullable=True),
        sa.Column("rsvp_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("visibility", event_visibility, nullable=False, server_default="private"),
        sa.Column("state", event_state, nullable=False, server_default="draft"),
        sa.Column("cancelled_reason", sa.String(500), nullable=True),
        sa.Column("capacity", sa.Integer, nullable=True),
        sa.Column("waitlist_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("show_guest_list", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("category", event_category, nullable=False, server_default="outro"),
        sa.Column("event_type", event_type, nullable=False, server_default="presencial"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("min_age", sa.Integer, nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("online_url", sa.String(1000), nullable=True),
        sa.Column("tags", sa.String(500), nullable=True),
        sa.Column("owner_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("report_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_hidden", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("hidden_reason", sa.String(255), nullable=True),
        sa.Column("hidden_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_date", "events", ["date"])
    op.create_index("ix_events_state", "events", ["state"])
    op.create_index("ix_events_owner_id", "events", ["owner_id"])

    # --- guests ---
    op.create_table(
        "guests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("status", rsvp_status, nullable=False, server_default="pending"),
        sa.Column("decline_reason", sa.String(500), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("event_id", "email", name="uq_guests_event_email"),
    )
    op.create_index("ix_guests_email", "guests", ["email"])
    op.create_index("ix_guests_event_id", "guests", ["event_id"])

    # --- announcements ---
    op.create_table(
        "announcements",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_announcements_event_id", "announcements", ["event_id"])

    # --- messages ---
    op.create_table(
        "messages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("sender_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("receiver_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_messages_event_id", "messages", ["event_id"])

    # --- reports ---
    op.create_table(
        "reports",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("reported_by", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reason", report_reason, nullable=False),
        sa.Column("details", sa.String(500), nullable=True),
        sa.Column("status", report_status, nullable=False, server_default="pending"),
        sa.Column("reviewed_by", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_notes", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("event_id", "reported_by", name="uq_reports_event_reporter"),
    )
    op.create_index("ix_reports_event_id", "reports", ["event_id"])

    # --- penalties ---
    op.create_table(
        "penalties",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", penalty_type, nullable=False),
        sa.Column("reason", sa.String(200), nullable=False),
        sa.Column("details", sa.String(500), nullable=True),
        sa.Column("duration", sa.Integer, nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_penalties_user_id", "penalties", ["user_id"])

    # --- notifications ---
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", notification_type, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id"), nullable=True),
        sa.Column("data", sa.JSON, nullable=True),
        sa.Column("action_url", sa.String(500), nullable=True),
        sa.Column("read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("push_sent", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("push_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    # --- push_subscriptions ---
    op.create_table(
        "push_subscriptions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("fcm_token", sa.String(500), nullable=False, unique=True),
        sa.Column("device_type", sa.String(50), nullable=True),
        sa.Column("device_name", sa.String(150), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("last_used", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_push_subscriptions_user_id", "push_subscriptions", ["user_id"])


def downgrade() -> None:
    op.drop_table("push_subscriptions")
    op.drop_table("notifications")
    op.drop_table("penalties")
    op.drop_table("reports")
    op.drop_table("messages")
    op.drop_table("announcements")
    op.drop_table("guests")
    op.drop_table("events")
    op.drop_table("users")
    bind = op.get_bind()
    for enum_type in (
        notification_type, penalty_type, report_status, report_reason, rsvp_status,
        event_type, event_category, event_state, event_visibility, user_role,
    ):
        enum_type.drop(bind, checkfirst=True)
