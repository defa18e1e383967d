"""create messaging schema

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-18 09:12:41.204117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('avatar', sa.String(1024), nullable=False, server_default=''),
        sa.Column('headline', sa.String(255), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'conversations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('is_group', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('group_name', sa.String(255)),
        sa.Column('group_image', sa.String(1024)),
        sa.Column('direct_key', sa.String(80), unique=True),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_message_id', sa.Uuid()),
        sa.Column('last_activity', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('message_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'conversation_participants',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('conversation_id', sa.Uuid(), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('muted_until', sa.DateTime(timezone=True)),
        sa.Column('typing_started_at', sa.DateTime(timezone=True)),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('conversation_id', 'user_id', name='uq_participant_user'),
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('conversation_id', sa.Uuid(), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sequence', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('message_type', sa.String(10), nullable=False, server_default='text'),
        sa.Column('attachments', sa.JSON(), server_default='[]'),
        sa.Column('is_edited', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('edited_at', sa.DateTime(timezone=True)),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reply_to_id', sa.Uuid(), sa.ForeignKey('messages.id')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('conversation_id', 'sequence', name='uq_message_conversation_sequence'),
        sa.CheckConstraint("message_type IN ('text', 'image', 'file', 'voice')", name='ck_message_type'),
    )

    op.create_table(
        'message_receipts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('message_id', sa.Uuid(), sa.ForeignKey('messages.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('kind', sa.String(10), nullable=False),
        sa.Column('recorded_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('message_id', 'user_id', 'kind', name='uq_receipt_once'),
        sa.CheckConstraint("kind IN ('read', 'delivered')", name='ck_receipt_kind'),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('recipient_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('sender_id', sa.Uuid(), sa.ForeignKey('users.id')),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('action_url', sa.String(1024)),
        sa.Column('conversation_id', sa.Uuid()),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'outbox_events',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('event_type', sa.String(50), nullable=False),
        sa.Column('conversation_id', sa.Uuid()),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('claimed_until', sa.DateTime(timezone=True)),
        sa.Column('dispatched_at', sa.DateTime(timezone=True)),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_error', sa.Text()),
    )

    # Indexes
    op.create_index('idx_participants_user', 'conversation_participants', ['user_id'])
    op.create_index('idx_conversations_last_activity', 'conversations', [sa.text('last_activity DESC')])
    op.create_index('idx_messages_sender_created', 'messages', ['sender_id', sa.text('created_at DESC')])
    op.create_index('idx_receipts_user_kind', 'message_receipts', ['user_id', 'kind'])
    op.create_index('idx_notifications_recipient', 'notifications', ['recipient_id', 'is_read', sa.text('created_at DESC')])
    op.create_index('idx_notifications_type', 'notifications', ['type', sa.text('created_at DESC')])
    op.create_index(
        'idx_outbox_pending',
        'outbox_events',
        ['created_at'],
        postgresql_where=sa.text('dispatched_at IS NULL'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('outbox_events')
    op.drop_table('notifications')
    op.drop_table('message_receipts')
    op.drop_table('messages')
    op.drop_table('conversation_participants')
    op.drop_table('conversations')
    op.drop_table('users')
