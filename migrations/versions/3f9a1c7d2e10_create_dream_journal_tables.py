"""create dream journal tables

Revision ID: 3f9a1c7d2e10
Revises:
Create Date: 2026-10-19 09:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel.sql.sqltypes


# revision identifiers, used by Alembic.
revision: str = '3f9a1c7d2e10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('users',
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('provider', sa.Enum('password', 'federated', 'anonymous', name='authprovider', native_enum=False, create_constraint=False), nullable=False),
        sa.Column('provider_subject', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('password_hash', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('provider', 'provider_subject', name='uq_users_provider_subject')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('auth_sessions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_auth_sessions_user_id'), 'auth_sessions', ['user_id'], unique=False)

    op.create_table('draft_dreams',
        sa.Column('dream_text', sa.Text(), nullable=False),
        sa.Column('dream_title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('is_pre_analyzed', sa.Boolean(), nullable=False),
        sa.Column('app_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_draft_dreams_app_id'), 'draft_dreams', ['app_id'], unique=False)
    op.create_index(op.f('ix_draft_dreams_user_id'), 'draft_dreams', ['user_id'], unique=False)
    op.create_index('ix_draft_dreams_scope_timestamp', 'draft_dreams', ['app_id', 'user_id', 'timestamp'], unique=False)

    op.create_table('archived_dreams',
        sa.Column('dream_text', sa.Text(), nullable=False),
        sa.Column('analysis_text', sa.Text(), nullable=False),
        sa.Column('dream_title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('matched_reality_event', sa.Text(), nullable=False),
        sa.Column('app_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_archived_dreams_app_id'), 'archived_dreams', ['app_id'], unique=False)
    op.create_index(op.f('ix_archived_dreams_user_id'), 'archived_dreams', ['user_id'], unique=False)
    op.create_index('ix_archived_dreams_scope_timestamp', 'archived_dreams', ['app_id', 'user_id', 'timestamp'], unique=False)

    op.create_table('daily_events',
        sa.Column('event_text', sa.Text(), nullable=False),
        sa.Column('app_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_daily_events_app_id'), 'daily_events', ['app_id'], unique=False)
    op.create_index(op.f('ix_daily_events_user_id'), 'daily_events', ['user_id'], unique=False)
    op.create_index('ix_daily_events_scope_timestamp', 'daily_events', ['app_id', 'user_id', 'timestamp'], unique=False)

    op.create_table('conversations',
        sa.Column('app_id', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_archived', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_conversations_app_id'), 'conversations', ['app_id'], unique=False)
    op.create_index(op.f('ix_conversations_user_id'), 'conversations', ['user_id'], unique=False)
    op.create_index(op.f('ix_conversations_is_archived'), 'conversations', ['is_archived'], unique=False)

    op.create_table('chat_messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('conversation_id', sa.Uuid(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('role', sa.Enum('user', 'model', name='chatrole', native_enum=False, create_constraint=False), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['conversation_id'], ['conversations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_chat_messages_conversation_id'), 'chat_messages', ['conversation_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_chat_messages_conversation_id'), table_name='chat_messages')
    op.drop_table('chat_messages')
    op.drop_index(op.f('ix_conversations_is_archived'), table_name='conversations')
    op.drop_index(op.f('ix_conversations_user_id'), table_name='conversations')
    op.drop_index(op.f('ix_conversations_app_id'), table_name='conversations')
    op.drop_table('conversations')
    op.drop_index('ix_daily_events_scope_timestamp', table_name='daily_events')
    op.drop_index(op.f('ix_daily_events_user_id'), table_name='daily_events')
    op.drop_index(op.f('ix_daily_events_app_id'), table_name='daily_events')
    op.drop_table('daily_events')
    op.drop_index('ix_archived_dreams_scope_timestamp', table_name='archived_dreams')
    op.drop_index(op.f('ix_archived_dreams_user_id'), table_name='archived_dreams')
    op.drop_index(op.f('ix_archived_dreams_app_id'), table_name='archived_dreams')
    op.drop_table('archived_dreams')
    op.drop_index('ix_draft_dreams_scope_timestamp', table_name='draft_dreams')
    op.drop_index(op.f('ix_draft_dreams_user_id'), table_name='draft_dreams')
    op.drop_index(op.f('ix_draft_dreams_app_id'), table_name='draft_dreams')
    op.drop_table('draft_dreams')
    op.drop_index(op.f('ix_auth_sessions_user_id'), table_name='auth_sessions')
    op.drop_table('auth_sessions')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
