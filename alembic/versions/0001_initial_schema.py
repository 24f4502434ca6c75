"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 12:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists, e.g. one created by init_db."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table(
            'users',
            sa.Column('id', sa.String(32), primary_key=True),
            sa.Column('username', sa.String(255), nullable=False),
            sa.Column('password', sa.String(255), nullable=False),
            sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
            sa.Column('last_used', sa.DateTime(timezone=True), nullable=True),
            sa.Column('properties', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)

    if not table_exists('access_tokens'):
        op.create_table(
            'access_tokens',
            sa.Column('token', sa.String(64), primary_key=True),
            sa.Column('user_id', sa.String(32), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
            sa.Column('device_id', sa.String(255), nullable=False),
            sa.Column('device_name', sa.String(255), nullable=False),
            sa.Column('application_name', sa.String(255), nullable=False),
            sa.Column('application_version', sa.String(100), nullable=False),
            sa.Column('remote_address', sa.String(100), nullable=False),
            sa.Column('created', sa.DateTime(timezone=True), nullable=False),
            sa.Column('last_used', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_access_tokens_user_id', 'access_tokens', ['user_id'])
        op.create_index('ix_access_tokens_device_id', 'access_tokens', ['device_id'])

    if not table_exists('user_data'):
        op.create_table(
            'user_data',
            sa.Column('user_id', sa.String(32), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
            sa.Column('item_id', sa.String(255), primary_key=True),
            sa.Column('position', sa.Integer(), nullable=False),
            sa.Column('played_percentage', sa.Integer(), nullable=False),
            sa.Column('play_count', sa.Integer(), nullable=False),
            sa.Column('played', sa.Boolean(), nullable=False),
            sa.Column('favorite', sa.Boolean(), nullable=False),
            sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        )
        op.create_index('ix_user_data_user_timestamp', 'user_data', ['user_id', 'timestamp'])

    if not table_exists('playlists'):
        op.create_table(
            'playlists',
            sa.Column('id', sa.String(32), primary_key=True),
            sa.Column('user_id', sa.String(32), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('item_ids', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_playlists_user_id', 'playlists', ['user_id'])

    if not table_exists('images'):
        op.create_table(
            'images',
            sa.Column('owner_id', sa.String(255), primary_key=True),
            sa.Column('type', sa.String(50), primary_key=True),
            sa.Column('mime_type', sa.String(100), nullable=False),
            sa.Column('etag', sa.String(64), nullable=False),
            sa.Column('size', sa.Integer(), nullable=False),
            sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
            sa.Column('data', sa.LargeBinary(), nullable=False),
        )

    if not table_exists('persons'):
        op.create_table(
            'persons',
            sa.Column('id', sa.String(32), primary_key=True),
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('date_of_birth', sa.DateTime(timezone=True), nullable=True),
            sa.Column('place_of_birth', sa.String(255), nullable=False),
            sa.Column('poster_url', sa.String(2000), nullable=False),
            sa.Column('bio', sa.Text(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_persons_name', 'persons', ['name'], unique=True)

    if not table_exists('quick_connect_codes'):
        op.create_table(
            'quick_connect_codes',
            sa.Column('secret', sa.String(64), primary_key=True),
            sa.Column('code', sa.String(16), nullable=False),
            sa.Column('user_id', sa.String(32), nullable=False),
            sa.Column('device_id', sa.String(255), nullable=False),
            sa.Column('device_name', sa.String(255), nullable=False),
            sa.Column('application_name', sa.String(255), nullable=False),
            sa.Column('application_version', sa.String(100), nullable=False),
            sa.Column('authorized', sa.Boolean(), nullable=False),
            sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_quick_connect_codes_code', 'quick_connect_codes', ['code'])


def downgrade() -> None:
    op.drop_table('quick_connect_codes')
    op.drop_table('persons')
    op.drop_table('images')
    op.drop_table('playlists')
    op.drop_table('user_data')
    op.drop_table('access_tokens')
    op.drop_table('users')
