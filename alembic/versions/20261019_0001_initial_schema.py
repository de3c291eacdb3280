"""Initial schema - account tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Simple accounts, keyed by email
    op.create_table(
        'users',
        sa.Column('id_user', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('first_name', sa.String(255), nullable=False),
        sa.Column('last_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('salt', sa.String(64), nullable=False),
        sa.Column('hash', sa.String(128), nullable=False),
        sa.Column('two_fa_key', sa.String(255), nullable=True),
        sa.Column('two_fa_uri', sa.String(1024), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Token-bearing accounts, keyed by name
    op.create_table(
        'jwt_users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('salt', sa.String(64), nullable=False),
        sa.Column('hash', sa.String(128), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_jwt_users_name', 'jwt_users', ['name'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_jwt_users_name', table_name='jwt_users')
    op.drop_table('jwt_users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
