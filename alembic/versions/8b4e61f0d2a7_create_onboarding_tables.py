"""create_onboarding_tables

Revision ID: 8b4e61f0d2a7
Revises: 3f1d2c9b7a10
Create Date: 2026-10-05 14:37:12.540918

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b4e61f0d2a7'
down_revision: Union[str, None] = '3f1d2c9b7a10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create tables for saved onboarding flows and onboarding analytics events."""
    op.create_table(
        'onboarding_progress',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('storage_key', sa.String(), nullable=False, unique=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('state', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'onboarding_event',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('organization_id', sa.Integer(), nullable=True),
        sa.Column('properties', sa.JSON(), nullable=False),
        sa.Column('occurred_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['organization_id'], ['organization.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_onboarding_event_id'), 'onboarding_event', ['id'], unique=False)
    op.create_index(op.f('ix_onboarding_event_event'), 'onboarding_event', ['event'], unique=False)
    op.create_index(op.f('ix_onboarding_event_user_id'), 'onboarding_event', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop onboarding tables."""
    op.drop_index(op.f('ix_onboarding_event_user_id'), table_name='onboarding_event')
    op.drop_index(op.f('ix_onboarding_event_event'), table_name='onboarding_event')
    op.drop_index(op.f('ix_onboarding_event_id'), table_name='onboarding_event')
    op.drop_table('onboarding_event')
    op.drop_table('onboarding_progress')
