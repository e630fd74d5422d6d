"""Create plan catalog, trainer subscription and audit tables

Revision ID: 7c1e2a9d4b30
Revises:
Create Date: 2026-10-19 09:12:44.118305

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7c1e2a9d4b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'plans',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('plan_type', sa.String(length=20), nullable=False),
        sa.Column('monthly_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('annual_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('max_students', sa.Integer(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('visible_on_landing', sa.Boolean(), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('plans', schema=None) as batch_op:
        batch_op.create_index('idx_plan_active', ['active'], unique=False)
        batch_op.create_index('idx_plan_landing', ['active', 'visible_on_landing'], unique=False)
        batch_op.create_index('idx_plan_display_order', ['display_order'], unique=False)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=True),
        sa.Column('period', sa.String(length=20), nullable=False),
        sa.Column('discount_percent', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('subscription_start', sa.Date(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('subscription_status', sa.String(length=20), nullable=False),
        sa.Column('cancellation_reason', sa.String(length=255), nullable=True),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['plan_id'], ['plans.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=True)
        batch_op.create_index('idx_user_role', ['role'], unique=False)
        batch_op.create_index('idx_user_plan', ['plan_id'], unique=False)
        # Past-due sweep and expiring-subscriptions lookups
        batch_op.create_index('idx_user_status_due_date', ['subscription_status', 'due_date'], unique=False)

    op.create_table(
        'subscription_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=True),
        sa.Column('plan_name', sa.String(length=100), nullable=True),
        sa.Column('period', sa.String(length=20), nullable=False),
        sa.Column('discount_percent', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('final_monthly_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('final_annual_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('cancellation_reason', sa.String(length=255), nullable=True),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('subscription_history', schema=None) as batch_op:
        batch_op.create_index('idx_history_trainer_recorded', ['trainer_id', 'recorded_at'], unique=False)

    op.create_table(
        'audit_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('action', sa.String(length=32), nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=True),
        sa.Column('trainer_id', sa.Integer(), nullable=True),
        sa.Column('plan_id', sa.Integer(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('audit_entries', schema=None) as batch_op:
        batch_op.create_index('idx_audit_trainer', ['trainer_id'], unique=False)
        batch_op.create_index('idx_audit_plan', ['plan_id'], unique=False)
        batch_op.create_index('idx_audit_action_recorded', ['action', 'recorded_at'], unique=False)


def downgrade():
    with op.batch_alter_table('audit_entries', schema=None) as batch_op:
        batch_op.drop_index('idx_audit_action_recorded')
        batch_op.drop_index('idx_audit_plan')
        batch_op.drop_index('idx_audit_trainer')
    op.drop_table('audit_entries')

    with op.batch_alter_table('subscription_history', schema=None) as batch_op:
        batch_op.drop_index('idx_history_trainer_recorded')
    op.drop_table('subscription_history')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_index('idx_user_status_due_date')
        batch_op.drop_index('idx_user_plan')
        batch_op.drop_index('idx_user_role')
        batch_op.drop_index(batch_op.f('ix_users_email'))
    op.drop_table('users')

    with op.batch_alter_table('plans', schema=None) as batch_op:
        batch_op.drop_index('idx_plan_display_order')
        batch_op.drop_index('idx_plan_landing')
        batch_op.drop_index('idx_plan_active')
    op.drop_table('plans')
