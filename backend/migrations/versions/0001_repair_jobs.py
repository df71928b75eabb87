"""repair jobs and staff users

Revision ID: 0001_repair_jobs
Revises: 
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_repair_jobs'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('staff_users',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('email', sa.String(length=128), nullable=False, unique=True),
        sa.Column('display_name', sa.String(length=128), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='CUSTOMER'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('phone', sa.String(length=32)),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_staff_users_email', 'staff_users', ['email'])
    op.create_index('ix_staff_users_role', 'staff_users', ['role'])

    op.create_table('repair_jobs',
        sa.Column('job_id', sa.String(length=16), primary_key=True),
        sa.Column('customer_name', sa.String(length=120), nullable=False),
        sa.Column('customer_phone', sa.String(length=32), nullable=False),
        sa.Column('customer_email', sa.String(length=128)),
        sa.Column('device_model', sa.String(length=120), nullable=False),
        sa.Column('device_serial', sa.String(length=80)),
        sa.Column('problem_description', sa.Text(), nullable=False),
        sa.Column('problem_category', sa.String(length=32), nullable=False, server_default='OTHER'),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='NEW_QUEUE'),
        sa.Column('priority', sa.String(length=16), nullable=False, server_default='NORMAL'),
        sa.Column('queue_number', sa.Integer(), nullable=False),
        sa.Column('estimated_cost', sa.Float(), nullable=False, server_default=sa.text('0')),
        sa.Column('actual_cost', sa.Float(), nullable=False, server_default=sa.text('0')),
        sa.Column('drop_app_id', sa.String(length=64)),
        sa.Column('asp_id', sa.String(length=64)),
        sa.Column('assigned_technician', sa.String(length=120)),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('source', sa.String(length=16), nullable=False, server_default='ONLINE'),
        sa.Column('warranty_period_days', sa.Integer(), nullable=False, server_default=sa.text('90')),
        sa.Column('history', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True)),
    )
    # status / owner filters and the newest-first listing
    op.create_index('ix_repair_jobs_status', 'repair_jobs', ['status'])
    op.create_index('ix_repair_jobs_drop_app_id', 'repair_jobs', ['drop_app_id'])
    op.create_index('ix_repair_jobs_asp_id', 'repair_jobs', ['asp_id'])
    op.create_index('ix_repair_jobs_queue_number', 'repair_jobs', ['queue_number'])
    op.create_index('ix_repair_jobs_created_at', 'repair_jobs', ['created_at'])


def downgrade():
    for tbl in ['repair_jobs', 'staff_users']:
        op.drop_table(tbl)
