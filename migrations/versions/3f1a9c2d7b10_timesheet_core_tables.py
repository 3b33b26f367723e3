"""timesheet core tables (settings, employees, projects, periods, entries, expectations)

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('mon_hours', sa.Numeric(4, 2), nullable=False, server_default='8'),
        sa.Column('tue_hours', sa.Numeric(4, 2), nullable=False, server_default='8'),
        sa.Column('wed_hours', sa.Numeric(4, 2), nullable=False, server_default='8'),
        sa.Column('thu_hours', sa.Numeric(4, 2), nullable=False, server_default='8'),
        sa.Column('fri_hours', sa.Numeric(4, 2), nullable=False, server_default='8'),
        sa.Column('sat_hours', sa.Numeric(4, 2), nullable=False, server_default='0'),
        sa.Column('sun_hours', sa.Numeric(4, 2), nullable=False, server_default='0'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_settings_is_default', 'settings', ['is_default'], unique=False)

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=True),
        sa.Column('settings_id', sa.Integer(), sa.ForeignKey('settings.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(length=80), nullable=False),
        sa.Column('surname', sa.String(length=80), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index('ix_emp_user_id', 'employees', ['user_id'], unique=False)
    op.create_index('ix_emp_start_end', 'employees', ['start_date', 'end_date'], unique=False)

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('code', sa.String(length=32), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_projects_active', 'projects', ['active'], unique=False)

    op.create_table(
        'periods',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('week_key', sa.String(length=10), nullable=False),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('closed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.Column('total_hours', sa.Numeric(6, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('employee_id', 'week_key', name='uq_period_employee_week'),
    )
    op.create_index('ix_periods_employee_id', 'periods', ['employee_id'], unique=False)
    op.create_index('ix_periods_week_key', 'periods', ['week_key'], unique=False)
    op.create_index('ix_periods_week_start_date', 'periods', ['week_start_date'], unique=False)

    day_type = sa.Enum('work', 'sick', 'time_off', name='day_type')
    op.create_table(
        'day_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('type', day_type, nullable=False),
        sa.Column('project_id', sa.Integer(), sa.ForeignKey('projects.id', ondelete='SET NULL'), nullable=True),
        sa.Column('hours', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_day_entries_emp_date', 'day_entries', ['employee_id', 'work_date'], unique=False)
    op.create_index('ix_day_entries_emp_proj', 'day_entries', ['employee_id', 'project_id'], unique=False)

    op.create_table(
        'day_expectations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('expected_hours', sa.Numeric(4, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('employee_id', 'work_date', name='uq_day_expectation_emp_date'),
    )


def downgrade() -> None:
    op.drop_table('day_expectations')
    op.drop_index('ix_day_entries_emp_proj', table_name='day_entries')
    op.drop_index('ix_day_entries_emp_date', table_name='day_entries')
    op.drop_table('day_entries')
    try:
        sa.Enum('work', 'sick', 'time_off', name='day_type').drop(op.get_bind(), checkfirst=True)
    except Exception:
        # sqlite has no named enum types
        pass
    op.drop_index('ix_periods_week_start_date', table_name='periods')
    op.drop_index('ix_periods_week_key', table_name='periods')
    op.drop_index('ix_periods_employee_id', table_name='periods')
    op.drop_table('periods')
    op.drop_index('ix_projects_active', table_name='projects')
    op.drop_table('projects')
    op.drop_index('ix_emp_start_end', table_name='employees')
    op.drop_index('ix_emp_user_id', table_name='employees')
    op.drop_table('employees')
    op.drop_index('ix_settings_is_default', table_name='settings')
    op.drop_table('settings')
