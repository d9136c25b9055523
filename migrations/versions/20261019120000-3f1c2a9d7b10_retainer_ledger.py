"""Retainer ledger

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLModel persists enum member names
billing_type_enum_values = ['RETAINER', 'T_AND_M', 'FIXED']
retainer_status_enum_values = ['ACTIVE', 'INACTIVE']


def create_enum(name: str, values: list):
    """Create an enum type safely."""
    enum = postgresql.ENUM(*values, name=name, create_type=False)
    enum.create(op.get_bind(), checkfirst=True)
    return enum


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    billing_type_enum = create_enum('billingtype', billing_type_enum_values)
    retainer_status_enum = create_enum('retainerstatus', retainer_status_enum_values)

    op.create_table('client',
                    *timestamps(),
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(), nullable=False),
                    sa.Column('contact_name', sa.String(), nullable=True),
                    sa.Column('encrypted_contact_email', sa.String(), nullable=True),
                    sa.Column('currency', sa.String(), nullable=False),
                    sa.Column('is_archived', sa.Boolean(), nullable=False),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_client_name'), 'client', ['name'], unique=False)
    op.create_index(op.f('ix_client_is_archived'), 'client', ['is_archived'], unique=False)

    op.create_table('project',
                    *timestamps(),
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('client_id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(), nullable=False),
                    sa.Column('billing_type', billing_type_enum, nullable=False),
                    sa.Column('is_archived', sa.Boolean(), nullable=False),
                    sa.Column('retainer_status', retainer_status_enum, nullable=True),
                    sa.Column('included_minutes_per_month', sa.Integer(), nullable=True),
                    sa.Column('overage_rate', sa.Float(), nullable=True),
                    sa.Column('rollover_enabled', sa.Boolean(), nullable=True),
                    sa.Column('start_date', sa.Date(), nullable=True),
                    sa.Column('hourly_rate', sa.Float(), nullable=True),
                    sa.ForeignKeyConstraint(
                        ['client_id'], ['client.id'],
                        name='fk_project_client_id'
                    ),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_project_client_id'), 'project', ['client_id'], unique=False)
    op.create_index(op.f('ix_project_billing_type'), 'project', ['billing_type'], unique=False)
    op.create_index(op.f('ix_project_is_archived'), 'project', ['is_archived'], unique=False)

    op.create_table('workcategory',
                    *timestamps(),
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(), nullable=False),
                    sa.Column('is_archived', sa.Boolean(), nullable=False),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_workcategory_name'), 'workcategory', ['name'], unique=False)
    op.create_index(op.f('ix_workcategory_is_archived'), 'workcategory', ['is_archived'], unique=False)

    op.create_table('task',
                    *timestamps(),
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('project_id', sa.Integer(), nullable=True),
                    sa.Column('title', sa.String(), nullable=False),
                    sa.Column('client_update_text', sa.String(), nullable=True),
                    sa.Column('work_category_id', sa.Integer(), nullable=True),
                    sa.Column('is_archived', sa.Boolean(), nullable=False),
                    sa.ForeignKeyConstraint(
                        ['project_id'], ['project.id'],
                        name='fk_task_project_id'
                    ),
                    sa.ForeignKeyConstraint(
                        ['work_category_id'], ['workcategory.id'],
                        name='fk_task_work_category_id'
                    ),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_task_project_id'), 'task', ['project_id'], unique=False)
    op.create_index(op.f('ix_task_work_category_id'), 'task', ['work_category_id'], unique=False)
    op.create_index(op.f('ix_task_is_archived'), 'task', ['is_archived'], unique=False)

    op.create_table('timeentry',
                    *timestamps(),
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('task_id', sa.Integer(), nullable=False),
                    sa.Column('entry_date', sa.Date(), nullable=False),
                    sa.Column('duration_minutes', sa.Integer(), nullable=False),
                    sa.Column('note', sa.String(), nullable=True),
                    sa.ForeignKeyConstraint(
                        ['task_id'], ['task.id'],
                        name='fk_timeentry_task_id'
                    ),
                    sa.CheckConstraint('duration_minutes > 0',
                                       name='ck_timeentry_duration_positive'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_timeentry_task_id'), 'timeentry', ['task_id'], unique=False)
    op.create_index(op.f('ix_timeentry_entry_date'), 'timeentry', ['entry_date'], unique=False)

    op.create_table('retainerperiod',
                    *timestamps(),
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('project_id', sa.Integer(), nullable=False),
                    sa.Column('period_start', sa.Date(), nullable=False),
                    sa.Column('period_end', sa.Date(), nullable=False),
                    sa.Column('included_minutes', sa.Integer(), nullable=False),
                    sa.Column('rollover_minutes', sa.Integer(), nullable=False),
                    sa.ForeignKeyConstraint(
                        ['project_id'], ['project.id'],
                        name='fk_retainerperiod_project_id'
                    ),
                    # At most one period per project and month, even under concurrent first access
                    sa.UniqueConstraint('project_id', 'period_start',
                                        name='uq_retainerperiod_project_period_start'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_retainerperiod_project_id'), 'retainerperiod', ['project_id'], unique=False)
    op.create_index(op.f('ix_retainerperiod_period_start'), 'retainerperiod', ['period_start'], unique=False)

    # ### end Alembic commands ###


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_retainerperiod_period_start'), table_name='retainerperiod')
    op.drop_index(op.f('ix_retainerperiod_project_id'), table_name='retainerperiod')
    op.drop_table('retainerperiod')
    op.drop_index(op.f('ix_timeentry_entry_date'), table_name='timeentry')
    op.drop_index(op.f('ix_timeentry_task_id'), table_name='timeentry')
    op.drop_table('timeentry')
    op.drop_index(op.f('ix_task_is_archived'), table_name='task')
    op.drop_index(op.f('ix_task_work_category_id'), table_name='task')
    op.drop_index(op.f('ix_task_project_id'), table_name='task')
    op.drop_table('task')
    op.drop_index(op.f('ix_workcategory_is_archived'), table_name='workcategory')
    op.drop_index(op.f('ix_workcategory_name'), table_name='workcategory')
    op.drop_table('workcategory')
    op.drop_index(op.f('ix_project_is_archived'), table_name='project')
    op.drop_index(op.f('ix_project_billing_type'), table_name='project')
    op.drop_index(op.f('ix_project_client_id'), table_name='project')
    op.drop_table('project')
    op.drop_index(op.f('ix_client_is_archived'), table_name='client')
    op.drop_index(op.f('ix_client_name'), table_name='client')
    op.drop_table('client')

    postgresql.ENUM(name='retainerstatus').drop(op.get_bind(), checkfirst=True)
    postgresql.ENUM(name='billingtype').drop(op.get_bind(), checkfirst=True)

    # ### end Alembic commands ###
