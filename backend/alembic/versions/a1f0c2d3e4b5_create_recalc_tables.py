"""create_recalc_tables

Revision ID: a1f0c2d3e4b5
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = 'a1f0c2d3e4b5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('role', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('team_id', sa.Uuid(), nullable=True),
        sa.Column('height_cm', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'])
    op.create_index(op.f('ix_users_team_id'), 'users', ['team_id'])

    op.create_table('training_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('duration_min', sa.Float(), nullable=True),
        sa.Column('rpe', sa.Float(), nullable=True),
        sa.Column('load', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_training_records_user_id'), 'training_records', ['user_id'])
    op.create_index(op.f('ix_training_records_date'), 'training_records', ['date'])

    op.create_table('inbody_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('measured_at', sa.Date(), nullable=False),
        sa.Column('measured_at_ts', sa.DateTime(timezone=True), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('body_fat_percent', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_inbody_records_user_id'), 'inbody_records', ['user_id'])
    op.create_index(op.f('ix_inbody_records_measured_at'), 'inbody_records', ['measured_at'])

    op.create_table('athlete_activity_level_daily',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('team_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('avg_load_14d', sa.Float(), nullable=False),
        sa.Column('team_p25', sa.Float(), nullable=True),
        sa.Column('team_p50', sa.Float(), nullable=True),
        sa.Column('team_p75', sa.Float(), nullable=True),
        sa.Column('activity_level_system', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('activity_level_effective', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('effective_source', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('override_by', sa.Uuid(), nullable=True),
        sa.Column('override_reason', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_activity_level_user_date'),
    )
    op.create_index(op.f('ix_athlete_activity_level_daily_user_id'), 'athlete_activity_level_daily', ['user_id'])
    op.create_index(op.f('ix_athlete_activity_level_daily_team_id'), 'athlete_activity_level_daily', ['team_id'])
    op.create_index(op.f('ix_athlete_activity_level_daily_date'), 'athlete_activity_level_daily', ['date'])

    op.create_table('nutrition_daily',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('team_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('height_cm', sa.Float(), nullable=False),
        sa.Column('body_fat_percent', sa.Float(), nullable=True),
        sa.Column('bmr', sa.Integer(), nullable=False),
        sa.Column('tdee', sa.Integer(), nullable=False),
        sa.Column('activity_level', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_nutrition_daily_user_date'),
    )
    op.create_index(op.f('ix_nutrition_daily_user_id'), 'nutrition_daily', ['user_id'])
    op.create_index(op.f('ix_nutrition_daily_team_id'), 'nutrition_daily', ['team_id'])
    op.create_index(op.f('ix_nutrition_daily_date'), 'nutrition_daily', ['date'])

    op.create_table('nutrition_targets_daily',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('team_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('tdee', sa.Integer(), nullable=False),
        sa.Column('goal', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('kcal_target', sa.Integer(), nullable=False),
        sa.Column('protein_g', sa.Integer(), nullable=False),
        sa.Column('fat_g', sa.Integer(), nullable=False),
        sa.Column('carbs_g', sa.Integer(), nullable=False),
        sa.Column('protein_kcal', sa.Integer(), nullable=False),
        sa.Column('fat_kcal', sa.Integer(), nullable=False),
        sa.Column('carbs_kcal', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_nutrition_targets_user_date'),
    )
    op.create_index(op.f('ix_nutrition_targets_daily_user_id'), 'nutrition_targets_daily', ['user_id'])
    op.create_index(op.f('ix_nutrition_targets_daily_team_id'), 'nutrition_targets_daily', ['team_id'])
    op.create_index(op.f('ix_nutrition_targets_daily_date'), 'nutrition_targets_daily', ['date'])


def downgrade() -> None:
    op.drop_table('nutrition_targets_daily')
    op.drop_table('nutrition_daily')
    op.drop_table('athlete_activity_level_daily')
    op.drop_table('inbody_records')
    op.drop_table('training_records')
    op.drop_index(op.f('ix_users_team_id'), table_name='users')
    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
