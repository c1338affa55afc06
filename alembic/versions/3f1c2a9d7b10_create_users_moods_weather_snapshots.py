"""create users, moods and weather snapshots

Revision ID: 3f1c2a9d7b10
Revises: 
Create Date: 2026-10-19 09:12:44.518203+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('google_id', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_google_id'), 'users', ['google_id'], unique=True)
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    # Create moods table
    op.create_table(
        'moods',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('mood', sa.String(length=16), nullable=False, comment='One of MoodLabel'),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False, comment='Event time (UTC)'),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_moods_id'), 'moods', ['id'], unique=False)
    op.create_index(op.f('ix_moods_user_id'), 'moods', ['user_id'], unique=False)
    op.create_index('idx_moods_user_date', 'moods', ['user_id', 'date'], unique=False)

    # Create weather_snapshots table
    op.create_table(
        'weather_snapshots',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('country', sa.String(length=8), nullable=False),
        sa.Column('temperature', sa.Float(), nullable=False, comment='Air temperature in °C'),
        sa.Column('feels_like', sa.Float(), nullable=True, comment='Apparent temperature in °C'),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('main', sa.String(length=32), nullable=False, comment='Condition category, e.g. Clear, Clouds, Rain'),
        sa.Column('icon', sa.String(length=8), nullable=True, comment='OpenWeatherMap style icon code'),
        sa.Column('humidity', sa.Float(), nullable=True, comment='Relative humidity in %'),
        sa.Column('wind_speed', sa.Float(), nullable=True, comment='Wind speed in m/s'),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False, comment='Observation time (UTC)'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_weather_snapshots_id'), 'weather_snapshots', ['id'], unique=False)
    op.create_index(op.f('ix_weather_snapshots_user_id'), 'weather_snapshots', ['user_id'], unique=False)
    op.create_index('idx_weather_user_date', 'weather_snapshots', ['user_id', 'date'], unique=False)
    op.create_index('idx_weather_user_city_date', 'weather_snapshots', ['user_id', 'city', 'date'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_weather_user_city_date', table_name='weather_snapshots')
    op.drop_index('idx_weather_user_date', table_name='weather_snapshots')
    op.drop_index(op.f('ix_weather_snapshots_user_id'), table_name='weather_snapshots')
    op.drop_index(op.f('ix_weather_snapshots_id'), table_name='weather_snapshots')
    op.drop_table('weather_snapshots')

    op.drop_index('idx_moods_user_date', table_name='moods')
    op.drop_index(op.f('ix_moods_user_id'), table_name='moods')
    op.drop_index(op.f('ix_moods_id'), table_name='moods')
    op.drop_table('moods')

    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_index(op.f('ix_users_google_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
