"""Create users, cocktails, ratings and favorites tables

Revision ID: 3f9c1d2e7a10
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1d2e7a10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=32), nullable=False, comment='Display username (case preserved)'),
        sa.Column('username_lower', sa.String(length=32), nullable=False, comment='Lowercased username for case-insensitive uniqueness and login'),
        sa.Column('email', sa.String(length=254), nullable=False, comment='Lowercased email address'),
        sa.Column('hashed_password', sa.String(length=255), nullable=False, comment='Bcrypt hashed password'),
        sa.Column('ingredients', sa.JSON(), nullable=False, comment='Ingredients the user has at home'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_username_lower'), 'users', ['username_lower'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('cocktails',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False, comment='Cocktail name'),
        sa.Column('name_key', sa.String(length=100), nullable=False, comment='Normalized name used by the unique constraint'),
        sa.Column('instructions', sa.Text(), nullable=False, comment='Preparation instructions'),
        sa.Column('ingredients', sa.JSON(), nullable=False, comment='Ingredient names'),
        sa.Column('alcoholic', sa.Boolean(), nullable=False),
        sa.Column('image', sa.String(length=512), nullable=True, comment='Public URL of the cocktail picture'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_cocktails_name_key'), 'cocktails', ['name_key'], unique=True)

    op.create_table('cocktail_ratings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('cocktail_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, comment='Rating from 1-5 stars'),
        sa.Column('comment', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('score >= 1 AND score <= 5', name='ck_rating_score_range'),
        sa.ForeignKeyConstraint(['cocktail_id'], ['cocktails.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('cocktail_id', 'user_id', name='uq_rating_cocktail_user')
    )
    op.create_index(op.f('ix_cocktail_ratings_cocktail_id'), 'cocktail_ratings', ['cocktail_id'], unique=False)
    op.create_index(op.f('ix_cocktail_ratings_user_id'), 'cocktail_ratings', ['user_id'], unique=False)

    op.create_table('user_favorites',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('cocktail_id', sa.String(length=36), nullable=False, comment='Cocktail id (not enforced as a foreign key)'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'cocktail_id', name='uq_favorite_user_cocktail')
    )
    op.create_index(op.f('ix_user_favorites_user_id'), 'user_favorites', ['user_id'], unique=False)
    op.create_index(op.f('ix_user_favorites_cocktail_id'), 'user_favorites', ['cocktail_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_user_favorites_cocktail_id'), table_name='user_favorites')
    op.drop_index(op.f('ix_user_favorites_user_id'), table_name='user_favorites')
    op.drop_table('user_favorites')
    op.drop_index(op.f('ix_cocktail_ratings_user_id'), table_name='cocktail_ratings')
    op.drop_index(op.f('ix_cocktail_ratings_cocktail_id'), table_name='cocktail_ratings')
    op.drop_table('cocktail_ratings')
    op.drop_index(op.f('ix_cocktails_name_key'), table_name='cocktails')
    op.drop_table('cocktails')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_username_lower'), table_name='users')
    op.drop_table('users')
