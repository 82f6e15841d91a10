"""initial

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table('listing',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(length=200), nullable=True),
        sa.Column('category', sa.String(length=64), nullable=True),
        sa.Column('price', sa.Float(), nullable=False, server_default=sa.text('0')),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('image_urls', sa.JSON(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('color', sa.String(length=64), nullable=True),
        sa.Column('material', sa.String(length=128), nullable=True),
        sa.Column('style', sa.String(length=64), nullable=True),
        sa.Column('brand', sa.String(length=200), nullable=True),
        sa.Column('condition', sa.String(length=32), nullable=True),
        sa.Column('size', sa.String(length=32), nullable=True),
        sa.Column('gender', sa.String(length=16), nullable=True),
        sa.Column('final_score', sa.Float(), nullable=True),
        sa.Column('is_boosted', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('boost_weight', sa.Float(), nullable=False, server_default=sa.text('0')),
        sa.Column('listed', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('sold', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_listing_feed', 'listing', ['listed', 'sold', 'created_at'])
    op.create_index('ix_listing_category', 'listing', ['category'])
    op.create_table('listing_promotion',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('listing_id', sa.Integer(), sa.ForeignKey('listing.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='ACTIVE'),
        sa.Column('views', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('clicks', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_listing_promotion_active', 'listing_promotion', ['listing_id', 'status'])

def downgrade() -> None:
    op.drop_index('ix_listing_promotion_active', table_name='listing_promotion')
    op.drop_table('listing_promotion')
    op.drop_index('ix_listing_category', table_name='listing')
    op.drop_index('ix_listing_feed', table_name='listing')
    op.drop_table('listing')
