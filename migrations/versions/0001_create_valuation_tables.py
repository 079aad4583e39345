"""Create listing, geo reference and valuation cache tables

Revision ID: 0001_valuation
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_valuation'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


SOURCE_TYPES = ('vector', 'aggregator', 'vector_crm')
DEAL_TYPES = ('sell', 'rent')
REALTY_TYPES = ('apartment', 'house', 'commercial', 'area', 'room', 'garage')


def upgrade() -> None:
    op.create_table(
        'streets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('geo_id', sa.Integer(), nullable=True),
        sa.Column('names_uk', sa.JSON(), nullable=False),
        sa.Column('names_ru', sa.JSON(), nullable=False),
        sa.Column('synced_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_streets_geo_id', 'streets', ['geo_id'])

    op.create_table(
        'apartment_complexes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name_uk', sa.String(255), nullable=True),
        sa.Column('name_ru', sa.String(255), nullable=True),
        sa.Column('name_en', sa.String(255), nullable=True),
        sa.Column('geo_id', sa.Integer(), nullable=True),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.Column('synced_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_apartment_complexes_geo_id', 'apartment_complexes', ['geo_id'])

    op.create_table(
        'unified_listings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('source_type', sa.Enum(*SOURCE_TYPES, name='sourcetype'), nullable=False),
        sa.Column('source_id', sa.Integer(), nullable=False),
        sa.Column('realty_platform', sa.String(50), nullable=True),
        sa.Column('deal_type', sa.Enum(*DEAL_TYPES, name='dealtype'), nullable=False),
        sa.Column('realty_type', sa.Enum(*REALTY_TYPES, name='realtytype'), nullable=False),
        sa.Column('geo_id', sa.Integer(), nullable=True),
        sa.Column('street_id', sa.Integer(), sa.ForeignKey('streets.id', ondelete='SET NULL'), nullable=True),
        sa.Column('complex_id', sa.Integer(), sa.ForeignKey('apartment_complexes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('house_number', sa.String(50), nullable=True),
        sa.Column('apartment_number', sa.String(50), nullable=True),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(10), nullable=False, server_default='USD'),
        sa.Column('price_per_meter', sa.Float(), nullable=True),
        sa.Column('total_area', sa.Float(), nullable=True),
        sa.Column('rooms', sa.Integer(), nullable=True),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('total_floors', sa.Integer(), nullable=True),
        sa.Column('condition', sa.String(255), nullable=True),
        sa.Column('primary_data', sa.JSON(), nullable=True),
        sa.Column('description', sa.JSON(), nullable=True),
        sa.Column('external_url', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_unified_listings_source', 'unified_listings', ['source_type', 'source_id'], unique=True)
    op.create_index('ix_unified_listings_realty_deal', 'unified_listings', ['realty_type', 'deal_type'])
    op.create_index('ix_unified_listings_complex', 'unified_listings', ['complex_id'])
    op.create_index('ix_unified_listings_geo_street', 'unified_listings', ['geo_id', 'street_id'])
    op.create_index('ix_unified_listings_realty_platform', 'unified_listings', ['realty_platform'])

    op.create_table(
        'valuation_cache',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('listing_id', sa.Uuid(), sa.ForeignKey('unified_listings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('analogs_data', sa.JSON(), nullable=False),
        sa.Column('fair_price', sa.JSON(), nullable=False),
        sa.Column('liquidity', sa.JSON(), nullable=False),
        sa.Column('calculated_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_valuation_cache_listing_id', 'valuation_cache', ['listing_id'], unique=True)
    op.create_index('ix_valuation_cache_calculated_at', 'valuation_cache', ['calculated_at'])
    op.create_index('ix_valuation_cache_expires_at', 'valuation_cache', ['expires_at'])


def downgrade() -> None:
    op.drop_table('valuation_cache')
    op.drop_table('unified_listings')
    op.drop_table('apartment_complexes')
    op.drop_table('streets')
    sa.Enum(name='realtytype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='dealtype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='sourcetype').drop(op.get_bind(), checkfirst=True)
