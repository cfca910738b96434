"""Create wishlist tables

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 위시리스트 테이블
    op.create_table(
        "wishlists",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False, index=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), server_default="active"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    # 위시리스트 품목 테이블
    op.create_table(
        "wishlist_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "wishlist_id",
            sa.Integer(),
            sa.ForeignKey("wishlists.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("product_id", sa.String(), nullable=True, comment="리테일러 상품 ID (ASIN 등)"),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("currency", sa.String(), server_default="USD"),
        sa.Column("product_url", sa.String(), nullable=True),
        sa.Column("retailer", sa.String(), nullable=True),
        sa.Column("quantity", sa.Integer(), server_default="1"),
        sa.Column("quantity_fulfilled", sa.Integer(), server_default="0"),
        sa.Column("is_fulfilled", sa.Boolean(), server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("wishlist_items")
    op.drop_table("wishlists")
