"""
위시리스트(필요 목록) 모델
가격 조회를 위해 읽기 전용으로 사용
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from needfully.database import Base


class Wishlist(Base):
    """위시리스트 모델"""

    __tablename__ = "wishlists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[Optional[str]] = mapped_column(
        String(20),
        default="active",
        comment="active / completed / archived",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
    )

    # 관계
    items = relationship(
        "WishlistItem",
        back_populates="wishlist",
        order_by="WishlistItem.id",
    )

    def __repr__(self) -> str:
        return f"<Wishlist(id={self.id}, title={self.title})>"


class WishlistItem(Base):
    """위시리스트 품목 모델"""

    __tablename__ = "wishlist_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    wishlist_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("wishlists.id"),
        nullable=False,
        index=True,
    )

    # 상품 정보
    product_id: Mapped[Optional[str]] = mapped_column(
        String,
        nullable=True,
        comment="리테일러 상품 ID (ASIN 등)",
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2),
        nullable=True,
        comment="등록 시점 가격",
    )
    currency: Mapped[Optional[str]] = mapped_column(String, default="USD")
    product_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    retailer: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # 수량 / 후원 상태
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    quantity_fulfilled: Mapped[int] = mapped_column(Integer, default=0)
    is_fulfilled: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
    )

    # 관계
    wishlist = relationship("Wishlist", back_populates="items")

    def __repr__(self) -> str:
        return f"<WishlistItem(id={self.id}, title={self.title})>"
