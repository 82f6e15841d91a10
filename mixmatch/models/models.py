from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, Float, Boolean, ForeignKey, DateTime, Text, JSON
from sqlalchemy.sql import func
from datetime import datetime
from mixmatch.core.db import Base


class Listing(Base):
    __tablename__ = "listing"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str | None] = mapped_column(String(200))
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    price: Mapped[float] = mapped_column(Float, default=0.0)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_urls: Mapped[list | None] = mapped_column(JSON, nullable=True)
    tags: Mapped[list | None] = mapped_column(JSON, nullable=True)
    color: Mapped[str | None] = mapped_column(String(64), nullable=True)
    material: Mapped[str | None] = mapped_column(String(128), nullable=True)
    style: Mapped[str | None] = mapped_column(String(64), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(200), nullable=True)
    condition: Mapped[str | None] = mapped_column(String(32), nullable=True)
    size: Mapped[str | None] = mapped_column(String(32), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(16), nullable=True)
    final_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_boosted: Mapped[bool] = mapped_column(Boolean, default=False)
    boost_weight: Mapped[float] = mapped_column(Float, default=0.0)
    listed: Mapped[bool] = mapped_column(Boolean, default=True)
    sold: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    promotions: Mapped[list["ListingPromotion"]] = relationship(
        "ListingPromotion",
        back_populates="listing",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ListingPromotion(Base):
    __tablename__ = "listing_promotion"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    listing_id: Mapped[int] = mapped_column(Integer, ForeignKey("listing.id", ondelete="CASCADE"))
    status: Mapped[str] = mapped_column(String(16), default="ACTIVE")
    views: Mapped[int] = mapped_column(Integer, default=0)
    clicks: Mapped[int] = mapped_column(Integer, default=0)
    ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    listing: Mapped[Listing] = relationship("Listing", back_populates="promotions")
