from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from storefront.db.session import Base
from storefront.models.common import IntIdMixin, TimestampMixin

class Category(Base, IntIdMixin, TimestampMixin):
    __tablename__ = "categories"
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(220), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    products: Mapped[list["Product"]] = relationship(back_populates="category")
