from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from storefront.db.session import Base
from storefront.models.common import IntIdMixin, TimestampMixin

class User(Base, IntIdMixin, TimestampMixin):
    __tablename__ = "users"
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    cpf: Mapped[str | None] = mapped_column(String(14), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default="CUSTOMER", nullable=False)

    orders: Mapped[list["Order"]] = relationship(back_populates="user")
