from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)
    email_verified = Column(Boolean, default=False, nullable=False)
    email_token = Column(String, unique=True, nullable=True)
    email_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    reset_token = Column(String, unique=True, nullable=True)
    reset_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    interactions = relationship(
        "Interaction",
        back_populates="customer",
        order_by="Interaction.created_at.desc()",
    )
