from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from app.core.database import Base
from app.models.types import EnumValueType


class InteractionType(str, enum.Enum):
    LIKE = "CURTIDA"
    COMMENT = "COMENTARIO"
    SHARE = "COMPARTILHAMENTO"
    PURCHASE = "COMPRA"
    VIEW = "VISUALIZACAO"
    RATING = "AVALIACAO"
    ADMIN_REPLY = "RESPOSTA_ADMIN"


class Interaction(Base):
    __tablename__ = "interactions"
    __table_args__ = (
        # exactly one author: a customer, or an admin for replies
        CheckConstraint(
            "(customer_id IS NULL) <> (admin_id IS NULL)",
            name="ck_interactions_single_author",
        ),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_interactions_rating_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(EnumValueType(InteractionType), nullable=False, index=True)
    content = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=True, index=True)
    parent_id = Column(Integer, ForeignKey("interactions.id", ondelete="SET NULL"), nullable=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    customer = relationship("Customer", back_populates="interactions")
    admin = relationship("Admin", back_populates="replies")
    product = relationship("Product", back_populates="interactions")
    parent = relationship("Interaction", remote_side=[id])
