from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from app.core.database import Base
from app.models.types import EnumValueType


class AccessLevel(str, enum.Enum):
    SUPERADMIN = "SUPERADMIN"  # controle total
    ADMIN = "ADMIN"  # produtos e clientes
    EDITOR = "EDITOR"  # edição de conteúdo


class AccountStatus(str, enum.Enum):
    ACTIVE = "ATIVO"
    INACTIVE = "INATIVO"
    SUSPENDED = "SUSPENSO"
    BLOCKED = "BLOQUEADO"
    PENDING = "PENDENTE"


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    access_level = Column(EnumValueType(AccessLevel), default=AccessLevel.EDITOR, nullable=False)
    status = Column(EnumValueType(AccountStatus), default=AccountStatus.ACTIVE, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    last_logout = Column(DateTime(timezone=True), nullable=True)
    confirmation_token = Column(String, unique=True, nullable=True)
    confirmation_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    replies = relationship("Interaction", back_populates="admin")
