from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.core.validators import normalize_email, validate_name, validate_password
from app.schemas.common import Pagination
from app.schemas.interaction import InteractionResponse


class CustomerRegister(BaseModel):
    name: str = Field(..., alias="nome")
    email: str
    password: str = Field(..., alias="senha")
    phone: Optional[str] = Field(None, alias="telefone", max_length=20)
    address: Optional[str] = Field(None, alias="endereco", max_length=500)

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def name_min_length(cls, value: str) -> str:
        return validate_name(value)

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return validate_password(value)


class CustomerLoginRequest(BaseModel):
    email: str
    password: str = Field(..., alias="senha", min_length=1)

    model_config = {"populate_by_name": True}

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        return normalize_email(value)


class EmailRequest(BaseModel):
    """Body of resend-confirmation and password-recovery requests."""
    email: str

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        return normalize_email(value)


class ConfirmEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    code: str = Field(..., min_length=1)
    new_password: str = Field(..., alias="novaSenha")

    model_config = {"populate_by_name": True}

    @field_validator("new_password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return validate_password(value, label="Nova senha")


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(None, alias="nome", max_length=100)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, alias="telefone", max_length=20)
    address: Optional[str] = Field(None, alias="endereco", max_length=200)

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def name_min_length(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return validate_name(value)

    @field_validator("email")
    @classmethod
    def email_format(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return normalize_email(value)


class CustomerRegistered(BaseModel):
    id: int
    name: str = Field(alias="nome")
    email: str
    email_verified: bool = Field(alias="emailVerificado")

    model_config = {"from_attributes": True, "populate_by_name": True}


class CustomerResponse(BaseModel):
    id: int
    name: str = Field(alias="nome")
    email: str
    phone: Optional[str] = Field(None, alias="telefone")
    address: Optional[str] = Field(None, alias="endereco")
    email_verified: bool = Field(alias="emailVerificado")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = {"from_attributes": True, "populate_by_name": True}


class CustomerListItem(CustomerResponse):
    total_interactions: int = Field(0, alias="totalInteracoes")


class CustomerDetail(CustomerResponse):
    interactions: List[InteractionResponse] = Field(default_factory=list, alias="interacoes")


class CustomerLoginData(BaseModel):
    customer: CustomerResponse = Field(alias="cliente")
    token: str

    model_config = {"populate_by_name": True}


class CustomerListResponse(BaseModel):
    success: bool = True
    data: List[CustomerListItem]
    pagination: Pagination
