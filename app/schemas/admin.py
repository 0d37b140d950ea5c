from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from app.core.validators import normalize_email, validate_name, validate_password
from app.models.admin import AccessLevel, AccountStatus


def _check_access_level(value):
    if value is None or isinstance(value, AccessLevel):
        return value
    if value not in {level.value for level in AccessLevel}:
        raise ValueError("Nível de acesso inválido")
    return value


class AdminLoginRequest(BaseModel):
    email: str
    password: str = Field(..., alias="senha", min_length=1)

    model_config = {"populate_by_name": True}

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        return normalize_email(value)


class AdminCreate(BaseModel):
    name: str = Field(..., alias="nome")
    email: str
    password: str = Field(..., alias="senha")
    access_level: Optional[AccessLevel] = Field(None, alias="nivelAcesso")

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

    @field_validator("access_level", mode="before")
    @classmethod
    def access_level_known(cls, value):
        return _check_access_level(value)


class AdminUpdate(BaseModel):
    name: Optional[str] = Field(None, alias="nome")
    email: Optional[str] = None
    password: Optional[str] = Field(None, alias="senha")
    access_level: Optional[AccessLevel] = Field(None, alias="nivelAcesso")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def name_min_length(cls, value: Optional[str]) -> Optional[str]:
        return validate_name(value) if value is not None else None

    @field_validator("email")
    @classmethod
    def email_format(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value) if value is not None else None

    @field_validator("password")
    @classmethod
    def password_length(cls, value: Optional[str]) -> Optional[str]:
        return validate_password(value) if value is not None else None

    @field_validator("access_level", mode="before")
    @classmethod
    def access_level_known(cls, value):
        return _check_access_level(value or None)


class AdminInvite(BaseModel):
    """Invitation without a password; the invitee sets it when activating the account."""
    name: str = Field(..., alias="nome")
    email: str
    access_level: Optional[AccessLevel] = Field(None, alias="nivelAcesso")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def name_min_length(cls, value: str) -> str:
        return validate_name(value)

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("access_level", mode="before")
    @classmethod
    def access_level_known(cls, value):
        return _check_access_level(value)


class AccountActivationRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., alias="senha")

    model_config = {"populate_by_name": True}

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return validate_password(value)


class AdminStatusUpdate(BaseModel):
    status: AccountStatus

    @field_validator("status", mode="before")
    @classmethod
    def status_known(cls, value):
        valid = [s.value for s in AccountStatus]
        if value not in valid:
            raise ValueError("Status inválido. Use: " + ", ".join(valid))
        return value


class AdminSummary(BaseModel):
    id: int
    name: str = Field(alias="nome")

    model_config = {"from_attributes": True, "populate_by_name": True}


class AdminResponse(BaseModel):
    id: int
    name: str = Field(alias="nome")
    email: str
    access_level: AccessLevel = Field(alias="nivelAcesso")
    status: AccountStatus
    last_login: Optional[datetime] = Field(None, alias="ultimoLogin")
    last_logout: Optional[datetime] = Field(None, alias="ultimoLogout")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = {"from_attributes": True, "populate_by_name": True}


class AdminLoginResponse(BaseModel):
    success: bool = True
    message: str = "Login realizado com sucesso"
    token: str
    admin: AdminResponse


class AdminMeResponse(BaseModel):
    success: bool = True
    admin: AdminResponse


class AdminInvited(AdminResponse):
    confirmation_token_expires_at: Optional[datetime] = Field(None, alias="conviteExpiraEm")


class PendingAccountResponse(BaseModel):
    success: bool = True
    admin: AdminResponse
    expires_at: Optional[datetime] = Field(None, alias="expiresAt")

    model_config = {"populate_by_name": True}


class AccountActivatedResponse(BaseModel):
    success: bool = True
    message: str = "Conta ativada com sucesso!"
    admin: AdminResponse
