from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime
from app.core.validators import normalize_interaction_type
from app.models.interaction import InteractionType
from app.schemas.admin import AdminSummary
from app.schemas.product import ProductSummary

# tipos que um cliente pode registrar; RESPOSTA_ADMIN vem só de /responder
CUSTOMER_INTERACTION_TYPES = [t for t in InteractionType if t != InteractionType.ADMIN_REPLY]


class InteractionCreate(BaseModel):
    type: str = Field(..., alias="tipo")
    product_id: int = Field(..., alias="produtoId", gt=0)
    content: Optional[str] = Field(None, alias="conteudo", max_length=2000)
    rating: Optional[int] = Field(None, alias="nota")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_type_rules(self):
        normalized = normalize_interaction_type(self.type)
        allowed = [t.value for t in CUSTOMER_INTERACTION_TYPES]
        if normalized not in allowed:
            raise ValueError("Tipo de interação inválido. Use: " + ", ".join(allowed))
        self.type = normalized

        if self.content is not None:
            self.content = self.content.strip() or None

        if normalized == InteractionType.COMMENT.value and not self.content:
            raise ValueError("Comentário não pode estar vazio")

        if normalized == InteractionType.RATING.value:
            if self.rating is None or not 1 <= self.rating <= 5:
                raise ValueError("Avaliação deve ter nota entre 1 e 5")
        else:
            self.rating = None
        return self

    @property
    def interaction_type(self) -> InteractionType:
        return InteractionType(self.type)


class AdminReplyCreate(BaseModel):
    interaction_id: int = Field(..., alias="interacaoId", gt=0)
    reply: str = Field(..., alias="resposta", max_length=2000)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def reply_not_empty(self):
        self.reply = self.reply.strip()
        if not self.reply:
            raise ValueError("Resposta não pode estar vazia")
        return self


class InteractionAuthor(BaseModel):
    id: int
    name: str = Field(alias="nome")
    email: str

    model_config = {"from_attributes": True, "populate_by_name": True}


class InteractionResponse(BaseModel):
    id: int
    type: InteractionType = Field(alias="tipo")
    content: Optional[str] = Field(None, alias="conteudo")
    rating: Optional[int] = Field(None, alias="nota")
    customer_id: Optional[int] = Field(None, alias="clienteId")
    admin_id: Optional[int] = Field(None, alias="adminId")
    parent_id: Optional[int] = Field(None, alias="interacaoPaiId")
    product_id: int = Field(alias="produtoId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    customer: Optional[InteractionAuthor] = Field(None, alias="cliente")
    admin: Optional[AdminSummary] = None
    product: Optional[ProductSummary] = Field(None, alias="produto")

    model_config = {"from_attributes": True, "populate_by_name": True}
