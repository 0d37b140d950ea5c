from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from app.schemas.common import Pagination

# Numeric(10, 2)
MAX_PRICE = Decimal("99999999.99")
CENT = Decimal("0.01")


def _check_price(value):
    if value is None:
        return None
    if value > MAX_PRICE:
        raise ValueError(f"Preço deve ser no máximo {MAX_PRICE}")
    price = value.quantize(CENT, rounding=ROUND_HALF_UP)
    if price <= 0:
        raise ValueError("Preço deve ser um número positivo")
    return price


def _check_stock(value):
    if value is not None and value < 0:
        raise ValueError("Estoque não pode ser negativo")
    return value


def _check_name(value):
    if value is None:
        return None
    name = value.strip()
    if not name:
        raise ValueError("Nome do produto é obrigatório")
    return name


class ProductCreate(BaseModel):
    name: str = Field(..., alias="nome", max_length=200)
    description: str = Field("", alias="descricao")
    price: Decimal = Field(..., alias="preco")
    stock: int = Field(0, alias="estoque")
    category: Optional[str] = Field(None, alias="categoria")
    sizes: List[str] = Field(default_factory=list, alias="tamanhos")
    colors: List[str] = Field(default_factory=list, alias="cores")
    image_url: Optional[str] = Field(None, alias="imagemUrl")
    images: List[str] = Field(default_factory=list, alias="imagens")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _check_name(v)

    @field_validator("price")
    @classmethod
    def price_positive(cls, v):
        return _check_price(v)

    @field_validator("stock")
    @classmethod
    def stock_not_negative(cls, v):
        return _check_stock(v)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, alias="nome", max_length=200)
    description: Optional[str] = Field(None, alias="descricao")
    price: Optional[Decimal] = Field(None, alias="preco")
    stock: Optional[int] = Field(None, alias="estoque")
    category: Optional[str] = Field(None, alias="categoria")
    sizes: Optional[List[str]] = Field(None, alias="tamanhos")
    colors: Optional[List[str]] = Field(None, alias="cores")
    image_url: Optional[str] = Field(None, alias="imagemUrl")
    images: Optional[List[str]] = Field(None, alias="imagens")
    available: Optional[bool] = Field(None, alias="disponivel")

    model_config = {"populate_by_name": True}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _check_name(v)

    @field_validator("price")
    @classmethod
    def price_positive(cls, v):
        return _check_price(v)

    @field_validator("stock")
    @classmethod
    def stock_not_negative(cls, v):
        return _check_stock(v)


class ProductSummary(BaseModel):
    id: int
    name: str = Field(alias="nome")
    image_url: Optional[str] = Field(None, alias="imagemUrl")

    model_config = {"from_attributes": True, "populate_by_name": True}


class ProductResponse(BaseModel):
    id: int
    name: str = Field(alias="nome")
    description: str = Field("", alias="descricao")
    price: float = Field(alias="preco")
    category: str = Field(alias="categoria")
    sizes: List[str] = Field(default_factory=list, alias="tamanhos")
    colors: List[str] = Field(default_factory=list, alias="cores")
    stock: int = Field(alias="estoque")
    available: bool = Field(alias="disponivel")
    image_url: str = Field(alias="imagemUrl")
    images: List[str] = Field(default_factory=list, alias="imagens")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = {"from_attributes": True, "populate_by_name": True}


class ProductListItem(ProductResponse):
    total_interactions: int = Field(0, alias="totalInteracoes")


class ProductDetail(ProductListItem):
    formatted_price: str = Field("", alias="precoFormatado")


class ProductListResponse(BaseModel):
    success: bool = True
    data: List[ProductListItem]
    pagination: Pagination
