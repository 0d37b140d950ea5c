from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.errors import parse_id
from app.dependencies import require_level
from app.models.admin import AccessLevel, Admin
from app.schemas.common import ApiResponse, DeletionResult
from app.schemas.product import (
    ProductCreate,
    ProductDetail,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from app.services.product_service import ProductQuery, ProductService

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1),
    limit: int = Query(10),
    categoria: Optional[str] = Query(None),
    busca: Optional[str] = Query(None),
    sortBy: str = Query("createdAt"),
    order: str = Query("desc"),
    db: Session = Depends(get_db),
):
    params = ProductQuery(
        page=page,
        limit=limit,
        category=categoria,
        search=busca,
        sort_by=sortBy,
        order=order,
    )
    return ProductService.list_products(db, params)


@router.get("/{product_id}", response_model=ApiResponse[ProductDetail])
async def get_product(product_id: str, db: Session = Depends(get_db)):
    product = ProductService.get_product(db, parse_id(product_id, "ID do produto"))
    return ApiResponse[ProductDetail](data=product)


@router.post("", response_model=ApiResponse[ProductResponse], status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    current_admin: Admin = Depends(require_level(AccessLevel.ADMIN)),
    db: Session = Depends(get_db),
):
    product = ProductService.create_product(db, product_data)
    return ApiResponse[ProductResponse](message="Produto criado com sucesso", data=product)


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    product_id: str,
    product_data: ProductUpdate,
    current_admin: Admin = Depends(require_level(AccessLevel.EDITOR)),
    db: Session = Depends(get_db),
):
    product = ProductService.update_product(db, parse_id(product_id, "ID do produto"), product_data)
    return ApiResponse[ProductResponse](message="Produto atualizado com sucesso", data=product)


@router.delete("/{product_id}", response_model=ApiResponse[DeletionResult])
async def delete_product(
    product_id: str,
    current_admin: Admin = Depends(require_level(AccessLevel.ADMIN)),
    db: Session = Depends(get_db),
):
    result = ProductService.delete_product(db, parse_id(product_id, "ID do produto"))
    return ApiResponse[DeletionResult](message="Produto excluído com sucesso", data=result)
