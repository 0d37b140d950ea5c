import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.errors import bad_request, conflict, not_found
from app.core.metrics import PRODUCT_OPERATIONS
from app.core.validators import format_price
from app.models.interaction import Interaction
from app.models.product import DEFAULT_CATEGORY, PLACEHOLDER_IMAGE, Product
from app.schemas.common import DeletionResult, Pagination
from app.schemas.product import (
    ProductCreate,
    ProductDetail,
    ProductListItem,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from app.services.interaction_service import InteractionService

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "createdAt": Product.created_at,
    "preco": Product.price,
    "nome": Product.name,
    "estoque": Product.stock,
}
MAX_PAGE_SIZE = 50


@dataclass
class ProductQuery:
    """Public catalog listing parameters. Unknown sort keys fall back to createdAt desc."""
    page: int = 1
    limit: int = 10
    category: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "createdAt"
    order: str = "desc"

    def __post_init__(self):
        self.page = max(1, self.page)
        self.limit = min(MAX_PAGE_SIZE, max(1, self.limit))
        self.category = (self.category or "").strip() or None
        if self.category and self.category.lower() == "todas":
            self.category = None
        self.search = (self.search or "").strip() or None
        if self.sort_by not in SORTABLE_FIELDS:
            self.sort_by = "createdAt"
        if self.order not in ("asc", "desc"):
            self.order = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise not_found("Produto não encontrado")
    return product


def _name_taken(db: Session, name: str, exclude_id: int = None) -> bool:
    query = db.query(Product.id).filter(func.lower(Product.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    return query.first() is not None


def _interaction_count(db: Session, product_id: int) -> int:
    return db.query(func.count(Interaction.id)).filter(Interaction.product_id == product_id).scalar() or 0


class ProductService:

    @staticmethod
    def list_products(db: Session, params: ProductQuery) -> ProductListResponse:
        query = db.query(Product).filter(Product.available.is_(True))
        if params.category:
            query = query.filter(func.lower(Product.category) == params.category.lower())
        if params.search:
            pattern = f"%{params.search}%"
            query = query.filter(
                or_(
                    Product.name.ilike(pattern),
                    Product.description.ilike(pattern),
                    Product.category.ilike(pattern),
                )
            )

        total = query.count()
        column = SORTABLE_FIELDS[params.sort_by]
        ordering = column.asc() if params.order == "asc" else column.desc()
        products = query.order_by(ordering, Product.id.asc()).offset(params.offset).limit(params.limit).all()

        counts = {}
        if products:
            counts = dict(
                db.query(Interaction.product_id, func.count(Interaction.id))
                .filter(Interaction.product_id.in_([p.id for p in products]))
                .group_by(Interaction.product_id)
                .all()
            )

        items = []
        for product in products:
            item = ProductListItem.model_validate(product)
            item.total_interactions = counts.get(product.id, 0)
            items.append(item)

        return ProductListResponse(data=items, pagination=Pagination.build(params.page, params.limit, total))

    @staticmethod
    def get_product(db: Session, product_id: int) -> ProductDetail:
        product = _get_product_or_404(db, product_id)
        detail = ProductDetail.model_validate(product)
        detail.total_interactions = _interaction_count(db, product.id)
        detail.formatted_price = format_price(product.price)
        return detail

    @staticmethod
    def create_product(db: Session, data: ProductCreate) -> ProductResponse:
        if _name_taken(db, data.name):
            raise conflict("Já existe um produto com este nome", code="DUPLICATE_PRODUCT")

        product = Product(
            name=data.name,
            description=data.description or "",
            price=data.price,
            stock=data.stock,
            category=(data.category or "").strip() or DEFAULT_CATEGORY,
            sizes=data.sizes,
            colors=data.colors,
            image_url=data.image_url or PLACEHOLDER_IMAGE,
            images=data.images,
            available=True,
        )
        db.add(product)
        db.commit()
        db.refresh(product)

        PRODUCT_OPERATIONS.labels(operation="create").inc()
        logger.info("product %s created: %s", product.id, product.name)
        return ProductResponse.model_validate(product)

    @staticmethod
    def update_product(db: Session, product_id: int, data: ProductUpdate) -> ProductResponse:
        product = _get_product_or_404(db, product_id)
        changes = data.model_dump(exclude_none=True)
        if not changes:
            raise bad_request("Nenhum campo para atualizar")

        if "name" in changes and _name_taken(db, changes["name"], exclude_id=product.id):
            raise conflict("Já existe um produto com este nome", code="DUPLICATE_PRODUCT")
        if "category" in changes:
            changes["category"] = changes["category"].strip() or DEFAULT_CATEGORY
        if "image_url" in changes:
            changes["image_url"] = changes["image_url"] or PLACEHOLDER_IMAGE

        for field, value in changes.items():
            setattr(product, field, value)
        db.commit()
        db.refresh(product)

        PRODUCT_OPERATIONS.labels(operation="update").inc()
        logger.info("product %s updated (%s)", product.id, ", ".join(sorted(changes)))
        return ProductResponse.model_validate(product)

    @staticmethod
    def delete_product(db: Session, product_id: int) -> DeletionResult:
        product = _get_product_or_404(db, product_id)
        removed = InteractionService.purge(db, Interaction.product_id == product.id)
        result = DeletionResult(id=product.id, name=product.name, removed_interactions=removed)
        db.delete(product)
        db.commit()

        PRODUCT_OPERATIONS.labels(operation="delete").inc()
        logger.info("product %s deleted with %d interactions", product_id, removed)
        return result
