import logging
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from app.core.errors import bad_request, not_found
from app.core.metrics import INTERACTIONS_CREATED
from app.models.admin import Admin
from app.models.customer import Customer
from app.models.interaction import Interaction, InteractionType
from app.models.product import Product
from app.schemas.interaction import AdminReplyCreate, InteractionCreate, InteractionResponse

logger = logging.getLogger(__name__)


def _with_relations(query):
    return query.options(
        joinedload(Interaction.customer),
        joinedload(Interaction.admin),
        joinedload(Interaction.product),
    )


class InteractionService:

    @staticmethod
    def purge(db: Session, *criteria) -> int:
        """Delete the interactions matching `criteria` together with the admin
        replies that answer them. Does not commit."""
        ids = [row.id for row in db.query(Interaction.id).filter(*criteria).all()]
        if not ids:
            return 0

        removed = (
            db.query(Interaction)
            .filter(Interaction.parent_id.in_(ids), ~Interaction.id.in_(ids))
            .delete(synchronize_session=False)
        )
        removed += (
            db.query(Interaction)
            .filter(Interaction.id.in_(ids))
            .delete(synchronize_session=False)
        )
        return removed

    @staticmethod
    def list_interactions(db: Session, product_id: Optional[int] = None) -> List[InteractionResponse]:
        query = _with_relations(db.query(Interaction))
        if product_id is not None:
            query = query.filter(Interaction.product_id == product_id)
        interactions = query.order_by(Interaction.created_at.desc(), Interaction.id.desc()).all()
        return [InteractionResponse.model_validate(i) for i in interactions]

    @staticmethod
    def get_interaction(db: Session, interaction_id: int) -> InteractionResponse:
        interaction = _with_relations(db.query(Interaction)).filter(Interaction.id == interaction_id).first()
        if not interaction:
            raise not_found("Interação não encontrada")
        return InteractionResponse.model_validate(interaction)

    @staticmethod
    def create_interaction(db: Session, customer: Customer, data: InteractionCreate) -> InteractionResponse:
        product = db.query(Product).filter(Product.id == data.product_id).first()
        if not product:
            raise not_found("Produto não encontrado")

        interaction = Interaction(
            type=data.interaction_type,
            content=data.content,
            rating=data.rating,
            customer_id=customer.id,
            product_id=product.id,
        )
        db.add(interaction)
        db.commit()
        db.refresh(interaction)

        INTERACTIONS_CREATED.labels(type=interaction.type.value).inc()
        logger.info(
            "interaction %s (%s) by customer %s on product %s",
            interaction.id, interaction.type.value, customer.id, product.id,
        )
        return InteractionResponse.model_validate(interaction)

    @staticmethod
    def reply(db: Session, admin: Admin, data: AdminReplyCreate) -> InteractionResponse:
        parent = db.query(Interaction).filter(Interaction.id == data.interaction_id).first()
        if not parent:
            raise not_found("Interação não encontrada")
        if parent.type == InteractionType.ADMIN_REPLY:
            raise bad_request("Não é possível responder a uma resposta de administrador")

        reply = Interaction(
            type=InteractionType.ADMIN_REPLY,
            content=data.reply,
            admin_id=admin.id,
            parent_id=parent.id,
            product_id=parent.product_id,
        )
        db.add(reply)
        db.commit()
        db.refresh(reply)

        INTERACTIONS_CREATED.labels(type=InteractionType.ADMIN_REPLY.value).inc()
        logger.info("admin %s replied to interaction %s", admin.id, parent.id)
        return InteractionResponse.model_validate(reply)

    @staticmethod
    def delete_interaction(db: Session, interaction_id: int) -> int:
        exists = db.query(Interaction.id).filter(Interaction.id == interaction_id).first()
        if not exists:
            raise not_found("Interação não encontrada")

        removed = InteractionService.purge(db, Interaction.id == interaction_id)
        db.commit()
        logger.info("interaction %s deleted (%d rows)", interaction_id, removed)
        return removed
