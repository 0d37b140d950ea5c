from datetime import timedelta
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.tokens import utcnow
from app.models.customer import Customer
from app.models.interaction import Interaction, InteractionType
from app.models.product import Product
from app.schemas.dashboard import DashboardSummary, DashboardTotals, TopProduct
from app.schemas.interaction import InteractionResponse
from app.schemas.product import ProductSummary

TOP_PRODUCTS = 5
RECENT_INTERACTIONS = 10
ACTIVE_CUSTOMER_WINDOW = timedelta(days=30)


class DashboardService:

    @staticmethod
    def summary(db: Session) -> DashboardSummary:
        now = utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        active_customers = (
            db.query(func.count(func.distinct(Interaction.customer_id)))
            .filter(Interaction.customer_id.isnot(None), Interaction.created_at >= now - ACTIVE_CUSTOMER_WINDOW)
            .scalar()
        )
        monthly_purchases = (
            db.query(func.count(Interaction.id))
            .filter(Interaction.type == InteractionType.PURCHASE, Interaction.created_at >= month_start)
            .scalar()
        )
        totals = DashboardTotals(
            customers=db.query(func.count(Customer.id)).scalar(),
            products=db.query(func.count(Product.id)).scalar(),
            interactions=db.query(func.count(Interaction.id)).scalar(),
            active_customers=active_customers or 0,
            monthly_purchases=monthly_purchases or 0,
        )

        by_type = {t.value: 0 for t in InteractionType}
        for interaction_type, count in (
            db.query(Interaction.type, func.count(Interaction.id)).group_by(Interaction.type).all()
        ):
            by_type[interaction_type.value] = count

        interaction_count = func.count(Interaction.id).label("total")
        top_rows = (
            db.query(Product, interaction_count)
            .join(Interaction, Interaction.product_id == Product.id)
            .group_by(Product.id)
            .order_by(interaction_count.desc(), Product.id.asc())
            .limit(TOP_PRODUCTS)
            .all()
        )
        top_products = [
            TopProduct(product=ProductSummary.model_validate(product), total_interactions=total)
            for product, total in top_rows
        ]

        recent = (
            db.query(Interaction)
            .options(
                joinedload(Interaction.customer),
                joinedload(Interaction.admin),
                joinedload(Interaction.product),
            )
            .order_by(Interaction.created_at.desc(), Interaction.id.desc())
            .limit(RECENT_INTERACTIONS)
            .all()
        )

        return DashboardSummary(
            totals=totals,
            interactions_by_type=by_type,
            top_products=top_products,
            recent_interactions=[InteractionResponse.model_validate(i) for i in recent],
        )
