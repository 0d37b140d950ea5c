"""Activity reports over a fixed period.

Each period is split into buckets (calendar days for 7d, 5-day windows for
30d, calendar months otherwise) and counts products, customers and
interactions created in each one. For every period except ``all`` the
aggregate figures cover exactly the span of the buckets.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import bad_request
from app.core.tokens import utcnow
from app.models.customer import Customer
from app.models.interaction import Interaction, InteractionType
from app.models.product import Product
from app.schemas.dashboard import TopProduct
from app.schemas.product import ProductSummary
from app.schemas.report import ReportBucket, ReportStats, ReportSummary

logger = logging.getLogger(__name__)

REPORT_PERIODS = ("7d", "30d", "90d", "1y", "all")
DEFAULT_PERIOD = "30d"
MONTH_LABELS = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]
MONTHS_PER_PERIOD = {"90d": 3, "1y": 12, "all": 6}
WINDOW_DAYS = 5
WINDOWS_IN_30D = 6
TOP_REPORT_PRODUCTS = 10

Bucket = Tuple[str, datetime, datetime]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def month_start(now: datetime, months_back: int) -> datetime:
    year, month = divmod(now.year * 12 + now.month - 1 - months_back, 12)
    return datetime(year, month + 1, 1, tzinfo=timezone.utc)


def build_buckets(period: str, now: datetime) -> List[Bucket]:
    if period == "7d":
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        buckets = []
        for days_back in range(6, -1, -1):
            start = today - timedelta(days=days_back)
            buckets.append((start.strftime("%d/%m"), start, start + timedelta(days=1)))
        return buckets

    if period == "30d":
        buckets = []
        for windows_back in range(WINDOWS_IN_30D - 1, -1, -1):
            end = now - timedelta(days=WINDOW_DAYS * windows_back)
            start = end - timedelta(days=WINDOW_DAYS)
            buckets.append((f"{start.day}/{start.month}", start, end))
        return buckets

    months = MONTHS_PER_PERIOD[period]
    return [
        (MONTH_LABELS[month_start(now, back).month - 1], month_start(now, back), month_start(now, back - 1))
        for back in range(months - 1, -1, -1)
    ]


def _count_into(buckets: List[ReportBucket], timestamps, field: str) -> None:
    for created_at in timestamps:
        created_at = _as_utc(created_at)
        for bucket in buckets:
            if bucket.start <= created_at < bucket.end:
                setattr(bucket, field, getattr(bucket, field) + 1)
                break


class ReportService:

    @staticmethod
    def generate(db: Session, period: Optional[str] = None) -> ReportSummary:
        period = (period or DEFAULT_PERIOD).strip().lower()
        if period not in REPORT_PERIODS:
            raise bad_request("Período inválido. Use: " + ", ".join(REPORT_PERIODS))

        now = utcnow()
        raw_buckets = build_buckets(period, now)
        window_start = None if period == "all" else raw_buckets[0][1]

        def in_window(query, column):
            return query if window_start is None else query.filter(column >= window_start)

        products = in_window(
            db.query(Product.created_at, Product.category, Product.price), Product.created_at
        ).all()
        customers = in_window(
            db.query(Customer.created_at, Customer.email_verified), Customer.created_at
        ).all()
        interactions = in_window(
            db.query(Interaction.created_at, Interaction.type), Interaction.created_at
        ).all()

        timeline = [ReportBucket(label=label, start=start, end=end) for label, start, end in raw_buckets]
        _count_into(timeline, (row.created_at for row in products), "products")
        _count_into(timeline, (row.created_at for row in customers), "customers")
        _count_into(timeline, (row.created_at for row in interactions), "interactions")

        by_type = {t.value: 0 for t in InteractionType}
        for row in interactions:
            by_type[row.type.value] += 1

        interaction_count = func.count(Interaction.id).label("total")
        top_query = in_window(
            db.query(Product, interaction_count).join(Interaction, Interaction.product_id == Product.id),
            Interaction.created_at,
        )
        top_rows = (
            top_query.group_by(Product.id)
            .order_by(interaction_count.desc(), Product.id.asc())
            .limit(TOP_REPORT_PRODUCTS)
            .all()
        )
        top_products = [
            TopProduct(product=ProductSummary.model_validate(product), total_interactions=total)
            for product, total in top_rows
        ]

        verified = sum(1 for row in customers if row.email_verified)
        prices = [Decimal(row.price) for row in products]
        average_price = float(round(sum(prices) / len(prices), 2)) if prices else 0.0
        busiest = max(timeline, key=lambda b: b.interactions) if interactions else None

        stats = ReportStats(
            total_products=len(products),
            total_customers=len(customers),
            total_interactions=len(interactions),
            verified_customers=verified,
            unverified_customers=len(customers) - verified,
            categories=len({row.category for row in products if row.category}),
            average_price=average_price,
            most_popular_product=top_products[0].product.name if top_products else None,
            busiest_bucket=busiest.label if busiest and busiest.interactions else None,
        )

        logger.info(
            "report %s: %d products, %d customers, %d interactions",
            period, len(products), len(customers), len(interactions),
        )
        return ReportSummary(
            period=period,
            start=window_start,
            end=now,
            timeline=timeline,
            interactions_by_type=by_type,
            top_products=top_products,
            stats=stats,
        )
