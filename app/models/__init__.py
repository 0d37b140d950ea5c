from app.models.admin import Admin, AccessLevel, AccountStatus
from app.models.customer import Customer
from app.models.product import Product
from app.models.interaction import Interaction, InteractionType

__all__ = [
    "Admin",
    "AccessLevel",
    "AccountStatus",
    "Customer",
    "Product",
    "Interaction",
    "InteractionType",
]
