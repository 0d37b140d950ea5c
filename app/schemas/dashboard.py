from pydantic import BaseModel, Field
from typing import Dict, List
from app.schemas.interaction import InteractionResponse
from app.schemas.product import ProductSummary


class DashboardTotals(BaseModel):
    customers: int = Field(alias="clientes")
    products: int = Field(alias="produtos")
    interactions: int = Field(alias="interacoes")
    active_customers: int = Field(alias="clientesAtivos")  # interagiram nos últimos 30 dias
    monthly_purchases: int = Field(alias="comprasMes")

    model_config = {"populate_by_name": True}


class TopProduct(BaseModel):
    product: ProductSummary = Field(alias="produto")
    total_interactions: int = Field(alias="totalInteracoes")

    model_config = {"populate_by_name": True}


class DashboardSummary(BaseModel):
    totals: DashboardTotals = Field(alias="totais")
    interactions_by_type: Dict[str, int] = Field(alias="interacoesPorTipo")
    top_products: List[TopProduct] = Field(alias="produtosMaisInteragidos")
    recent_interactions: List[InteractionResponse] = Field(alias="interacoesRecentes")

    model_config = {"populate_by_name": True}
