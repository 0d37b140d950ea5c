from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime
from app.schemas.dashboard import TopProduct


class ReportBucket(BaseModel):
    label: str = Field(alias="rotulo")
    start: datetime = Field(alias="inicio")
    end: datetime = Field(alias="fim")
    products: int = Field(0, alias="produtos")
    customers: int = Field(0, alias="clientes")
    interactions: int = Field(0, alias="interacoes")

    model_config = {"populate_by_name": True}


class ReportStats(BaseModel):
    total_products: int = Field(alias="totalProdutos")
    total_customers: int = Field(alias="totalClientes")
    total_interactions: int = Field(alias="totalInteracoes")
    verified_customers: int = Field(alias="clientesVerificados")
    unverified_customers: int = Field(alias="clientesNaoVerificados")
    categories: int = Field(alias="categorias")
    average_price: float = Field(alias="ticketMedio")
    most_popular_product: Optional[str] = Field(None, alias="produtoMaisPopular")
    busiest_bucket: Optional[str] = Field(None, alias="periodoMaisAtivo")

    model_config = {"populate_by_name": True}


class ReportSummary(BaseModel):
    period: str = Field(alias="periodo")
    start: Optional[datetime] = Field(None, alias="dataInicio")  # None para "all"
    end: datetime = Field(alias="dataFim")
    timeline: List[ReportBucket] = Field(alias="evolucao")
    interactions_by_type: Dict[str, int] = Field(alias="interacoesPorTipo")
    top_products: List[TopProduct] = Field(alias="produtosMaisInteragidos")
    stats: ReportStats = Field(alias="estatisticas")

    model_config = {"populate_by_name": True}
