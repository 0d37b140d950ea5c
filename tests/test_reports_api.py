from datetime import timedelta

import pytest

from app.core.tokens import utcnow
from app.models import InteractionType
from app.services.report_service import MONTH_LABELS, build_buckets, month_start


def _backdate(db_session, record, days):
    record.created_at = utcnow() - timedelta(days=days)
    db_session.commit()
    return record


# ── Janelas de cada período ───────────────────────────────────────────────

class TestBuckets:

    def test_seven_calendar_days(self):
        now = utcnow()
        buckets = build_buckets("7d", now)
        assert len(buckets) == 7
        assert buckets[-1][0] == now.strftime("%d/%m")
        assert buckets[-1][1] <= now < buckets[-1][2]
        assert buckets[0][1] == buckets[-1][1] - timedelta(days=6)

    def test_thirty_days_in_five_day_windows(self):
        now = utcnow()
        buckets = build_buckets("30d", now)
        assert len(buckets) == 6
        assert buckets[-1][2] == now
        assert buckets[0][1] == now - timedelta(days=30)
        for (_, _, end), (_, start, _) in zip(buckets, buckets[1:]):
            assert end == start

    @pytest.mark.parametrize("period,months", [("90d", 3), ("1y", 12), ("all", 6)])
    def test_monthly_periods(self, period, months):
        now = utcnow()
        buckets = build_buckets(period, now)
        assert len(buckets) == months
        assert buckets[-1][0] == MONTH_LABELS[now.month - 1]
        assert buckets[-1][1] == month_start(now, 0)
        assert buckets[0][1] == month_start(now, months - 1)

    def test_month_start_crosses_year(self):
        from datetime import datetime, timezone
        jan = datetime(2026, 1, 15, tzinfo=timezone.utc)
        assert month_start(jan, 1) == datetime(2025, 12, 1, tzinfo=timezone.utc)
        assert month_start(jan, -1) == datetime(2026, 2, 1, tzinfo=timezone.utc)


# ── Endpoint de relatórios ────────────────────────────────────────────────

class TestReportsEndpoint:

    def _get(self, client, headers, period=None):
        url = "/api/admin/relatorios" + (f"?periodo={period}" if period else "")
        response = client.get(url, headers=headers)
        assert response.status_code == 200, response.json()
        return response.json()["data"]

    def test_default_period_is_30d(self, client, editor_headers):
        data = self._get(client, editor_headers)
        assert data["periodo"] == "30d"
        assert len(data["evolucao"]) == 6

    def test_seven_days(self, client, editor_headers, make_product, db_session):
        make_product("Hoje")
        _backdate(db_session, make_product("Tres dias"), 3)
        _backdate(db_session, make_product("Antigo"), 10)

        data = self._get(client, editor_headers, "7d")
        assert len(data["evolucao"]) == 7
        assert data["estatisticas"]["totalProdutos"] == 2
        assert sum(b["produtos"] for b in data["evolucao"]) == 2
        assert data["evolucao"][-1]["produtos"] == 1

    def test_thirty_days(self, client, editor_headers, make_product, make_customer, db_session):
        _backdate(db_session, make_product("Recente"), 2)
        _backdate(db_session, make_product("Doze dias"), 12)
        _backdate(db_session, make_product("Antigo"), 40)
        _backdate(db_session, make_customer("ana@x.com"), 12)

        data = self._get(client, editor_headers, "30d")
        timeline = data["evolucao"]
        assert [b["produtos"] for b in timeline] == [0, 0, 0, 1, 0, 1]
        assert [b["clientes"] for b in timeline] == [0, 0, 0, 1, 0, 0]
        assert data["estatisticas"]["totalProdutos"] == 2

    def test_ninety_days(self, client, editor_headers, make_product, db_session):
        make_product("Este mes")
        _backdate(db_session, make_product("Muito antigo"), 100)

        data = self._get(client, editor_headers, "90d")
        assert len(data["evolucao"]) == 3
        assert data["evolucao"][-1]["rotulo"] == MONTH_LABELS[utcnow().month - 1]
        assert data["evolucao"][-1]["produtos"] == 1
        assert data["estatisticas"]["totalProdutos"] == 1

    def test_one_year(self, client, editor_headers, make_product, db_session):
        _backdate(db_session, make_product("Semestre"), 200)
        _backdate(db_session, make_product("Ano passado"), 400)

        data = self._get(client, editor_headers, "1y")
        assert len(data["evolucao"]) == 12
        assert data["estatisticas"]["totalProdutos"] == 1
        assert sum(b["produtos"] for b in data["evolucao"]) == 1

    def test_all_counts_everything(self, client, editor_headers, make_product, db_session):
        make_product("Novo")
        _backdate(db_session, make_product("Ano passado"), 400)

        data = self._get(client, editor_headers, "all")
        assert data["dataInicio"] is None
        assert len(data["evolucao"]) == 6
        assert data["estatisticas"]["totalProdutos"] == 2
        # a série mostra só os últimos 6 meses
        assert sum(b["produtos"] for b in data["evolucao"]) == 1

    def test_statistics(
        self, client, editor_headers, make_product, make_customer, make_interaction
    ):
        camiseta = make_product("Camiseta", price="50.00", category="Camisetas")
        calca = make_product("Calça", price="100.00", category="Calças")
        ana = make_customer("ana@x.com", verified=True)
        make_customer("bruno@x.com", verified=False)
        make_interaction(camiseta, ana, InteractionType.LIKE)
        make_interaction(camiseta, ana, InteractionType.PURCHASE)
        make_interaction(calca, ana, InteractionType.VIEW)

        data = self._get(client, editor_headers, "7d")
        stats = data["estatisticas"]
        assert stats["totalInteracoes"] == 3
        assert stats["clientesVerificados"] == 1
        assert stats["clientesNaoVerificados"] == 1
        assert stats["categorias"] == 2
        assert stats["ticketMedio"] == 75.0
        assert stats["produtoMaisPopular"] == "Camiseta"
        assert stats["periodoMaisAtivo"] == data["evolucao"][-1]["rotulo"]
        assert data["interacoesPorTipo"]["COMPRA"] == 1
        assert data["interacoesPorTipo"]["COMENTARIO"] == 0
        assert data["produtosMaisInteragidos"][0]["totalInteracoes"] == 2

    def test_empty_period(self, client, editor_headers):
        stats = self._get(client, editor_headers, "90d")["estatisticas"]
        assert stats["totalProdutos"] == 0
        assert stats["ticketMedio"] == 0.0
        assert stats["produtoMaisPopular"] is None
        assert stats["periodoMaisAtivo"] is None

    def test_invalid_period(self, client, editor_headers):
        response = client.get("/api/admin/relatorios?periodo=2w", headers=editor_headers)
        assert response.status_code == 400
        assert "Período inválido" in response.json()["error"]

    def test_requires_admin_token(self, client):
        assert client.get("/api/admin/relatorios").status_code == 401
