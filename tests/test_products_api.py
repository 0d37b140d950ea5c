from decimal import Decimal

from app.models import Interaction, InteractionType, Product
from app.models.product import PLACEHOLDER_IMAGE


# ── Catálogo público ──────────────────────────────────────────────────────

class TestProductListing:

    def test_only_available_products(self, client, make_product):
        make_product("Camiseta")
        make_product("Jaqueta", available=False)
        response = client.get("/api/produtos")
        assert response.status_code == 200
        names = [p["nome"] for p in response.json()["data"]]
        assert names == ["Camiseta"]

    def test_pagination(self, client, make_product):
        for i in range(5):
            make_product(f"Produto {i}")
        response = client.get("/api/produtos?page=2&limit=2")
        pagination = response.json()["pagination"]
        assert pagination == {
            "page": 2,
            "limit": 2,
            "total": 5,
            "totalPages": 3,
            "hasNext": True,
            "hasPrev": True,
        }
        assert len(response.json()["data"]) == 2

    def test_sort_by_price(self, client, make_product):
        make_product("Cara", price="199.90")
        make_product("Barata", price="19.90")
        make_product("Media", price="79.90")
        response = client.get("/api/produtos?sortBy=preco&order=asc")
        prices = [p["preco"] for p in response.json()["data"]]
        assert prices == [19.9, 79.9, 199.9]

    def test_unknown_sort_falls_back(self, client, make_product):
        make_product("Camiseta")
        response = client.get("/api/produtos?sortBy=senha&order=lado")
        assert response.status_code == 200

    def test_category_filter_case_insensitive(self, client, make_product):
        make_product("Camiseta", category="Camisetas")
        make_product("Calça", category="Calças")
        response = client.get("/api/produtos?categoria=camisetas")
        assert [p["nome"] for p in response.json()["data"]] == ["Camiseta"]

        everything = client.get("/api/produtos?categoria=todas")
        assert everything.json()["pagination"]["total"] == 2

    def test_search(self, client, make_product):
        make_product("Camiseta Azul", description="algodão")
        make_product("Bermuda", description="jeans azul")
        make_product("Boné")
        response = client.get("/api/produtos?busca=azul")
        assert response.json()["pagination"]["total"] == 2

    def test_invalid_page_param(self, client):
        response = client.get("/api/produtos?page=abc")
        assert response.status_code == 400


class TestProductDetail:

    def test_detail(self, client, make_product, make_customer, make_interaction):
        product = make_product("Jaqueta", price="1234.50")
        ana = make_customer("ana@x.com")
        make_interaction(product, ana, InteractionType.VIEW)

        response = client.get(f"/api/produtos/{product.id}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["preco"] == 1234.5
        assert data["precoFormatado"] == "R$ 1.234,50"
        assert data["totalInteracoes"] == 1
        assert data["tamanhos"] == ["P", "M"]

    def test_invalid_id(self, client):
        response = client.get("/api/produtos/0")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    def test_missing(self, client):
        assert client.get("/api/produtos/999").status_code == 404


# ── Gestão de produtos ────────────────────────────────────────────────────

class TestProductAdmin:

    def test_create(self, client, admin_headers):
        payload = {"nome": "Moletom", "preco": 149.9, "estoque": 5, "tamanhos": ["M", "G"]}
        response = client.post("/api/produtos", json=payload, headers=admin_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["categoria"] == "Geral"
        assert data["imagemUrl"] == PLACEHOLDER_IMAGE
        assert data["disponivel"] is True
        assert data["preco"] == 149.9

    def test_create_requires_admin(self, client, editor_headers):
        payload = {"nome": "Moletom", "preco": 149.9, "estoque": 5}
        assert client.post("/api/produtos", json=payload, headers=editor_headers).status_code == 403

    def test_create_validation(self, client, admin_headers):
        for payload in [
            {"nome": "Moletom", "preco": 0, "estoque": 5},
            {"nome": "Moletom", "preco": -10, "estoque": 5},
            {"nome": "Moletom", "preco": 10, "estoque": -1},
            {"nome": "   ", "preco": 10, "estoque": 1},
            {"preco": 10, "estoque": 1},
            {"nome": "Moletom", "preco": 0.001, "estoque": 1},
            {"nome": "Moletom", "preco": 100000000, "estoque": 1},
        ]:
            response = client.post("/api/produtos", json=payload, headers=admin_headers)
            assert response.status_code == 400, payload

    def test_price_rounded_to_cents(self, client, admin_headers, db_session):
        payload = {"nome": "Meia", "preco": "19.999", "estoque": 3}
        response = client.post("/api/produtos", json=payload, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["data"]["preco"] == 20.0
        assert db_session.query(Product).one().price == Decimal("20.00")

    def test_price_upper_bound(self, client, admin_headers):
        payload = {"nome": "Meia", "preco": 99999999.99, "estoque": 3}
        assert client.post("/api/produtos", json=payload, headers=admin_headers).status_code == 201

    def test_duplicate_name_case_insensitive(self, client, make_product, admin_headers, db_session):
        make_product("Moletom")
        response = client.post("/api/produtos", json={"nome": "MOLETOM", "preco": 10}, headers=admin_headers)
        assert response.status_code == 409
        assert db_session.query(Product).count() == 1

    def test_editor_updates(self, client, make_product, editor_headers):
        product = make_product("Moletom", stock=5)
        response = client.put(
            f"/api/produtos/{product.id}",
            json={"estoque": 0, "disponivel": False},
            headers=editor_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["estoque"] == 0
        assert data["disponivel"] is False

    def test_update_empty_body(self, client, make_product, editor_headers):
        product = make_product()
        response = client.put(f"/api/produtos/{product.id}", json={}, headers=editor_headers)
        assert response.status_code == 400

    def test_update_requires_token(self, client, make_product):
        product = make_product()
        assert client.put(f"/api/produtos/{product.id}", json={"estoque": 1}).status_code == 401

    def test_delete_cascades(self, client, make_product, make_customer, make_interaction, admin_headers, db_session):
        product = make_product()
        other = make_product("Outro")
        ana = make_customer("ana@x.com")
        make_interaction(product, ana, InteractionType.LIKE)
        make_interaction(product, ana, InteractionType.COMMENT, content="Legal")
        make_interaction(other, ana, InteractionType.LIKE)

        response = client.delete(f"/api/produtos/{product.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["interacoesRemovidas"] == 2
        assert db_session.query(Product).count() == 1
        assert db_session.query(Interaction).count() == 1

    def test_delete_requires_admin(self, client, make_product, editor_headers):
        product = make_product()
        assert client.delete(f"/api/produtos/{product.id}", headers=editor_headers).status_code == 403
