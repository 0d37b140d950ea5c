import os

# o engine é criado na importação de app.core.database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"

from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import security
from app.core.database import Base, get_db
from app.core.rate_limit import limiter
from app.core.security import TOKEN_TYPE_ADMIN, TOKEN_TYPE_CUSTOMER, create_access_token, get_password_hash
from app.models import AccessLevel, AccountStatus, Admin, Customer, Interaction, InteractionType, Product
from main import app

DEFAULT_PASSWORD = "senha123"


@pytest.fixture(autouse=True)
def fast_bcrypt():
    real_setting = security.get_auth_setting

    def _setting(key, default):
        if key == "bcrypt_rounds":
            return 4
        return real_setting(key, default)

    with patch.object(security, "get_auth_setting", side_effect=_setting):
        yield


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        limiter.enabled = True
        app.dependency_overrides.clear()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def admin_token(admin: Admin) -> str:
    return create_access_token(admin.id, admin.email, admin.access_level.value, TOKEN_TYPE_ADMIN)


def customer_token(customer: Customer) -> str:
    return create_access_token(customer.id, customer.email, None, TOKEN_TYPE_CUSTOMER)


@pytest.fixture
def make_admin(db_session):
    def _make(
        email: str,
        level: AccessLevel = AccessLevel.EDITOR,
        status: AccountStatus = AccountStatus.ACTIVE,
        name: str = "Admin Teste",
        password: str = DEFAULT_PASSWORD,
    ) -> Admin:
        admin = Admin(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            access_level=level,
            status=status,
        )
        db_session.add(admin)
        db_session.commit()
        db_session.refresh(admin)
        return admin

    return _make


@pytest.fixture
def make_customer(db_session):
    def _make(
        email: str,
        verified: bool = True,
        name: str = "Cliente Teste",
        password: str = DEFAULT_PASSWORD,
    ) -> Customer:
        customer = Customer(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            email_verified=verified,
        )
        db_session.add(customer)
        db_session.commit()
        db_session.refresh(customer)
        return customer

    return _make


@pytest.fixture
def make_product(db_session):
    def _make(
        name: str = "Camiseta Básica",
        price: str = "49.90",
        stock: int = 10,
        category: str = "Camisetas",
        available: bool = True,
        description: str = "",
    ) -> Product:
        product = Product(
            name=name,
            description=description,
            price=Decimal(price),
            stock=stock,
            category=category,
            sizes=["P", "M"],
            colors=["Preto"],
            images=[],
            available=available,
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_interaction(db_session):
    def _make(
        product: Product,
        customer: Customer = None,
        interaction_type: InteractionType = InteractionType.LIKE,
        content: str = None,
        rating: int = None,
        admin: Admin = None,
        parent: Interaction = None,
    ) -> Interaction:
        interaction = Interaction(
            type=interaction_type,
            content=content,
            rating=rating,
            customer_id=customer.id if customer else None,
            admin_id=admin.id if admin else None,
            parent_id=parent.id if parent else None,
            product_id=product.id,
        )
        db_session.add(interaction)
        db_session.commit()
        db_session.refresh(interaction)
        return interaction

    return _make


@pytest.fixture
def superadmin(make_admin):
    return make_admin("super@loja.com", AccessLevel.SUPERADMIN, name="Super Admin")


@pytest.fixture
def admin_user(make_admin):
    return make_admin("admin@loja.com", AccessLevel.ADMIN, name="Admin Loja")


@pytest.fixture
def editor(make_admin):
    return make_admin("editor@loja.com", AccessLevel.EDITOR, name="Editor Loja")


@pytest.fixture
def superadmin_headers(superadmin):
    return auth_header(admin_token(superadmin))


@pytest.fixture
def admin_headers(admin_user):
    return auth_header(admin_token(admin_user))


@pytest.fixture
def editor_headers(editor):
    return auth_header(admin_token(editor))
