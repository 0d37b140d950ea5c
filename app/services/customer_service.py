import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.auth_config import get_auth_setting
from app.core.errors import ApiError, bad_request, conflict, forbidden, not_found, unauthorized
from app.core.metrics import (
    CUSTOMER_OPERATIONS,
    CUSTOMER_REGISTRATIONS,
    EMAIL_CONFIRMATIONS,
    LOGIN_ATTEMPTS,
    PASSWORD_RESETS,
)
from app.core.security import TOKEN_TYPE_CUSTOMER, create_access_token, get_password_hash, verify_password
from app.core.tokens import (
    generate_confirmation_token,
    generate_reset_code,
    get_token_expiration,
    is_token_expired,
)
from app.models.customer import Customer
from app.models.interaction import Interaction
from app.schemas.common import DeletionResult, Pagination
from app.schemas.customer import (
    CustomerDetail,
    CustomerListItem,
    CustomerListResponse,
    CustomerLoginData,
    CustomerLoginRequest,
    CustomerRegister,
    CustomerRegistered,
    CustomerResponse,
    CustomerUpdate,
)
from app.services.interaction_service import InteractionService

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50
RESET_CODE_ATTEMPTS = 20


@dataclass
class CustomerQuery:
    """Admin-side customer listing parameters."""
    page: int = 1
    limit: int = 10
    search: Optional[str] = None

    def __post_init__(self):
        self.page = max(1, self.page)
        self.limit = min(MAX_PAGE_SIZE, max(1, self.limit))
        self.search = (self.search or "").strip() or None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _get_customer_or_404(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise not_found("Cliente não encontrado")
    return customer


def _issue_confirmation_token(customer: Customer) -> None:
    customer.email_token = generate_confirmation_token()
    customer.email_token_expires_at = get_token_expiration(
        get_auth_setting("email_confirmation_expire_hours", 24)
    )


class CustomerService:

    @staticmethod
    def register(db: Session, data: CustomerRegister) -> CustomerRegistered:
        if db.query(Customer.id).filter(Customer.email == data.email).first():
            CUSTOMER_REGISTRATIONS.labels(result="duplicate").inc()
            raise conflict("Email já cadastrado", code="EMAIL_IN_USE")

        customer = Customer(
            name=data.name,
            email=data.email,
            password_hash=get_password_hash(data.password),
            phone=data.phone,
            address=data.address,
            email_verified=False,
        )
        _issue_confirmation_token(customer)
        db.add(customer)
        db.commit()
        db.refresh(customer)

        CUSTOMER_REGISTRATIONS.labels(result="success").inc()
        # o envio do email fica fora do serviço; só registramos a emissão
        logger.info("customer %s registered, confirmation token issued", customer.id)
        return CustomerRegistered.model_validate(customer)

    @staticmethod
    def login(db: Session, credentials: CustomerLoginRequest) -> CustomerLoginData:
        customer = db.query(Customer).filter(Customer.email == credentials.email).first()

        if not customer or not verify_password(credentials.password, customer.password_hash):
            LOGIN_ATTEMPTS.labels(actor="customer", result="failure", failure_reason="invalid_credentials").inc()
            raise unauthorized("Email ou senha incorretos", code="INVALID_CREDENTIALS")

        if not customer.email_verified:
            LOGIN_ATTEMPTS.labels(actor="customer", result="failure", failure_reason="unverified").inc()
            raise forbidden(
                "Email não confirmado. Verifique sua caixa de entrada.",
                code="EMAIL_NOT_CONFIRMED",
                needsEmailConfirmation=True,
            )

        token = create_access_token(customer.id, customer.email, None, TOKEN_TYPE_CUSTOMER)
        LOGIN_ATTEMPTS.labels(actor="customer", result="success", failure_reason="none").inc()
        return CustomerLoginData(customer=CustomerResponse.model_validate(customer), token=token)

    @staticmethod
    def confirm_email(db: Session, token: str) -> None:
        customer = db.query(Customer).filter(Customer.email_token == token).first()
        if not customer:
            EMAIL_CONFIRMATIONS.labels(result="invalid").inc()
            raise bad_request("Token inválido ou já utilizado", code="INVALID_TOKEN")

        if customer.email_verified:
            EMAIL_CONFIRMATIONS.labels(result="already_verified").inc()
            raise bad_request("Email já foi confirmado", code="ALREADY_VERIFIED")

        if is_token_expired(customer.email_token_expires_at):
            # o token continua gravado; o cliente pede um novo via reenvio
            EMAIL_CONFIRMATIONS.labels(result="expired").inc()
            raise bad_request("Token expirado. Solicite um novo email de confirmação.", code="TOKEN_EXPIRED")

        customer.email_verified = True
        customer.email_token = None
        customer.email_token_expires_at = None
        db.commit()

        EMAIL_CONFIRMATIONS.labels(result="success").inc()
        logger.info("customer %s confirmed email", customer.id)

    @staticmethod
    def resend_confirmation(db: Session, email: str) -> None:
        customer = db.query(Customer).filter(Customer.email == email).first()
        if not customer:
            raise not_found("Cliente não encontrado")
        if customer.email_verified:
            raise bad_request("Email já foi confirmado", code="ALREADY_VERIFIED")

        _issue_confirmation_token(customer)
        db.commit()
        logger.info("customer %s confirmation token reissued", customer.id)

    @staticmethod
    def request_password_reset(db: Session, email: str) -> None:
        customer = db.query(Customer).filter(Customer.email == email).first()
        if not customer:
            # mesma resposta para emails desconhecidos
            PASSWORD_RESETS.labels(stage="request", result="unknown_email").inc()
            return

        for _ in range(RESET_CODE_ATTEMPTS):
            code = generate_reset_code()
            if not db.query(Customer.id).filter(Customer.reset_token == code).first():
                break
        else:
            raise ApiError(503, "Não foi possível gerar o código. Tente novamente.", code="CODE_UNAVAILABLE")

        customer.reset_token = code
        customer.reset_token_expires_at = get_token_expiration(
            get_auth_setting("password_reset_expire_hours", 1)
        )
        db.commit()

        PASSWORD_RESETS.labels(stage="request", result="success").inc()
        logger.info("customer %s password reset code issued", customer.id)

    @staticmethod
    def reset_password(db: Session, code: str, new_password: str) -> None:
        customer = db.query(Customer).filter(Customer.reset_token == code.strip()).first()
        if not customer:
            PASSWORD_RESETS.labels(stage="reset", result="invalid").inc()
            raise bad_request("Código inválido ou já utilizado", code="INVALID_CODE")

        if is_token_expired(customer.reset_token_expires_at):
            PASSWORD_RESETS.labels(stage="reset", result="expired").inc()
            raise bad_request("Código expirado. Solicite um novo código.", code="CODE_EXPIRED")

        customer.password_hash = get_password_hash(new_password)
        customer.reset_token = None
        customer.reset_token_expires_at = None
        db.commit()

        PASSWORD_RESETS.labels(stage="reset", result="success").inc()
        logger.info("customer %s password reset", customer.id)

    @staticmethod
    def list_customers(db: Session, params: CustomerQuery) -> CustomerListResponse:
        query = db.query(Customer)
        if params.search:
            pattern = f"%{params.search}%"
            query = query.filter(or_(Customer.name.ilike(pattern), Customer.email.ilike(pattern)))

        total = query.count()
        customers = (
            query.order_by(Customer.created_at.desc(), Customer.id.desc())
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )

        counts = {}
        if customers:
            counts = dict(
                db.query(Interaction.customer_id, func.count(Interaction.id))
                .filter(Interaction.customer_id.in_([c.id for c in customers]))
                .group_by(Interaction.customer_id)
                .all()
            )

        items = []
        for customer in customers:
            item = CustomerListItem.model_validate(customer)
            item.total_interactions = counts.get(customer.id, 0)
            items.append(item)

        return CustomerListResponse(
            data=items,
            pagination=Pagination.build(params.page, params.limit, total),
        )

    @staticmethod
    def get_customer(db: Session, customer_id: int) -> CustomerDetail:
        return CustomerDetail.model_validate(_get_customer_or_404(db, customer_id))

    @staticmethod
    def update_customer(db: Session, customer_id: int, data: CustomerUpdate) -> CustomerResponse:
        customer = _get_customer_or_404(db, customer_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise bad_request("Nenhum campo para atualizar")

        email = changes.pop("email", None)
        if email and email != customer.email:
            taken = db.query(Customer.id).filter(Customer.email == email, Customer.id != customer.id).first()
            if taken:
                raise conflict("Email já está em uso", code="EMAIL_IN_USE")
            customer.email = email

        name = changes.pop("name", None)
        if name:
            customer.name = name
        # telefone e endereço aceitam null para limpar o campo
        for field, value in changes.items():
            setattr(customer, field, value)

        db.commit()
        db.refresh(customer)

        CUSTOMER_OPERATIONS.labels(operation="update").inc()
        logger.info("customer %s updated", customer.id)
        return CustomerResponse.model_validate(customer)

    @staticmethod
    def delete_customer(db: Session, customer_id: int) -> DeletionResult:
        customer = _get_customer_or_404(db, customer_id)
        removed = InteractionService.purge(db, Interaction.customer_id == customer.id)
        result = DeletionResult(id=customer.id, name=customer.name, removed_interactions=removed)
        db.delete(customer)
        db.commit()

        CUSTOMER_OPERATIONS.labels(operation="delete").inc()
        logger.info("customer %s deleted with %d interactions", customer_id, removed)
        return result
