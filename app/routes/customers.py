from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.errors import parse_id
from app.core.rate_limit import (
    limiter,
    get_login_rate_limit,
    get_password_reset_rate_limit,
    get_register_rate_limit,
)
from app.dependencies import require_level
from app.models.admin import AccessLevel, Admin
from app.schemas.common import ApiResponse, DeletionResult, MessageResponse
from app.schemas.customer import (
    ConfirmEmailRequest,
    CustomerDetail,
    CustomerListResponse,
    CustomerLoginData,
    CustomerLoginRequest,
    CustomerRegister,
    CustomerRegistered,
    CustomerResponse,
    CustomerUpdate,
    EmailRequest,
    PasswordResetRequest,
)
from app.services.customer_service import CustomerQuery, CustomerService

router = APIRouter()


@router.post("/cadastro", response_model=ApiResponse[CustomerRegistered], status_code=status.HTTP_201_CREATED)
@limiter.limit(get_register_rate_limit())
async def register(
    request: Request,
    customer_data: CustomerRegister,
    db: Session = Depends(get_db),
):
    customer = CustomerService.register(db, customer_data)
    return ApiResponse[CustomerRegistered](
        message="Cadastro realizado com sucesso! Verifique seu email para confirmar a conta.",
        data=customer,
    )


@router.post("/login", response_model=ApiResponse[CustomerLoginData])
@limiter.limit(get_login_rate_limit())
async def login(
    request: Request,
    credentials: CustomerLoginRequest,
    db: Session = Depends(get_db),
):
    data = CustomerService.login(db, credentials)
    return ApiResponse[CustomerLoginData](message="Login realizado com sucesso", data=data)


@router.post("/confirmar-email", response_model=MessageResponse)
async def confirm_email(body: ConfirmEmailRequest, db: Session = Depends(get_db)):
    CustomerService.confirm_email(db, body.token)
    return MessageResponse(message="Email confirmado com sucesso! Você já pode fazer login.")


@router.post("/reenviar-confirmacao", response_model=MessageResponse)
@limiter.limit(get_password_reset_rate_limit())
async def resend_confirmation(
    request: Request,
    body: EmailRequest,
    db: Session = Depends(get_db),
):
    CustomerService.resend_confirmation(db, body.email)
    return MessageResponse(message="Novo email de confirmação enviado")


@router.post("/recuperar-senha", response_model=MessageResponse)
@limiter.limit(get_password_reset_rate_limit())
async def request_password_reset(
    request: Request,
    body: EmailRequest,
    db: Session = Depends(get_db),
):
    CustomerService.request_password_reset(db, body.email)
    return MessageResponse(message="Se o email estiver cadastrado, você receberá um código de recuperação")


@router.post("/redefinir-senha", response_model=MessageResponse)
@limiter.limit(get_password_reset_rate_limit())
async def reset_password(
    request: Request,
    body: PasswordResetRequest,
    db: Session = Depends(get_db),
):
    CustomerService.reset_password(db, body.code, body.new_password)
    return MessageResponse(message="Senha redefinida com sucesso")


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    page: int = Query(1),
    limit: int = Query(10),
    search: Optional[str] = Query(None),
    current_admin: Admin = Depends(require_level(AccessLevel.EDITOR)),
    db: Session = Depends(get_db),
):
    return CustomerService.list_customers(db, CustomerQuery(page=page, limit=limit, search=search))


@router.get("/{customer_id}", response_model=ApiResponse[CustomerDetail])
async def get_customer(
    customer_id: str,
    current_admin: Admin = Depends(require_level(AccessLevel.EDITOR)),
    db: Session = Depends(get_db),
):
    customer = CustomerService.get_customer(db, parse_id(customer_id, "ID do cliente"))
    return ApiResponse[CustomerDetail](data=customer)


@router.put("/{customer_id}", response_model=ApiResponse[CustomerResponse])
async def update_customer(
    customer_id: str,
    customer_data: CustomerUpdate,
    current_admin: Admin = Depends(require_level(AccessLevel.ADMIN)),
    db: Session = Depends(get_db),
):
    customer = CustomerService.update_customer(db, parse_id(customer_id, "ID do cliente"), customer_data)
    return ApiResponse[CustomerResponse](message="Cliente atualizado com sucesso", data=customer)


@router.delete("/{customer_id}", response_model=ApiResponse[DeletionResult])
async def delete_customer(
    customer_id: str,
    current_admin: Admin = Depends(require_level(AccessLevel.ADMIN)),
    db: Session = Depends(get_db),
):
    result = CustomerService.delete_customer(db, parse_id(customer_id, "ID do cliente"))
    return ApiResponse[DeletionResult](message="Cliente excluído com sucesso", data=result)
