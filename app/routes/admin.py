from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.database import get_db
from app.core.errors import bad_request, parse_id
from app.core.rate_limit import limiter, get_login_rate_limit, get_password_reset_rate_limit
from app.dependencies import get_current_admin, require_level
from app.models.admin import AccessLevel, Admin
from app.schemas.admin import (
    AccountActivatedResponse,
    AccountActivationRequest,
    AdminCreate,
    AdminInvite,
    AdminInvited,
    AdminLoginRequest,
    AdminLoginResponse,
    AdminMeResponse,
    AdminResponse,
    AdminStatusUpdate,
    AdminUpdate,
    PendingAccountResponse,
)
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.dashboard import DashboardSummary
from app.schemas.report import ReportSummary
from app.services.admin_service import AdminService
from app.services.dashboard_service import DashboardService
from app.services.report_service import ReportService

router = APIRouter()

# rotas fixas antes de /{admin_id}


@router.post("/auth/login", response_model=AdminLoginResponse)
@limiter.limit(get_login_rate_limit())
async def login(
    request: Request,
    credentials: AdminLoginRequest,
    db: Session = Depends(get_db),
):
    return AdminService.login(db, credentials)


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    AdminService.logout(db, current_admin)
    return MessageResponse(message="Logout realizado com sucesso")


@router.get("/me", response_model=AdminMeResponse)
async def me(current_admin: Admin = Depends(get_current_admin)):
    return AdminMeResponse(admin=AdminResponse.model_validate(current_admin))


@router.get("/dashboard", response_model=ApiResponse[DashboardSummary])
async def dashboard(
    current_admin: Admin = Depends(require_level(AccessLevel.EDITOR)),
    db: Session = Depends(get_db),
):
    return ApiResponse[DashboardSummary](data=DashboardService.summary(db))


@router.get("/relatorios", response_model=ApiResponse[ReportSummary])
async def reports(
    periodo: Optional[str] = Query(None),
    current_admin: Admin = Depends(require_level(AccessLevel.EDITOR)),
    db: Session = Depends(get_db),
):
    return ApiResponse[ReportSummary](data=ReportService.generate(db, periodo))


@router.post("/convites", response_model=ApiResponse[AdminInvited], status_code=status.HTTP_201_CREATED)
async def invite_admin(
    invite_data: AdminInvite,
    current_admin: Admin = Depends(require_level(AccessLevel.SUPERADMIN)),
    db: Session = Depends(get_db),
):
    admin = AdminService.invite_admin(db, invite_data)
    return ApiResponse[AdminInvited](
        message="Administrador convidado. O convite deve ser confirmado para ativar a conta.",
        data=admin,
    )


@router.get("/confirmar-conta", response_model=PendingAccountResponse)
@limiter.limit(get_password_reset_rate_limit())
async def check_invitation(
    request: Request,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    if not token:
        raise bad_request("Token não fornecido")
    admin = AdminService.check_invitation(db, token)
    return PendingAccountResponse(
        admin=AdminResponse.model_validate(admin),
        expires_at=admin.confirmation_token_expires_at,
    )


@router.post("/confirmar-conta", response_model=AccountActivatedResponse)
@limiter.limit(get_password_reset_rate_limit())
async def activate_account(
    request: Request,
    body: AccountActivationRequest,
    db: Session = Depends(get_db),
):
    return AccountActivatedResponse(admin=AdminService.activate_account(db, body))


@router.get("", response_model=ApiResponse[List[AdminResponse]])
async def list_admins(
    current_admin: Admin = Depends(require_level(AccessLevel.ADMIN)),
    db: Session = Depends(get_db),
):
    return ApiResponse[List[AdminResponse]](data=AdminService.list_admins(db))


@router.post("", response_model=ApiResponse[AdminResponse], status_code=status.HTTP_201_CREATED)
async def create_admin(
    admin_data: AdminCreate,
    current_admin: Admin = Depends(require_level(AccessLevel.SUPERADMIN)),
    db: Session = Depends(get_db),
):
    admin = AdminService.create_admin(db, admin_data)
    return ApiResponse[AdminResponse](message="Administrador criado com sucesso", data=admin)


@router.get("/{admin_id}", response_model=ApiResponse[AdminResponse])
async def get_admin(
    admin_id: str,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    admin = AdminService.get_admin(db, current_admin, parse_id(admin_id))
    return ApiResponse[AdminResponse](data=admin)


@router.put("/{admin_id}", response_model=ApiResponse[AdminResponse])
async def update_admin(
    admin_id: str,
    admin_data: AdminUpdate,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    admin = AdminService.update_admin(db, current_admin, parse_id(admin_id), admin_data)
    return ApiResponse[AdminResponse](message="Administrador atualizado com sucesso", data=admin)


@router.delete("/{admin_id}", response_model=MessageResponse)
async def delete_admin(
    admin_id: str,
    current_admin: Admin = Depends(require_level(AccessLevel.SUPERADMIN)),
    db: Session = Depends(get_db),
):
    AdminService.delete_admin(db, current_admin, parse_id(admin_id))
    return MessageResponse(message="Administrador excluído com sucesso")


@router.patch("/{admin_id}/status", response_model=ApiResponse[AdminResponse])
async def update_admin_status(
    admin_id: str,
    status_data: AdminStatusUpdate,
    current_admin: Admin = Depends(require_level(AccessLevel.SUPERADMIN)),
    db: Session = Depends(get_db),
):
    admin = AdminService.set_status(db, current_admin, parse_id(admin_id), status_data.status)
    return ApiResponse[AdminResponse](message=f"Status atualizado para {admin.status.value}", data=admin)
