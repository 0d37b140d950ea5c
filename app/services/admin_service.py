import logging
from typing import List
from sqlalchemy.orm import Session

from app.core.auth_config import get_auth_setting
from app.core.config import settings
from app.core.errors import bad_request, conflict, forbidden, not_found, unauthorized
from app.core.metrics import ADMIN_OPERATIONS, LOGIN_ATTEMPTS, LOGOUTS
from app.core.permissions import can_access_admin_record, can_manage_admin, check_level
from app.core.security import TOKEN_TYPE_ADMIN, create_access_token, get_password_hash, verify_password
from app.core.tokens import generate_confirmation_token, get_token_expiration, is_token_expired, utcnow
from app.models.admin import AccessLevel, AccountStatus, Admin
from app.models.interaction import Interaction
from app.schemas.admin import (
    AccountActivationRequest,
    AdminCreate,
    AdminInvite,
    AdminInvited,
    AdminLoginRequest,
    AdminLoginResponse,
    AdminResponse,
    AdminUpdate,
)
from app.services.interaction_service import InteractionService

logger = logging.getLogger(__name__)


def _get_admin_or_404(db: Session, admin_id: int) -> Admin:
    admin = db.query(Admin).filter(Admin.id == admin_id).first()
    if not admin:
        raise not_found("Administrador não encontrado")
    return admin


def _count_superadmins(db: Session, active_only: bool = False) -> int:
    query = db.query(Admin).filter(Admin.access_level == AccessLevel.SUPERADMIN)
    # convites pendentes não contam
    query = query.filter(Admin.status != AccountStatus.PENDING)
    if active_only:
        query = query.filter(Admin.status == AccountStatus.ACTIVE)
    return query.count()


def _email_taken(db: Session, email: str, exclude_id: int = None) -> bool:
    query = db.query(Admin.id).filter(Admin.email == email)
    if exclude_id is not None:
        query = query.filter(Admin.id != exclude_id)
    return query.first() is not None


def _get_pending_invite(db: Session, token: str) -> Admin:
    admin = (
        db.query(Admin)
        .filter(Admin.confirmation_token == token, Admin.status == AccountStatus.PENDING)
        .first()
    )
    if not admin or is_token_expired(admin.confirmation_token_expires_at):
        raise bad_request("Token inválido ou expirado", code="INVALID_TOKEN")
    return admin


class AdminService:

    @staticmethod
    def login(db: Session, credentials: AdminLoginRequest) -> AdminLoginResponse:
        admin = db.query(Admin).filter(Admin.email == credentials.email).first()

        if not admin or not verify_password(credentials.password, admin.password_hash):
            LOGIN_ATTEMPTS.labels(actor="admin", result="failure", failure_reason="invalid_credentials").inc()
            logger.info("admin login failed for %s", credentials.email)
            raise unauthorized("Email ou senha incorretos", code="INVALID_CREDENTIALS")

        if admin.status != AccountStatus.ACTIVE:
            LOGIN_ATTEMPTS.labels(actor="admin", result="failure", failure_reason="inactive").inc()
            raise forbidden(
                f"Conta de administrador não está ativa (Status: {admin.status.value})",
                code="ACCOUNT_INACTIVE",
            )

        admin.last_login = utcnow()
        db.commit()
        db.refresh(admin)

        token = create_access_token(admin.id, admin.email, admin.access_level.value, TOKEN_TYPE_ADMIN)
        LOGIN_ATTEMPTS.labels(actor="admin", result="success", failure_reason="none").inc()
        logger.info("admin %s logged in", admin.id)
        return AdminLoginResponse(token=token, admin=AdminResponse.model_validate(admin))

    @staticmethod
    def logout(db: Session, admin: Admin) -> None:
        # tokens issued before this moment stop being accepted
        admin.last_logout = utcnow()
        db.commit()
        LOGOUTS.inc()
        logger.info("admin %s logged out", admin.id)

    @staticmethod
    def list_admins(db: Session) -> List[AdminResponse]:
        admins = db.query(Admin).order_by(Admin.created_at.desc(), Admin.id.desc()).all()
        return [AdminResponse.model_validate(a) for a in admins]

    @staticmethod
    def get_admin(db: Session, actor: Admin, admin_id: int) -> AdminResponse:
        if not can_access_admin_record(actor.id, actor.access_level, admin_id):
            raise forbidden("Acesso negado", code="INSUFFICIENT_LEVEL")
        return AdminResponse.model_validate(_get_admin_or_404(db, admin_id))

    @staticmethod
    def create_admin(db: Session, data: AdminCreate) -> AdminResponse:
        if _email_taken(db, data.email):
            raise conflict("Email já cadastrado", code="EMAIL_IN_USE")

        admin = Admin(
            name=data.name,
            email=data.email,
            password_hash=get_password_hash(data.password),
            access_level=data.access_level or AccessLevel.EDITOR,
            status=AccountStatus.ACTIVE,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

        ADMIN_OPERATIONS.labels(operation="create").inc()
        logger.info("admin %s created with level %s", admin.id, admin.access_level.value)
        return AdminResponse.model_validate(admin)

    @staticmethod
    def invite_admin(db: Session, data: AdminInvite) -> AdminInvited:
        """Create a PENDENTE admin with no password and a one-time activation token."""
        if _email_taken(db, data.email):
            raise conflict("Este email já está cadastrado no sistema", code="EMAIL_IN_USE")

        admin = Admin(
            name=data.name,
            email=data.email,
            password_hash="",
            access_level=data.access_level or AccessLevel.EDITOR,
            status=AccountStatus.PENDING,
            confirmation_token=generate_confirmation_token(),
            confirmation_token_expires_at=get_token_expiration(
                get_auth_setting("admin_invite_expire_hours", 24)
            ),
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

        ADMIN_OPERATIONS.labels(operation="invite").inc()
        logger.info("admin %s invited with level %s, activation token issued", admin.id, admin.access_level.value)
        return AdminInvited.model_validate(admin)

    @staticmethod
    def check_invitation(db: Session, token: str) -> Admin:
        return _get_pending_invite(db, token)

    @staticmethod
    def activate_account(db: Session, data: AccountActivationRequest) -> AdminResponse:
        admin = _get_pending_invite(db, data.token)

        admin.password_hash = get_password_hash(data.password)
        admin.status = AccountStatus.ACTIVE
        admin.confirmation_token = None
        admin.confirmation_token_expires_at = None
        db.commit()
        db.refresh(admin)

        ADMIN_OPERATIONS.labels(operation="activate").inc()
        logger.info("admin %s activated account", admin.id)
        return AdminResponse.model_validate(admin)

    @staticmethod
    def update_admin(db: Session, actor: Admin, admin_id: int, data: AdminUpdate) -> AdminResponse:
        if not can_access_admin_record(actor.id, actor.access_level, admin_id):
            raise forbidden("Acesso negado", code="INSUFFICIENT_LEVEL")

        admin = _get_admin_or_404(db, admin_id)
        if not can_manage_admin(actor.id, actor.access_level, admin.id, admin.access_level):
            raise forbidden("Sem permissão para editar este administrador", code="INSUFFICIENT_LEVEL")

        changes = data.model_dump(exclude_none=True)
        if not changes:
            raise bad_request("Nenhum campo para atualizar")

        new_level = changes.get("access_level")
        if new_level is not None and new_level != admin.access_level:
            if not check_level(actor.access_level, AccessLevel.SUPERADMIN):
                raise forbidden("Apenas SUPERADMIN pode alterar nível de acesso", code="INSUFFICIENT_LEVEL")
            if admin.access_level == AccessLevel.SUPERADMIN and _count_superadmins(db) <= 1:
                raise conflict("Não é possível rebaixar o último SUPERADMIN", code="LAST_SUPERADMIN")
            admin.access_level = new_level

        if "email" in changes and changes["email"] != admin.email:
            if _email_taken(db, changes["email"], exclude_id=admin.id):
                raise conflict("Email já está em uso", code="EMAIL_IN_USE")
            admin.email = changes["email"]

        if "name" in changes:
            admin.name = changes["name"]
        if "password" in changes:
            admin.password_hash = get_password_hash(changes["password"])

        db.commit()
        db.refresh(admin)

        ADMIN_OPERATIONS.labels(operation="update").inc()
        logger.info("admin %s updated by %s (%s)", admin.id, actor.id, ", ".join(sorted(changes)))
        return AdminResponse.model_validate(admin)

    @staticmethod
    def delete_admin(db: Session, actor: Admin, admin_id: int) -> None:
        if actor.id == admin_id:
            raise bad_request("Não é possível excluir sua própria conta", code="SELF_DELETE")

        admin = _get_admin_or_404(db, admin_id)
        if admin.access_level == AccessLevel.SUPERADMIN and _count_superadmins(db) <= 1:
            raise conflict("Não é possível excluir o último SUPERADMIN", code="LAST_SUPERADMIN")

        replies = InteractionService.purge(db, Interaction.admin_id == admin.id)
        db.delete(admin)
        db.commit()

        ADMIN_OPERATIONS.labels(operation="delete").inc()
        logger.info("admin %s deleted by %s (%d replies removed)", admin_id, actor.id, replies)

    @staticmethod
    def set_status(db: Session, actor: Admin, admin_id: int, new_status: AccountStatus) -> AdminResponse:
        if actor.id == admin_id and new_status != AccountStatus.ACTIVE:
            raise bad_request("Você não pode desativar sua própria conta")

        admin = _get_admin_or_404(db, admin_id)
        if (
            admin.access_level == AccessLevel.SUPERADMIN
            and admin.status == AccountStatus.ACTIVE
            and new_status != AccountStatus.ACTIVE
            and _count_superadmins(db, active_only=True) <= 1
        ):
            raise conflict("Não é possível desativar o último SUPERADMIN ativo", code="LAST_SUPERADMIN")

        admin.status = new_status
        db.commit()
        db.refresh(admin)

        ADMIN_OPERATIONS.labels(operation="status").inc()
        logger.info("admin %s status set to %s by %s", admin.id, new_status.value, actor.id)
        return AdminResponse.model_validate(admin)

    @staticmethod
    def bootstrap_superadmin(db: Session) -> None:
        """Create the first SUPERADMIN from BOOTSTRAP_SUPERADMIN_* when no admin exists."""
        if db.query(Admin.id).first() is not None:
            return
        email = settings.BOOTSTRAP_SUPERADMIN_EMAIL
        password = settings.BOOTSTRAP_SUPERADMIN_PASSWORD
        if not email or not password:
            logger.warning("no admin accounts exist and BOOTSTRAP_SUPERADMIN_EMAIL/PASSWORD are not set")
            return

        admin = Admin(
            name=settings.BOOTSTRAP_SUPERADMIN_NAME,
            email=email.strip().lower(),
            password_hash=get_password_hash(password),
            access_level=AccessLevel.SUPERADMIN,
            status=AccountStatus.ACTIVE,
        )
        db.add(admin)
        db.commit()
        logger.info("bootstrap SUPERADMIN %s created", admin.email)
