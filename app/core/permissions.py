from typing import Optional
from app.models.admin import AccessLevel


LEVEL_RANK = {
    AccessLevel.SUPERADMIN: 3,
    AccessLevel.ADMIN: 2,
    AccessLevel.EDITOR: 1,
}


def _to_access_level(level: str | AccessLevel | None) -> Optional[AccessLevel]:
    """converte string para AccessLevel, retorna None se inválido"""
    if isinstance(level, AccessLevel):
        return level
    try:
        return AccessLevel(level)
    except ValueError:
        return None


def rank(level: str | AccessLevel | None) -> int:
    access_level = _to_access_level(level)
    if access_level is None:
        return 0
    return LEVEL_RANK[access_level]


def check_level(actual: str | AccessLevel | None, required: str | AccessLevel) -> bool:
    """True iff `actual` ranks at least as high as `required`."""
    actual_rank = rank(actual)
    if actual_rank == 0:
        return False
    return actual_rank >= rank(required)


def can_access_admin_record(actor_id: int, actor_level: str | AccessLevel, target_id: int) -> bool:
    """ADMIN and above see every admin record; anyone sees their own."""
    return actor_id == target_id or check_level(actor_level, AccessLevel.ADMIN)


def can_manage_admin(actor_id: int, actor_level: str | AccessLevel, target_id: int, target_level: str | AccessLevel) -> bool:
    """Editing another admin needs SUPERADMIN or a strictly higher rank than the target."""
    if actor_id == target_id or check_level(actor_level, AccessLevel.SUPERADMIN):
        return True
    return rank(actor_level) > rank(target_level)
