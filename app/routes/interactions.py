from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.database import get_db
from app.core.errors import parse_id
from app.dependencies import get_current_customer, require_level
from app.models.admin import AccessLevel, Admin
from app.models.customer import Customer
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.interaction import AdminReplyCreate, InteractionCreate, InteractionResponse
from app.services.interaction_service import InteractionService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[InteractionResponse]])
async def list_interactions(
    produtoId: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    product_id = parse_id(produtoId, "produtoId") if produtoId is not None else None
    interactions = InteractionService.list_interactions(db, product_id)
    return ApiResponse[List[InteractionResponse]](data=interactions)


@router.post("", response_model=ApiResponse[InteractionResponse], status_code=status.HTTP_201_CREATED)
async def create_interaction(
    interaction_data: InteractionCreate,
    current_customer: Customer = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    interaction = InteractionService.create_interaction(db, current_customer, interaction_data)
    return ApiResponse[InteractionResponse](message="Interação registrada com sucesso", data=interaction)


@router.post("/responder", response_model=ApiResponse[InteractionResponse], status_code=status.HTTP_201_CREATED)
async def reply_interaction(
    reply_data: AdminReplyCreate,
    current_admin: Admin = Depends(require_level(AccessLevel.EDITOR)),
    db: Session = Depends(get_db),
):
    reply = InteractionService.reply(db, current_admin, reply_data)
    return ApiResponse[InteractionResponse](message="Resposta enviada com sucesso", data=reply)


@router.get("/{interaction_id}", response_model=ApiResponse[InteractionResponse])
async def get_interaction(interaction_id: str, db: Session = Depends(get_db)):
    interaction = InteractionService.get_interaction(db, parse_id(interaction_id, "ID da interação"))
    return ApiResponse[InteractionResponse](data=interaction)


@router.delete("/{interaction_id}", response_model=MessageResponse)
async def delete_interaction(
    interaction_id: str,
    current_admin: Admin = Depends(require_level(AccessLevel.EDITOR)),
    db: Session = Depends(get_db),
):
    InteractionService.delete_interaction(db, parse_id(interaction_id, "ID da interação"))
    return MessageResponse(message="Interação excluída com sucesso")
