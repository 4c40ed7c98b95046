# CASHBOOK/backend/cashbook/routes/entries.py

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
import logging
from cashbook.models import models as db_models
from cashbook.schemas import schemas
from cashbook.database import get_db
from cashbook.auth import get_current_user
from cashbook.constants import MAX_ENTRIES_PER_PAGE
from cashbook.services import cashbook_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["entries"])


def _get_entry_for_edit(db: Session, entry_id: int, current_user: db_models.User) -> db_models.Entry:
    """Charge une écriture si l'utilisateur peut modifier son cashbook"""
    entry = db.query(db_models.Entry).filter(db_models.Entry.id == entry_id).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Écriture non trouvée")
    cashbook, _, perms = cashbook_service.resolve_access(db, entry.cashbook_id, current_user)
    cashbook_service.require(perms, "can_edit", "Vous n'avez pas le droit de modifier ce cashbook")
    cashbook_service.require_not_deleted(cashbook)
    return entry

@router.get("/cashbooks/{cashbook_id}/entries", response_model=List[schemas.EntryOut])
def get_entries(
    cashbook_id: int,
    limit: int = Query(MAX_ENTRIES_PER_PAGE, ge=1, le=MAX_ENTRIES_PER_PAGE),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Écritures d'un cashbook, les plus récentes d'abord"""
    cashbook_service.resolve_access(db, cashbook_id, current_user)
    return db.query(db_models.Entry).filter(
        db_models.Entry.cashbook_id == cashbook_id
    ).order_by(db_models.Entry.created_at.desc(), db_models.Entry.id.desc()).limit(limit).all()

@router.post("/cashbooks/{cashbook_id}/entries", response_model=schemas.EntryOut)
def create_entry(
    cashbook_id: int,
    entry: schemas.EntryCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Ajouter une entrée, une sortie ou une note (cashbook actif uniquement)"""
    cashbook, _, perms = cashbook_service.resolve_access(db, cashbook_id, current_user)
    cashbook_service.require_not_deleted(cashbook)
    cashbook_service.require(perms, "can_post", "Impossible d'ajouter une écriture à ce cashbook")

    new_entry = db_models.Entry(
        cashbook_id=cashbook.id,
        type=entry.type.value,
        amount=entry.amount,
        description=entry.description or "",
        payment_method=entry.payment_method.value,
        attachment_url=entry.attachment_url,
        is_verified=False,
        created_by=current_user.id
    )
    db.add(new_entry)
    db.commit()
    db.refresh(new_entry)
    return new_entry

@router.put("/entries/{entry_id}", response_model=schemas.EntryOut)
def update_entry(
    entry_id: int,
    update: schemas.EntryUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    entry = _get_entry_for_edit(db, entry_id, current_user)
    if update.amount is not None:
        entry.amount = update.amount
    if update.description is not None:
        entry.description = update.description
    if update.type is not None:
        entry.type = update.type.value
    if update.payment_method is not None:
        entry.payment_method = update.payment_method.value
    db.commit()
    db.refresh(entry)
    return entry

@router.delete("/entries/{entry_id}")
def delete_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Supprimer définitivement une écriture; les totaux sont recalculés à la lecture"""
    entry = _get_entry_for_edit(db, entry_id, current_user)
    db.delete(entry)
    db.commit()
    logger.info(f"🗑️ Écriture {entry_id} supprimée par {current_user.id}")
    return {"message": "Écriture supprimée avec succès"}
