# CASHBOOK/backend/cashbook/routes/cashbooks.py
from datetime import datetime
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cashbook.models import models as db_models
from cashbook.schemas import schemas
from cashbook.database import get_db
from cashbook.auth import get_current_user, require_owner
from cashbook.constants import CashbookStatus, UserRole, DEFAULT_CASHBOOK_NAME
from cashbook.permissions import can_create_cashbooks, is_owner
from cashbook.services import cashbook_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cashbooks", tags=["cashbooks"])


def _get_category_or_404(db: Session, category_id: int) -> db_models.Category:
    category = db.query(db_models.Category).filter(db_models.Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Catégorie non trouvée")
    return category

@router.post("/", response_model=schemas.CashbookOut)
def create_cashbook(
    cashbook: schemas.CashbookCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Créer un cashbook et y assigner le personnel sélectionné"""
    if not can_create_cashbooks(current_user):
        raise HTTPException(status_code=403, detail="Vous n'avez pas le droit de créer des cashbooks")
    _get_category_or_404(db, cashbook.category_id)

    new_cashbook = db_models.Cashbook(
        category_id=cashbook.category_id,
        name=cashbook.name.strip() or DEFAULT_CASHBOOK_NAME,
        owner_id=current_user.id,
        status=CashbookStatus.ACTIVE.value
    )
    db.add(new_cashbook)
    db.flush()

    assignees = {user_id for user_id in cashbook.staff_ids if user_id != current_user.id}
    for user in db.query(db_models.User).filter(db_models.User.id.in_(assignees)).all():
        if user.is_owner:
            continue
        db.add(db_models.CashbookStaff(
            cashbook_id=new_cashbook.id,
            user_id=user.id,
            role=UserRole.EMPLOYEE.value,
            can_edit=True,
            can_archive=False
        ))
        cashbook_service.notify(db, user.id, "Nouveau cashbook", f"Vous avez été ajouté au cashbook « {new_cashbook.name} »")

    # Un créateur non propriétaire garde l'accès à ce qu'il a créé
    creator_staff = None
    if not is_owner(current_user):
        creator_staff = db_models.CashbookStaff(
            cashbook_id=new_cashbook.id,
            user_id=current_user.id,
            role=current_user.role,
            can_edit=True,
            can_archive=bool(current_user.can_archive_cashbooks)
        )
        db.add(creator_staff)

    db.commit()
    db.refresh(new_cashbook)
    logger.info(f"📒 Cashbook {new_cashbook.id} créé par {current_user.id}")
    return cashbook_service.serialize_cashbook(new_cashbook, current_user, creator_staff)

@router.get("/", response_model=List[schemas.CashbookOut])
def get_cashbooks(
    category_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Cashbooks visibles par l'utilisateur connecté"""
    return [
        cashbook_service.serialize_cashbook(cb, current_user, staff)
        for cb, staff in cashbook_service.list_visible_cashbooks(db, current_user, category_id)
    ]

@router.get("/deleted", response_model=List[schemas.CashbookOut])
def get_deleted_cashbooks(
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    """Corbeille: cashbooks supprimés, les plus récents d'abord"""
    cashbooks = db.query(db_models.Cashbook).filter(
        db_models.Cashbook.is_deleted == True  # noqa: E712
    ).order_by(db_models.Cashbook.deleted_at.desc()).all()
    return [cashbook_service.serialize_cashbook(cb, owner) for cb in cashbooks]

@router.get("/{cashbook_id}", response_model=schemas.CashbookWithDetails)
def get_cashbook_details(
    cashbook_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Détails d'un cashbook avec ses totaux"""
    cashbook, staff, perms = cashbook_service.resolve_access(db, cashbook_id, current_user)
    return {
        **cashbook_service.serialize_cashbook(cashbook, current_user, staff, perms),
        **cashbook_service.get_cashbook_totals(db, cashbook.id)
    }

@router.put("/{cashbook_id}", response_model=schemas.CashbookOut)
def update_cashbook(
    cashbook_id: int,
    update: schemas.CashbookUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Renommer un cashbook ou changer sa catégorie"""
    cashbook, staff, perms = cashbook_service.resolve_access(db, cashbook_id, current_user)
    cashbook_service.require(perms, "can_edit", "Vous n'avez pas le droit de modifier ce cashbook")
    cashbook_service.require_not_deleted(cashbook)

    if update.name is not None:
        if not update.name.strip():
            raise HTTPException(status_code=400, detail="Le nom ne peut pas être vide")
        cashbook.name = update.name.strip()
    if update.category_id is not None:
        _get_category_or_404(db, update.category_id)
        cashbook.category_id = update.category_id
    db.commit()
    db.refresh(cashbook)
    return cashbook_service.serialize_cashbook(cashbook, current_user, staff)

@router.post("/{cashbook_id}/status", response_model=schemas.CashbookOut)
def update_cashbook_status(
    cashbook_id: int,
    update: schemas.CashbookStatusUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Archiver (COMPLETED) ou réactiver (ACTIVE) un cashbook; bascule si aucun statut n'est donné"""
    cashbook, staff, perms = cashbook_service.resolve_access(db, cashbook_id, current_user)
    cashbook_service.require(perms, "can_archive", "Vous n'avez pas le droit d'archiver ce cashbook")
    cashbook_service.require_not_deleted(cashbook)

    if update.status is not None:
        next_status = update.status
    elif cashbook.status == CashbookStatus.ACTIVE.value:
        next_status = CashbookStatus.COMPLETED
    else:
        next_status = CashbookStatus.ACTIVE

    cashbook.status = next_status.value
    db.commit()
    db.refresh(cashbook)
    logger.info(f"📦 Cashbook {cashbook.id} -> {cashbook.status} par {current_user.id}")
    return cashbook_service.serialize_cashbook(cashbook, current_user, staff)

@router.delete("/{cashbook_id}")
def delete_cashbook(
    cashbook_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Mettre un cashbook à la corbeille (les écritures sont conservées)"""
    cashbook, staff, perms = cashbook_service.resolve_access(db, cashbook_id, current_user)
    cashbook_service.require(perms, "can_delete", "Seul le propriétaire peut supprimer un cashbook")
    if cashbook.is_deleted:
        raise HTTPException(status_code=400, detail="Cashbook déjà dans la corbeille")

    cashbook.is_deleted = True
    cashbook.deleted_at = datetime.utcnow()
    cashbook.deleted_by = current_user.id
    db.commit()
    logger.info(f"🗑️ Cashbook {cashbook.id} mis à la corbeille par {current_user.id}")
    return {"message": "Cashbook déplacé dans la corbeille"}

@router.post("/{cashbook_id}/restore", response_model=schemas.CashbookOut)
def restore_cashbook(
    cashbook_id: int,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    cashbook = db.query(db_models.Cashbook).filter(db_models.Cashbook.id == cashbook_id).first()
    if not cashbook:
        raise HTTPException(status_code=404, detail="Cashbook non trouvé")

    cashbook.is_deleted = False
    cashbook.deleted_at = None
    cashbook.deleted_by = None
    db.commit()
    db.refresh(cashbook)
    logger.info(f"♻️ Cashbook {cashbook.id} restauré par {owner.id}")
    return cashbook_service.serialize_cashbook(cashbook, owner)
