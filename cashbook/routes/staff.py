# CASHBOOK/backend/cashbook/routes/staff.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import logging
from cashbook.models import models as db_models
from cashbook.schemas import schemas
from cashbook.database import get_db
from cashbook.auth import require_owner
from cashbook.constants import UserRole
from cashbook.services import cashbook_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cashbooks/{cashbook_id}/staff", tags=["staff"])


def _get_cashbook_or_404(db: Session, cashbook_id: int) -> db_models.Cashbook:
    cashbook = db.query(db_models.Cashbook).filter(db_models.Cashbook.id == cashbook_id).first()
    if not cashbook:
        raise HTTPException(status_code=404, detail="Cashbook non trouvé")
    return cashbook

def _get_staff_or_404(db: Session, cashbook_id: int, user_id: int) -> db_models.CashbookStaff:
    staff = cashbook_service.get_staff_record(db, cashbook_id, user_id)
    if not staff:
        raise HTTPException(status_code=404, detail="Cet utilisateur n'est pas assigné à ce cashbook")
    return staff

@router.get("/", response_model=List[schemas.CashbookStaffOut])
def get_cashbook_staff(
    cashbook_id: int,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    _get_cashbook_or_404(db, cashbook_id)
    return db.query(db_models.CashbookStaff).filter(
        db_models.CashbookStaff.cashbook_id == cashbook_id
    ).order_by(db_models.CashbookStaff.id).all()

@router.post("/", response_model=schemas.CashbookStaffOut)
def assign_staff(
    cashbook_id: int,
    assignment: schemas.StaffAssign,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    """Assigner un employé à un cashbook"""
    cashbook = _get_cashbook_or_404(db, cashbook_id)
    cashbook_service.require_not_deleted(cashbook)
    if assignment.role == UserRole.OWNER:
        raise HTTPException(status_code=400, detail="Le rôle OWNER ne peut pas être attribué par cashbook")
    user = db.query(db_models.User).filter(db_models.User.id == assignment.user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="Utilisateur non trouvé")
    if user.is_owner:
        raise HTTPException(status_code=400, detail="Le propriétaire a déjà accès à tous les cashbooks")
    if cashbook_service.get_staff_record(db, cashbook_id, user.id):
        raise HTTPException(status_code=400, detail="Cet utilisateur est déjà assigné à ce cashbook")

    staff = db_models.CashbookStaff(
        cashbook_id=cashbook.id,
        user_id=user.id,
        role=assignment.role.value,
        can_edit=assignment.can_edit,
        can_archive=assignment.can_archive
    )
    db.add(staff)
    cashbook_service.notify(db, user.id, "Nouveau cashbook", f"Vous avez été ajouté au cashbook « {cashbook.name} »")
    db.commit()
    db.refresh(staff)
    logger.info(f"👥 Utilisateur {user.id} assigné au cashbook {cashbook.id}")
    return staff

@router.patch("/{user_id}", response_model=schemas.CashbookStaffOut)
def update_staff_permissions(
    cashbook_id: int,
    user_id: int,
    update: schemas.StaffPermissionUpdate,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    """Modifier les permissions d'un employé sur un cashbook"""
    if update.role == UserRole.OWNER:
        raise HTTPException(status_code=400, detail="Le rôle OWNER ne peut pas être attribué par cashbook")
    staff = _get_staff_or_404(db, cashbook_id, user_id)
    if update.can_edit is not None:
        staff.can_edit = update.can_edit
    if update.can_archive is not None:
        staff.can_archive = update.can_archive
    if update.role is not None:
        staff.role = update.role.value
    db.commit()
    db.refresh(staff)
    return staff

@router.delete("/{user_id}")
def remove_staff(
    cashbook_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    """Retirer l'accès d'un employé à un cashbook"""
    cashbook = _get_cashbook_or_404(db, cashbook_id)
    staff = _get_staff_or_404(db, cashbook_id, user_id)
    db.delete(staff)
    cashbook_service.notify(db, user_id, "Accès retiré", f"Votre accès au cashbook « {cashbook.name} » a été retiré")
    db.commit()
    logger.info(f"👥 Utilisateur {user_id} retiré du cashbook {cashbook_id}")
    return {"message": "Accès retiré avec succès"}
