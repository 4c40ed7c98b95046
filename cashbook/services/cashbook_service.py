# CASHBOOK/backend/cashbook/services/cashbook_service.py : accès et listes de cashbooks

from typing import List, Optional, Tuple
import logging

from fastapi import HTTPException
from sqlalchemy import func, case, or_
from sqlalchemy.orm import Session

from cashbook.models import models
from cashbook.constants import CashbookStatus, EntryType, UserRole
from cashbook.permissions import CashbookPermissions, evaluate, is_owner

logger = logging.getLogger(__name__)


def not_deleted():
    """Filtre des cashbooks hors corbeille (is_deleted faux ou NULL)"""
    return or_(models.Cashbook.is_deleted == False, models.Cashbook.is_deleted.is_(None))  # noqa: E712


def get_staff_record(db: Session, cashbook_id: int, user_id: int) -> Optional[models.CashbookStaff]:
    return db.query(models.CashbookStaff).filter(
        models.CashbookStaff.cashbook_id == cashbook_id,
        models.CashbookStaff.user_id == user_id
    ).first()


def list_visible_cashbooks(
    db: Session,
    user: models.User,
    category_id: Optional[int] = None
) -> List[Tuple[models.Cashbook, Optional[models.CashbookStaff]]]:
    """Cashbooks visibles par l'utilisateur, du plus récent au plus ancien.

    Le propriétaire voit tous les cashbooks hors corbeille, actifs ou archivés.
    Les autres ne voient que les cashbooks actifs où ils ont un enregistrement
    CashbookStaff (la jointure interne garantit l'absence d'accès sans
    assignation).
    """
    if is_owner(user):
        query = db.query(models.Cashbook).filter(not_deleted())
        if category_id:
            query = query.filter(models.Cashbook.category_id == category_id)
        cashbooks = query.order_by(models.Cashbook.created_at.desc(), models.Cashbook.id.desc()).all()
        return [(cb, None) for cb in cashbooks]

    query = db.query(models.Cashbook, models.CashbookStaff).join(
        models.CashbookStaff,
        models.CashbookStaff.cashbook_id == models.Cashbook.id
    ).filter(
        models.CashbookStaff.user_id == user.id,
        models.Cashbook.status == CashbookStatus.ACTIVE.value,
        not_deleted()
    )
    if category_id:
        query = query.filter(models.Cashbook.category_id == category_id)
    return query.order_by(models.Cashbook.created_at.desc(), models.Cashbook.id.desc()).all()


def list_user_assignments(db: Session, user_id: int) -> List[Tuple[models.Cashbook, models.CashbookStaff]]:
    """Cashbooks (hors corbeille) auxquels un utilisateur est assigné, tous statuts"""
    return db.query(models.Cashbook, models.CashbookStaff).join(
        models.CashbookStaff,
        models.CashbookStaff.cashbook_id == models.Cashbook.id
    ).filter(
        models.CashbookStaff.user_id == user_id,
        not_deleted()
    ).order_by(models.Cashbook.created_at.desc(), models.Cashbook.id.desc()).all()


def resolve_access(
    db: Session,
    cashbook_id: int,
    user: models.User
) -> Tuple[models.Cashbook, Optional[models.CashbookStaff], CashbookPermissions]:
    """Charge un cashbook et les droits de l'utilisateur dessus.

    Lève 404 si le cashbook n'existe pas ou n'est pas visible: on ne révèle pas
    l'existence d'un cashbook à quelqu'un qui n'y a pas accès.
    """
    cashbook = db.query(models.Cashbook).filter(models.Cashbook.id == cashbook_id).first()
    if not cashbook:
        raise HTTPException(status_code=404, detail="Cashbook non trouvé")

    staff = None if is_owner(user) else get_staff_record(db, cashbook_id, user.id)
    perms = evaluate(user, cashbook, staff)
    if not perms.can_view:
        logger.warning(f"⛔ Utilisateur {user.id} sans accès au cashbook {cashbook_id}")
        raise HTTPException(status_code=404, detail="Cashbook non trouvé")
    return cashbook, staff, perms


def require(perms: CashbookPermissions, permission: str, detail: str):
    """Lève 403 si la permission demandée n'est pas accordée"""
    if not getattr(perms, permission):
        raise HTTPException(status_code=403, detail=detail)


def require_not_deleted(cashbook: models.Cashbook):
    """Lève 400 tant que le cashbook est dans la corbeille"""
    if cashbook.is_deleted:
        raise HTTPException(status_code=400, detail="Cashbook dans la corbeille: restaurez-le d'abord")


def get_cashbook_totals(db: Session, cashbook_id: int) -> dict:
    """Totaux d'un cashbook: solde = somme(IN) - somme(OUT); les NOTE sont ignorées"""
    total_in, total_out, count = db.query(
        func.coalesce(func.sum(case((models.Entry.type == EntryType.IN.value, models.Entry.amount), else_=0)), 0),
        func.coalesce(func.sum(case((models.Entry.type == EntryType.OUT.value, models.Entry.amount), else_=0)), 0),
        func.count(models.Entry.id)
    ).filter(
        models.Entry.cashbook_id == cashbook_id
    ).one()

    return {
        "total_in": float(total_in),
        "total_out": float(total_out),
        "balance": float(total_in) - float(total_out),
        "entries_count": count
    }


def serialize_cashbook(
    cashbook: models.Cashbook,
    user: models.User,
    staff: Optional[models.CashbookStaff] = None,
    perms: Optional[CashbookPermissions] = None
) -> dict:
    """Cashbook + contexte de permissions de l'utilisateur courant"""
    perms = perms or evaluate(user, cashbook, staff)
    if is_owner(user):
        user_role = UserRole.OWNER.value
    else:
        user_role = staff.role if staff is not None else None

    return {
        "id": cashbook.id,
        "category_id": cashbook.category_id,
        "name": cashbook.name,
        "owner_id": cashbook.owner_id,
        "status": cashbook.status,
        "created_at": cashbook.created_at,
        "is_deleted": bool(cashbook.is_deleted),
        "deleted_at": cashbook.deleted_at,
        "deleted_by": cashbook.deleted_by,
        "user_role": user_role,
        "can_edit": perms.can_edit,
        "can_archive": perms.can_archive,
        "can_post": perms.can_post
    }


def notify(db: Session, user_id: int, title: str, message: str = ""):
    """Ajoute une notification (le commit est laissé à l'appelant)"""
    notification = models.Notification(user_id=user_id, title=title, message=message)
    db.add(notification)
    return notification
