# CASHBOOK/backend/cashbook/routes/users.py

from datetime import datetime
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from cashbook import auth
from cashbook.constants import UserRole, AVATAR_URL_TEMPLATE, DEFAULT_USER_NAME
from cashbook.database import get_db
from cashbook.models import models as db_models
from cashbook.schemas import schemas
from cashbook.services import cashbook_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _phone_taken(db: Session, phone: str) -> bool:
    return db.query(db_models.User).filter(db_models.User.phone == phone).first() is not None

def _new_user(data: schemas.UserRegister, role: UserRole, can_create: bool, can_archive: bool) -> db_models.User:
    full_name = data.full_name.strip() or DEFAULT_USER_NAME
    return db_models.User(
        full_name=full_name,
        phone=data.phone.strip(),
        email=data.email,
        password_hash=auth.hash_password(data.password),
        role=role.value,
        can_create_cashbooks=can_create,
        can_archive_cashbooks=can_archive,
        profile_photo=AVATAR_URL_TEMPLATE.format(seed=full_name)
    )

def _get_user_or_404(db: Session, user_id: int) -> db_models.User:
    user = db.query(db_models.User).filter(db_models.User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="Utilisateur non trouvé")
    return user


@router.get("/setup-status", response_model=schemas.SetupStatus)
def setup_status(db: Session = Depends(get_db)):
    """Indique si un premier utilisateur (propriétaire) existe déjà"""
    count = db.query(db_models.User).count()
    return {"initialized": count > 0, "users_count": count}

@router.post("/register", response_model=schemas.UserOut)
def register(user: schemas.UserRegister, db: Session = Depends(get_db)):
    """Inscription: le premier utilisateur devient propriétaire, les suivants sont non assignés"""
    if _phone_taken(db, user.phone.strip()):
        raise HTTPException(status_code=400, detail="Téléphone déjà utilisé")

    is_first = db.query(db_models.User).count() == 0
    role = UserRole.OWNER if is_first else UserRole.UNASSIGNED
    new_user = _new_user(user, role, can_create=is_first, can_archive=is_first)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"👤 Nouvel utilisateur {new_user.id} ({role.value})")
    return new_user

@router.post("/login", response_model=schemas.Token)
def login(credentials: schemas.UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(db_models.User).filter(db_models.User.phone == credentials.phone.strip()).first()
    if not db_user or not auth.verify_password(credentials.password, db_user.password_hash):
        raise HTTPException(status_code=400, detail="Téléphone ou mot de passe incorrect")

    db_user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(db_user)
    token = auth.create_access_token({"sub": db_user.phone})
    return {"access_token": token, "token_type": "bearer", "user": db_user}

@router.get("/me", response_model=schemas.UserOut)
def read_me(current_user: db_models.User = Depends(auth.get_current_user)):
    return current_user

@router.put("/me", response_model=schemas.UserOut)
def update_me(
    update: schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Mise à jour du profil (nom, mot de passe, photo)"""
    if update.full_name:
        current_user.full_name = update.full_name.strip()
    if update.password:
        current_user.password_hash = auth.hash_password(update.password)
    if update.profile_photo:
        current_user.profile_photo = update.profile_photo
    db.commit()
    db.refresh(current_user)
    return current_user

@router.get("/", response_model=List[schemas.UserOut])
def list_users(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    return db.query(db_models.User).order_by(db_models.User.created_at.asc(), db_models.User.id.asc()).all()

# ---------- Gestion du personnel (propriétaire uniquement) ----------

@router.post("/", response_model=schemas.UserOut)
def create_staff_user(
    staff: schemas.StaffCreate,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(auth.require_owner)
):
    """Créer un compte employé"""
    if _phone_taken(db, staff.phone.strip()):
        raise HTTPException(status_code=400, detail="Téléphone déjà utilisé")
    if staff.role == UserRole.OWNER:
        raise HTTPException(status_code=400, detail="Il ne peut y avoir qu'un seul propriétaire")

    new_user = _new_user(staff, staff.role, staff.can_create_cashbooks, staff.can_archive_cashbooks)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"👤 Employé {new_user.id} créé par {owner.id}")
    return new_user

@router.patch("/{user_id}", response_model=schemas.UserOut)
def update_user(
    user_id: int,
    update: schemas.UserUpdate,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(auth.require_owner)
):
    user = _get_user_or_404(db, user_id)
    if update.role is not None and user.id == owner.id and update.role != UserRole.OWNER:
        raise HTTPException(status_code=400, detail="Le propriétaire ne peut pas changer son propre rôle")
    if update.role == UserRole.OWNER and user.id != owner.id:
        raise HTTPException(status_code=400, detail="Il ne peut y avoir qu'un seul propriétaire")

    if update.full_name:
        user.full_name = update.full_name.strip()
    if update.role is not None:
        user.role = update.role.value
    if update.can_create_cashbooks is not None:
        user.can_create_cashbooks = update.can_create_cashbooks
    if update.can_archive_cashbooks is not None:
        user.can_archive_cashbooks = update.can_archive_cashbooks
    if update.password:
        user.password_hash = auth.hash_password(update.password)
    db.commit()
    db.refresh(user)
    return user

@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(auth.require_owner)
):
    """Supprimer un employé et ses assignations"""
    user = _get_user_or_404(db, user_id)
    if user.is_owner:
        raise HTTPException(status_code=400, detail="Le propriétaire ne peut pas être supprimé")

    # Les écritures et cashbooks restent, sans référence vers l'utilisateur supprimé
    db.query(db_models.Entry).filter(db_models.Entry.created_by == user.id).update(
        {db_models.Entry.created_by: None}, synchronize_session=False
    )
    db.query(db_models.Entry).filter(db_models.Entry.verified_by == user.id).update(
        {db_models.Entry.verified_by: None}, synchronize_session=False
    )
    db.query(db_models.Cashbook).filter(db_models.Cashbook.owner_id == user.id).update(
        {db_models.Cashbook.owner_id: None}, synchronize_session=False
    )
    db.delete(user)
    db.commit()
    logger.info(f"🗑️ Utilisateur {user_id} supprimé par {owner.id}")
    return {"message": "Utilisateur supprimé avec succès"}

@router.get("/{user_id}/cashbooks", response_model=List[schemas.CashbookOut])
def get_user_cashbooks(
    user_id: int,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(auth.require_owner)
):
    """Cashbooks assignés à un employé, avec ses permissions sur chacun"""
    user = _get_user_or_404(db, user_id)
    return [
        cashbook_service.serialize_cashbook(cb, user, staff)
        for cb, staff in cashbook_service.list_user_assignments(db, user.id)
    ]
