# CASHBOOK/backend/cashbook/routes/categories.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from cashbook.models import models as db_models
from cashbook.schemas import schemas
from cashbook.database import get_db
from cashbook.auth import get_current_user, require_owner

router = APIRouter(prefix="/categories", tags=["categories"])


def _get_category_or_404(db: Session, category_id: int) -> db_models.Category:
    category = db.query(db_models.Category).filter(db_models.Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Catégorie non trouvée")
    return category

@router.get("/", response_model=List[schemas.CategoryOut])
def get_categories(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Toutes les catégories, par ordre alphabétique"""
    return db.query(db_models.Category).order_by(db_models.Category.name).all()

@router.post("/", response_model=schemas.CategoryOut)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    new_category = db_models.Category(name=category.name.strip(), owner_id=owner.id)
    db.add(new_category)
    db.commit()
    db.refresh(new_category)
    return new_category

@router.put("/{category_id}", response_model=schemas.CategoryOut)
def update_category(
    category_id: int,
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    db_category = _get_category_or_404(db, category_id)
    db_category.name = category.name.strip()
    db.commit()
    db.refresh(db_category)
    return db_category

@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    owner: db_models.User = Depends(require_owner)
):
    db_category = _get_category_or_404(db, category_id)

    # Les cashbooks (y compris ceux de la corbeille) gardent une catégorie valide
    in_use = db.query(db_models.Cashbook).filter(db_models.Cashbook.category_id == category_id).count()
    if in_use:
        raise HTTPException(status_code=400, detail="Catégorie utilisée par des cashbooks")

    db.delete(db_category)
    db.commit()
    return {"message": "Catégorie supprimée avec succès"}
