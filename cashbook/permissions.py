# CASHBOOK/backend/cashbook/permissions.py : évaluation des permissions par cashbook

"""
Modèle d'autorisation des cashbooks.

Le propriétaire (OWNER) contourne toutes les vérifications par cashbook.
Pour les autres utilisateurs, les droits viennent de leur enregistrement
CashbookStaff sur le cashbook concerné; sans cet enregistrement, aucun accès.

Les fonctions de ce module sont pures: elles n'accèdent jamais à la base et
acceptent aussi bien des modèles SQLAlchemy que n'importe quel objet exposant
les mêmes attributs.
"""

from dataclasses import dataclass, asdict
from typing import Any, Optional
from cashbook.constants import UserRole, CashbookStatus


@dataclass(frozen=True)
class CashbookPermissions:
    can_view: bool = False
    can_edit: bool = False
    can_archive: bool = False
    can_delete: bool = False
    can_create: bool = False
    can_post: bool = False

    def as_dict(self):
        return asdict(self)


def _value(field):
    # Les enums str et les chaînes brutes de la base se comparent de la même façon
    return getattr(field, "value", field)


def is_owner(actor: Any) -> bool:
    return actor is not None and _value(actor.role) == UserRole.OWNER.value


def can_create_cashbooks(actor: Any) -> bool:
    """Permission globale de création (indépendante de tout cashbook)"""
    return is_owner(actor) or bool(getattr(actor, "can_create_cashbooks", False))


def evaluate(actor: Any, cashbook: Any, staff: Optional[Any] = None) -> CashbookPermissions:
    """Calcule les droits de `actor` sur `cashbook`.

    `staff` est l'enregistrement CashbookStaff de l'acteur pour ce cashbook,
    ou None s'il n'est pas assigné.
    """
    is_deleted = bool(getattr(cashbook, "is_deleted", False))
    # Aucune écriture dans un cashbook archivé ou dans la corbeille
    is_active = _value(cashbook.status) == CashbookStatus.ACTIVE.value and not is_deleted
    can_create = can_create_cashbooks(actor)

    if is_owner(actor):
        return CashbookPermissions(
            can_view=True,
            can_edit=True,
            can_archive=True,
            can_delete=True,
            can_create=can_create,
            can_post=is_active,
        )

    if staff is None:
        return CashbookPermissions(can_create=can_create)

    can_edit = bool(staff.can_edit)
    return CashbookPermissions(
        # Les cashbooks archivés ou dans la corbeille ne sont visibles que du propriétaire
        can_view=is_active,
        can_edit=can_edit,
        can_archive=bool(staff.can_archive),
        can_delete=False,
        can_create=can_create,
        can_post=is_active and can_edit,
    )
