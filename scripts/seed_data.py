# CASHBOOK/backend/scripts/seed_data.py : script pour générer des données de démo

#!/usr/bin/env python
"""Script pour générer des données de démo réalistes"""

import random
import sys
import os
from datetime import datetime, timedelta
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cashbook.database import SessionLocal, create_tables
from cashbook.models import models
from cashbook.auth import hash_password
from cashbook.constants import UserRole, EntryType, PaymentMethod

def generate_test_data():
    """Génère un propriétaire, deux employés, des cashbooks et 90 jours d'écritures"""
    create_tables()
    db = SessionLocal()

    try:
        owner = models.User(
            full_name="Demo Owner",
            phone="01700000000",
            password_hash=hash_password("demo123"),
            role=UserRole.OWNER.value,
            can_create_cashbooks=True,
            can_archive_cashbooks=True
        )
        staff_members = [
            models.User(
                full_name=f"Employé {i+1}",
                phone=f"0180000000{i+1}",
                password_hash=hash_password("staff123"),
                role=UserRole.EMPLOYEE.value
            )
            for i in range(2)
        ]
        db.add_all([owner, *staff_members])
        db.commit()

        categories = [models.Category(name=name, owner_id=owner.id) for name in ["Boutique", "Projets", "Maison"]]
        db.add_all(categories)
        db.commit()

        for category in categories:
            cashbook = models.Cashbook(
                category_id=category.id,
                name=f"{category.name} - Caisse",
                owner_id=owner.id
            )
            db.add(cashbook)
            db.flush()

            for member in staff_members:
                db.add(models.CashbookStaff(
                    cashbook_id=cashbook.id,
                    user_id=member.id,
                    role=UserRole.EMPLOYEE.value,
                    can_edit=True,
                    can_archive=False
                ))

            for days_ago in range(90):
                date = datetime.utcnow() - timedelta(days=days_ago)

                # 1-3 entrées par jour
                for _ in range(random.randint(1, 3)):
                    db.add(models.Entry(
                        cashbook_id=cashbook.id,
                        type=EntryType.IN.value,
                        amount=random.randint(500, 20000),
                        description="Vente",
                        payment_method=random.choice(list(PaymentMethod)).value,
                        created_by=random.choice(staff_members).id,
                        created_at=date
                    ))

                # Sorties 2-3 fois par semaine
                if random.random() < 0.3:
                    db.add(models.Entry(
                        cashbook_id=cashbook.id,
                        type=EntryType.OUT.value,
                        amount=random.randint(1000, 8000),
                        description=random.choice(["Loyer", "Salaires", "Fournitures", "Transport"]),
                        created_by=owner.id,
                        created_at=date
                    ))

        db.commit()
        print("✅ Données de démo générées avec succès!")
        print("👤 Propriétaire: 01700000000 / demo123")
    finally:
        db.close()

if __name__ == "__main__":
    generate_test_data()
