# CASHBOOK/backend/cashbook/database.py

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from cashbook.config import DATABASE_URL, DEBUG
import logging

logger = logging.getLogger(__name__)


def build_engine(url: str):
    """Crée le moteur SQLAlchemy (options de pool selon le dialecte)"""
    if url.startswith("sqlite"):
        # SQLite: une connexion partagée entre les threads de FastAPI
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=DEBUG
        )
    return create_engine(
        url,
        pool_size=5,  # Nombre de connexions permanentes
        max_overflow=10,  # Connexions supplémentaires temporaires
        pool_pre_ping=True,  # Vérifie que la connexion est vivante avant utilisation
        echo=DEBUG
    )


# Création de la connexion à la base de données
try:
    engine = build_engine(DATABASE_URL)
except Exception as e:
    logger.error(f"❌ Erreur de configuration de la base de données: {e}")
    raise

# Session pour interagir avec la base
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base pour créer les modèles (tables)
Base = declarative_base()

# Dependency pour FastAPI
def get_db():
    """
    Dépendance FastAPI pour obtenir une session de base de données.
    À utiliser dans les routes avec: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables(bind=None):
    """Crée toutes les tables définies dans les modèles"""
    # Les modèles doivent être importés pour être enregistrés dans Base.metadata
    from cashbook.models import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
    logger.info("✅ Tables créées/vérifiées avec succès")

def drop_tables(bind=None):
    """Supprime toutes les tables (UTILISER AVEC PRÉCAUTION)"""
    Base.metadata.drop_all(bind=bind or engine)
    logger.warning("⚠️ Toutes les tables ont été supprimées")

def check_connection():
    """Vérifie que la connexion à la base fonctionne"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Erreur de connexion: {e}")
        return False
