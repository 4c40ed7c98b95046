# CASHBOOK/backend/cashbook/config.py

import os
from dotenv import load_dotenv
from pathlib import Path

# Trouve le chemin absolu du dossier contenant ce fichier (cashbook/)
BASE_DIR = Path(__file__).parent.absolute()
env_path = BASE_DIR / '.env'

# Charge les variables depuis le fichier .env
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
    print(f"✅ Fichier .env chargé depuis: {env_path}")

# ============================================
# CONFIGURATION ENVIRONNEMENT
# ============================================
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# ============================================
# CONFIGURATION BASE DE DONNÉES
# ============================================
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    # En production, on veut lever une erreur
    if ENVIRONMENT == "production":
        raise ValueError("DATABASE_URL must be set in production")
    DATABASE_URL = "sqlite:///./cashbook.db"

# ============================================
# CONFIGURATION JWT / AUTH
# ============================================
SECRET_KEY = os.getenv("SECRET_KEY", "change_this_secret_key_in_production")
if SECRET_KEY == "change_this_secret_key_in_production" and ENVIRONMENT == "production":
    raise ValueError("SECRET_KEY must be changed in production")

ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24 heures par défaut

# ============================================
# SESSION CLIENT (identité en cache)
# ============================================
SESSION_CACHE_PATH = Path(
    os.getenv("SESSION_CACHE_PATH", str(Path.home() / ".cashbook" / "session.json"))
)

# ============================================
# CONFIGURATION CORS (Frontend)
# ============================================
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")

# ============================================
# LOGGING
# ============================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def is_production():
    """Vérifie si on est en production"""
    return ENVIRONMENT == "production"

def is_development():
    """Vérifie si on est en développement"""
    return ENVIRONMENT == "development"
