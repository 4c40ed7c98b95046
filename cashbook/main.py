# CASHBOOK/backend/cashbook/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from cashbook.routes import users, categories, cashbooks, staff, entries, reports, notifications
from cashbook.database import check_connection, create_tables
from cashbook.config import ALLOWED_ORIGINS, ENVIRONMENT, LOG_LEVEL
import logging
import datetime
import sys
import fastapi
import sqlalchemy

# Configuration du logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Démarrage de l'API Cashbook...")

    if check_connection():
        logger.info("✅ Connexion à la base de données établie")
        # Création des tables si elles n'existent pas
        create_tables()
    else:
        logger.error("❌ Impossible de se connecter à la base de données")

    yield

    logger.info("👋 Arrêt de l'API Cashbook")

app = FastAPI(
    title="Cashbook API",
    description="Gestion de cashbooks multi-utilisateurs: catégories, personnel, écritures et rapports",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "users",
            "description": "Inscription, connexion et gestion du personnel"
        },
        {
            "name": "categories",
            "description": "Catégories de cashbooks"
        },
        {
            "name": "cashbooks",
            "description": "Cashbooks: création, archivage, corbeille"
        },
        {
            "name": "staff",
            "description": "Assignation du personnel et permissions par cashbook"
        },
        {
            "name": "entries",
            "description": "Écritures d'entrée, de sortie et notes"
        },
        {
            "name": "reports",
            "description": "Rapports agrégés par période 📊"
        },
        {
            "name": "notifications",
            "description": "Notifications des utilisateurs"
        }
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Inclusion des routeurs
app.include_router(users.router)
app.include_router(categories.router)
app.include_router(cashbooks.router)
app.include_router(staff.router)
app.include_router(entries.router)
app.include_router(reports.router)
app.include_router(notifications.router)

@app.get("/")
def root():
    """
    Racine de l'API - Informations générales
    """
    return {
        "success": True,
        "message": "Cashbook backend opérationnel 🚀",
        "version": app.version,
        "environment": ENVIRONMENT,
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "endpoints": {
            "users": "/users",
            "categories": "/categories",
            "cashbooks": "/cashbooks",
            "reports": "/reports",
            "notifications": "/notifications",
            "docs": "/docs"
        },
        "health_check": "/health"
    }

@app.get("/health")
def health_check():
    """
    Endpoint de santé pour le monitoring
    """
    db_status = check_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "version": app.version,
        "timestamp": datetime.datetime.now().isoformat()
    }

@app.get("/info")
def info():
    """
    Informations détaillées sur l'API
    """
    return {
        "name": app.title,
        "description": app.description,
        "version": app.version,
        "python_version": sys.version,
        "fastapi_version": fastapi.__version__,
        "sqlalchemy_version": sqlalchemy.__version__,
        "environment": ENVIRONMENT
    }
