# CASHBOOK/backend/cashbook/session.py : session client avec identité en cache

"""
Session côté client.

L'identité de l'utilisateur connecté est mise en cache dans un fichier JSON.
Au chargement (`restore`), elle est revalidée contre la base: si le mot de
passe enregistré ne correspond plus, la session est fermée. Si la base est
injoignable, on continue avec la dernière identité connue (mode hors ligne),
sans revalidation.
"""

from pathlib import Path
from typing import Callable, Optional
import logging

from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from cashbook.auth import verify_password
from cashbook.config import SESSION_CACHE_PATH
from cashbook.database import SessionLocal
from cashbook.models import models
from cashbook.schemas.schemas import CachedIdentity

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Téléphone ou mot de passe incorrect"""


def fetch_identity(phone: str) -> Optional[CachedIdentity]:
    """Recharge un utilisateur depuis la base à partir de son téléphone"""
    db = SessionLocal()
    try:
        user = db.query(models.User).filter(models.User.phone == phone.strip()).first()
        return CachedIdentity.model_validate(user) if user else None
    finally:
        db.close()


class IdentitySession:
    """Identité courante + cache persistant"""

    def __init__(
        self,
        cache_path: Optional[Path] = None,
        lookup: Callable[[str], Optional[CachedIdentity]] = fetch_identity
    ):
        self.cache_path = Path(cache_path or SESSION_CACHE_PATH)
        self.lookup = lookup
        self.user: Optional[CachedIdentity] = None
        self.is_online = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _read_cache(self) -> Optional[CachedIdentity]:
        if not self.cache_path.exists():
            return None
        try:
            return CachedIdentity.model_validate_json(self.cache_path.read_text(encoding="utf-8"))
        except ValidationError:
            logger.warning(f"⚠️ Cache de session illisible, ignoré: {self.cache_path}")
            return None

    def _write_cache(self, identity: CachedIdentity):
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.cache_path.write_text(identity.model_dump_json(), encoding="utf-8")

    def restore(self) -> Optional[CachedIdentity]:
        """Recharge et revalide l'identité en cache"""
        cached = self._read_cache()
        if cached is None:
            self.user = None
            return None

        try:
            fresh = self.lookup(cached.phone)
        except OperationalError as e:
            # Base injoignable: dernière identité connue, sans revalidation
            logger.warning(f"📴 Base injoignable, session hors ligne pour {cached.phone}: {e}")
            self.user = cached
            self.is_online = False
            return self.user

        self.is_online = True
        if fresh is not None and fresh.password_hash == cached.password_hash:
            self._write_cache(fresh)
            self.user = fresh
            return self.user

        logger.info(f"🔒 Session invalidée pour {cached.phone}")
        self.logout()
        return None

    def login(self, phone: str, password: str) -> CachedIdentity:
        identity = self.lookup(phone)
        if identity is None or not verify_password(password, identity.password_hash):
            raise AuthenticationError("Téléphone ou mot de passe incorrect")
        self._write_cache(identity)
        self.user = identity
        self.is_online = True
        logger.info(f"✅ Connecté: {identity.phone}")
        return identity

    def logout(self):
        if self.cache_path.exists():
            self.cache_path.unlink()
        self.user = None
