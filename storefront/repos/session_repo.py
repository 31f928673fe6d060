# storefront/repos/session_repo.py
import json
from typing import Optional

from pydantic import ValidationError

from storefront.domain.schemas import AuthSession, User
from storefront.repos.storage import KeyValueStorage
from storefront.utils.settings import TOKEN_STORAGE_KEY, USER_STORAGE_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SessionRepo:
    def __init__(
        self,
        storage: KeyValueStorage,
        token_key: str | None = None,
        user_key: str | None = None,
    ):
        self.storage = storage
        self.token_key = token_key or TOKEN_STORAGE_KEY
        self.user_key = user_key or USER_STORAGE_KEY

    def get_token(self) -> Optional[str]:
        return self.storage.get(self.token_key) or None

    def get_user(self) -> Optional[User]:
        raw = self.storage.get(self.user_key)
        if raw is None:
            return None
        try:
            return User.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Corrupt stored user, dropping: {e}")
            self.storage.delete(self.user_key)
            return None

    def save(self, session: AuthSession) -> None:
        self.storage.set(self.token_key, session.token)
        self.storage.set(self.user_key, json.dumps(session.user.to_wire()))

    def clear(self) -> None:
        self.storage.delete(self.token_key)
        self.storage.delete(self.user_key)
