# storefront/services/auth_service.py
from typing import Callable, Optional

from pydantic import ValidationError

from storefront.domain.schemas import AuthSession, User
from storefront.repos.session_repo import SessionRepo
from storefront.services.api_client import ApiClient, ApiError
from storefront.utils.listeners import Listeners
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """
    Stan uwierzytelnienia sesji aplikacji.

    Stan poczatkowy wynika z tokenu zapisanego w magazynie lokalnym.
    Subskrybenci dostaja True/False tylko przy faktycznej zmianie stanu.
    """

    def __init__(self, api: ApiClient, session_repo: SessionRepo):
        self.api = api
        self.session_repo = session_repo
        self._listeners: Listeners[bool] = Listeners()
        self._user: Optional[User] = session_repo.get_user()
        self._authenticated = session_repo.get_token() is not None

    @property
    def token(self) -> Optional[str]:
        return self.session_repo.get_token()

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    @property
    def is_admin(self) -> bool:
        return bool(self._user and self._user.is_admin)

    def subscribe(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        return self._listeners.subscribe(listener)

    # =====================================================
    # COMMANDS
    # =====================================================
    def sign_in(self, email: str, password: str) -> User:
        data = self.api.post("/auth/signin", json={"email": email, "password": password})
        return self._start_session(data, "Login failed")

    def sign_up(self, name: str, email: str, password: str) -> User:
        data = self.api.post(
            "/auth/signup",
            json={"name": name, "email": email, "password": password},
        )
        if not isinstance(data, dict) or not data.get("user"):
            raise ApiError("User data not received")
        return self._start_session(data, "Signup failed")

    def sign_out(self) -> None:
        self.session_repo.clear()
        self._user = None
        logger.info("Signed out")
        self._set_authenticated(False)

    def _start_session(self, data, failure: str) -> User:
        try:
            session = AuthSession.model_validate(data)
        except ValidationError as e:
            logger.error(f"{failure}: malformed session payload ({e.error_count()} errors)")
            raise ApiError(failure)

        previous_token = self.token
        self.session_repo.save(session)
        self._user = session.user
        logger.info(f"Signed in as {session.user.email}")
        # nowy token przy aktywnej sesji = inny koszyk na serwerze
        self._set_authenticated(True, force=previous_token not in (None, session.token))
        return session.user

    def _set_authenticated(self, value: bool, force: bool = False) -> None:
        if value == self._authenticated and not force:
            return
        self._authenticated = value
        self._listeners.emit(value)
