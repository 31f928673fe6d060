# storefront/main.py
import requests

from storefront.repos.local_cart_repo import LocalCartRepo
from storefront.repos.session_repo import SessionRepo
from storefront.repos.storage import KeyValueStorage, build_storage
from storefront.services.api_client import ApiClient
from storefront.services.auth_service import AuthService
from storefront.services.cart_client import CartClient
from storefront.services.cart_reconciler import CartReconciler
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.product_client import ProductClient
from storefront.services.product_resolver import ProductResolver
from storefront.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


class Storefront:
    """Obiekty sesji aplikacji, przekazywane jawnie do warstwy UI."""

    def __init__(
        self,
        api: ApiClient,
        auth: AuthService,
        cart: CartService,
        orders: OrderService,
        notifications: NotificationService,
    ):
        self.api = api
        self.auth = auth
        self.cart = cart
        self.orders = orders
        self.notifications = notifications

    def close(self) -> None:
        self.cart.close()
        self.api.session.close()


def create_storefront(
    api_url: str | None = None,
    storage: KeyValueStorage | None = None,
    storage_url: str | None = None,
    merge_on_login: bool | None = None,
    http_session: requests.Session | None = None,
) -> Storefront:
    configure_logging()
    storage = storage or build_storage(storage_url)
    session_repo = SessionRepo(storage)
    local_repo = LocalCartRepo(storage)

    api = ApiClient(base_url=api_url, token_provider=session_repo.get_token, session=http_session)
    notifications = NotificationService()
    auth = AuthService(api, session_repo)

    cart_client = CartClient(api)
    resolver = ProductResolver(ProductClient(api), local_repo)
    reconciler = CartReconciler(cart_client, resolver, local_repo, merge_on_login=merge_on_login)
    cart = CartService(auth, reconciler, cart_client, local_repo, notifications)
    orders = OrderService(api, auth, cart, notifications)

    # stan poczatkowy: jednorazowo, wg tokenu zapisanego w magazynie
    cart.load()
    logger.info(
        f"Storefront ready (authenticated={auth.is_authenticated}, "
        f"cart lines={len(cart.items)})"
    )
    return Storefront(api, auth, cart, orders, notifications)
