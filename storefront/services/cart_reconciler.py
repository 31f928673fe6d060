# storefront/services/cart_reconciler.py
from typing import List

import requests

from storefront.domain.schemas import CartLine
from storefront.repos.local_cart_repo import LocalCartRepo
from storefront.services.api_client import ApiError
from storefront.services.cart_client import CartClient
from storefront.services.product_resolver import ProductResolver
from storefront.utils.settings import CART_MERGE_ON_LOGIN
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartReconciler:
    """
    Wybiera zrodlo koszyka po kazdej zmianie stanu uwierzytelnienia.

    - niezalogowany: snapshot lokalny + hydratacja produktow (z samonaprawa)
    - zalogowany: pelny koszyk z serwera; blad pobrania jest zglaszany wyzej

    Przy logowaniu lokalne pozycje NIE sa domyslnie dolaczane do koszyka
    na serwerze. Z merge_on_login=True sa wysylane przez add() (serwer sumuje
    ilosci per produkt), a snapshot lokalny jest czyszczony.
    """

    def __init__(
        self,
        cart_client: CartClient,
        resolver: ProductResolver,
        local_repo: LocalCartRepo,
        merge_on_login: bool | None = None,
    ):
        self.cart_client = cart_client
        self.resolver = resolver
        self.local_repo = local_repo
        self.merge_on_login = CART_MERGE_ON_LOGIN if merge_on_login is None else merge_on_login

    def load(self, authenticated: bool, login: bool = False) -> List[CartLine]:
        if not authenticated:
            return self.load_local()

        if login and self.merge_on_login:
            self._push_local_entries()

        # brak fallbacku na snapshot lokalny: takie pozycje nie istnialyby na serwerze
        lines = self.cart_client.fetch_all()
        logger.info(f"Loaded {len(lines)} cart lines from backend")
        return lines

    def load_local(self) -> List[CartLine]:
        entries = self.local_repo.load()
        if not entries:
            return []
        lines = self.resolver.resolve_all(entries)
        logger.info(f"Loaded {len(lines)} cart lines from local storage")
        return lines

    def _push_local_entries(self) -> None:
        entries = self.local_repo.load()
        if not entries:
            return

        remaining = []
        for entry in entries:
            try:
                self.cart_client.add(entry.product_id, entry.quantity)
            except (ApiError, requests.RequestException) as e:
                logger.warning(f"Could not merge {entry.product_id} into backend cart: {e}")
                remaining.append(entry)

        logger.info(f"Merged {len(entries) - len(remaining)} local cart entries into backend cart")
        if remaining:
            self.local_repo.save(remaining)
        else:
            self.local_repo.clear()
