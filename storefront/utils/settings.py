# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

STOREFRONT_API_URL = os.getenv("STOREFRONT_API_URL", "http://localhost:5000/api")
STORAGE_URL = os.getenv("STORAGE_URL", "memory://")
CART_STORAGE_KEY = os.getenv("CART_STORAGE_KEY", "cart")
TOKEN_STORAGE_KEY = os.getenv("TOKEN_STORAGE_KEY", "token")
USER_STORAGE_KEY = os.getenv("USER_STORAGE_KEY", "user")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 5))
CART_MERGE_ON_LOGIN = os.getenv("CART_MERGE_ON_LOGIN", "false").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
