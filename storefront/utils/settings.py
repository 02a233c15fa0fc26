# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
LOCAL_STORE_NAMESPACE = os.getenv("LOCAL_STORE_NAMESPACE", "")
REMOTE_STORE_URL = os.getenv("REMOTE_STORE_URL", "http://document-store:8080")
REMOTE_STORE_TOKEN = os.getenv("REMOTE_STORE_TOKEN", "")
REMOTE_STORE_TIMEOUT = float(os.getenv("REMOTE_STORE_TIMEOUT", 5))
CATALOG_URL = os.getenv("CATALOG_URL", "http://product-service:8000")
SESSION_READY_TIMEOUT = float(os.getenv("SESSION_READY_TIMEOUT", 10))
FREE_SHIPPING_THRESHOLD = int(os.getenv("FREE_SHIPPING_THRESHOLD", 1000))
SHIPPING_FEE = int(os.getenv("SHIPPING_FEE", 50))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

HTTP_RETRY_ATTEMPTS = int(os.getenv("HTTP_RETRY_ATTEMPTS", 3))
HTTP_RETRY_WAIT_MIN = float(os.getenv("HTTP_RETRY_WAIT_MIN", 0.3))
HTTP_RETRY_WAIT_MAX = float(os.getenv("HTTP_RETRY_WAIT_MAX", 3))
REDIS_RETRY_ATTEMPTS = int(os.getenv("REDIS_RETRY_ATTEMPTS", 3))
REDIS_RETRY_WAIT_MIN = float(os.getenv("REDIS_RETRY_WAIT_MIN", 0.2))
REDIS_RETRY_WAIT_MAX = float(os.getenv("REDIS_RETRY_WAIT_MAX", 2))
