# storefront/repos/local_store.py
import json
from typing import List

import redis
from pydantic import ValidationError

from storefront.domain.schemas import StoredItem, item_model
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, LOCAL_STORE_NAMESPACE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def connect(url: str | None = None) -> redis.Redis:
    return redis.Redis.from_url(url or REDIS_URL, decode_responses=True)


def parse_items(list_name: str, raw: list, source: str) -> List[StoredItem]:
    """
    Zamienia surowa tablice na modele.
    - zle wpisy sa pomijane (z warningiem)
    - duplikaty id: zostaje pierwszy
    """
    model = item_model(list_name)
    items: List[StoredItem] = []
    seen = set()

    for entry in raw:
        try:
            item = model.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Dropping malformed {list_name} entry from {source}: {e.errors()[:1]}")
            continue

        if item.id in seen:
            logger.warning(f"Dropping duplicate {list_name} id {item.id} from {source}")
            continue

        seen.add(item.id)
        items.append(item)

    return items


class LocalStore:
    """
    Magazyn lokalny urzadzenia (key-value, wartosc = JSON array).
    -klucze `cart` i `wishlist`, opcjonalnie z prefiksem przestrzeni nazw
    -zapis calej listy jednym SET, wiec czytajacy nie widzi polowy zapisu
    -zepsuty JSON = pusta lista, nigdy wyjatek
    """

    def __init__(self, client: redis.Redis | None = None, namespace: str | None = None):
        self.redis = client if client is not None else connect()
        self.namespace = LOCAL_STORE_NAMESPACE if namespace is None else namespace

    def key(self, list_name: str) -> str:
        if self.namespace:
            return f"{self.namespace}:{list_name}"
        return list_name

    def scoped(self, namespace: str) -> "LocalStore":
        #ten sam klient, inny prefiks (np. mirror zalogowanego usera)
        prefix = f"{self.namespace}:{namespace}" if self.namespace else namespace
        return LocalStore(self.redis, prefix)

    @redis_retry()
    def _get(self, key: str) -> str | None:
        return self.redis.get(key)

    def load(self, list_name: str) -> List[StoredItem]:
        key = self.key(list_name)
        blob = self._get(key)

        if blob is None:
            return []

        try:
            raw = json.loads(blob)
        except (TypeError, ValueError) as e:
            logger.warning(f"Malformed JSON under {key}, treating as empty: {e}")
            return []

        if not isinstance(raw, list):
            logger.warning(f"Value under {key} is not a list, treating as empty")
            return []

        return parse_items(list_name, raw, key)

    @redis_retry()
    def save(self, list_name: str, items: List[StoredItem]) -> None:
        key = self.key(list_name)
        payload = json.dumps([item.to_doc() for item in items])
        self.redis.set(key, payload)
        logger.debug(f"Saved {len(items)} items under {key}")

    @redis_retry()
    def clear(self, list_name: str) -> None:
        key = self.key(list_name)
        self.redis.delete(key)
        logger.info(f"Cleared local list {key}")
