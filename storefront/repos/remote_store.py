# storefront/repos/remote_store.py
from typing import Any, Dict, List

import requests
from pydantic import ValidationError

from storefront.domain import lists
from storefront.domain.result import Err, ErrorKind, Ok, Result
from storefront.domain.schemas import StoredItem, item_model
from storefront.repos.document_client import DocumentClient
from storefront.repos.local_store import parse_items
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class RemoteStore:
    """
    Listy `cart` / `wishlist` w dokumencie usera.
    -fetch / replace na calej liscie
    -add_one / remove_one / update_one jako read-modify-write na swiezym odczycie
    -brak lockow miedzy klientami, zgubiony update przy wyscigu jest akceptowany
    Nigdy nie rzuca, zawsze zwraca Ok / Err.
    """

    def __init__(self, client: DocumentClient):
        self.client = client

    #query
    def fetch(self, user_id: str, list_name: str) -> Result:
        try:
            doc = self.client.get_document(user_id)
        except requests.JSONDecodeError as e:
            logger.error(f"Remote document for user {user_id} is not valid JSON: {e}")
            return Err(ErrorKind.MALFORMED_DATA, f"Could not read {list_name}: {e}")
        except requests.RequestException as e:
            logger.error(f"Fetch {list_name} for user {user_id} failed: {e}")
            return Err(ErrorKind.TRANSPORT_FAILURE, f"Could not load {list_name}: {e}")

        if doc is None:
            return Err(ErrorKind.NOT_FOUND, f"No document for user {user_id}")

        if not isinstance(doc, dict):
            logger.error(f"Remote document for user {user_id} is not an object")
            return Err(ErrorKind.MALFORMED_DATA, f"Unexpected {list_name} document for user {user_id}")

        raw = doc.get(list_name)
        if raw is None:
            return Ok([])

        if not isinstance(raw, list):
            logger.warning(f"Remote {list_name} for user {user_id} is not a list, treating as empty")
            return Ok([])

        return Ok(parse_items(list_name, raw, f"users/{user_id}"))

    #commands
    def replace(self, user_id: str, list_name: str, items: List[StoredItem]) -> Result:
        payload = {list_name: [item.to_doc() for item in items]}

        try:
            self.client.merge_document(user_id, payload)
        except requests.RequestException as e:
            logger.error(f"Replace {list_name} for user {user_id} failed: {e}")
            return Err(ErrorKind.TRANSPORT_FAILURE, f"Could not save {list_name}: {e}")

        logger.info(f"Replaced {list_name} for user {user_id} ({len(items)} items)")
        return Ok(list(items))

    def latest(self, user_id: str, list_name: str) -> Result:
        #brak dokumentu = pusta lista, pierwszy zapis go utworzy
        result = self.fetch(user_id, list_name)
        if not result.ok and result.kind == ErrorKind.NOT_FOUND:
            return Ok([])
        return result

    def add_one(self, user_id: str, list_name: str, item: StoredItem) -> Result:
        latest = self.latest(user_id, list_name)
        if not latest.ok:
            return latest

        if lists.find(latest.items, item.id) is not None:
            #juz jest na liscie, bez zapisu
            return Ok(latest.items, changed=False)

        return self.replace(user_id, list_name, lists.add(latest.items, item))

    def remove_one(self, user_id: str, list_name: str, item_id: str) -> Result:
        latest = self.latest(user_id, list_name)
        if not latest.ok:
            return latest

        items = lists.remove(latest.items, item_id)
        if items is None:
            return Err(ErrorKind.NOT_FOUND, f"Item {item_id} not found in {list_name}", latest.items)

        return self.replace(user_id, list_name, items)

    def update_one(self, user_id: str, list_name: str, item_id: str, patch: Dict[str, Any]) -> Result:
        latest = self.latest(user_id, list_name)
        if not latest.ok:
            return latest

        current = lists.find(latest.items, item_id)
        if current is None:
            return Err(ErrorKind.NOT_FOUND, f"Item {item_id} not found in {list_name}", latest.items)

        if "quantity" in patch and patch["quantity"] <= 0:
            items = lists.remove(latest.items, item_id)
        else:
            data = {**current.to_doc(), **patch, "id": item_id}
            try:
                updated = item_model(list_name).model_validate(data)
            except ValidationError as e:
                return Err(ErrorKind.INVALID_INPUT, f"Invalid update for {item_id}: {e.errors()[:1]}", latest.items)
            items = [updated if i.id == item_id else i for i in latest.items]

        return self.replace(user_id, list_name, items)
