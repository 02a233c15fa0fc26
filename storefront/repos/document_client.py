# storefront/repos/document_client.py
from urllib.parse import quote

import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import REMOTE_STORE_URL, REMOTE_STORE_TOKEN, REMOTE_STORE_TIMEOUT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class DocumentClient:
    """
    Klient HTTP do zdalnego magazynu dokumentow (jeden dokument na usera).
    GET   /users/{id} -> dokument albo 404
    PATCH /users/{id} -> merge, pola ktorych nie wyslano zostaja bez zmian
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or REMOTE_STORE_URL).rstrip("/")
        self.timeout = REMOTE_STORE_TIMEOUT if timeout is None else timeout
        self.session = session or requests.Session()

        token = REMOTE_STORE_TOKEN if token is None else token
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, user_id: str) -> str:
        return f"{self.base_url}/users/{quote(user_id, safe='')}"

    @http_retry()
    def get_document(self, user_id: str) -> dict | None:
        url = self._url(user_id)
        logger.info(f"DocumentClient GET {url}")

        resp = self.session.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    @http_retry()
    def merge_document(self, user_id: str, fields: dict) -> None:
        url = self._url(user_id)
        logger.info(f"DocumentClient PATCH {url} fields={sorted(fields)}")

        resp = self.session.patch(url, json=fields, timeout=self.timeout)
        resp.raise_for_status()
