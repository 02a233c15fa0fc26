# storefront/main.py
from fastapi import FastAPI
import uvicorn

from storefront.api import include_routers
from storefront.repos.document_client import DocumentClient
from storefront.repos.local_store import LocalStore
from storefront.repos.remote_store import RemoteStore
from storefront.services.catalog_client import CatalogClient
from storefront.services.notification_service import NotificationService
from storefront.services.reconciliation import ReconciliationEngine
from storefront.services.session import SessionContext
from storefront.services.storefront_service import StorefrontService
from storefront.utils.settings import SESSION_READY_TIMEOUT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def build_storefront(
    context: SessionContext | None = None,
    local: LocalStore | None = None,
    remote: RemoteStore | None = None,
    notifier: NotificationService | None = None,
    catalog: CatalogClient | None = None,
) -> StorefrontService:
    """Sklada silnik i API mutacji, jeden SessionContext na proces."""
    engine = ReconciliationEngine(
        context=context or SessionContext(),
        local=local or LocalStore(),
        remote=remote or RemoteStore(DocumentClient()),
    )
    #silnik subskrybuje zmiany sesji dokladnie raz
    engine.start()

    return StorefrontService(engine=engine, notifier=notifier, catalog=catalog)


def create_app(
    storefront: StorefrontService | None = None,
    ready_timeout: float = SESSION_READY_TIMEOUT,
) -> FastAPI:
    app = FastAPI(
        title="Storefront Sync",
        version="1.0.0",
    )

    app.state.storefront = storefront or build_storefront()
    app.state.ready_timeout = ready_timeout

    include_routers(app)
    logger.info("Storefront sync app created")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
