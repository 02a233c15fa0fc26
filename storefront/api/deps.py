# storefront/api/deps.py
from fastapi import HTTPException, Request

from storefront.domain.result import Err, ErrorKind
from storefront.services.storefront_service import StorefrontService

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.MALFORMED_DATA: 502,
    ErrorKind.TRANSPORT_FAILURE: 503,
}


def get_storefront(request: Request) -> StorefrontService:
    svc: StorefrontService = request.app.state.storefront
    #pierwsze zapytanie czeka (raz) az dostawca tozsamosci poda sesje
    svc.engine.wait_ready(request.app.state.ready_timeout)
    return svc


def raise_for_error(result: Err):
    raise HTTPException(status_code=STATUS_BY_KIND.get(result.kind, 500), detail=result.message)
