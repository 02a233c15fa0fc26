# storefront/api/routers/session.py
from fastapi import APIRouter, Request

from storefront.domain.schemas import SessionIn, SessionOut
from storefront.services.session import Authenticated, Guest

router = APIRouter(prefix="/session", tags=["session"])


def _merge_out(report) -> dict:
    return {
        "merged": report.merged,
        "dropped": report.dropped,
        "pending": report.pending,
        "error": report.error.message if report.error else None,
    }


@router.get("", response_model=SessionOut)
def get_session(request: Request):
    session = request.app.state.storefront.engine.session
    return SessionOut(authenticated=session.authenticated, user_id=session.user_id)


@router.put("")
def put_session(payload: SessionIn, request: Request):
    """
    Dostawca tozsamosci wypycha zmiane sesji (login / logout).
    Przy logowaniu zwraca raport scalenia list goscia.
    """
    context = request.app.state.storefront.engine.context
    session = Authenticated(payload.user_id) if payload.user_id else Guest()

    reports = {}
    for outcome in context.publish(session):
        reports.update(outcome or {})

    return {
        "authenticated": session.authenticated,
        "user_id": session.user_id,
        "merge": {name: _merge_out(report) for name, report in reports.items()},
    }
