# storefront/api/routers/health.py
from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    context = request.app.state.storefront.engine.context
    return {"status": "ok", "session_ready": context.ready.is_set()}
