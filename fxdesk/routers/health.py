from fastapi import APIRouter, Depends, Request

from fxdesk.models.rates import HealthOut
from fxdesk.routers.deps import get_rate_store
from fxdesk.services.rates.store import RateStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut, summary="Liveness and rate table state")
async def health(request: Request, store: RateStore = Depends(get_rate_store)):
    """Report 'degraded' when the rate file could not be read at startup."""
    return HealthOut(
        status="degraded" if store.load_failed else "ok",
        rates_loaded=store.state.value,
        currencies=len(store),
        version=request.app.state.settings.version,
    )
