"""Status endpoint."""
from fastapi import APIRouter, Depends

from tabchat.api.deps import get_store
from tabchat.api.schemas.status import StatusResponse
from tabchat.infra.db.store import TabularStore
from tabchat.services.status_service import StatusService

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/status", response_model=StatusResponse)
def status(store: TabularStore = Depends(get_store)) -> StatusResponse:
    return StatusService(store).status()
