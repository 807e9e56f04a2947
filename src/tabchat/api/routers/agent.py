"""Natural-language agent endpoint."""
from fastapi import APIRouter, Depends

from tabchat.api.deps import get_store
from tabchat.api.schemas.agent import AgentRequest, AgentResponse
from tabchat.infra.db.store import TabularStore
from tabchat.services.agent_service import AgentService

router = APIRouter(prefix="/api", tags=["agent"])


@router.post("/agent", response_model=AgentResponse)
def send_message(payload: AgentRequest, store: TabularStore = Depends(get_store)) -> AgentResponse:
    return AgentService(store).send(payload)
