"""Direct SQL execution endpoint."""
from fastapi import APIRouter, Depends, HTTPException

from tabchat.api.deps import get_store
from tabchat.api.schemas.execute import ExecuteRequest, ExecuteResponse
from tabchat.infra.db.store import TabularStore
from tabchat.services.query_service import QueryExecutor

router = APIRouter(prefix="/api", tags=["execute"])


@router.post("/execute", response_model=ExecuteResponse)
def execute(payload: ExecuteRequest, store: TabularStore = Depends(get_store)) -> ExecuteResponse:
    """Always 200 for query failures; the body carries ``ok: false`` and the reason."""
    if not payload.sql.strip():
        raise HTTPException(status_code=400, detail="Missing sql")
    result = QueryExecutor(store).execute(payload.sql, payload.limit)
    if result.executed:
        return ExecuteResponse(ok=True, sql=result.sql, fields=result.fields, rows=result.rows)
    return ExecuteResponse(ok=False, sql=result.sql, error=result.error, kind=result.kind)
