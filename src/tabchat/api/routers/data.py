"""CSV catalog endpoints. These read files directly and never touch the Store."""
from fastapi import APIRouter, Depends

from tabchat.api.deps import get_store
from tabchat.api.schemas.data import FileListResponse
from tabchat.domain.models import PreviewResult, TableFile
from tabchat.infra.db.store import TabularStore
from tabchat.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/data", tags=["data"])


@router.get("/files", response_model=FileListResponse)
def list_files(store: TabularStore = Depends(get_store)) -> FileListResponse:
    return FileListResponse(files=CatalogService(store.data_dir).list_tables())


@router.get("/files/{table}", response_model=TableFile)
def get_file(table: str, store: TabularStore = Depends(get_store)) -> TableFile:
    path = CatalogService(store.data_dir).get_file(table)
    return TableFile(name=path.stem, file=path.name)


@router.get("/preview", response_model=PreviewResult)
def preview(
    table: str = "", limit: int | None = None, store: TabularStore = Depends(get_store),
) -> PreviewResult:
    return CatalogService(store.data_dir).preview(table, limit)
