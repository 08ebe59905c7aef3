from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from boutique.core.dependencies import get_store
from boutique.core.store import RecordStore
from boutique.schemas.backup import ImportResult
from boutique.services.backup_service import (
    backup_filename,
    export_backup_json,
    import_all_data,
)

router = APIRouter()


@router.get("/export")
def export_backup(store: RecordStore = Depends(get_store)):
    """Download all six collections as one JSON backup file."""
    return Response(
        content=export_backup_json(store),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


@router.post("/import", response_model=ImportResult)
async def import_backup(request: Request, store: RecordStore = Depends(get_store)):
    """
    Restore a backup file. Overwrites every collection present in the file;
    a malformed file changes nothing.
    """
    # Raw body so that malformed JSON is reported as ImportFailed, not 422
    body = await request.body()
    return await run_in_threadpool(import_all_data, store, body)
