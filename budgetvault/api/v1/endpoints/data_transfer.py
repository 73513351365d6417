"""
API endpoints for exporting and importing a user's complete dataset.
"""

import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from budgetvault.api.dependencies import get_current_active_user, get_data_transfer_service
from budgetvault.core.config import settings
from budgetvault.core.exceptions import (
    InvalidSnapshotError,
    SnapshotExportError,
    SnapshotImportError,
    UnsupportedSnapshotVersionError,
)
from budgetvault.models.user import User
from budgetvault.schemas.data_transfer import ImportMode, ImportOptions, ImportRequest, ImportResult
from budgetvault.schemas.snapshot import Snapshot
from budgetvault.services.data_transfer import DataTransferService

router = APIRouter()

INVALID_FORMAT = "Invalid data format"


def _is_json_media_type(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def _check_size(size: int) -> None:
    if size > settings.import_max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"Import file exceeds {settings.import_max_bytes} bytes",
        )


def _decode_json(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise HTTPException(status_code=400, detail=INVALID_FORMAT)


async def _run_import(
    service: DataTransferService,
    current_user: User,
    document: Any,
    options: ImportOptions,
) -> ImportResult:
    # The caller always owns what they import
    if isinstance(document, dict):
        document = {**document, "user_id": current_user.id}

    try:
        return await service.import_user_data(
            user_id=current_user.id,
            document=document,
            mode=options.mode,
            dry_run=options.dry_run,
        )
    except UnsupportedSnapshotVersionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidSnapshotError:
        raise HTTPException(status_code=400, detail=INVALID_FORMAT)
    except SnapshotImportError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/export", response_model=Snapshot)
async def export_data(
    download: bool = Query(False, description="Return the snapshot as a file attachment"),
    current_user: User = Depends(get_current_active_user),
    service: DataTransferService = Depends(get_data_transfer_service),
) -> Any:
    """
    Export all templates, budgets, transactions and savings goals of the current user.
    """
    try:
        snapshot = await service.export_user_data(current_user.id)
    except SnapshotExportError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if download:
        filename = f"budget-export-{snapshot.exported_at.date().isoformat()}.json"
        return JSONResponse(
            content=snapshot.model_dump(mode="json"),
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    return snapshot


@router.post("/import", response_model=ImportResult)
async def import_data(
    request: Request,
    current_user: User = Depends(get_current_active_user),
    service: DataTransferService = Depends(get_data_transfer_service),
) -> Any:
    """
    Import a snapshot sent as ``{"data": <snapshot>, "options": {"mode", "dryRun"}}``.

    Records the store rejects are listed in ``errors``; the rest are imported.
    """
    if not _is_json_media_type(request.headers.get("content-type")):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only JSON documents are supported",
        )

    # Refuse oversized bodies before reading them
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        _check_size(int(content_length))

    body = await request.body()
    _check_size(len(body))

    try:
        import_request = ImportRequest.model_validate(_decode_json(body))
    except ValidationError:
        raise HTTPException(status_code=400, detail=INVALID_FORMAT)

    return await _run_import(service, current_user, import_request.data, import_request.options)


@router.post("/import/file", response_model=ImportResult)
async def import_data_file(
    file: UploadFile = File(..., description="Snapshot JSON file"),
    mode: ImportMode = Query(ImportMode.REPLACE, description="Import strategy"),
    dry_run: bool = Query(False, alias="dryRun", description="Validate without importing"),
    current_user: User = Depends(get_current_active_user),
    service: DataTransferService = Depends(get_data_transfer_service),
) -> Any:
    """
    Import a snapshot uploaded as a JSON file.
    """
    filename = (file.filename or "").lower()
    if not (_is_json_media_type(file.content_type) or filename.endswith(".json")):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only JSON files are supported",
        )

    content = await file.read(settings.import_max_bytes + 1)
    _check_size(len(content))

    return await _run_import(
        service,
        current_user,
        _decode_json(content),
        ImportOptions(mode=mode, dry_run=dry_run),
    )
