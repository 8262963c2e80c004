"""
Blob Container Pages

FastAPI endpoints for listing, uploading, deleting and renaming product images.

Author: ABC Retail Platform Team
Date: 2025
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import Response

from ...core.templating import render_template
from ..pages import is_blank, see_other
from ..storage import StorageService, get_storage

router = APIRouter(prefix="/blob", tags=["blobs"])


@router.get("", name="list_blobs", summary="List Blobs")
async def list_blobs(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Show blob names in the product image container."""
    blobs = await storage.list_blobs()
    return render_template(request, "blob/index.html", nav_active="blob", blobs=blobs)


@router.post("/upload", summary="Upload Blob")
async def upload_blob(
    request: Request,
    file: Optional[UploadFile] = File(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Upload the posted file under its own name; empty uploads are ignored."""
    if file is not None and file.filename and file.size:
        try:
            await storage.upload_blob(file.filename, file.file)
        finally:
            await file.close()
    return see_other(request, "list_blobs")


@router.post("/delete", summary="Delete Blob")
async def delete_blob(
    request: Request,
    name: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Delete a blob by name; missing blobs are ignored."""
    if not is_blank(name):
        await storage.delete_blob(name)
    return see_other(request, "list_blobs")


@router.get("/rename", name="rename_blob_form", summary="Rename Blob Form")
async def rename_blob_form(
    request: Request,
    name: Optional[str] = Query(None),
) -> Response:
    """
    Show the rename form.

    Raises:
        404 Not Found: Blank name
    """
    if is_blank(name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blob not found")
    return render_template(
        request,
        "rename.html",
        nav_active="blob",
        kind="Blob",
        old_name=name,
        action=request.url_for("rename_blob"),
        back=request.url_for("list_blobs"),
        warning="Renaming copies the blob to the new name and then deletes the original.",
    )


@router.post("/rename", name="rename_blob", summary="Rename Blob")
async def rename_blob(
    request: Request,
    oldName: Optional[str] = Form(None),
    newName: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Rename a blob by copy then delete when both names are given."""
    if not is_blank(oldName) and not is_blank(newName):
        await storage.rename_blob_non_atomic(oldName, newName)
    return see_other(request, "list_blobs")
