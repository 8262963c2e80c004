"""
File Share Pages

FastAPI endpoints for listing, uploading, deleting and renaming contract files.

Author: ABC Retail Platform Team
Date: 2025
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import Response

from ...core.templating import render_template
from ..pages import is_blank, see_other
from ..storage import StorageService, get_storage

router = APIRouter(prefix="/files", tags=["files"])


@router.get("", name="list_files", summary="List Files")
async def list_files(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Show file names in the contract share root."""
    files = await storage.list_files()
    return render_template(request, "files/index.html", nav_active="files", files=files)


@router.post("/upload", summary="Upload File")
async def upload_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Upload the posted file with its declared length; empty uploads are ignored."""
    if file is not None and file.filename and file.size:
        try:
            await storage.upload_file(file.filename, file.file, file.size)
        finally:
            await file.close()
    return see_other(request, "list_files")


@router.post("/delete", summary="Delete File")
async def delete_file(
    request: Request,
    name: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Delete a file by name; missing files are ignored."""
    if not is_blank(name):
        await storage.delete_file(name)
    return see_other(request, "list_files")


@router.get("/rename", name="rename_file_form", summary="Rename File Form")
async def rename_file_form(
    request: Request,
    name: Optional[str] = Query(None),
) -> Response:
    """
    Show the rename form.

    Raises:
        404 Not Found: Blank name
    """
    if is_blank(name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return render_template(
        request,
        "rename.html",
        nav_active="files",
        kind="File",
        old_name=name,
        action=request.url_for("rename_file"),
        back=request.url_for("list_files"),
        warning=None,
    )


@router.post("/rename", name="rename_file", summary="Rename File")
async def rename_file(
    request: Request,
    oldName: Optional[str] = Form(None),
    newName: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Rename a file when both names are given."""
    if not is_blank(oldName) and not is_blank(newName):
        await storage.rename_file(oldName, newName)
    return see_other(request, "list_files")
