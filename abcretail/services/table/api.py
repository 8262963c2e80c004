"""
Customer Table Pages

FastAPI endpoints listing, creating, editing and deleting customer profiles.

Author: ABC Retail Platform Team
Date: 2025
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import Response

from ...core.templating import render_template
from ..pages import is_blank, see_other
from ..storage import StorageService, get_storage
from .models import CustomerProfile

router = APIRouter(prefix="/table", tags=["customers"])


@router.get("", name="list_customers", summary="List Customers")
async def list_customers(
    request: Request,
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Show all customer profiles sorted by name."""
    customers = await storage.list_customers()
    return render_template(request, "table/index.html", nav_active="table", customers=customers)


@router.post("/create", summary="Create Customer")
async def create_customer(
    request: Request,
    fullName: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    fav: Optional[str] = Form(None),
    tier: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Create a customer with a freshly generated identifier."""
    await storage.add_customer(CustomerProfile.new(fullName, email, fav, tier))
    return see_other(request, "list_customers")


@router.get("/edit", name="edit_customer_form", summary="Edit Customer Form")
async def edit_customer_form(
    request: Request,
    rowKey: Optional[str] = Query(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """
    Show the edit form for one customer.

    Raises:
        404 Not Found: Blank row key or unknown customer
    """
    if is_blank(rowKey):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

    result = await storage.get_customer(rowKey)
    if not result.found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

    return render_template(request, "table/edit.html", nav_active="table", customer=result.value)


@router.post("/edit", summary="Edit Customer")
async def edit_customer(
    request: Request,
    rowKey: Optional[str] = Form(None),
    fullName: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    fav: Optional[str] = Form(None),
    tier: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """
    Replace an existing customer's editable fields.

    Raises:
        404 Not Found: Blank row key or unknown customer
    """
    if is_blank(rowKey):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

    result = await storage.get_customer(rowKey)
    if not result.found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

    await storage.update_customer(result.value.apply_edits(fullName, email, fav, tier))
    return see_other(request, "list_customers")


@router.post("/delete", summary="Delete Customer")
async def delete_customer(
    request: Request,
    rowKey: Optional[str] = Form(None),
    storage: StorageService = Depends(get_storage),
) -> Response:
    """Delete a customer; unknown identifiers are ignored."""
    if not is_blank(rowKey):
        await storage.delete_customer(rowKey)
    return see_other(request, "list_customers")
