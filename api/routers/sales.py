"""
Sales API Endpoints.

CRUD endpoints for the ledger plus the dashboard aggregates. Every successful
write runs the notification sync before the response is sent; notification
failures never fail the request.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_notification_sync, get_sale_service
from api.models import (
    DeleteResponse,
    SaleCreateRequest,
    SaleResponse,
    SaleUpdateRequest,
    SummaryResponse,
    SyncResponse,
)
from domain.summary import summarize
from repositories.sale_repository import SaleNotFoundError
from services.sale_service import SaleService
from services.sync_service import NotificationSync

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/sales",
    response_model=List[SaleResponse],
    summary="List Sales",
    description="List every sale, oldest first."
)
def list_sales(service: SaleService = Depends(get_sale_service)):
    try:
        return [SaleResponse.from_sale(sale) for sale in service.list_sales()]
    except Exception as e:
        logger.exception("Failed to list sales")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list sales: {str(e)}"
        )


@router.post(
    "/sales",
    response_model=SaleResponse,
    summary="Record Sale",
    description="Record a new sale and refresh the webhook dashboard."
)
def create_sale(request: SaleCreateRequest, service: SaleService = Depends(get_sale_service)):
    """
    Record a new sale.

    **Example request:**
    ```json
    {
      "name": "FW PRO",
      "value": 800,
      "buyer": "Maria",
      "status": "pending"
    }
    ```

    `buyer` defaults to "Não informado" and `status` to "pending".
    """
    try:
        sale = service.create_sale(
            name=request.name,
            value=request.value,
            buyer=request.buyer,
            status=request.status,
        )
        return SaleResponse.from_sale(sale)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to create sale")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to create sale: {str(e)}"
        )


@router.put(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    summary="Update Sale",
    description="Update name, value, buyer and/or status of a sale."
)
def update_sale(
    sale_id: str,
    request: SaleUpdateRequest,
    service: SaleService = Depends(get_sale_service),
):
    try:
        sale = service.update_sale(
            sale_id,
            name=request.name,
            value=request.value,
            buyer=request.buyer,
            status=request.status,
        )
        return SaleResponse.from_sale(sale)

    except SaleNotFoundError:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to update sale %s", sale_id)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to update sale: {str(e)}"
        )


@router.delete(
    "/sales/{sale_id}",
    response_model=DeleteResponse,
    summary="Delete Sale"
)
def delete_sale(sale_id: str, service: SaleService = Depends(get_sale_service)):
    try:
        service.delete_sale(sale_id)
        return DeleteResponse(success=True)

    except SaleNotFoundError:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    except Exception as e:
        logger.exception("Failed to delete sale %s", sale_id)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to delete sale: {str(e)}"
        )


@router.get(
    "/summary",
    response_model=SummaryResponse,
    summary="Sales Summary",
    description="Total revenue, per-status subtotals and net profit."
)
def get_summary(service: SaleService = Depends(get_sale_service)):
    try:
        return SummaryResponse.from_summary(summarize(service.list_sales()))
    except Exception as e:
        logger.exception("Failed to build summary")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build summary: {str(e)}"
        )


@router.post(
    "/sync",
    response_model=SyncResponse,
    summary="Sync Notification",
    description="Republish the webhook dashboard without changing any sale."
)
def sync_notification(sync: Optional[NotificationSync] = Depends(get_notification_sync)):
    if sync is None:
        raise HTTPException(status_code=503, detail="Notification sync is not available")

    result = sync.sync()
    if result is None:
        raise HTTPException(status_code=500, detail="Notification sync failed; see server logs")

    return SyncResponse(
        outcome=result.outcome.value,
        tracking_message=result.state.is_tracking,
        error=result.error,
    )
