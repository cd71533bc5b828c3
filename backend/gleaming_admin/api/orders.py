"""
Orders API Endpoints
Order tracking, shipping-status workflow and invoices

Orders are addressed by the customer they belong to and their own id:
/orders/{user_id}/{order_id}.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response

from gleaming_admin.core.exceptions import (
    EmptyInvoiceError,
    NotFoundError,
    TransactionConflictError,
)
from gleaming_admin.domain.order import OrderDetailsUpdate, StatusUpdate
from gleaming_admin.services.invoice_service import generate_invoice_pdf, invoice_filename
from gleaming_admin.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_orders(
    search: Optional[str] = Query(None, description="Search by order id, customer name or email"),
):
    """
    Get every order of every customer, newest first

    Customer name and email come from the customer records.
    """
    try:
        orders = OrderService().list_orders(search=search)

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        logger.error(f"Error fetching orders: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/{user_id}/{order_id}")
async def get_order(user_id: str, order_id: str):
    try:
        order = OrderService().get_order(user_id, order_id)
        return {
            "status": "success",
            "data": order.to_dict()
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.get("/{user_id}/{order_id}/items")
async def get_order_items(user_id: str, order_id: str):
    """
    Get an order's line items with catalog stock, GST and delivery estimates
    """
    try:
        items = OrderService().list_order_items(user_id, order_id)
        return {
            "status": "success",
            "count": len(items),
            "data": [item.model_dump() for item in items]
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order items: {str(e)}")


@router.patch("/{user_id}/{order_id}/status")
async def update_order_status(user_id: str, order_id: str, payload: StatusUpdate):
    """
    Change an order's status

    Moving to Processing, Shipped or Delivered takes the ordered units out of
    stock (once); cancelling an order whose stock was taken puts it back.
    """
    try:
        result = OrderService().change_order_status(user_id, order_id, payload.order_status)

        if result.changed:
            number = order_id[:6].upper()
            message = f"Order #{number} status changed to {result.new_status}."
        else:
            message = f"Order is already {result.new_status}."

        return {
            "status": "success",
            "message": message,
            "data": result.model_dump()
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransactionConflictError as e:
        logger.error(f"Status update for {user_id}/{order_id} gave up: {e}")
        raise HTTPException(status_code=409, detail="Could not update the order status. Please try again.")
    except Exception as e:
        logger.error(f"Order status update failed for {user_id}/{order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")


@router.put("/{user_id}/{order_id}")
async def update_order(user_id: str, order_id: str, payload: OrderDetailsUpdate):
    """Edit an order's status, tracking number and carrier"""
    try:
        order = OrderService().update_order_details(user_id, order_id, payload)
        return {
            "status": "success",
            "message": f"Order #{order.order_id or order.id[:6]} has been updated.",
            "data": order.to_dict()
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransactionConflictError as e:
        logger.error(f"Order update for {user_id}/{order_id} gave up: {e}")
        raise HTTPException(status_code=409, detail="Could not update the order status. Please try again.")
    except Exception as e:
        logger.error(f"Error updating order {user_id}/{order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating order: {str(e)}")


@router.delete("/{user_id}/{order_id}")
async def delete_order(user_id: str, order_id: str):
    """Delete an order and its line items"""
    try:
        OrderService().delete_order(user_id, order_id)
        return {
            "status": "success",
            "message": "The order has been successfully deleted."
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting order {user_id}/{order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting order: {str(e)}")


@router.get("/{user_id}/{order_id}/invoice")
async def download_invoice(user_id: str, order_id: str):
    """
    Download the order's invoice as a PDF

    Returns:
        application/pdf attachment named invoice-<NUMBER>.pdf
    """
    try:
        service = OrderService()
        order = service.get_order(user_id, order_id)
        items = service.list_order_items(user_id, order_id)
        pdf = generate_invoice_pdf(order, items)

        return Response(
            content=pdf,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f"attachment; filename={invoice_filename(order)}"
            }
        )

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EmptyInvoiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating invoice for {user_id}/{order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error generating invoice: {str(e)}")
