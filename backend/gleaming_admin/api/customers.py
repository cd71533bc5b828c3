"""
Customers API Endpoints
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from gleaming_admin.core.exceptions import NotFoundError
from gleaming_admin.domain.customer import CustomerInput
from gleaming_admin.services.customer_service import CustomerService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_customers(
    search: Optional[str] = Query(None, description="Search by name or email"),
):
    try:
        customers = CustomerService().list_customers(search=search)
        return {
            "status": "success",
            "count": len(customers),
            "data": [customer.to_dict() for customer in customers]
        }

    except Exception as e:
        logger.error(f"Error fetching customers: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching customers: {str(e)}")


@router.get("/{customer_id}")
async def get_customer(customer_id: str):
    try:
        customer = CustomerService().get_customer(customer_id)
        return {
            "status": "success",
            "data": customer.to_dict()
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching customer: {str(e)}")


@router.post("/", status_code=201)
async def create_customer(payload: CustomerInput):
    """
    Create a customer record

    Only the record is created; the customer needs an auth account before
    they can sign in.
    """
    try:
        customer = CustomerService().create_customer(payload)
        return {
            "status": "success",
            "message": f'The customer "{customer.full_name}" has been successfully saved.',
            "data": customer.to_dict()
        }

    except Exception as e:
        logger.error(f"Error creating customer: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating customer: {str(e)}")


@router.put("/{customer_id}")
async def update_customer(customer_id: str, payload: CustomerInput):
    try:
        customer = CustomerService().update_customer(customer_id, payload)
        return {
            "status": "success",
            "message": f'The customer "{customer.full_name}" has been successfully updated.',
            "data": customer.to_dict()
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating customer {customer_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating customer: {str(e)}")


@router.delete("/{customer_id}")
async def delete_customer(customer_id: str):
    """Delete a customer record; their orders are kept"""
    try:
        CustomerService().delete_customer(customer_id)
        return {
            "status": "success",
            "message": "The customer has been successfully deleted."
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting customer {customer_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting customer: {str(e)}")


@router.get("/{customer_id}/orders")
async def get_customer_orders(customer_id: str):
    """A customer's order history, newest first"""
    try:
        orders = CustomerService().customer_order_history(customer_id)
        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order history: {str(e)}")
