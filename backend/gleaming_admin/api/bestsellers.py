"""
Bestsellers API Endpoints

Bestsellers are products flagged isBestseller. Listings read the live
products (current stock); writes merge into both the products collection and
the bestsellers mirror the storefront reads.
"""
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile

from gleaming_admin.core.exceptions import InvalidUploadError, NotFoundError
from gleaming_admin.domain.product import MetalType, ProductInput
from gleaming_admin.services.bulk_upload_service import BulkUploadService
from gleaming_admin.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_bestsellers(
    type: Optional[MetalType] = Query(None, description="gold or silver"),
    search: Optional[str] = Query(None, description="Search by product name"),
    category: Optional[str] = Query(None),
    availability: Optional[str] = Query(None),
):
    try:
        products = ProductService().list_bestsellers(
            product_type=type,
            search=search,
            category=category,
            availability=availability,
        )

        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        logger.error(f"Error fetching bestsellers: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching bestsellers: {str(e)}")


@router.post("/", status_code=201)
async def create_bestseller(payload: ProductInput):
    try:
        product = ProductService().save_product(payload, bestseller_only=True)
        return {
            "status": "success",
            "data": product.to_dict()
        }

    except Exception as e:
        logger.error(f"Error creating bestseller: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating bestseller: {str(e)}")


@router.put("/{product_id}")
async def update_bestseller(product_id: str, payload: ProductInput):
    try:
        product = ProductService().save_product(payload, product_id=product_id, bestseller_only=True)
        return {
            "status": "success",
            "data": product.to_dict()
        }

    except Exception as e:
        logger.error(f"Error updating bestseller {product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating bestseller: {str(e)}")


@router.post("/bulk-upload")
async def bulk_upload_bestsellers(
    file: UploadFile = File(...),
    type: MetalType = Form(..., description="gold or silver"),
):
    """Create one bestseller per spreadsheet row"""
    try:
        contents = await file.read()
        count = BulkUploadService().upload(
            file_content=contents,
            filename=file.filename,
            product_type=type,
            bestseller_only=True,
        )

        return {
            "status": "success",
            "message": f"Bulk upload of {count} items complete.",
            "count": count
        }

    except InvalidUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing upload {file.filename}: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing file: {str(e)}")


@router.delete("/{product_id}")
async def delete_bestseller(product_id: str):
    """Delete the product from the catalog and the bestsellers mirror"""
    try:
        ProductService().delete_product(product_id)
        return {
            "status": "success",
            "message": "The product has been successfully deleted."
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting bestseller {product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting bestseller: {str(e)}")
