"""
Products API Endpoints
Catalog management for gold and silver products, with bulk spreadsheet uploads
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse

from gleaming_admin.core.exceptions import InvalidUploadError, NotFoundError
from gleaming_admin.domain.product import MetalType, ProductInput
from gleaming_admin.services.bulk_upload_service import BulkUploadService
from gleaming_admin.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_products(
    type: Optional[MetalType] = Query(None, description="gold or silver"),
    search: Optional[str] = Query(None, description="Search by product name"),
    category: Optional[str] = Query(None, description="Filter by category ('all' for none)"),
    availability: Optional[str] = Query(None, description="READY TO SHIP or MADE TO ORDER ('all' for none)"),
):
    """Get the products of a metal type with optional filters"""
    try:
        products = ProductService().list_products(
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
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/categories")
async def get_categories():
    """Product categories offered by the product form"""
    return {
        "status": "success",
        "data": ProductService.list_categories()
    }


@router.get("/bulk-upload/template")
async def download_bulk_upload_template():
    """
    Download an Excel template with the bulk upload columns

    Returns:
        Excel file ready for editing
    """
    try:
        excel_file = BulkUploadService.generate_template()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"Products_Template_{timestamp}.xlsx"

        return StreamingResponse(
            excel_file,
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={
                "Content-Disposition": f"attachment; filename={filename}"
            }
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating template: {str(e)}")


@router.post("/bulk-upload")
async def bulk_upload_products(
    file: UploadFile = File(..., description="Spreadsheet with one product per row"),
    type: MetalType = Form(..., description="gold or silver"),
    bestseller_only: bool = Form(False, description="Flag every uploaded product as a bestseller"),
):
    """
    Create one product per spreadsheet row (.xlsx, .xls or .csv)

    Returns:
        Number of products created
    """
    try:
        contents = await file.read()
        count = BulkUploadService().upload(
            file_content=contents,
            filename=file.filename,
            product_type=type,
            bestseller_only=bestseller_only,
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


@router.get("/{product_id}")
async def get_product(product_id: str):
    """Get a single product"""
    try:
        product = ProductService().get_product(product_id)
        return {
            "status": "success",
            "data": product.to_dict()
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.post("/", status_code=201)
async def create_product(payload: ProductInput):
    """Create a product; bestsellers are mirrored for the storefront"""
    try:
        product = ProductService().save_product(payload)
        return {
            "status": "success",
            "message": f'The product "{product.name}" has been successfully added.',
            "data": product.to_dict()
        }

    except Exception as e:
        logger.error(f"Error creating product: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.put("/{product_id}")
async def update_product(product_id: str, payload: ProductInput):
    """Update a product and set or remove its bestseller mirror"""
    try:
        product = ProductService().save_product(payload, product_id=product_id)
        return {
            "status": "success",
            "message": f'The product "{product.name}" has been successfully updated.',
            "data": product.to_dict()
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating product {product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.delete("/{product_id}")
async def delete_product(product_id: str):
    """Delete a product and its bestseller mirror"""
    try:
        ProductService().delete_product(product_id)
        return {
            "status": "success",
            "message": "The product has been successfully deleted."
        }

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting product {product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")
