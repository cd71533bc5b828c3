"""
Dashboard API Endpoint
"""
import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query

from gleaming_admin.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_dashboard(
    filter: Literal["all_time", "today", "week", "month", "year", "custom"] = Query(
        "all_time", description="Date filter for the stats"
    ),
    date_from: Optional[date] = Query(None, alias="from", description="Custom range start (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, alias="to", description="Custom range end, inclusive"),
):
    """
    Dashboard stats, recent orders, low stock products and weekly charts

    Only the stats follow the date filter.
    """
    try:
        data = DashboardService().get_dashboard(filter, date_from, date_to)
        return {
            "status": "success",
            "data": data
        }

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error building dashboard: {e}")
        raise HTTPException(status_code=500, detail=f"Error building dashboard: {str(e)}")
