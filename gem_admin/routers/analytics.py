import logging

from fastapi import APIRouter, Depends

from gem_admin.config import get_settings
from gem_admin.services import charts
from gem_admin.services.retry import load_with_retry
from gem_admin.utils.api_client import ApiClient, RequestContext, get_api_client
from gem_admin.utils.security import get_request_context

logger = logging.getLogger(__name__)

router = APIRouter()

EMPTY_OVERVIEW = {
    "totalProducts": 0,
    "totalOrders": 0,
    "totalBookingCalls": 0,
    "totalRevenue": 0,
    "monthlyOrders": 0,
    "weeklyOrders": 0,
    "avgOrderValue": 0,
}


def _load_stats(client: ApiClient, ctx: RequestContext) -> dict:
    settings = get_settings()
    body = load_with_retry(
        lambda: client.analytics.get_sales_data(ctx),
        attempts=settings.LOAD_RETRY_ATTEMPTS,
        delay=settings.LOAD_RETRY_DELAY_SECONDS,
        label="Loading sales stats",
    )
    data = body.get("data")
    return data if isinstance(data, dict) else {}


def _overview(stats: dict) -> dict:
    return {**EMPTY_OVERVIEW, **(stats.get("overview") or {})}


# Dashboard home: headline cards, revenue chart and recent sales
@router.get("/dashboard")
def get_dashboard(client: ApiClient = Depends(get_api_client), ctx: RequestContext = Depends(get_request_context)):
    stats = _load_stats(client, ctx)
    growth = stats.get("growth") or {}
    return {
        "overview": _overview(stats),
        "growth": {
            "ordersGrowthRate": growth.get("ordersGrowthRate", 0),
            "revenueGrowthRate": growth.get("revenueGrowthRate", 0),
        },
        "overviewChart": charts.overview_series(stats.get("dailyStats")),
        "recentSales": charts.recent_sales(stats.get("recentOrders")),
    }


# Analytics page: revenue, growth and order status breakdown
@router.get("/analytics")
def get_analytics(client: ApiClient = Depends(get_api_client), ctx: RequestContext = Depends(get_request_context)):
    stats = _load_stats(client, ctx)
    daily = stats.get("dailyStats")
    return {
        "overview": _overview(stats),
        "growthRate": charts.growth_rate(daily),
        "salesChart": charts.revenue_series(daily),
        "growthChart": charts.growth_series(daily),
        "statusBreakdown": charts.status_breakdown_slices(stats.get("statusBreakdown")),
    }
