import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from gem_admin.config import get_settings
from gem_admin.schemas.order import OrderStatusUpdate
from gem_admin.services.csv_export import ORDER_COLUMNS, csv_response, to_csv
from gem_admin.services.inflight import guard
from gem_admin.services.listing import ALL_STATUSES, ORDER_SEARCH_FIELDS, ListState, apply_filters, paginate
from gem_admin.services.status import ORDER_TARGETS, ORDER_TRANSITIONS, OrderStatus, can_transition, parse_status
from gem_admin.services.view_models import order_row, rows
from gem_admin.utils.api_client import ApiClient, RequestContext, get_api_client
from gem_admin.utils.security import get_request_context

logger = logging.getLogger(__name__)

router = APIRouter()


def _fetch_rows(client: ApiClient, ctx: RequestContext, search: str, status: str):
    # The whole collection is fetched at once and paginated here
    body = client.orders.get_all(ctx, limit=get_settings().ORDERS_FETCH_LIMIT)
    return apply_filters(rows(body.get("data"), order_row), search, status, ORDER_SEARCH_FIELDS)


@router.get("")
def list_orders(
    search: str = "",
    status: str = ALL_STATUSES,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    prev_search: Optional[str] = Query(None, alias="prevSearch"),
    prev_status: Optional[str] = Query(None, alias="prevStatus"),
    prev_limit: Optional[int] = Query(None, alias="prevLimit", ge=1, le=100),
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    state = ListState.from_query(search, status, page, limit, prev_search, prev_status, prev_limit)
    filtered = _fetch_rows(client, ctx, state.search, state.status)
    result = paginate(filtered, state.page, state.page_size)
    return {
        "data": result.items,
        "pagination": result.to_dict(),
        "filters": {"search": state.search, "status": state.status},
        "statusOptions": sorted(s.value for s in ORDER_TARGETS),
    }


@router.get("/export")
def export_orders(
    search: str = "",
    status: str = ALL_STATUSES,
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    filtered = _fetch_rows(client, ctx, search, status)
    logger.info("Exporting %d orders", len(filtered))
    return csv_response(to_csv(filtered, ORDER_COLUMNS), "orders")


@router.put("/{id}/status")
def update_order_status(
    id: str,
    payload: OrderStatusUpdate,
    current: str = Query(None, description="Status shown in the list, when known"),
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    target = payload.status
    if target not in ORDER_TARGETS:
        raise HTTPException(status_code=400, detail=f"Cannot change order status to {target.value}")
    if current:
        try:
            current_status = parse_status(OrderStatus, current)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid current status")
        if not can_transition(ORDER_TRANSITIONS, current_status, target):
            raise HTTPException(status_code=400, detail=f"Cannot change order status to {target.value}")
    with guard.hold("order-status", id):
        body = client.orders.update_status(ctx, id, target.value)
    logger.info("Order %s status changed to %s", id, target.value)
    return {
        "message": f"Order status changed to {target.value}.",
        "id": id,
        "status": target.value.lower(),
        "data": body.get("data"),
    }
