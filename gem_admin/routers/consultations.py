import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from gem_admin.schemas.consultation import ConsultationStatusUpdate
from gem_admin.services.csv_export import CONSULTATION_COLUMNS, csv_response, to_csv
from gem_admin.services.inflight import guard
from gem_admin.services.listing import (
    ALL_STATUSES,
    CONSULTATION_SEARCH_FIELDS,
    PAGE_SIZES,
    ListState,
    apply_filters,
    server_page,
)
from gem_admin.services.status import (
    CONSULTATION_TARGETS,
    CONSULTATION_TRANSITIONS,
    ConsultationStatus,
    can_transition,
    consultation_wire_value,
    parse_status,
    status_options,
)
from gem_admin.services.view_models import consultation_row, rows
from gem_admin.utils.api_client import ApiClient, RequestContext, get_api_client
from gem_admin.utils.security import get_request_context

logger = logging.getLogger(__name__)

router = APIRouter()

# Export pulls every booking in one request
EXPORT_LIMIT = 10000


@router.get("")
def list_consultations(
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
    """Bookings are paginated by the API; search and status narrow the current page."""
    state = ListState.from_query(search, status, page, limit, prev_search, prev_status, prev_limit)
    body = client.consultations.get_all(ctx, page=state.page, limit=state.page_size)
    page_rows = rows(body.get("data"), consultation_row)
    filtered = apply_filters(page_rows, state.search, state.status, CONSULTATION_SEARCH_FIELDS)
    return {
        "data": filtered,
        "pagination": server_page(body.get("pagination"), state.page, state.page_size, len(page_rows)),
        "filters": {"search": state.search, "status": state.status},
        "statusOptions": status_options(CONSULTATION_TARGETS),
        "pageSizes": list(PAGE_SIZES),
    }


@router.get("/export")
def export_consultations(
    search: str = "",
    status: str = ALL_STATUSES,
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    body = client.consultations.get_all(ctx, page=1, limit=EXPORT_LIMIT)
    filtered = apply_filters(rows(body.get("data"), consultation_row), search, status, CONSULTATION_SEARCH_FIELDS)
    logger.info("Exporting %d consultations", len(filtered))
    return csv_response(to_csv(filtered, CONSULTATION_COLUMNS), "consultations")


@router.put("/{id}/status")
def update_consultation_status(
    id: str,
    payload: ConsultationStatusUpdate,
    current: str = Query(None, description="Status shown in the list, when known"),
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    target = payload.status
    if current:
        try:
            current_status = parse_status(ConsultationStatus, current)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid current status")
        if not can_transition(CONSULTATION_TRANSITIONS, current_status, target):
            raise HTTPException(status_code=400, detail=f"Cannot change consultation status to {target.value}")
    with guard.hold("consultation-status", id):
        body = client.consultations.update_status(ctx, id, consultation_wire_value(target))
    logger.info("Consultation %s status changed to %s", id, target.value)
    return {
        "message": f"Consultation status changed to {target.value}.",
        "id": id,
        "status": target.value,
        "data": body.get("data"),
    }


@router.delete("/{id}")
def delete_consultation(
    id: str,
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    with guard.hold("consultation-delete", id):
        client.consultations.delete(ctx, id)
    logger.info("Deleted consultation %s", id)
    return {"message": "The consultation has been successfully deleted.", "id": id}
