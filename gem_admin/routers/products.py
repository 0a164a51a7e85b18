import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel

from gem_admin.config import get_settings
from gem_admin.schemas.product import DraftCheckIn, DraftCheckOut, ProductDraft, ProductImage, ProductSaveOut
from gem_admin.schemas.user import DashboardSession
from gem_admin.services import media
from gem_admin.services.catalog import catalog_options
from gem_admin.services.csv_export import PRODUCT_COLUMNS, csv_response, to_csv
from gem_admin.services.inflight import guard
from gem_admin.services.listing import ALL_STATUSES, PRODUCT_SEARCH_FIELDS, ListState, apply_filters, paginate
from gem_admin.services.product_form import FormState, ProductForm, draft_from_product, select_primary_category
from gem_admin.services.retry import load_with_retry
from gem_admin.services.view_models import product_row, rows
from gem_admin.utils.api_client import ApiClient, ApiError, ForbiddenError, NotFoundError, RequestContext, get_api_client
from gem_admin.utils.security import get_current_session, get_request_context
from gem_admin.utils.storage import read_upload

logger = logging.getLogger(__name__)

router = APIRouter()

PRODUCTS_PAGE = "/dashboard/products"


# Helpers

def _fetch_rows(client: ApiClient, ctx: RequestContext, search: str, status: str):
    body = client.products.get_all(ctx)
    return apply_filters(rows(body.get("data"), product_row), search, status, PRODUCT_SEARCH_FIELDS)


def _error_state(status_code: int, message: str, retry: bool):
    # Full-page error state: the UI offers "Try again" and "Back to products"
    return HTTPException(status_code=status_code, detail={"message": message, "retry": retry, "back": PRODUCTS_PAGE})


# List, export and catalog

@router.get("")
def list_products(
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
    }


@router.get("/export")
def export_products(
    search: str = "",
    status: str = ALL_STATUSES,
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    filtered = _fetch_rows(client, ctx, search, status)
    logger.info("Exporting %d products", len(filtered))
    return csv_response(to_csv(filtered, PRODUCT_COLUMNS), "products")


@router.get("/catalog")
def product_catalog(session: DashboardSession = Depends(get_current_session)):
    return catalog_options()


# Form helpers

@router.post("/draft", response_model=DraftCheckOut)
def check_draft(payload: DraftCheckIn, session: DashboardSession = Depends(get_current_session)):
    try:
        state = FormState(payload.state)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid form state")
    # Keep the category image in step with the selected category
    draft = select_primary_category(payload.draft, payload.draft.primaryCategory)
    form = ProductForm(draft, state)
    return {
        "state": form.state.value,
        "errors": form.errors,
        "canSubmit": form.can_submit,
        "discountPercentage": form.discount_percentage,
        "dimensionsSummary": form.dimensions_summary,
        "primaryCategoryImage": form.draft.primaryCategoryImage,
    }


@router.post("/media")
def upload_product_image(
    file: UploadFile = File(...),
    alt: str = Form(""),
    images: Optional[str] = Form(None),
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    """Upload one image to the CDN and append it to the given image list.

    ``images`` is the form's current list as a JSON array; it comes back
    unchanged if the upload fails.
    """
    try:
        current = [ProductImage.model_validate(i).model_dump() for i in json.loads(images or "[]")]
    except (ValueError, TypeError):
        raise HTTPException(status_code=400, detail="images must be a JSON array of {url, alt}")
    filename, content, content_type = read_upload(file, kind="image")
    updated = media.append_uploaded(
        current,
        lambda: client.media.upload(ctx, filename, content, content_type),
        alt=alt,
    )
    return {"image": updated[-1], "images": updated}


class ImageEdit(BaseModel):
    images: List[ProductImage]
    action: str
    index: int
    alt: str = ""


@router.post("/media/edit")
def edit_product_images(payload: ImageEdit, session: DashboardSession = Depends(get_current_session)):
    current = [i.model_dump() for i in payload.images]
    if payload.action == "remove":
        return {"images": media.remove_at(current, payload.index)}
    if payload.action == "alt":
        return {"images": media.update_alt_at(current, payload.index, payload.alt)}
    raise HTTPException(status_code=400, detail="action must be 'remove' or 'alt'")


# Single product

@router.get("/{id}")
def get_product(
    id: str,
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    settings = get_settings()
    try:
        body = load_with_retry(
            lambda: client.products.get_by_id(ctx, id),
            attempts=settings.LOAD_RETRY_ATTEMPTS,
            delay=settings.LOAD_RETRY_DELAY_SECONDS,
            label=f"Loading product {id}",
        )
    except NotFoundError:
        raise _error_state(404, "Product not found. It may have been deleted.", retry=False)
    except ForbiddenError:
        raise _error_state(403, "You don't have permission to edit this product.", retry=False)
    except ApiError as e:
        if not e.transient:
            raise
        logger.error("Giving up on product %s: %s", id, e.message)
        raise _error_state(502, "Server error. Please try again later.", retry=True)

    product = body.get("data")
    if not isinstance(product, dict):
        raise _error_state(502, "Invalid response format from server", retry=True)
    form = ProductForm(draft_from_product(product))
    return {
        "data": product,
        "draft": form.draft.model_dump(),
        "discountPercentage": form.discount_percentage,
        "dimensionsSummary": form.dimensions_summary,
    }


@router.post("", response_model=ProductSaveOut, status_code=201)
def create_product(
    draft: ProductDraft,
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
    session: DashboardSession = Depends(get_current_session),
):
    payload = ProductForm(draft, FormState.DIRTY).submit()
    with guard.hold("create-product", session.jti):
        body = client.products.create(ctx, payload)
    logger.info("Created product %s", payload.get("name"))
    return {"message": body.get("message") or "Product has been successfully created.", "data": body.get("data")}


@router.put("/{id}", response_model=ProductSaveOut)
def update_product(
    id: str,
    draft: ProductDraft,
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    payload = ProductForm(draft, FormState.DIRTY).submit()
    with guard.hold("update-product", id):
        body = client.products.update(ctx, id, payload)
    logger.info("Updated product %s", id)
    return {"message": body.get("message") or "Product has been successfully updated.", "data": body.get("data")}


@router.delete("/{id}")
def delete_product(
    id: str,
    client: ApiClient = Depends(get_api_client),
    ctx: RequestContext = Depends(get_request_context),
):
    with guard.hold("delete-product", id):
        client.products.delete(ctx, id)
    logger.info("Deleted product %s", id)
    return {"message": "Product deleted", "id": id}
