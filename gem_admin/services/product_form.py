"""Product form state: field updates, validation and derived values.

All helpers are pure; a new :class:`ProductDraft` is returned on every change
and the input draft is never mutated.
"""
import enum
import logging
import math
import re
from typing import Any, Dict, Optional

from gem_admin.schemas.product import Dimensions, ProductDraft
from gem_admin.services.catalog import category_image

logger = logging.getLogger(__name__)

DIMENSION_AXES = ("length", "width", "height")
MEASUREMENT_FIELDS = ("weight", "weightRatti", "weightCarat", "specificGravity")
FLOAT_FIELDS = ("originalPrice", "discountedPrice") + MEASUREMENT_FIELDS
STRING_FIELDS = (
    "name",
    "description",
    "primaryCategory",
    "primaryCategoryImage",
    "secondaryCategory",
    "shape",
    "origin",
    "certification",
    "poojaEnergization",
    "colour",
    "treatment",
    "treatmentType",
    "composition",
    "returnPolicy",
    "dimensionType",
)


class FormState(str, enum.Enum):
    PRISTINE = "pristine"
    DIRTY = "dirty"
    SUBMITTED = "submitted"


def parse_number(value: Any) -> Optional[float]:
    """Parse a form input to a finite float; None when blank or not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _humanize(field: str) -> str:
    # "weightRatti" -> "Weight ratti"
    words = re.sub(r"([A-Z])", r" \1", field).lower()
    return words[:1].upper() + words[1:]


def empty_draft() -> ProductDraft:
    return ProductDraft()


def draft_from_product(product: Dict[str, Any]) -> ProductDraft:
    """Hydrate an edit draft from an upstream product record."""
    return ProductDraft.model_validate(product or {})


def update_field(draft: ProductDraft, field: str, value: Any) -> ProductDraft:
    if field not in ProductDraft.model_fields:
        raise KeyError(field)
    if field == "primaryCategory":
        return select_primary_category(draft, value)
    if field == "dimensions":
        value = Dimensions.model_validate(value or {})
    # Round-trip through validation so numbers from hydrated data become strings
    data = draft.model_dump()
    data[field] = value
    return ProductDraft.model_validate(data)


def select_primary_category(draft: ProductDraft, category: Optional[str]) -> ProductDraft:
    category = category or ""
    return draft.model_copy(update={
        "primaryCategory": category,
        "primaryCategoryImage": category_image(category),
    })


def update_dimension(draft: ProductDraft, axis: str, value: Any) -> ProductDraft:
    if axis not in DIMENSION_AXES:
        raise KeyError(axis)
    dimensions = draft.dimensions.model_copy(update={axis: parse_number(value)})
    return draft.model_copy(update={"dimensions": dimensions})


def add_benefit(draft: ProductDraft, benefit: str) -> ProductDraft:
    benefit = (benefit or "").strip()
    if not benefit or benefit in draft.productBenefits:
        return draft
    return draft.model_copy(update={"productBenefits": [*draft.productBenefits, benefit]})


def remove_benefit(draft: ProductDraft, index: int) -> ProductDraft:
    if index < 0 or index >= len(draft.productBenefits):
        return draft
    benefits = [b for i, b in enumerate(draft.productBenefits) if i != index]
    return draft.model_copy(update={"productBenefits": benefits})


def validate(draft: ProductDraft) -> Dict[str, str]:
    """Return field name -> message; an empty mapping means the draft can be submitted."""
    errors: Dict[str, str] = {}

    if _is_blank(draft.name):
        errors["name"] = "Product name is required"

    if _is_blank(draft.stock):
        errors["stock"] = "Stock is required"
    else:
        stock = parse_number(draft.stock)
        if stock is None or stock < 0:
            errors["stock"] = "Stock must be a valid non-negative number"

    if _is_blank(draft.originalPrice):
        errors["originalPrice"] = "Original price is required"
    else:
        price = parse_number(draft.originalPrice)
        if price is None or price <= 0:
            errors["originalPrice"] = "Original price must be a valid positive number"

    if _is_blank(draft.primaryCategory):
        errors["primaryCategory"] = "Primary category is required"

    if not _is_blank(draft.discountedPrice):
        discounted = parse_number(draft.discountedPrice)
        original = parse_number(draft.originalPrice)
        if discounted is None or discounted < 0:
            errors["discountedPrice"] = "Discounted price must be a valid non-negative number"
        elif original and discounted >= original:
            errors["discountedPrice"] = "Discounted price must be less than original price"

    for field in MEASUREMENT_FIELDS:
        raw = getattr(draft, field)
        if _is_blank(raw):
            continue
        number = parse_number(raw)
        if number is None or number < 0:
            errors[field] = f"{_humanize(field)} must be a valid non-negative number"

    gravity = parse_number(draft.specificGravity)
    if gravity is not None and gravity <= 0:
        errors["specificGravity"] = "Specific gravity must be a positive number"

    for axis in DIMENSION_AXES:
        value = getattr(draft.dimensions, axis)
        if value is not None and value < 0:
            errors[f"dimensions.{axis}"] = f"{axis.capitalize()} must be a non-negative number"

    return errors


def discount_percentage(original_price: Any, discounted_price: Any) -> int:
    original = parse_number(original_price)
    discounted = parse_number(discounted_price)
    if not discounted or discounted <= 0 or not original or original <= 0:
        return 0
    # Half-up rounding, as shown next to the price inputs
    return int(math.floor(100 * (original - discounted) / original + 0.5))


def _format_axis(value: Optional[float]) -> str:
    if value is None:
        return "0"
    # Full precision, but 12.0 reads as "12"
    return str(int(value)) if value.is_integer() else repr(value)


def dimensions_summary(dimensions: Optional[Dimensions]) -> Optional[str]:
    if dimensions is None or not dimensions.is_set():
        return None
    return "×".join(_format_axis(getattr(dimensions, axis)) for axis in DIMENSION_AXES) + " mm"


def _prepare_dimensions(dimensions: Dimensions) -> Optional[Dict[str, float]]:
    if not dimensions.is_set():
        return None
    return {axis: getattr(dimensions, axis) or 0.0 for axis in DIMENSION_AXES}


def draft_to_payload(draft: ProductDraft) -> Dict[str, Any]:
    """Build the upstream product body; unset values are dropped, never sent as NaN."""
    payload: Dict[str, Any] = {field: getattr(draft, field).strip() or None for field in STRING_FIELDS}
    for field in FLOAT_FIELDS:
        payload[field] = parse_number(getattr(draft, field))
    stock = parse_number(draft.stock)
    payload["stock"] = int(stock) if stock is not None else None
    payload["dimensions"] = _prepare_dimensions(draft.dimensions)
    payload["isAvailable"] = draft.isAvailable
    payload["images"] = [image.model_dump() for image in draft.images]
    payload["productBenefits"] = list(draft.productBenefits)
    return {k: v for k, v in payload.items() if v is not None}


class DraftValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("Please fix the errors in the form before submitting.")
        self.errors = errors


class ProductForm:
    """A draft plus its pristine/dirty/submitted state.

    Validation only runs once the form has been edited or submitted, so a
    freshly loaded form never shows errors.
    """

    def __init__(self, draft: Optional[ProductDraft] = None, state: FormState = FormState.PRISTINE):
        self.draft = draft or empty_draft()
        self.state = FormState(state)
        self.errors: Dict[str, str] = {}
        self._revalidate()

    def _revalidate(self) -> None:
        self.errors = validate(self.draft) if self.state is not FormState.PRISTINE else {}

    def change(self, field: str, value: Any) -> "ProductForm":
        self.draft = update_field(self.draft, field, value)
        self._mark_dirty()
        return self

    def change_dimension(self, axis: str, value: Any) -> "ProductForm":
        self.draft = update_dimension(self.draft, axis, value)
        self._mark_dirty()
        return self

    def _mark_dirty(self) -> None:
        if self.state is FormState.PRISTINE:
            self.state = FormState.DIRTY
        self._revalidate()

    def submit(self) -> Dict[str, Any]:
        """Validate and return the upstream payload; raises DraftValidationError."""
        self.state = FormState.SUBMITTED
        self._revalidate()
        if self.errors:
            logger.info("Product form rejected with %d field errors", len(self.errors))
            raise DraftValidationError(self.errors)
        return draft_to_payload(self.draft)

    @property
    def can_submit(self) -> bool:
        return not validate(self.draft)

    @property
    def discount_percentage(self) -> int:
        return discount_percentage(self.draft.originalPrice, self.draft.discountedPrice)

    @property
    def dimensions_summary(self) -> Optional[str]:
        return dimensions_summary(self.draft.dimensions)
