"""
test_product_form.py: Product draft editing, validation and derived values.

Tests cover:
  - validate: required fields, numeric rules, discount vs. original price
  - update_field / update_dimension / benefits: pure, non-mutating updates
  - category selection and its catalog image
  - discount_percentage and dimensions_summary
  - draft_to_payload: what is sent to the store API
  - ProductForm: pristine / dirty / submitted behavior
"""

import pytest

from gem_admin.schemas.product import Dimensions, ProductDraft
from gem_admin.services.catalog import CATEGORY_IMAGES
from gem_admin.services.product_form import (
    DraftValidationError,
    FormState,
    ProductForm,
    add_benefit,
    dimensions_summary,
    discount_percentage,
    draft_from_product,
    draft_to_payload,
    parse_number,
    remove_benefit,
    update_dimension,
    update_field,
    validate,
)


def _valid_draft(**overrides) -> ProductDraft:
    data = {"name": "Ruby Ring", "stock": "5", "originalPrice": "100", "primaryCategory": "ruby"}
    data.update(overrides)
    return ProductDraft(**data)


# ===========================================================================
# Validation
# ===========================================================================

class TestValidate:
    """Tests for validate."""

    def test_minimal_valid_draft_has_no_errors(self):
        """Name, stock, original price and category are enough."""
        assert validate(_valid_draft()) == {}

    def test_empty_draft_reports_every_required_field(self):
        errors = validate(ProductDraft())
        assert errors == {
            "name": "Product name is required",
            "stock": "Stock is required",
            "originalPrice": "Original price is required",
            "primaryCategory": "Primary category is required",
        }

    def test_whitespace_name_is_blank(self):
        assert validate(_valid_draft(name="   "))["name"] == "Product name is required"

    def test_discount_above_original_price(self):
        errors = validate(_valid_draft(originalPrice="100", discountedPrice="150"))
        assert errors == {"discountedPrice": "Discounted price must be less than original price"}

    def test_discount_equal_to_original_price(self):
        errors = validate(_valid_draft(originalPrice="100", discountedPrice="100"))
        assert "discountedPrice" in errors

    def test_negative_discount_regardless_of_original(self):
        """A negative discount is invalid even when the original price is missing."""
        errors = validate(ProductDraft(discountedPrice="-5"))
        assert errors["discountedPrice"] == "Discounted price must be a valid non-negative number"
        errors = validate(_valid_draft(discountedPrice="-5"))
        assert errors["discountedPrice"] == "Discounted price must be a valid non-negative number"

    def test_zero_original_price_is_not_positive(self):
        errors = validate(_valid_draft(originalPrice="0"))
        assert errors["originalPrice"] == "Original price must be a valid positive number"

    def test_non_numeric_stock(self):
        assert validate(_valid_draft(stock="lots"))["stock"] == "Stock must be a valid non-negative number"

    def test_negative_stock(self):
        assert "stock" in validate(_valid_draft(stock="-1"))

    def test_non_finite_numbers_are_invalid(self):
        errors = validate(_valid_draft(originalPrice="inf", weight="nan"))
        assert "originalPrice" in errors
        assert errors["weight"] == "Weight must be a valid non-negative number"

    def test_measurement_fields_use_humanized_names(self):
        errors = validate(_valid_draft(weightRatti="-2", weightCarat="abc"))
        assert errors["weightRatti"] == "Weight ratti must be a valid non-negative number"
        assert errors["weightCarat"] == "Weight carat must be a valid non-negative number"

    def test_zero_specific_gravity(self):
        errors = validate(_valid_draft(specificGravity="0"))
        assert errors["specificGravity"] == "Specific gravity must be a positive number"

    def test_negative_dimension(self):
        draft = _valid_draft().model_copy(update={"dimensions": Dimensions(length=-1)})
        assert validate(draft) == {"dimensions.length": "Length must be a non-negative number"}

    def test_rules_are_independent(self):
        """All failing rules are reported together."""
        errors = validate(ProductDraft(name="", stock="x", originalPrice="-3", discountedPrice="-1"))
        assert set(errors) == {"name", "stock", "originalPrice", "primaryCategory", "discountedPrice"}


# ===========================================================================
# Field updates
# ===========================================================================

class TestFieldUpdates:
    """Tests for update_field, update_dimension and the benefit helpers."""

    def test_update_field_returns_new_draft(self):
        draft = ProductDraft()
        updated = update_field(draft, "name", "Emerald Pendant")
        assert updated.name == "Emerald Pendant"
        assert draft.name == ""

    def test_update_field_unknown_name(self):
        with pytest.raises(KeyError):
            update_field(ProductDraft(), "price", "10")

    def test_update_field_coerces_numbers_to_text(self):
        assert update_field(ProductDraft(), "stock", 7).stock == "7"

    def test_blue_sapphire_sets_catalog_image(self):
        updated = update_field(ProductDraft(), "primaryCategory", "blue-sapphire")
        assert updated.primaryCategoryImage == CATEGORY_IMAGES["blue-sapphire"]
        assert updated.primaryCategoryImage.startswith("https://")

    def test_unknown_category_clears_image(self):
        draft = update_field(ProductDraft(), "primaryCategory", "blue-sapphire")
        updated = update_field(draft, "primaryCategory", "moonrock")
        assert updated.primaryCategory == "moonrock"
        assert updated.primaryCategoryImage == ""

    def test_update_dimension_keeps_other_axes(self):
        draft = update_dimension(ProductDraft(), "length", "10")
        draft = update_dimension(draft, "width", "4.5")
        assert draft.dimensions == Dimensions(length=10.0, width=4.5, height=None)

    def test_update_dimension_clears_on_blank_or_garbage(self):
        draft = update_dimension(ProductDraft(), "height", "3")
        assert update_dimension(draft, "height", "").dimensions.height is None
        assert update_dimension(draft, "height", "abc").dimensions.height is None

    def test_update_dimension_unknown_axis(self):
        with pytest.raises(KeyError):
            update_dimension(ProductDraft(), "depth", "1")

    def test_benefits_trimmed_and_unique(self):
        draft = add_benefit(ProductDraft(), "  Brings prosperity ")
        draft = add_benefit(draft, "Brings prosperity")
        draft = add_benefit(draft, "   ")
        assert draft.productBenefits == ["Brings prosperity"]

    def test_duplicate_benefits_collapse_on_hydration(self):
        draft = draft_from_product({"productBenefits": ["Luck & Fortune", " Luck & Fortune ", "", "Calm"]})
        assert draft.productBenefits == ["Luck & Fortune", "Calm"]
        assert draft_to_payload(draft)["productBenefits"] == ["Luck & Fortune", "Calm"]

    def test_remove_benefit_out_of_bounds_is_noop(self):
        draft = add_benefit(ProductDraft(), "Calms the mind")
        assert remove_benefit(draft, 3).productBenefits == ["Calms the mind"]
        assert remove_benefit(draft, 0).productBenefits == []

    def test_hydration_turns_numbers_into_text(self):
        draft = draft_from_product({
            "_id": "p1",
            "name": "Yellow Sapphire",
            "originalPrice": 1200.0,
            "discountedPrice": 999.5,
            "stock": 3,
            "weightRatti": None,
            "isAvailable": None,
            "images": None,
        })
        assert draft.originalPrice == "1200"
        assert draft.discountedPrice == "999.5"
        assert draft.stock == "3"
        assert draft.weightRatti == ""
        assert draft.isAvailable is True
        assert draft.images == []


# ===========================================================================
# Derived values
# ===========================================================================

class TestDerivedValues:
    """Tests for discount_percentage, dimensions_summary and parse_number."""

    def test_discount_percentage(self):
        assert discount_percentage("100", "80") == 20

    def test_discount_percentage_rounds_half_up(self):
        # 100 * 5 / 200 = 2.5
        assert discount_percentage("200", "195") == 3

    @pytest.mark.parametrize("original, discounted", [("100", ""), ("100", "0"), ("0", "50"), ("", "10")])
    def test_discount_percentage_zero_cases(self, original, discounted):
        assert discount_percentage(original, discounted) == 0

    def test_dimensions_summary_with_placeholders(self):
        assert dimensions_summary(Dimensions(length=12, height=4.5)) == "12×0×4.5 mm"

    def test_dimensions_summary_keeps_full_precision(self):
        assert dimensions_summary(Dimensions(length=1234567)) == "1234567×0×0 mm"
        assert dimensions_summary(Dimensions(length=12.3456789, width=5)) == "12.3456789×5×0 mm"

    def test_dimensions_summary_unset(self):
        assert dimensions_summary(Dimensions()) is None

    def test_parse_number(self):
        assert parse_number(" 2.5 ") == 2.5
        assert parse_number("") is None
        assert parse_number("1e400") is None
        assert parse_number(True) is None


# ===========================================================================
# Payload
# ===========================================================================

class TestDraftToPayload:
    """Tests for draft_to_payload."""

    def test_minimal_payload(self):
        payload = draft_to_payload(_valid_draft())
        assert payload["name"] == "Ruby Ring"
        assert payload["stock"] == 5
        assert payload["originalPrice"] == 100.0
        assert payload["primaryCategory"] == "ruby"
        assert payload["isAvailable"] is True
        assert payload["images"] == []
        assert "discountedPrice" not in payload
        assert "dimensions" not in payload
        assert "shape" not in payload

    def test_dimensions_sent_with_zero_for_unset_axes(self):
        draft = update_dimension(_valid_draft(), "width", "3")
        assert draft_to_payload(draft)["dimensions"] == {"length": 0.0, "width": 3.0, "height": 0.0}

    def test_text_fields_are_trimmed(self):
        payload = draft_to_payload(_valid_draft(name="  Ruby Ring  ", origin=" Burma "))
        assert payload["name"] == "Ruby Ring"
        assert payload["origin"] == "Burma"


# ===========================================================================
# Form state
# ===========================================================================

class TestProductForm:
    """Tests for the pristine / dirty / submitted form state."""

    def test_pristine_form_shows_no_errors(self):
        form = ProductForm()
        assert form.state is FormState.PRISTINE
        assert form.errors == {}
        assert form.can_submit is False

    def test_first_change_marks_dirty_and_validates(self):
        form = ProductForm().change("name", "Opal")
        assert form.state is FormState.DIRTY
        assert "stock" in form.errors
        assert "name" not in form.errors

    def test_submit_invalid_raises_with_errors(self):
        form = ProductForm()
        with pytest.raises(DraftValidationError) as exc:
            form.submit()
        assert form.state is FormState.SUBMITTED
        assert "name" in exc.value.errors

    def test_submit_valid_returns_payload(self):
        form = ProductForm(_valid_draft()).change("discountedPrice", "80")
        payload = form.submit()
        assert payload["discountedPrice"] == 80.0
        assert form.discount_percentage == 20

    def test_change_dimension_updates_summary(self):
        form = ProductForm(_valid_draft()).change_dimension("length", "8")
        assert form.dimensions_summary == "8×0×0 mm"
