from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional


class ProductImage(BaseModel):
    url: str
    alt: str = ""


class Dimensions(BaseModel):
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None

    @field_validator("length", "width", "height", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    def is_set(self) -> bool:
        return any(v is not None for v in (self.length, self.width, self.height))


# Fields the admin types as free text; numbers stay strings until the payload is built
TEXT_FIELDS = (
    "name",
    "description",
    "originalPrice",
    "discountedPrice",
    "primaryCategory",
    "primaryCategoryImage",
    "secondaryCategory",
    "stock",
    "weight",
    "weightRatti",
    "weightCarat",
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
    "specificGravity",
)


class ProductDraft(BaseModel):
    """In-memory, unsaved product being created or edited."""
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    description: str = ""
    originalPrice: str = ""
    discountedPrice: str = ""
    primaryCategory: str = ""
    primaryCategoryImage: str = ""
    secondaryCategory: str = ""
    stock: str = ""
    weight: str = ""
    weightRatti: str = ""
    weightCarat: str = ""
    shape: str = ""
    origin: str = ""
    certification: str = ""
    poojaEnergization: str = ""
    colour: str = ""
    treatment: str = ""
    treatmentType: str = ""
    composition: str = ""
    returnPolicy: str = ""
    dimensionType: str = ""
    specificGravity: str = ""
    dimensions: Dimensions = Field(default_factory=Dimensions)
    isAvailable: bool = True
    images: List[ProductImage] = Field(default_factory=list)
    productBenefits: List[str] = Field(default_factory=list)

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _to_text(cls, v):
        if v is None:
            return ""
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        return str(v) if not isinstance(v, str) else v

    @field_validator("dimensions", mode="before")
    @classmethod
    def _default_dimensions(cls, v):
        return v if v is not None else {}

    @field_validator("images", mode="before")
    @classmethod
    def _default_list(cls, v):
        return v if v is not None else []

    @field_validator("productBenefits", mode="before")
    @classmethod
    def _unique_benefits(cls, v):
        # Tags are a set: trimmed, no blanks, first occurrence wins
        if isinstance(v, str):
            v = [v]
        benefits: List[str] = []
        for tag in v or []:
            tag = str(tag).strip()
            if tag and tag not in benefits:
                benefits.append(tag)
        return benefits

    @field_validator("isAvailable", mode="before")
    @classmethod
    def _default_available(cls, v):
        return True if v is None else v


class DraftCheckIn(BaseModel):
    draft: ProductDraft
    # pristine | dirty | submitted
    state: str = "dirty"


class DraftCheckOut(BaseModel):
    state: str
    errors: Dict[str, str]
    canSubmit: bool
    discountPercentage: int
    dimensionsSummary: Optional[str] = None
    primaryCategoryImage: str = ""


class ProductSaveOut(BaseModel):
    message: str
    data: Optional[Any] = None
