"""Static gemstone taxonomy used by the product form."""
from typing import Dict, List

CATEGORY_IMAGE_BASE = "https://res.cloudinary.com/gemstore/image/upload/v1/categories"

PRIMARY_CATEGORIES: List[str] = [
    "pink-sapphire",
    "blue-sapphire",
    "yellow-sapphire",
    "red-coral",
    "pearl",
    "hessonite",
    "ruby",
    "emerald",
    "diamond",
    "opal",
    "amethyst",
    "topaz",
    "garnet",
    "tanzanite",
    "aquamarine",
    "peridot",
    "tourmaline",
    "citrine",
    "moonstone",
    "alexandrite",
    "lapis-lazuli",
    "turquoise",
    "spinel",
    "iolite",
    "zircon",
    "chrysoberyl",
    "kyanite",
    "sodalite",
    "other",
]

SECONDARY_CATEGORIES: List[str] = [
    "gemstone-rings",
    "gemstone-pendants",
    "loose-gemstones",
    "gemstone-bracelets",
    "none",
]

# One representative image per primary category
CATEGORY_IMAGES: Dict[str, str] = {
    category: f"{CATEGORY_IMAGE_BASE}/{category}.png" for category in PRIMARY_CATEGORIES
}

PRODUCT_BENEFITS: List[str] = [
    "Financial Growth",
    "Relationship Growth",
    "Promotes Good Health",
    "Spiritual Growth",
    "Emotional Stability",
    "Success in Education",
    "Career Success",
    "Protection from Negativity",
    "Enhanced Creativity",
    "Chakra Balancing",
    "Manifestation Power",
    "Psychic Abilities",
    "Courage & Confidence",
    "Detoxification",
    "Fertility & Vitality",
    "Better Sleep",
    "Luck & Fortune",
    "Longevity",
    "Astral Travel",
    "Divine Connection",
    "Past Life Recall",
    "Karmic Healing",
    "Aura Cleansing",
    "Grounding & Stability",
    "Enhanced Intuition",
    "Peace & Tranquility",
    "Angelic Communication",
    "DNA Activation",
    "Energy Amplification",
    "Stress Relief",
    "Pain Relief",
    "Enhanced Focus",
    "Protection from Electromagnetic (EMF) Radiation",
    "Dream Recall & Interpretation",
    "Enhanced Meditation",
    "Self-Discovery",
    "Transmutation of Negative Energy",
    "Other",
]


def category_image(category_id: str) -> str:
    """Return the catalog image URL for a primary category, or "" if unknown."""
    return CATEGORY_IMAGES.get(category_id or "", "")


def category_label(category_id: str) -> str:
    # "blue-sapphire" -> "Blue Sapphire"
    return " ".join(word.capitalize() for word in (category_id or "").replace("-", " ").split())


def catalog_options() -> dict:
    return {
        "primaryCategories": [
            {"value": c, "label": category_label(c), "image": CATEGORY_IMAGES[c]} for c in PRIMARY_CATEGORIES
        ],
        "secondaryCategories": [{"value": c, "label": category_label(c)} for c in SECONDARY_CATEGORIES],
        "productBenefits": list(PRODUCT_BENEFITS),
    }
