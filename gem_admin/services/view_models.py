"""Map upstream records onto the flat rows the list views work with."""
from typing import Any, Dict, List, Optional


def _record_id(record: Dict[str, Any]) -> Optional[str]:
    value = record.get("_id") or record.get("id")
    return str(value) if value is not None else None


def _lower(value: Any) -> str:
    return str(value).lower() if value else ""


def product_row(product: Dict[str, Any]) -> Dict[str, Any]:
    available = product.get("isAvailable")
    available = True if available is None else bool(available)
    discounted = product.get("discountedPrice")
    return {
        "id": _record_id(product),
        "name": product.get("name") or "",
        "slug": product.get("slug"),
        "description": product.get("description") or "",
        "price": discounted if discounted else product.get("originalPrice"),
        "originalPrice": product.get("originalPrice"),
        "discountedPrice": discounted,
        "category": product.get("primaryCategory") or "",
        "secondaryCategory": product.get("secondaryCategory") or "",
        "stock": product.get("stock"),
        "status": "active" if available else "inactive",
        "origin": product.get("origin"),
        "shape": product.get("shape"),
        "weight": product.get("weight"),
        "colour": product.get("colour"),
        "images": product.get("images") or [],
        "isAvailable": available,
    }


def order_row(order: Dict[str, Any]) -> Dict[str, Any]:
    user = order.get("user") or {}
    if not isinstance(user, dict):
        user = {}
    return {
        "id": _record_id(order),
        "customer": user.get("name") or order.get("customerName") or "",
        "email": user.get("email") or order.get("email") or "",
        "date": order.get("createdAt"),
        "total": order.get("totalAmount", order.get("total")),
        "status": _lower(order.get("status")),
        "items": order.get("items") or order.get("orderItems") or [],
    }


def consultation_row(booking: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": _record_id(booking),
        "name": booking.get("name") or "",
        "email": booking.get("email") or "",
        "phone": booking.get("phoneNumber"),
        "company": booking.get("birthPlace") or "",
        "service": booking.get("purpose") or "",
        "preferredDate": booking.get("dateOfBirth"),
        "preferredTime": booking.get("timeOfBirth"),
        "message": booking.get("message") or "",
        "status": _lower(booking.get("status")),
        "submittedAt": booking.get("createdAt"),
        "gender": booking.get("gender"),
        "birthPlace": booking.get("birthPlace"),
        "dateOfBirth": booking.get("dateOfBirth"),
        "timeOfBirth": booking.get("timeOfBirth"),
        "updatedAt": booking.get("updatedAt"),
    }


def video_row(video: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": _record_id(video),
        "title": video.get("title") or "",
        "url": video.get("video") or video.get("url"),
        "format": video.get("format"),
        "size": video.get("size"),
        "duration": video.get("duration"),
        "createdAt": video.get("createdAt"),
    }


def rows(records: Any, mapper) -> List[Dict[str, Any]]:
    if not isinstance(records, list):
        return []
    return [mapper(r) for r in records if isinstance(r, dict)]
