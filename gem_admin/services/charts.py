"""Shape the analytics payload into the inputs the dashboard charts expect."""
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

PIE_COLORS = ["#adfa1d", "#84cc16", "#65a30d", "#4d7c0f", "#365314"]
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def parse_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _sort_key(stat: Dict[str, Any]):
    parsed = parse_date(stat.get("date"))
    # Undated rows sort first and keep their relative order
    return (parsed is not None, parsed.replace(tzinfo=None) if parsed else datetime.min)


def sorted_stats(daily_stats: Optional[Sequence[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return sorted(daily_stats or [], key=_sort_key)


def short_date(value: Any) -> str:
    """"2024-01-05" -> "Jan 5"."""
    parsed = parse_date(value)
    if parsed is None:
        return str(value or "")
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}"


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def overview_series(daily_stats) -> List[Dict[str, Any]]:
    return [
        {"name": short_date(stat.get("date")), "total": stat.get("revenue") or 0, "orders": stat.get("orders") or 0}
        for stat in sorted_stats(daily_stats)
    ]


def revenue_series(daily_stats) -> List[Dict[str, Any]]:
    return [
        {"date": short_date(stat.get("date")), "revenue": stat.get("revenue") or 0}
        for stat in sorted_stats(daily_stats)
    ]


def growth_series(daily_stats) -> List[Dict[str, Any]]:
    """Day-over-day revenue growth; days after a zero-revenue day report 0."""
    stats = sorted_stats(daily_stats)
    series = []
    for previous, current in zip(stats, stats[1:]):
        before = _number(previous.get("revenue"))
        after = _number(current.get("revenue"))
        growth = round((after - before) / before * 100, 1) if before else 0
        series.append({"date": short_date(current.get("date")), "growth": growth})
    return series


def growth_rate(daily_stats) -> float:
    stats = sorted_stats(daily_stats)
    if len(stats) < 2:
        return 0
    first = _number(stats[0].get("revenue"))
    last = _number(stats[-1].get("revenue"))
    if first == 0:
        return 0
    return round((last - first) / first * 100, 1)


def status_breakdown_slices(breakdown: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    entries = list((breakdown or {}).items())
    total = sum(_number(count) for _, count in entries)
    return [
        {
            "name": status,
            "value": count,
            "color": PIE_COLORS[i % len(PIE_COLORS)],
            "percent": round(_number(count) / total * 100) if total > 0 else 0,
        }
        for i, (status, count) in enumerate(entries)
    ]


def initials(name: Optional[str]) -> str:
    return "".join(word[:1] for word in (name or "").split()).upper()[:2]


def recent_sales(recent_orders, limit: int = 5) -> List[Dict[str, Any]]:
    sales = []
    for order in (recent_orders or [])[:limit]:
        user = order.get("user") or {}
        sales.append({
            "id": order.get("_id") or order.get("id"),
            "name": user.get("name") or "",
            "email": user.get("email") or "",
            "initials": initials(user.get("name")),
            "amount": order.get("totalAmount") or 0,
            "date": short_date(order.get("createdAt")),
        })
    return sales
