"""
List shaping for the timeline, gallery and dashboard views.

All functions work on already-loaded Memory objects (anything with ``date``,
``created_at``, ``mood``, ``title``, ``content``, ``tags`` and ``media``) so
they can be reused on any query result.
"""
import calendar
import datetime as dt
import math
from collections import OrderedDict
from typing import List, Dict, Optional, Sequence, Any

from relive.models.media import MEDIA_TYPES
from relive.services.media_service import strip_html_tags
from relive.utils.moods import mood_label, mood_color, OTHER_LABEL, OTHER_COLOR

ON_THIS_DAY_LIMIT = 3
EXCERPT_LENGTH = 160
# audio has nothing to show in a grid
GALLERY_MEDIA_TYPES = tuple(t for t in MEDIA_TYPES if t != "audio")


def _sort_key(memory):
    return (memory.date, memory.created_at or dt.datetime.min)


def sort_by_date(memories: Sequence[Any]) -> List[Any]:
    """Newest first; same-day memories by creation time, newest first."""
    return sorted(memories, key=_sort_key, reverse=True)


def paginate(items: Sequence[Any], page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    """
    Slice ``items`` into a 1-based page.

    Returns:
        Dict with ``items`` and the pagination fields ``page``, ``per_page``,
        ``total``, ``total_pages``, ``has_next`` and ``has_previous``
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if per_page < 1:
        raise ValueError("per_page must be >= 1")

    total = len(items)
    total_pages = math.ceil(total / per_page)
    start = (page - 1) * per_page
    return {
        "items": list(items[start:start + per_page]),
        "page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_previous": page > 1 and total > 0,
    }


def group_by_year_month(memories: Sequence[Any]) -> List[Dict[str, Any]]:
    """
    Bucket memories into years and months, both descending.

    Returns:
        ``[{"year": 2024, "months": [{"month": 3, "month_name": "March",
        "memories": [...]}, ...]}, ...]``
    """
    years: "OrderedDict[int, OrderedDict[int, list]]" = OrderedDict()
    for memory in sort_by_date(memories):
        months = years.setdefault(memory.date.year, OrderedDict())
        months.setdefault(memory.date.month, []).append(memory)

    return [
        {
            "year": year,
            "months": [
                {"month": month, "month_name": calendar.month_name[month], "memories": items}
                for month, items in months.items()
            ],
        }
        for year, months in years.items()
    ]


def _tag_names(memory) -> List[str]:
    return [getattr(tag, "name", tag) for tag in memory.tags or []]


def filter_memories(
    memories: Sequence[Any],
    tag: Optional[str] = None,
    mood: Optional[str] = None,
    query: Optional[str] = None,
    date_from: Optional[dt.date] = None,
    date_to: Optional[dt.date] = None,
) -> List[Any]:
    """Keep memories matching every given criterion. Tag and text matching ignore case."""
    needle = query.strip().lower() if query else None
    wanted_tag = tag.strip().lower() if tag else None

    result = []
    for memory in memories:
        if wanted_tag and wanted_tag not in (name.lower() for name in _tag_names(memory)):
            continue
        if mood and memory.mood != mood:
            continue
        if date_from and memory.date < date_from:
            continue
        if date_to and memory.date > date_to:
            continue
        if needle:
            haystack = f"{memory.title} {strip_html_tags(memory.content)} {memory.location or ''}".lower()
            if needle not in haystack:
                continue
        result.append(memory)
    return result


def _previous_month(today: dt.date):
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def on_this_day(memories: Sequence[Any], today: dt.date, limit: int = ON_THIS_DAY_LIMIT) -> Dict[str, Any]:
    """
    Pick memories to resurface on the dashboard.

    Tried in order, first non-empty wins:
        1. same month and day in an earlier year ("A year ago today" / "N years ago today")
        2. same day of the previous month ("A month ago today")
        3. yesterday ("Yesterday")
        4. the most recent memories ("Recent memories")
    """
    ordered = sort_by_date(memories)

    past_years = [
        m for m in ordered
        if m.date.month == today.month and m.date.day == today.day and m.date.year < today.year
    ]
    if past_years:
        years_ago = today.year - past_years[0].date.year
        context = "A year ago today" if years_ago == 1 else f"{years_ago} years ago today"
        return {"context": context, "memories": past_years[:limit]}

    month_year, month = _previous_month(today)
    past_month = [
        m for m in ordered
        if m.date.year == month_year and m.date.month == month and m.date.day == today.day
    ]
    if past_month:
        return {"context": "A month ago today", "memories": past_month[:limit]}

    yesterday = today - dt.timedelta(days=1)
    yesterdays = [m for m in ordered if m.date == yesterday]
    if yesterdays:
        return {"context": "Yesterday", "memories": yesterdays[:limit]}

    if ordered:
        return {"context": "Recent memories", "memories": ordered[:limit]}

    return {"context": "", "memories": []}


def period_start(period: str, today: dt.date) -> dt.date:
    if period == "month":
        return today.replace(day=1)
    if period == "year":
        return today.replace(month=1, day=1)
    raise ValueError(f"Unknown period: {period}")


def mood_breakdown(memories: Sequence[Any], period: str, today: dt.date) -> Dict[str, Any]:
    """Count moods of memories dated from the start of ``period`` up to ``today``."""
    start = period_start(period, today)
    counts: Dict[str, int] = {}
    for memory in memories:
        if memory.mood and start <= memory.date <= today:
            counts[memory.mood] = counts.get(memory.mood, 0) + 1

    moods = [
        {
            "emoji": emoji,
            "label": mood_label(emoji) or OTHER_LABEL,
            "color": mood_color(emoji) or OTHER_COLOR,
            "count": count,
        }
        for emoji, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]
    return {"period": period, "moods": moods, "total": sum(counts.values())}


def excerpt(html_content: str, length: int = EXCERPT_LENGTH) -> str:
    text = strip_html_tags(html_content)
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "..."


def gallery_items(memories: Sequence[Any], media_type: Optional[str] = None) -> List[Dict[str, Any]]:
    """Flatten the image and video media of ``memories`` into gallery cards, newest memory first."""
    types = (media_type,) if media_type else GALLERY_MEDIA_TYPES
    items = []
    for memory in sort_by_date(memories):
        for media in memory.media:
            if media.type not in types:
                continue
            items.append({
                "media_id": media.id,
                "url": media.url,
                "type": media.type,
                "thumbnail_url": media.thumbnail_url,
                "memory_id": memory.id,
                "title": memory.title,
                "mood": memory.mood,
                "mood_label": mood_label(memory.mood),
                "color": mood_color(memory.mood),
                "tags": _tag_names(memory),
                "date": memory.date,
                "location": memory.location,
                "excerpt": excerpt(memory.content),
            })
    return items
