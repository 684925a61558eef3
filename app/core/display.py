"""
Display helpers shared by the profile, page and comment modules.

These shape fetched rows for the frontend: relative timestamps, avatar
initials, page excerpts, and the in-memory search filters applied after a
table query.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

EXCERPT_LENGTH = 100
_MARKDOWN_MARKERS = re.compile(r"[#*`]")

PAGE_STATUS_ALL = "all"
PAGE_STATUS_PUBLISHED = "published"
PAGE_STATUS_DRAFT = "draft"


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse a Supabase timestamp (ISO 8601, possibly with a trailing Z) into an aware datetime."""
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_relative(value: Union[str, datetime], now: Optional[datetime] = None) -> str:
    """'Just now' under an hour, 'Nh ago' under a day, otherwise M/D/YYYY."""
    dt = parse_timestamp(value)
    now = now or datetime.now(timezone.utc)
    diff_hours = (now - dt).total_seconds() / 3600
    if diff_hours < 1:
        return "Just now"
    if diff_hours < 24:
        return f"{int(diff_hours)}h ago"
    return f"{dt.month}/{dt.day}/{dt.year}"


def get_initials(name: Optional[str]) -> str:
    if not name:
        return ""
    return "".join(part[0] for part in name.split(" ") if part).upper()


def page_excerpt(content: Optional[str]) -> str:
    content = content or ""
    excerpt = _MARKDOWN_MARKERS.sub("", content)[:EXCERPT_LENGTH]
    # Length check is against the raw content, markers included
    if len(content) > EXCERPT_LENGTH:
        excerpt += "..."
    return excerpt


def collect_skills(profiles: Iterable[Dict[str, Any]]) -> List[str]:
    skills = set()
    for profile in profiles:
        for skill in profile.get("skills") or []:
            skills.add(skill)
    return sorted(skills)


def filter_profiles(
    profiles: List[Dict[str, Any]],
    search: Optional[str] = None,
    skill: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Case-insensitive search over name, bio and skills, then exact skill match."""
    filtered = profiles
    if search:
        term = search.lower()
        filtered = [
            p for p in filtered
            if term in (p.get("full_name") or "").lower()
            or term in (p.get("bio") or "").lower()
            or any(term in s.lower() for s in p.get("skills") or [])
        ]
    if skill:
        filtered = [p for p in filtered if skill in (p.get("skills") or [])]
    return filtered


def filter_pages(
    pages: List[Dict[str, Any]],
    search: Optional[str] = None,
    status: str = PAGE_STATUS_ALL,
) -> List[Dict[str, Any]]:
    filtered = pages
    if search:
        term = search.lower()
        filtered = [
            p for p in filtered
            if term in (p.get("title") or "").lower()
            or term in (p.get("content") or "").lower()
        ]
    if status == PAGE_STATUS_PUBLISHED:
        filtered = [p for p in filtered if p.get("published")]
    elif status == PAGE_STATUS_DRAFT:
        filtered = [p for p in filtered if not p.get("published")]
    return filtered
