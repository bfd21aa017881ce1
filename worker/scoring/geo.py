"""Local-intent (GEO) scoring.

Only applies when the audit is given a LocalContext. Components:

    location mentions      30  city and state mentions (6 each, max 5)
    service-area phrasing  20  "serving", "we serve", "service area" ... (10 each, max 2)
    near me                10
    local keywords         15  distinct local-intent terms (3 each, max 5)
    business info          15  phone, street address, opening hours (5 each)
    neighborhoods          10  named neighborhoods / service areas (2 each, max 5)
"""

import re
from dataclasses import dataclass, field

SERVICE_AREA_PATTERN = re.compile(
    r"\b(?:serving|we serve|proudly serve|servicing|service areas?|areas we serve)\b",
    re.IGNORECASE,
)
NEAR_ME_PATTERN = re.compile(r"\bnear (?:me|you)\b", re.IGNORECASE)
LOCAL_KEYWORDS = (
    "local",
    "locally",
    "nearby",
    "in your area",
    "neighborhood",
    "community",
    "locally owned",
    "family owned",
    "residents",
    "downtown",
)
PHONE_PATTERN = re.compile(r"\(?\b\d{3}\)?[\s.-]\d{3}[\s.-]\d{4}\b")
ADDRESS_PATTERN = re.compile(
    r"\b\d{1,6}\s+(?:[A-Z][\w.]*\s+){1,4}"
    r"(?:street|st|avenue|ave|road|rd|boulevard|blvd|drive|dr|lane|ln|way|court|ct|suite|parkway|pkwy)\b",
    re.IGNORECASE,
)
HOURS_PATTERN = re.compile(
    r"\b(?:hours|open (?:daily|24|\d)|mon(?:day)?\s?[-–]\s?(?:fri|sat|sun)"
    r"|\d{1,2}(?::\d{2})?\s?(?:am|pm)\b)",
    re.IGNORECASE,
)


@dataclass
class LocalContext:
    """Where a local business operates."""

    city: str
    state: str = ""
    service_areas: list[str] = field(default_factory=list)
    neighborhoods: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "city": self.city,
            "state": self.state,
            "service_areas": self.service_areas,
            "neighborhoods": self.neighborhoods,
        }


@dataclass
class GEOScore:
    score: int
    components: dict[str, int] = field(default_factory=dict)
    city_mentions: int = 0
    state_mentions: int = 0
    service_area_statements: int = 0
    has_near_me: bool = False
    local_keyword_count: int = 0
    has_phone: bool = False
    has_address: bool = False
    has_hours: bool = False
    neighborhood_mentions: int = 0

    @property
    def has_location_mentions(self) -> bool:
        return self.city_mentions + self.state_mentions > 0

    @property
    def has_business_info(self) -> bool:
        return self.has_phone or self.has_address or self.has_hours

    @property
    def has_local_intent(self) -> bool:
        return self.has_near_me or self.local_keyword_count > 0

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "components": self.components,
            "has_location_mentions": self.has_location_mentions,
            "city_mentions": self.city_mentions,
            "state_mentions": self.state_mentions,
            "has_service_area": self.service_area_statements > 0,
            "service_area_statements": self.service_area_statements,
            "has_near_me_optimization": self.has_near_me,
            "has_local_keywords": self.local_keyword_count > 0,
            "local_keyword_count": self.local_keyword_count,
            "has_business_info": self.has_business_info,
            "has_phone": self.has_phone,
            "has_address": self.has_address,
            "has_hours": self.has_hours,
            "has_local_intent": self.has_local_intent,
            "neighborhood_mentions": self.neighborhood_mentions,
        }


def _count_mentions(name: str, text: str) -> int:
    name = name.strip()
    if not name:
        return 0
    return len(re.findall(rf"\b{re.escape(name)}\b", text, re.IGNORECASE))


def score_geo(text: str, local_context: LocalContext) -> GEOScore:
    """Score content for local search intent around the given location."""
    text = text or ""
    lower = text.lower()

    city_mentions = _count_mentions(local_context.city, text)
    state_mentions = _count_mentions(local_context.state, text)
    location_points = min(city_mentions + state_mentions, 5) * 6

    service_statements = len(SERVICE_AREA_PATTERN.findall(text))
    service_points = min(service_statements, 2) * 10

    near_me = bool(NEAR_ME_PATTERN.search(text))

    keyword_count = sum(
        1 for keyword in LOCAL_KEYWORDS if re.search(rf"\b{re.escape(keyword)}\b", lower)
    )
    keyword_points = min(keyword_count, 5) * 3

    has_phone = bool(PHONE_PATTERN.search(text))
    has_address = bool(ADDRESS_PATTERN.search(text))
    has_hours = bool(HOURS_PATTERN.search(text))
    business_points = 5 * (int(has_phone) + int(has_address) + int(has_hours))

    area_names = {
        name.strip().lower()
        for name in [*local_context.neighborhoods, *local_context.service_areas]
        if name.strip()
    }
    neighborhood_mentions = sum(1 for name in area_names if _count_mentions(name, text))
    neighborhood_points = min(neighborhood_mentions, 5) * 2

    components = {
        "location_mentions": location_points,
        "service_area": service_points,
        "near_me": 10 if near_me else 0,
        "local_keywords": keyword_points,
        "business_info": business_points,
        "neighborhoods": neighborhood_points,
    }

    return GEOScore(
        score=min(sum(components.values()), 100),
        components=components,
        city_mentions=city_mentions,
        state_mentions=state_mentions,
        service_area_statements=service_statements,
        has_near_me=near_me,
        local_keyword_count=keyword_count,
        has_phone=has_phone,
        has_address=has_address,
        has_hours=has_hours,
        neighborhood_mentions=neighborhood_mentions,
    )
