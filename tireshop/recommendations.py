#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Tire recommendations

Asks an OpenAI chat model to pick tires for a short questionnaire. Whenever
that does not produce a usable answer the deterministic ranking in
fallback_recommendations() is returned instead, so callers never see an
error from here.
"""
# ========================================================
# IMPORTS
# ========================================================
import json
import logging
from dataclasses import asdict, dataclass
from typing import List, Optional
from openai import OpenAI
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tireshop.errors import ValidationError
from tireshop.models import Season

logger = logging.getLogger(__name__)

# ========================================================
# GLOABALS
# ========================================================
MAX_RECOMMENDATIONS = 5

# cents, (min, max) both inclusive, None = open
BUDGET_RANGES = {
    "economy": (5000, 10000),
    "mid_range": (10000, 20000),
    "premium": (20000, 30000),
    "luxury": (30000, None),
}

PREFERENCE_FIELDS = {
    "drivingStyle": "driving_style",
    "weather": "weather",
    "budget": "budget",
    "vehicleType": "vehicle_type",
}

PROMPT_TEMPLATE = """As a tire recommendation expert, analyze these user \
preferences and recommend the best matching tires from the available options.
User preferences: {preferences}
Available tires: {tires}

Consider the following factors:
- Driving style ({driving_style})
- Weather conditions ({weather})
- Budget range ({budget})
- Vehicle type ({vehicle_type})

Return the response as a JSON object containing the IDs of the recommended \
tires in order of relevance.
Format: {{ "recommendedTireIds": [1, 2, 3] }}"""


# ========================================================
# CLASSES
# ========================================================
@dataclass(frozen=True)
class UserPreferences:
    driving_style: Optional[str] = None
    weather: Optional[str] = None
    budget: Optional[str] = None
    vehicle_type: Optional[str] = None

    @classmethod
    def from_json(cls, data) -> "UserPreferences":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object.")
        values = {}
        errors = {}
        for wire, attr in PREFERENCE_FIELDS.items():
            raw = data.get(wire)
            if raw is None:
                continue
            if not isinstance(raw, str):
                errors[wire] = "must be a string"
                continue
            values[attr] = raw.strip() or None
        if errors:
            raise ValidationError("Invalid preferences.", errors)
        return cls(**values)

    def to_wire(self) -> dict:
        return {wire: getattr(self, attr)
                for wire, attr in PREFERENCE_FIELDS.items()}


class RecommendationEngine:
    """
    LLM backed recommender with a local fallback.

    client is anything exposing chat.completions.create() like openai.OpenAI;
    None skips the model call entirely.
    """

    def __init__(self, client=None, model: str = "gpt-4o",
                 max_results: int = MAX_RECOMMENDATIONS):
        self.client = client
        self.model = model
        self.max_results = max_results

    def recommend(self, preferences: UserPreferences, candidates) -> list:
        """Return at most max_results tires taken from candidates."""
        candidates = list(candidates)
        if self.client is None:
            logger.warning("No recommendation model configured, "
                           "using fallback ranking")
            return fallback_recommendations(preferences, candidates,
                                            self.max_results)
        try:
            picked = self._ask_model(preferences, candidates)
        except Exception:
            logger.exception("Recommendation request failed, "
                             "using fallback ranking")
            picked = []

        if not picked:
            logger.warning("Recommendation model returned nothing usable, "
                           "using fallback ranking")
            return fallback_recommendations(preferences, candidates,
                                            self.max_results)
        return picked

    def _ask_model(self, preferences, candidates) -> list:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user",
                       "content": build_prompt(preferences, candidates)}],
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError("No response content from the model")
        ids = parse_recommended_ids(content)
        return select_by_ids(ids, candidates)[:self.max_results]


# ========================================================
# FUNCTIONS
# ========================================================
def build_client(api_key: str, timeout: float) -> Optional[OpenAI]:
    """OpenAI client with a bounded timeout and a single attempt."""
    if not api_key:
        return None
    return OpenAI(api_key=api_key, timeout=timeout, max_retries=0)


def _tire_summary(tire) -> dict:
    model = tire.model
    return {
        "id": tire.id,
        "brand": model.brand.name if model and model.brand else None,
        "model": model.name if model else None,
        "season": Season(model.season).label if model else None,
        "size": tire.size,
        "code": tire.code,
        "fuelEfficiency": tire.fuel_efficiency,
        "wetGrip": tire.wet_grip,
        "noiseLevel": tire.noise_level,
        "price": tire.price,
        "inStock": bool(tire.in_stock),
    }


def build_prompt(preferences: UserPreferences, candidates) -> str:
    prefs = preferences.to_wire()
    tires = [_tire_summary(t) for t in candidates]
    return PROMPT_TEMPLATE.format(
        preferences=json.dumps(prefs),
        tires=json.dumps(tires, separators=(",", ":")),
        **{k: v or "not specified" for k, v in asdict(preferences).items()},
    )


def parse_recommended_ids(content: str) -> List[int]:
    """Read {"recommendedTireIds": [...]}; raises ValueError if malformed."""
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    raw_ids = data.get("recommendedTireIds")
    if not isinstance(raw_ids, list):
        raise ValueError("recommendedTireIds missing")
    ids = []
    for raw in raw_ids:
        if isinstance(raw, bool):
            continue
        if isinstance(raw, int):
            ids.append(raw)
        elif isinstance(raw, str) and raw.strip().isdigit():
            ids.append(int(raw.strip()))
    return ids


def select_by_ids(ids, candidates) -> list:
    """Map ids to candidates in the given order; unknown and repeated ids are dropped."""
    by_id = {t.id: t for t in candidates}
    seen = set()
    picked = []
    for tire_id in ids:
        if tire_id in by_id and tire_id not in seen:
            seen.add(tire_id)
            picked.append(by_id[tire_id])
    return picked


def season_for_weather(weather: Optional[str]) -> Season:
    """Anything mentioning snow needs winter tires."""
    if weather and "snow" in weather.lower():
        return Season.WINTER
    return Season.SUMMER


def budget_range(budget: Optional[str]):
    """(min, max) in cents for a budget category, None if unknown."""
    if not budget:
        return None
    key = budget.strip().lower().replace("-", "_").replace(" ", "_")
    return BUDGET_RANGES.get(key)


def _in_budget(price, bounds) -> bool:
    low, high = bounds
    if price < low:
        return False
    return high is None or price <= high


def _style_key(driving_style: Optional[str]):
    # 'A' is the best rating, so plain ascending order puts it first
    style = (driving_style or "").strip().lower()
    if style == "sporty":
        return lambda t: t.wet_grip
    if style == "eco":
        return lambda t: t.fuel_efficiency
    if style == "comfort":
        return lambda t: t.noise_level
    return None


def fallback_recommendations(preferences: UserPreferences, candidates,
                             limit: int = MAX_RECOMMENDATIONS) -> list:
    """
    Rule based ranking used when the model gives no answer.

    1. season from the weather answer (snow -> winter, else summer)
    2. price bucket from the budget answer
    3. order by driving style
    4. in-stock tires first (stable)
    5. cut to limit
    """
    season = season_for_weather(preferences.weather)
    tires = [t for t in candidates if t.season == season]

    bounds = budget_range(preferences.budget)
    if bounds is not None:
        tires = [t for t in tires if _in_budget(t.price, bounds)]

    key = _style_key(preferences.driving_style)
    if key is not None:
        tires = sorted(tires, key=key)

    tires = sorted(tires, key=lambda t: not t.in_stock)
    return tires[:limit]
