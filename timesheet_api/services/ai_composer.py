# timesheet_api/services/ai_composer.py
"""
Natural-language entry composer.

The suggester (a language model in production, a plain callable in tests)
returns proposed entries per date. Its output is untrusted: every item is
schema-checked on its own, hours are clamped to 0..24, zero-hour entries and
dates outside the caller's allowed set are dropped. Nothing here writes
entries; the caller applies accepted suggestions through the normal
replace-day-entries path.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional
import json
import logging

import requests
from pydantic import BaseModel, Field, ValidationError as SchemaError

from timesheet_api.common.errors import APIError, UpstreamError, ValidationError
from timesheet_api.models.day_entry import DAY_TYPES
from timesheet_api.services.weeks import is_date_iso, monday_of, parse_iso

log = logging.getLogger(__name__)

NO_CHANGES = "no applicable changes"

# (command, week_context) -> {"suggestions": [...], "rationale": str} or a bare list
Suggester = Callable[[str, dict], object]


class SuggestedEntry(BaseModel):
    hours: float = Field(allow_inf_nan=False)
    type: Optional[str] = None


class SuggestedDay(BaseModel):
    date: str
    entries: List[dict] = Field(default_factory=list)


def _clean_entry(raw) -> Optional[dict]:
    try:
        e = SuggestedEntry.model_validate(raw)
    except SchemaError:
        return None
    typ = e.type or "work"
    if typ not in DAY_TYPES:
        return None
    hours = max(0.0, min(24.0, float(e.hours)))
    if hours <= 0:
        return None
    return {"hours": round(hours, 2), "type": typ}


def filter_suggestions(raw_suggestions, allowed_dates) -> List[dict]:
    """
    Keep only well-formed suggestions for allowed dates.

    Malformed items are dropped silently; an empty result is a valid outcome.
    """
    allowed = {str(d).strip() for d in (allowed_dates or [])}
    if not isinstance(raw_suggestions, list):
        return []

    safe: List[dict] = []
    dropped = 0
    for raw in raw_suggestions:
        try:
            day = SuggestedDay.model_validate(raw)
        except SchemaError:
            dropped += 1
            continue
        date_iso = day.date.strip()
        if date_iso not in allowed:
            dropped += 1
            continue
        entries = [e for e in (_clean_entry(x) for x in day.entries) if e]
        if not entries:
            dropped += 1
            continue
        safe.append({"date": date_iso, "entries": entries})

    if dropped:
        log.debug("ai composer dropped %d suggestion(s)", dropped)
    return safe


def _validate_request(command, week_start, allowed_dates):
    if not isinstance(command, str) or not command.strip():
        raise ValidationError("command is required", payload={"field": "command"})
    if not is_date_iso(week_start):
        raise ValidationError("week_start must be YYYY-MM-DD", payload={"field": "week_start"})
    if not isinstance(allowed_dates, list) or not allowed_dates:
        raise ValidationError("allowed_dates must be a non-empty list", payload={"field": "allowed_dates"})
    for d in allowed_dates:
        if not is_date_iso(d):
            raise ValidationError(f"Invalid date: {d}", payload={"field": "allowed_dates", "date": d})
    try:
        parse_iso(week_start)
    except ValueError:
        raise ValidationError("week_start must be YYYY-MM-DD", payload={"field": "week_start"})


def compose(command, week_start, allowed_dates, expected_by_day, suggester: Suggester) -> Dict:
    """
    Ask the suggester for entries and return the filtered result:
      {"applicable": bool, "suggestions": [...], "rationale": str|None, "message": str|None}
    """
    _validate_request(command, week_start, allowed_dates)
    context = {
        "week_start": monday_of(week_start).isoformat(),
        "expected_by_day": [float(h) for h in expected_by_day],
        "allowed_dates": list(allowed_dates),
    }

    try:
        raw = suggester(command.strip(), context)
    except APIError:
        raise
    except Exception as e:
        log.exception("ai suggester failed")
        raise UpstreamError("AI suggestion service failed") from e

    rationale = None
    if isinstance(raw, dict):
        rationale = raw.get("rationale") if isinstance(raw.get("rationale"), str) else None
        raw = raw.get("suggestions")

    safe = filter_suggestions(raw, allowed_dates)
    return {
        "applicable": bool(safe),
        "suggestions": safe,
        "rationale": rationale,
        "message": None if safe else NO_CHANGES,
    }


SYSTEM_PROMPT = "\n".join([
    "You propose daily hour entries for some or all days of the given week.",
    "You receive the week's Monday date and the expected hours for each day (Mon..Sun).",
    "A day may have several entries. Each entry is {\"hours\": number, \"type\": \"work\"|\"sick\"|\"time_off\"}.",
    "Absence caused by sickness is type 'sick'; any other absence is type 'time_off'.",
    "When the user refers to a whole day, the entries for that day must add up to its expected hours.",
    "Only propose entries for days the user mentions. Fill days with 'work' only when asked to.",
    "Never return an entry with 0 hours.",
    "Answer with JSON only: {\"suggestions\": [{\"date\": \"YYYY-MM-DD\", \"entries\": [...]}], \"rationale\": \"...\"}.",
])


class OpenAISuggester:
    """Chat-completions client returning the model's JSON answer as a dict."""

    def __init__(self, api_key: str | None, model: str = "gpt-4o-mini", timeout: float = 30,
                 base_url: str = "https://api.openai.com/v1"):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_config(cls, config) -> "OpenAISuggester":
        return cls(
            api_key=config.get("OPENAI_API_KEY"),
            model=config.get("AI_MODEL", "gpt-4o-mini"),
            timeout=config.get("AI_TIMEOUT", 30),
            base_url=config.get("AI_BASE_URL", "https://api.openai.com/v1"),
        )

    def __call__(self, command: str, context: dict):
        if not self.api_key:
            raise UpstreamError("AI service is not configured")

        body = {
            "model": self.model,
            "temperature": 0.2,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": json.dumps({
                    "instructions": command,
                    "weekStart": context["week_start"],
                    "expectedByDay": context["expected_by_day"],
                })},
            ],
        }
        resp = requests.post(
            f"{self.base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json=body,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        content = resp.json()["choices"][0]["message"]["content"]
        return json.loads(content)
