# timesheet_api/common/paging.py
from flask import request

DEFAULT_SIZE = 50
MAX_SIZE = 200


def page_limit():
    """`?page=&size=` -> (page, size); junk values fall back to page 1 / DEFAULT_SIZE."""
    try:
        page = max(int(request.args.get("page", 1)), 1)
    except (TypeError, ValueError):
        page = 1
    try:
        size = max(1, min(int(request.args.get("size", DEFAULT_SIZE)), MAX_SIZE))
    except (TypeError, ValueError):
        size = DEFAULT_SIZE
    return page, size


def order_by_param(allowed: dict, default: list):
    """
    `?sort=surname,-start_date` -> ORDER BY clauses from `allowed` columns.
    Unknown keys are skipped; nothing usable returns `default`.
    """
    clauses = []
    for key in (p.strip() for p in request.args.get("sort", "").split(",")):
        desc = key.startswith("-")
        col = allowed.get(key.lstrip("-"))
        if col is not None:
            clauses.append(col.desc() if desc else col.asc())
    return clauses or default
