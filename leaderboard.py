"""
leaderboard.py
--------------
Aggregates trash entries into a ranked list of collectors. Everything is
recomputed from the records passed in; nothing is cached between calls.
"""

from validation import parse_number

UNKNOWN_COLLECTOR = "Unknown"
ALL_DEPARTMENTS = "all"


def quantity_of(record):
    """Numeric quantity of a record, 0 when missing or not a number."""
    number = parse_number(record.get("quantity"))
    return 0 if number is None else number


def total_quantity(records):
    return sum(quantity_of(record) for record in records)


def compute_leaderboard(records, department=ALL_DEPARTMENTS):
    """Rank collectors by total quantity, optionally within one department.

    Returns {"ranked": [{"collector", "total"}, ...], "departments": [...]}.
    Departments are always taken from the full record set so the filter
    options stay available whatever is currently selected. Collectors with
    equal totals keep the order in which they first appear.
    """
    filter_all = not department or department == ALL_DEPARTMENTS

    totals = {}
    departments = {}
    for record in records:
        dept = record.get("department")
        if dept and isinstance(dept, str):
            departments.setdefault(dept, None)
        if not filter_all and dept != department:
            continue
        collector = record.get("collector") or UNKNOWN_COLLECTOR
        totals[collector] = totals.get(collector, 0) + quantity_of(record)

    ranked = [{"collector": name, "total": total} for name, total in totals.items()]
    ranked = sorted(ranked, key=lambda x: x["total"], reverse=True)
    return {"ranked": ranked, "departments": list(departments)}
