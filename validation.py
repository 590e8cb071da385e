"""
validation.py
-------------
Form validation for trash entries and user accounts. Entry rules live in one
declarative table (ENTRY_RULES) that drives the server-side checks and is
exported to the browser through client_rules(), so both sides agree.

Validators never raise on bad input: they return a ValidationResult whose
errors map holds at most one message per field.
"""

import math
import re
from collections import namedtuple
from datetime import date, datetime, timezone

import config

LETTERS_PATTERN = r"^[A-Za-z\s]+$"
# ASCII only: both patterns are also run as JavaScript regexes
NUMBER_PATTERN = r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$"
DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"
MIN_ENTRY_DATE = date(2024, 1, 1)
GENERAL_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

ENTRY_RULES = {
    "type": {
        "pattern": LETTERS_PATTERN,
        "messages": {"invalid": "Type must contain only letters and spaces."},
    },
    "quantity": {
        "positive_number": True,
        "format": NUMBER_PATTERN,
        "messages": {"invalid": "Quantity must be a positive number."},
    },
    "location": {
        "min_length": 3,
        "messages": {"invalid": "Location must be at least 3 characters long."},
    },
    "date": {
        "format": DATE_PATTERN,
        "not_future": True,
        "min_date": MIN_ENTRY_DATE,  # strict mode only
        "messages": {
            "required": "Please select a date.",
            "invalid": "Invalid date format.",
            "future": "Date cannot be in the future.",
            "too_early": "Date cannot be before 2024.",
        },
    },
    "collector": {
        "pattern": LETTERS_PATTERN,
        "unique": True,
        "messages": {
            "invalid": "Collector name must contain only letters and spaces.",
            "taken": "Collector name already exists.",
        },
    },
}

ENTRY_FIELDS = ("type", "quantity", "location", "date", "collector")
EDITABLE_FIELDS = ("type", "quantity", "location", "date")


class ValidationResult(namedtuple("ValidationResult", ["entry", "errors"])):
    """Normalized values on success, field -> message map on failure."""

    __slots__ = ()

    @property
    def ok(self):
        return not self.errors


def _text(value):
    if value is None:
        return ""
    return str(value).strip()


def parse_number(value):
    """Return a finite number or None. Integral values come back as int.

    Strings must be plain ASCII decimals (NUMBER_PATTERN); float() alone
    would also take "1_000" or non-ASCII digits.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = _text(value)
        if not re.fullmatch(NUMBER_PATTERN, text):
            return None
        number = float(text)
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _text(value)
    # fromisoformat also takes "20250601" and week dates on newer Pythons
    if not re.fullmatch(DATE_PATTERN, text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _check_field(field, raw, strict, today):
    """Apply ENTRY_RULES[field] to raw input. Returns (value, error)."""
    rule = ENTRY_RULES[field]
    messages = rule["messages"]

    if "pattern" in rule:
        text = _text(raw)
        if not text or not re.fullmatch(rule["pattern"], text):
            return None, messages["invalid"]
        return text, None

    if "min_length" in rule:
        text = _text(raw)
        if len(text) < rule["min_length"]:
            return None, messages["invalid"]
        return text, None

    if rule.get("positive_number"):
        number = parse_number(raw)
        if number is None or number <= 0:
            return None, messages["invalid"]
        return number, None

    # date
    if not _text(raw):
        return None, messages["required"]
    parsed = _parse_date(raw)
    if parsed is None:
        return None, messages["invalid"]
    if rule.get("not_future") and parsed > today:
        return None, messages["future"]
    if strict and parsed < rule["min_date"]:
        return None, messages["too_early"]
    return parsed.isoformat(), None


def _validate_fields(form, fields, strict, today):
    values, errors = {}, {}
    for field in fields:
        value, error = _check_field(field, form.get(field), strict, today)
        if error:
            errors[field] = error
        else:
            values[field] = value
    return values, errors


def validate_entry(form, collector_exists, strict=True, today=None):
    """Validate a new trash entry submission.

    collector_exists(name) is only called when the collector name is well
    formed. Failures of that lookup propagate to the caller.
    """
    today = today or date.today()
    values, errors = _validate_fields(form, ENTRY_FIELDS, strict, today)

    if "collector" not in errors and collector_exists(values["collector"]):
        errors["collector"] = ENTRY_RULES["collector"]["messages"]["taken"]

    if errors:
        return ValidationResult(None, errors)
    values["createdAt"] = datetime.now(timezone.utc).isoformat()
    return ValidationResult(values, {})


def validate_entry_update(form, strict=True, today=None):
    """Validate an edit. Collector and owner are immutable, so neither is checked."""
    today = today or date.today()
    values, errors = _validate_fields(form, EDITABLE_FIELDS, strict, today)
    if errors:
        return ValidationResult(None, errors)
    return ValidationResult(values, {})


def client_rules(strict=True, today=None):
    """JSON-safe copy of ENTRY_RULES for the browser pre-check."""
    today = today or date.today()
    rules = {}
    for field, rule in ENTRY_RULES.items():
        exported = {"messages": dict(rule["messages"])}
        for key in ("pattern", "format", "min_length", "positive_number", "unique"):
            if key in rule:
                exported[key] = rule[key]
        if field == "date":
            exported["max"] = today.isoformat()
            exported["min"] = rule["min_date"].isoformat() if strict else None
        rules[field] = exported
    return rules


# ------------------------------------------------------------
# Account forms
# ------------------------------------------------------------
def school_email_pattern(domain=None):
    domain = domain or config.INSTITUTION_EMAIL_DOMAIN
    return r"^[0-9]{9}@" + re.escape(domain) + r"$"


def _email_error(email, strict, domain, message):
    pattern = school_email_pattern(domain) if strict else GENERAL_EMAIL_PATTERN
    if not email or not re.fullmatch(pattern, email, re.IGNORECASE):
        return message
    return None


def validate_registration(form, strict=True, domain=None):
    domain = domain or config.INSTITUTION_EMAIL_DOMAIN
    errors = {}

    name = _text(form.get("name"))
    email = _text(form.get("email"))
    password = form.get("password") or ""
    department = _text(form.get("department"))

    if strict:
        message = "Please use your school email (e.g., 202311512@%s)" % domain
    else:
        message = "Please enter a valid email address."
    email_error = _email_error(email, strict, domain, message)
    if email_error:
        errors["email"] = email_error
    if len(name) < 2:
        errors["name"] = "Name must be at least 2 characters long."
    if len(password) < 6:
        errors["password"] = "Password must be at least 6 characters long."
    if not department:
        errors["department"] = "Please select your department."

    if errors:
        return ValidationResult(None, errors)
    return ValidationResult({
        "name": name,
        "email": email.lower(),
        "password": password,
        "department": department,
    }, {})


def validate_login(form, strict=True, domain=None):
    domain = domain or config.INSTITUTION_EMAIL_DOMAIN
    errors = {}

    email = _text(form.get("email"))
    password = form.get("password") or ""

    if strict:
        message = "Please use your valid school email (e.g., 202311512@%s)" % domain
    else:
        message = "Please enter a valid email address."
    email_error = _email_error(email, strict, domain, message)
    if email_error:
        errors["email"] = email_error
    if not password:
        errors["password"] = "Password is required."

    if errors:
        return ValidationResult(None, errors)
    return ValidationResult({"email": email.lower(), "password": password}, {})
