from __future__ import annotations

import re
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from ..excel.values import is_blank, is_date_cell, parse_money
from ..models.catalog import ClassificationMethod, ColumnClassification, ColumnRole

"""Rule-based column classifier.

Three independent signal paths vote for roles:

1. header text: keyword containment in the normalized header label
2. value shape: share of sampled values that parse as money, look like
   dates, 5-digit zip codes, mixed alphanumeric identifiers or prose
3. position: a placeholder header ("Unnamed: 0", "V", blank) in the first
   column leans towards an identifier

Every role that fired gets a weight; weights are normalized into a
probability-like distribution. The top role is the guess, the rest are the
ranked alternatives, and the method records which path contributed most to
the guess. Classification never raises: a column where nothing fires is
free-text with a low fixed confidence.
"""

__all__ = [
    "HEADER_KEYWORDS",
    "UNRECOGNIZED_CONFIDENCE",
    "normalize_header",
    "header_roles",
    "classify",
]

HEADER_WEIGHT = 3.0
SHAPE_WEIGHT = 1.0
POSITIONAL_WEIGHT = 0.5
FREE_TEXT_FLOOR = 0.1
UNRECOGNIZED_CONFIDENCE = 0.15

# Keywords of three letters or fewer must match a whole token ("id" should
# not fire on "width"); longer ones match anywhere in the header.
HEADER_KEYWORDS: dict[ColumnRole, tuple[str, ...]] = {
    ColumnRole.MONETARY_AMOUNT: (
        "charge", "cost", "rate", "amount", "total", "net", "price",
        "freight", "fee", "spend", "gross", "usd", "paid",
    ),
    ColumnRole.DATE: ("date", "timestamp", "time", "period", "month", "year"),
    ColumnRole.IDENTIFIER: (
        "id", "sku", "number", "no", "code", "tracking", "invoice", "order",
        "pro", "bol", "reference", "ref", "shipment", "po",
    ),
    ColumnRole.ZIP_CODE: ("zip", "postal", "postcode"),
    ColumnRole.QUANTITY: (
        "qty", "quantity", "units", "pieces", "pcs", "pkgs", "packages",
        "count", "cartons", "pallets", "cases",
    ),
    ColumnRole.WEIGHT: ("weight", "lbs", "lb", "kg", "wt"),
    ColumnRole.CARRIER: ("carrier", "scac", "mode", "service"),
    ColumnRole.FREE_TEXT: (
        "description", "desc", "name", "notes", "comment", "city", "state",
        "address", "consignee", "shipper", "origin", "destination", "customer",
    ),
}

_ROLE_ORDER = {role: i for i, role in enumerate(ColumnRole)}
_METHOD_ORDER = {method: i for i, method in enumerate(ClassificationMethod)}

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_PLACEHOLDER_RE = re.compile(r"^(unnamed:?\s*\d+|column\s*\d+|v\d*)$")
_ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")
_DATE_RES = (
    re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$"),
    re.compile(r"^\d{4}-\d{2}-\d{2}([ T]\d{2}:\d{2}(:\d{2})?)?$"),
    re.compile(r"^\d{1,2}-\d{1,2}-\d{4}$"),
    re.compile(r"^\d{4}/\d{2}/\d{2}$"),
)
_IDENT_RE = re.compile(r"^(?=.*[a-z])(?=.*\d)[a-z0-9\-_#/]+$", re.IGNORECASE)

MONEY_SHARE = 0.8
DATE_SHARE = 0.6
ZIP_SHARE = 0.8
IDENT_SHARE = 0.8
IDENT_UNIQUE = 0.9
TEXT_SHARE = 0.6


def normalize_header(label: str) -> str:
    """Lowercase words of a header: "Rate_Amount" and "RateAmount" -> "rate amount"."""
    text = _CAMEL_RE.sub(" ", str(label))
    return re.sub(r"[_\s\-/.]+", " ", text.lower()).strip()


def _keyword_hit(keyword: str, norm: str, tokens: set[str]) -> bool:
    if len(keyword) <= 3:
        return keyword in tokens
    return keyword in norm


def header_roles(header_label: str) -> list[ColumnRole]:
    """Roles whose header keywords appear in ``header_label``."""
    norm = normalize_header(header_label)
    if not norm:
        return []
    tokens = set(re.findall(r"[a-z0-9]+", norm))
    return [
        role for role, keywords in HEADER_KEYWORDS.items()
        if any(_keyword_hit(k, norm, tokens) for k in keywords)
    ]


def _is_placeholder(header_label: str) -> bool:
    norm = normalize_header(header_label)
    return not norm or bool(_PLACEHOLDER_RE.match(norm))


def _looks_like_date(value: Any) -> bool:
    if is_date_cell(value):
        return True
    if isinstance(value, str):
        text = value.strip()
        return any(p.match(text) for p in _DATE_RES)
    return False


def _looks_like_zip(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return 10000 <= value <= 99999
    if isinstance(value, str):
        return bool(_ZIP_RE.match(value.strip()))
    return False


def _has_money_marks(value: Any, amount: Decimal) -> bool:
    """Currency symbol, thousands separator or a fractional part."""
    if isinstance(value, str) and any(ch in value for ch in "$€£¥,"):
        return True
    return amount != amount.to_integral_value()


def _shape_votes(samples: Sequence[Any], money_header: bool = False) -> dict[ColumnRole, float]:
    """Value-shape votes.

    Workbook cells arrive as bare floats without their currency format, so
    when the header already names a money column plain numbers count as money.
    """
    values = [v for v in samples if not is_blank(v)]
    votes: dict[ColumnRole, float] = {}
    if not values:
        return votes
    n = len(values)

    money_marked = 0
    money_parsed = 0
    for v in values:
        if is_date_cell(v):
            continue
        amount = parse_money(v)
        if amount is None:
            continue
        money_parsed += 1
        if _has_money_marks(v, amount):
            money_marked += 1
    money_share = money_parsed / n

    zip_share = sum(1 for v in values if _looks_like_zip(v)) / n
    date_share = sum(1 for v in values if _looks_like_date(v)) / n

    if zip_share >= ZIP_SHARE:
        votes[ColumnRole.ZIP_CODE] = SHAPE_WEIGHT * zip_share * 1.2
    if date_share >= DATE_SHARE:
        votes[ColumnRole.DATE] = SHAPE_WEIGHT * date_share * 1.2
    if money_share >= MONEY_SHARE:
        if money_marked or money_header:
            votes[ColumnRole.MONETARY_AMOUNT] = SHAPE_WEIGHT * money_share
        else:
            votes[ColumnRole.QUANTITY] = SHAPE_WEIGHT * money_share * 0.8

    texts = [v for v in values if isinstance(v, str) and parse_money(v) is None and not _looks_like_date(v)]
    if texts:
        ident_share = sum(1 for t in texts if _IDENT_RE.match(t.strip())) / n
        unique_share = len({t.strip() for t in texts}) / len(texts)
        if ident_share >= IDENT_SHARE and unique_share >= IDENT_UNIQUE:
            votes[ColumnRole.IDENTIFIER] = SHAPE_WEIGHT * ident_share
        else:
            text_share = len(texts) / n
            if text_share >= TEXT_SHARE:
                votes[ColumnRole.FREE_TEXT] = SHAPE_WEIGHT * 0.5 * text_share
    return votes


def classify(header_label: str, samples: Sequence[Any], ordinal: int) -> ColumnClassification:
    """Classify one column from its header label, sampled values and position."""
    label = "" if header_label is None else str(header_label)
    # role -> method -> accumulated weight
    contributions: dict[ColumnRole, dict[ClassificationMethod, float]] = {}

    def vote(role: ColumnRole, method: ClassificationMethod, weight: float) -> None:
        per_method = contributions.setdefault(role, {})
        per_method[method] = per_method.get(method, 0.0) + weight

    # "Unnamed: 0" would otherwise hit the "name" keyword
    placeholder = _is_placeholder(label)
    header_hits = [] if placeholder else header_roles(label)
    for role in header_hits:
        vote(role, ClassificationMethod.HEADER_TEXT_MATCH, HEADER_WEIGHT)

    money_header = ColumnRole.MONETARY_AMOUNT in header_hits and ColumnRole.QUANTITY not in header_hits
    for role, weight in _shape_votes(samples, money_header).items():
        vote(role, ClassificationMethod.VALUE_SHAPE_MATCH, weight)

    if placeholder and ordinal == 0:
        vote(ColumnRole.IDENTIFIER, ClassificationMethod.POSITIONAL_DEFAULT, POSITIONAL_WEIGHT)

    if not contributions:
        return ColumnClassification(
            raw_header=label,
            ordinal=ordinal,
            guessed_role=ColumnRole.FREE_TEXT,
            confidence=UNRECOGNIZED_CONFIDENCE,
            alternatives=(),
            method=ClassificationMethod.POSITIONAL_DEFAULT,
        )

    vote(ColumnRole.FREE_TEXT, ClassificationMethod.POSITIONAL_DEFAULT, FREE_TEXT_FLOOR)

    weights = {role: sum(per.values()) for role, per in contributions.items()}
    total = sum(weights.values())
    ranked = sorted(
        ((role, w / total) for role, w in weights.items()),
        key=lambda item: (-item[1], _ROLE_ORDER[item[0]]),
    )
    guess, confidence = ranked[0]
    winning = contributions[guess]
    method = min(winning, key=lambda m: (-winning[m], _METHOD_ORDER[m]))

    return ColumnClassification(
        raw_header=label,
        ordinal=ordinal,
        guessed_role=guess,
        confidence=min(1.0, max(0.0, confidence)),
        alternatives=tuple(ranked[1:]),
        method=method,
    )
