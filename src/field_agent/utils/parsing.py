"""
Price and amount parsing utilities.

Listing prices and budgets arrive as free text ("150 €", "1.299,00 €",
"99.50", "VB 80"). These helpers turn them into Decimals for comparison.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

AMOUNT_RE = re.compile(r"\d[\d.,]*")


def _normalize_separators(raw: str) -> str:
	"""
	Return ``raw`` with a single '.' decimal separator and no grouping.

	When both '.' and ',' appear the last one is the decimal separator.
	A lone separator followed by exactly three digits is treated as a
	thousands separator ("1.299" -> "1299"), otherwise as decimal.
	"""
	last_dot = raw.rfind(".")
	last_comma = raw.rfind(",")
	if last_dot >= 0 and last_comma >= 0:
		decimal_sep = "." if last_dot > last_comma else ","
		group_sep = "," if decimal_sep == "." else "."
		return raw.replace(group_sep, "").replace(decimal_sep, ".")
	sep = "." if last_dot >= 0 else ("," if last_comma >= 0 else "")
	if not sep:
		return raw
	head, _, tail = raw.rpartition(sep)
	if len(tail) == 3 or raw.count(sep) > 1:
		return raw.replace(sep, "")
	return head.replace(sep, "") + "." + tail


def parse_amount(text: str | int | float | None) -> Optional[Decimal]:
	"""
	Extract the first monetary amount from text.

	Parameters:
		text: Free-form amount such as "150 €" or "1.299,00 EUR".

	Returns:
		The amount as a Decimal, or None when no number is present.
	"""
	if text is None:
		return None
	if isinstance(text, (int, float)) and not isinstance(text, bool):
		return Decimal(str(text))
	m = AMOUNT_RE.search(str(text))
	if not m:
		return None
	candidate = m.group(0).rstrip(".,")
	try:
		return Decimal(_normalize_separators(candidate))
	except InvalidOperation:
		return None


def format_amount(value: Decimal | int | float) -> str:
	"""Render an amount without trailing zeros, e.g. Decimal('150.00') -> '150'."""
	d = Decimal(str(value))
	text = format(d.normalize(), "f")
	return text


__all__ = ["parse_amount", "format_amount"]
