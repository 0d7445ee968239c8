"""Ticket cost extraction from free-form text."""

from __future__ import annotations

import re
from typing import Optional

FREE = "Free"

PRICE_PATTERN = re.compile(r"([£$€])\s?(\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)")
PRIZE_PATTERN = re.compile(r"\bprizes?\b", re.IGNORECASE)
FREE_PATTERN = re.compile(r"\b(?:free|complimentary|no\s+charge|no\s+cost)\b", re.IGNORECASE)

# Characters either side of a price that are checked for "prize".
PRIZE_WINDOW = 20


def extract_cost(text: Optional[str]) -> Optional[str]:
    """Return a price such as ``"£25"``, ``"Free"``, or None.

    Amounts next to the word "prize" are competition winnings, not ticket
    prices, and are ignored.
    """
    if not text:
        return None

    match = PRICE_PATTERN.search(text)
    if match:
        nearby = text[max(0, match.start() - PRIZE_WINDOW): match.end() + PRIZE_WINDOW]
        if PRIZE_PATTERN.search(nearby):
            return None
        return f"{match.group(1)}{match.group(2)}"

    if FREE_PATTERN.search(text):
        return FREE
    return None
