"""Keyword signals extracted from free-text user messages."""

import re

from brief_council.models import Signals

_NO_PROFIT_RE = re.compile(
    r"\b(no\s+(tener|obtener)\s+ganancias?"
    r"|cero\s+ganancias?"
    r"|sin\s+ganancias?"
    r"|no\s+profits?"
    r"|zero\s+profits?)\b"
)
_MONEY_RE = re.compile(r"\$\s*(\d+)|\b(\d+)\s*(?:usd|dólares|dolares)\b")
_NUMBER_RE = re.compile(r"\d+")
_SALES_RE = re.compile(r"\bventas?\b|\bvender\b|\bsell(ing)?\b|\bsales\b")
_P2P_RE = re.compile(r"\bp2p\b|transfer(encia|ir)|enviar dinero|send money|wallet|billetera")
_LITE_RE = re.compile(r"\b(free|gratis|lite)\b")

PRODUCT_KEYWORDS = ("gps",)


def detect_product(text: str) -> str | None:
    for keyword in PRODUCT_KEYWORDS:
        if re.search(rf"\b{re.escape(keyword)}\b", text):
            return keyword.upper()
    return None


def detect_budget(text: str) -> int | None:
    """First amount marked with $ or a currency word, else the first number."""
    money = _MONEY_RE.search(text)
    if money:
        return int(money.group(1) or money.group(2))
    match = _NUMBER_RE.search(text)
    return int(match.group()) if match else None


def extract_signals(text: str | None) -> Signals:
    lowered = (text or "").lower()
    return Signals(
        wants_no_profit=bool(_NO_PROFIT_RE.search(lowered)),
        budget=detect_budget(lowered),
        product=detect_product(lowered),
        wants_sales=bool(_SALES_RE.search(lowered)),
        p2p=bool(_P2P_RE.search(lowered)),
        plan_lite=bool(_LITE_RE.search(lowered)),
    )
