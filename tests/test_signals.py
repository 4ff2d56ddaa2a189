"""Tests for brief_council/signals.py."""

import pytest

from brief_council.models import Signals
from brief_council.signals import detect_budget, extract_signals


def test_gps_sales_budget_no_profit():
    signals = extract_signals("quiero vender GPS, presupuesto 500, sin ganancias")
    assert signals.product == "GPS"
    assert signals.budget == 500
    assert signals.wants_no_profit is True
    assert signals.wants_sales is True
    assert signals.p2p is False


@pytest.mark.parametrize("text", [
    "sin ganancia",
    "Sin Ganancias por ahora",
    "cero ganancias",
    "no obtener ganancias",
    "no tener ganancia",
    "we want no profit",
    "zero profit is fine",
])
def test_no_profit_phrases(text):
    assert extract_signals(text).wants_no_profit is True


def test_profit_mentioned_without_negation():
    assert extract_signals("quiero ganancias altas").wants_no_profit is False


@pytest.mark.parametrize("text,expected", [
    ("presupuesto $300", 300),
    ("tengo 1200 usd", 1200),
    ("unos 80 dólares", 80),
    ("sin cifras", None),
    ("vender GPS en 4 semanas con 500 usd", 500),
    ("en 2 meses, presupuesto $750", 750),
    ("lanzar en 3 semanas, presupuesto 400", 3),
])
def test_detect_budget(text, expected):
    assert detect_budget(text) == expected


def test_p2p_keywords():
    assert extract_signals("una app para enviar dinero a amigos").p2p is True
    assert extract_signals("billetera P2P").p2p is True
    assert extract_signals("transferencias entre cuentas").p2p is True


def test_lite_hint():
    assert extract_signals("estoy en el plan FREE").plan_lite is True
    assert extract_signals("plan completo").plan_lite is False


@pytest.mark.parametrize("text", [
    "quiero vender GPS con conexión satélite, presupuesto 500",
    "un plan para clientes elite",
    "contratar un freelance",
    "vender freezers usados",
])
def test_lite_hint_requires_whole_word(text):
    assert extract_signals(text).plan_lite is False


def test_empty_and_none_input():
    assert extract_signals("") == Signals()
    assert extract_signals(None) == Signals()


def test_deterministic():
    text = "vender GPS con 500 dólares en plan gratis"
    assert extract_signals(text) == extract_signals(text)
