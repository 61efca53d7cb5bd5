"""
FACTURA-PE: Test Suite — Monto en letras (Leyenda 1000)

Run: python -m pytest tests/test_amount_words.py -v
"""
from decimal import Decimal

import pytest

from app.sunat.amount_words import (
    MAX_SUPPORTED_AMOUNT,
    UnsupportedAmountError,
    amount_in_words,
    integer_to_words,
)


class TestIntegerToWords:
    @pytest.mark.parametrize("n,expected", [
        (0, "CERO"),
        (1, "UNO"),
        (9, "NUEVE"),
        (10, "DIEZ"),
        (15, "QUINCE"),
        (16, "DIECISEIS"),
        (20, "VEINTE"),
        (21, "VEINTIUNO"),
        (22, "VEINTIDOS"),
        (26, "VEINTISEIS"),
        (30, "TREINTA"),
        (31, "TREINTA Y UNO"),
        (99, "NOVENTA Y NUEVE"),
        (100, "CIEN"),
        (101, "CIENTO UNO"),
        (120, "CIENTO VEINTE"),
        (218, "DOSCIENTOS DIECIOCHO"),
        (500, "QUINIENTOS"),
        (777, "SETECIENTOS SETENTA Y SIETE"),
        (999, "NOVECIENTOS NOVENTA Y NUEVE"),
    ])
    def test_below_thousand(self, n, expected):
        assert integer_to_words(n) == expected

    @pytest.mark.parametrize("n,expected", [
        (1000, "MIL"),
        (1001, "MIL UNO"),
        (2000, "DOS MIL"),
        (21000, "VEINTIUN MIL"),
        (31000, "TREINTA Y UN MIL"),
        (100000, "CIEN MIL"),
        (101000, "CIENTO UN MIL"),
        (1_000_000, "UN MILLON"),
        (1_500_000, "UN MILLON QUINIENTOS MIL"),
        (2_000_000, "DOS MILLONES"),
        (21_000_001, "VEINTIUN MILLONES UNO"),
        (1_000_000_000, "MIL MILLONES"),
    ])
    def test_thousands_and_millions(self, n, expected):
        assert integer_to_words(n) == expected

    def test_ceiling(self):
        words = integer_to_words(MAX_SUPPORTED_AMOUNT)
        assert words == (
            "NOVECIENTOS NOVENTA Y NUEVE MIL NOVECIENTOS NOVENTA Y NUEVE MILLONES "
            "NOVECIENTOS NOVENTA Y NUEVE MIL NOVECIENTOS NOVENTA Y NUEVE"
        )

    def test_out_of_range(self):
        with pytest.raises(UnsupportedAmountError):
            integer_to_words(MAX_SUPPORTED_AMOUNT + 1)
        with pytest.raises(UnsupportedAmountError):
            integer_to_words(-1)


class TestAmountInWords:
    @pytest.mark.parametrize("amount,expected", [
        (0, "CERO CON 00/100 SOLES"),
        (Decimal("120.50"), "CIENTO VEINTE CON 50/100 SOLES"),
        (Decimal("218.00"), "DOSCIENTOS DIECIOCHO CON 00/100 SOLES"),
        ("1.00", "UNO CON 00/100 SOLES"),
        (25.5, "VEINTICINCO CON 50/100 SOLES"),
        (0.1 + 0.2, "CERO CON 30/100 SOLES"),
        (Decimal("0.995"), "UNO CON 00/100 SOLES"),
        (Decimal("1234567.89"),
         "UN MILLON DOSCIENTOS TREINTA Y CUATRO MIL QUINIENTOS SESENTA Y SIETE CON 89/100 SOLES"),
    ])
    def test_soles(self, amount, expected):
        assert amount_in_words(amount) == expected

    def test_currency_labels(self):
        assert amount_in_words(10, "USD") == "DIEZ CON 00/100 DOLARES AMERICANOS"
        assert amount_in_words(10, "eur") == "DIEZ CON 00/100 EUROS"
        assert amount_in_words(10, "GBP") == "DIEZ CON 00/100 GBP"

    @pytest.mark.parametrize("amount", [
        -0.01, Decimal("-5"), MAX_SUPPORTED_AMOUNT + 1, Decimal("999999999999.999"),
        Decimal("Infinity"), Decimal("NaN"), "abc",
    ])
    def test_unsupported(self, amount):
        with pytest.raises(UnsupportedAmountError) as exc:
            amount_in_words(amount)
        assert exc.value.message
