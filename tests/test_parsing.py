import pytest

from chatwarden.commands import calculator
from chatwarden.commands.parsing import format_number, parse_currency, parse_duration
from chatwarden.config.defaults import default_currency_rates
from chatwarden.core.errors import ValidationError


def test_parse_duration_units() -> None:
    assert parse_duration("10m") == 10
    assert parse_duration("1h") == 60
    assert parse_duration("2d") == 2880


@pytest.mark.parametrize("token", ["", "10", "10x", "m", "1.5h", "-1m", "0m", "10 m"])
def test_parse_duration_rejects_invalid(token: str) -> None:
    assert parse_duration(token) is None


def test_parse_currency_cross_rate() -> None:
    conversion = parse_currency("100 USD to EUR", default_currency_rates())
    assert f"{conversion.result:.2f}" == "93.00"
    assert f"{conversion.rate:.4f}" == "0.9300"

    reverse = parse_currency("10 eur TO gbp", default_currency_rates())
    assert reverse.source == "EUR"
    assert reverse.target == "GBP"
    assert f"{reverse.rate:.4f}" == "0.8495"


def test_parse_currency_errors() -> None:
    with pytest.raises(ValidationError, match="Invalid format"):
        parse_currency("a lot of money", default_currency_rates())
    with pytest.raises(ValidationError, match="Supported: USD, EUR, GBP, JPY, INR"):
        parse_currency("5 USD to CHF", default_currency_rates())


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("2+2*5", 12),
        ("(1+2)*3", 9),
        ("-3 + 5", 2),
        ("7/2", 3.5),
        ("2 * -(1.5 + .5)", -4),
        ("+4", 4),
    ],
)
def test_calculator_evaluates(expression: str, expected: float) -> None:
    assert calculator.evaluate(expression) == expected


@pytest.mark.parametrize(
    "expression",
    ["", "1/0", "2*(3", "2 3", "__import__('os')", "2**3", "1.5.2", ")", "4 % 2"],
)
def test_calculator_rejects(expression: str) -> None:
    with pytest.raises(ValidationError):
        calculator.evaluate(expression)


_BIG = "1" + "0" * 200


@pytest.mark.parametrize(
    "expression",
    [f"{_BIG}*{_BIG}", f"{_BIG}*{_BIG} - {_BIG}*{_BIG}", "1" + "0" * 400],
)
def test_calculator_rejects_non_finite_results(expression: str) -> None:
    with pytest.raises(ValidationError):
        calculator.evaluate(expression)


def test_calculator_rejects_deep_nesting() -> None:
    with pytest.raises(ValidationError):
        calculator.evaluate("(" * 200 + "1" + ")" * 200)


def test_format_number() -> None:
    assert format_number(12.0) == "12"
    assert format_number(3.5) == "3.5"
    assert format_number(float("inf")) == "inf"
