import pytest

from coinwatch.errors import NetworkError, ParseError, ValidationError
from coinwatch.ops import add_coin, check_alarms, list_coins, remove_coin, set_alarm
from coinwatch.portfolio import Coin, Portfolio


def fake_fetcher(prices: dict):
    """Return a fetch function backed by a dict; missing symbols fail like the API would."""
    calls = []

    def fetch(symbol: str) -> float:
        calls.append(symbol)
        value = prices.get(symbol)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise NetworkError(symbol, "400 Client Error: Bad Request")
        return value

    fetch.calls = calls
    return fetch


@pytest.fixture
def portfolio():
    return Portfolio(coins=[Coin("BTCUSDT"), Coin("ETHUSDT"), Coin("ADAUSDT")])


def test_add_coin_appends_in_order(portfolio):
    assert add_coin(portfolio, "DOGEUSDT") is True
    assert portfolio.symbols() == ["BTCUSDT", "ETHUSDT", "ADAUSDT", "DOGEUSDT"]
    assert portfolio.coins[-1].price == 0.0


def test_add_existing_coin_is_a_no_op(portfolio):
    before = portfolio.symbols()

    assert add_coin(portfolio, "ETHUSDT") is False
    assert portfolio.symbols() == before


def test_add_twice_keeps_single_entry():
    portfolio = Portfolio()

    assert add_coin(portfolio, "BTCUSDT") is True
    assert add_coin(portfolio, "BTCUSDT") is False
    assert portfolio.symbols() == ["BTCUSDT"]


def test_remove_coin_keeps_remaining_order(portfolio):
    assert remove_coin(portfolio, "ETHUSDT") is True
    assert portfolio.symbols() == ["BTCUSDT", "ADAUSDT"]


def test_remove_unknown_coin_reports_not_found():
    portfolio = Portfolio(coins=[Coin("BTCUSDT")])

    assert remove_coin(portfolio, "DOGEUSDT") is False
    assert portfolio.symbols() == ["BTCUSDT"]


def test_set_alarm_overwrites_existing_threshold():
    portfolio = Portfolio()

    set_alarm(portfolio, "ETHUSDT", 2000.0)
    set_alarm(portfolio, "ETHUSDT", 2500.0)

    assert portfolio.alarms == {"ETHUSDT": 2500.0}


def test_set_alarm_initializes_missing_mapping():
    portfolio = Portfolio(alarms=None)

    set_alarm(portfolio, "BTCUSDT", 70000)

    assert portfolio.alarms == {"BTCUSDT": 70000.0}


def test_set_alarm_for_symbol_not_held(portfolio):
    set_alarm(portfolio, "SOLUSDT", 150.0)

    assert "SOLUSDT" in portfolio.alarms
    assert "SOLUSDT" not in portfolio.symbols()


def test_list_coins_fetches_in_portfolio_order(portfolio):
    fetch = fake_fetcher({"BTCUSDT": 65000.0, "ETHUSDT": 3000.0, "ADAUSDT": 0.45})

    quotes = list_coins(portfolio, fetch)

    assert fetch.calls == ["BTCUSDT", "ETHUSDT", "ADAUSDT"]
    assert [(q.symbol, q.price) for q in quotes] == [
        ("BTCUSDT", 65000.0),
        ("ETHUSDT", 3000.0),
        ("ADAUSDT", 0.45),
    ]
    assert all(q.ok for q in quotes)


def test_list_coins_continues_after_failed_fetch(portfolio):
    fetch = fake_fetcher({"BTCUSDT": 65000.0, "ETHUSDT": ParseError("ETHUSDT", "invalid price 'x'")})

    quotes = list_coins(portfolio, fetch)

    assert [q.symbol for q in quotes] == ["BTCUSDT", "ETHUSDT", "ADAUSDT"]
    assert quotes[0].ok
    assert quotes[1].error == "invalid price 'x'"
    assert "400" in quotes[2].error


def test_list_coins_does_not_write_prices_back(portfolio):
    list_coins(portfolio, fake_fetcher({"BTCUSDT": 1.0, "ETHUSDT": 2.0, "ADAUSDT": 3.0}))

    assert [c.price for c in portfolio.coins] == [0.0, 0.0, 0.0]


def test_alarm_triggers_at_or_above_threshold():
    portfolio = Portfolio(alarms={"ETHUSDT": 2000.0})

    above = check_alarms(portfolio, fake_fetcher({"ETHUSDT": 2500.0}))
    below = check_alarms(portfolio, fake_fetcher({"ETHUSDT": 1500.0}))
    equal = check_alarms(portfolio, fake_fetcher({"ETHUSDT": 2000.0}))

    assert [c.triggered for c in above] == [True]
    assert above[0].current_price == 2500.0
    assert [c.triggered for c in below] == [False]
    assert [c.triggered for c in equal] == [True]


def test_check_alarms_iterates_sorted_and_skips_failures():
    portfolio = Portfolio(alarms={"SOLUSDT": 100.0, "BTCUSDT": 50000.0, "ETHUSDT": 2000.0})
    fetch = fake_fetcher({"SOLUSDT": 150.0, "ETHUSDT": 1000.0})

    results = check_alarms(portfolio, fetch)

    assert fetch.calls == ["BTCUSDT", "ETHUSDT", "SOLUSDT"]
    assert results[0].error is not None
    assert results[0].triggered is False
    assert [(r.symbol, r.triggered) for r in results[1:]] == [
        ("ETHUSDT", False),
        ("SOLUSDT", True),
    ]


def test_check_alarms_with_no_alarms():
    assert check_alarms(Portfolio(alarms=None), fake_fetcher({})) == []


@pytest.mark.parametrize("symbol", ["", "   "])
def test_add_blank_symbol_is_rejected(symbol):
    portfolio = Portfolio(coins=[Coin("BTCUSDT")])

    with pytest.raises(ValidationError):
        add_coin(portfolio, symbol)

    assert portfolio.symbols() == ["BTCUSDT"]
