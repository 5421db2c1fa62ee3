"""Command-line interface: one command per invocation against portfolio.json."""

import argparse
import logging
import math
import sys

from .config import Config, setup_logging
from .data_sources.binance import fetch_price
from .display import coins_table, format_price, help_table
from .errors import PortfolioFileError, StoreError, UsageError, ValidationError
from .ops import add_coin, check_alarms, list_coins, remove_coin, set_alarm
from .portfolio import load_portfolio, save_portfolio

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND = "Unknown command. Type 'help' for a list of commands."
INVALID_SYMBOL = "Invalid symbol. Please enter a ticker such as BTCUSDT."


class _CommandParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad arguments as UsageError instead of exiting."""

    def error(self, message):
        logger.info("%s: %s", self.prog, message)
        raise UsageError(self.usage or self.prog)


def build_parser() -> argparse.ArgumentParser:
    p = _CommandParser(prog="coinwatch", add_help=False)
    sub = p.add_subparsers(dest="cmd", required=True)

    add = sub.add_parser("add", usage="add <symbol>", add_help=False)
    add.add_argument("symbol")

    sub.add_parser("list", add_help=False)

    remove = sub.add_parser("remove", usage="remove <symbol>", add_help=False)
    remove.add_argument("symbol")

    # Price stays a string here so a bad number gets its own message.
    alarm = sub.add_parser("alarm", usage="alarm <symbol> <price>", add_help=False)
    alarm.add_argument("symbol")
    alarm.add_argument("price")

    sub.add_parser("save", add_help=False)
    sub.add_parser("alarms", add_help=False)
    sub.add_parser("help", add_help=False)
    return p


def parse_command(argv: list) -> argparse.Namespace:
    """Parse one known command; extra arguments are only an error for commands that take any."""
    parser = build_parser()
    # Everything after the command name is positional, so "-1e3" or "-btc" are values.
    args, extra = parser.parse_known_args([argv[0], "--", *argv[1:]])
    if extra and args.cmd in TAKES_ARGS:
        logger.info("%s: unexpected arguments %s", args.cmd, extra)
        raise UsageError(TAKES_ARGS[args.cmd])
    if hasattr(args, "symbol"):
        if not args.symbol.strip():
            logger.info("%s: blank symbol", args.cmd)
            raise ValidationError(INVALID_SYMBOL)
        args.symbol = args.symbol.upper()
    return args


def parse_alarm_price(raw: str) -> float:
    try:
        price = float(raw)
    except ValueError:
        price = math.nan
    if not math.isfinite(price):
        logger.info("Rejected alarm price %r", raw)
        raise ValidationError("Invalid price. Please enter a valid number.")
    return price


def cmd_add(args, portfolio, cfg: Config) -> None:
    if add_coin(portfolio, args.symbol):
        print("Coin added successfully.")
    else:
        print("Coin already exists in portfolio.")


def cmd_list(args, portfolio, cfg: Config) -> None:
    if not portfolio.coins:
        print("No coins in portfolio.")
        return
    quotes = list_coins(portfolio, lambda symbol: fetch_price(symbol, cfg))
    for q in quotes:
        if not q.ok:
            print(f"Error fetching price for {q.symbol}: {q.error}")
    print(coins_table(quotes))


def cmd_remove(args, portfolio, cfg: Config) -> None:
    if remove_coin(portfolio, args.symbol):
        print("Coin removed.")
    else:
        print("Coin not found in the portfolio.")


def cmd_alarm(args, portfolio, cfg: Config) -> None:
    price = parse_alarm_price(args.price)
    set_alarm(portfolio, args.symbol, price)
    print(f"Alarm set for {args.symbol} at {format_price(price)}")


def cmd_save(args, portfolio, cfg: Config) -> None:
    try:
        save_portfolio(cfg.portfolio_file, portfolio)
    except StoreError as e:
        logger.info("Save failed: %s", e)
        print(f"Error saving portfolio: {e}")
        return
    print("Portfolio saved successfully.")


def cmd_alarms(args, portfolio, cfg: Config) -> None:
    if not portfolio.alarms:
        print("No alarms set.")
        return
    for check in check_alarms(portfolio, lambda symbol: fetch_price(symbol, cfg)):
        if check.error is not None:
            print(f"Error fetching price for {check.symbol}: {check.error}")
        elif check.triggered:
            print(
                f"ALARM: {check.symbol} has reached {format_price(check.threshold)} "
                f"(current: {format_price(check.current_price)})"
            )


def cmd_help(args, portfolio, cfg: Config) -> None:
    print(help_table())


COMMANDS = {
    "add": cmd_add,
    "list": cmd_list,
    "remove": cmd_remove,
    "alarm": cmd_alarm,
    "save": cmd_save,
    "alarms": cmd_alarms,
    "help": cmd_help,
}

# Usage lines for commands that take positional arguments.
TAKES_ARGS = {
    "add": "add <symbol>",
    "remove": "remove <symbol>",
    "alarm": "alarm <symbol> <price>",
}


def main(argv=None) -> int:
    # Enable console logging early.
    setup_logging()
    argv = sys.argv[1:] if argv is None else list(argv)
    cfg = Config.from_env()

    # The portfolio is loaded before anything else; a broken file stops every command.
    try:
        portfolio = load_portfolio(cfg.portfolio_file)
    except PortfolioFileError as e:
        logger.info("Load failed: %s", e)
        print(f"Error loading portfolio: {e}")
        return 1

    if not argv:
        print(help_table())
        return 0

    handler = COMMANDS.get(argv[0])
    if handler is None:
        logger.info("Unknown command: %s", argv[0])
        print(UNKNOWN_COMMAND)
        return 0

    try:
        args = parse_command(argv)
        handler(args, portfolio, cfg)
    except (UsageError, ValidationError) as e:
        print(e)
    return 0
