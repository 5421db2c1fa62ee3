"""Table rendering for the CLI."""

from prettytable import PrettyTable

HELP_ROWS = [
    ("add <symbol>", "Add a coin to your portfolio (e.g., BTCUSDT)."),
    ("list", "List coins in portfolio."),
    ("remove <symbol>", "Remove coin from portfolio."),
    ("alarm <symbol> <price>", "Set a price alarm for a coin."),
    ("save", "Save portfolio config file."),
    ("alarms", "Check all set alarms."),
    ("help", "Display this help."),
]


def format_price(value: float) -> str:
    return f"${value:.2f}"


def coins_table(quotes) -> str:
    """Symbol / price table; quotes that failed to fetch are left out."""
    table = PrettyTable(["Symbol", "Current Price"])
    table.align = "l"
    for q in quotes:
        if q.ok:
            table.add_row([q.symbol, format_price(q.price)])
    return table.get_string()


def help_table() -> str:
    table = PrettyTable(["Command", "Description"])
    table.align = "l"
    for row in HELP_ROWS:
        table.add_row(list(row))
    return table.get_string()
