import sys
from decimal import Context, Decimal
from typing import Dict, Iterator, Optional, TextIO

from .models import ClientAccount

HEADER = "client,available,held,total,locked"
FOUR_PLACES = Decimal("0.0001")


def format_decimal(value: Decimal) -> str:
    """Format decimal with at least 4 decimal places and no exponent."""
    _, digits, exponent = value.as_tuple()
    if exponent > -4:
        # enough precision for every integer digit plus the four places
        precision = max(len(digits) + exponent, 1) + 4
        value = value.quantize(FOUR_PLACES, context=Context(prec=precision))
    return f"{value:f}"


def format_account(account: ClientAccount) -> str:
    return (
        f"{account.client_id},"
        f"{format_decimal(account.available)},"
        f"{format_decimal(account.held)},"
        f"{format_decimal(account.total)},"
        f"{str(account.locked).lower()}"
    )


def render_accounts(accounts: Dict[int, ClientAccount]) -> Iterator[str]:
    yield HEADER
    for client_id in sorted(accounts.keys()):
        yield format_account(accounts[client_id])


def write_accounts(accounts: Dict[int, ClientAccount], stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stdout
    for line in render_accounts(accounts):
        stream.write(line + "\n")
