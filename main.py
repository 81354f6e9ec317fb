from decimal import Decimal
from typing import NamedTuple

from rich.pretty import pprint

from objectfactory import *


class Money(NamedTuple):
    amount: Decimal
    currency: str


class Account:
    owner: str
    balance: Money

    def __init__(self, owner: str, balance: Money):
        self.owner = owner
        self.balance = balance

    @initializer
    def _restore(self, id: int):
        self.owner = f"user-{id}"
        self.balance = create_instance(Money)


if __name__ == '__main__':
    pprint(describe(Account))
    pprint(get_activator(Account, [str, Money])("ana", Money(Decimal("12.50"), "EUR")).__dict__)
    pprint(get_activator(Account, [int], allow_nonpublic=True)(7).__dict__)
    pprint(get_formattable_factory(Account)().__dict__)
    pprint(get_default_activator(Money))
