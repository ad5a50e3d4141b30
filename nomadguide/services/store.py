"""Store read model consumed by the balance engine.

The real document store lives outside this package. `TripReadModel` is the
shape the engine expects from it; `InMemoryTripStore` is a reference
implementation that also enforces the trip lifecycle rules (single active
trip, cascading delete, default categories on creation). User entries reach it
through `create_trip` and `record_transaction`, which accept only the validated
`TripIn` and `TransactionIn` models. The HTTP layer loads request snapshots into
it.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Dict, List, Optional, Protocol

from nomadguide.core.errors import TripNotFoundError
from nomadguide.models import (
    Category,
    ExchangeRateTable,
    RecurringTransaction,
    Transaction,
    TransactionIn,
    Trip,
    TripIn,
)
from nomadguide.models.constants import DEFAULT_INCOME_CATEGORIES, DEFAULT_OUTCOME_CATEGORIES
from nomadguide.services.balance import BalanceSummary, summarize_balance
from nomadguide.services.rates.conversion import convert_transactions
from nomadguide.services.thresholds import BudgetThresholds

logger = logging.getLogger("nomadguide.store")


class TripReadModel(Protocol):
    def get_trip(self, trip_id: str) -> Trip: ...

    def list_incomes(self, trip_id: str) -> List[Transaction]: ...

    def list_outcomes(self, trip_id: str) -> List[Transaction]: ...

    def list_recurring(self, trip_id: str) -> List[RecurringTransaction]: ...

    def list_categories(self, trip_id: str, kind: Optional[str] = None) -> List[Category]: ...


def default_categories(trip_id: str) -> List[Category]:
    seeded: List[Category] = []
    for kind, templates in (
        ("income", DEFAULT_INCOME_CATEGORIES),
        ("outcome", DEFAULT_OUTCOME_CATEGORIES),
    ):
        for template in templates:
            seeded.append(
                Category(id=uuid.uuid4().hex, trip_id=trip_id, kind=kind, **template)
            )
    return seeded


class InMemoryTripStore:
    def __init__(self) -> None:
        self._trips: Dict[str, Trip] = {}
        self._transactions: Dict[str, List[Transaction]] = {}
        self._recurring: Dict[str, List[RecurringTransaction]] = {}
        self._categories: Dict[str, List[Category]] = {}

    # Internal --------------------------------------------------
    def _require(self, trip_id: str) -> Trip:
        trip = self._trips.get(trip_id)
        if trip is None:
            raise TripNotFoundError(trip_id)
        return trip

    # Lifecycle -------------------------------------------------
    def add_trip(
        self,
        trip: Trip,
        *,
        seed_categories: bool = True,
        activate: bool = False,
    ) -> Trip:
        self._trips[trip.id] = trip
        self._transactions.setdefault(trip.id, [])
        self._recurring.setdefault(trip.id, [])
        self._categories.setdefault(trip.id, [])
        if seed_categories:
            self._categories[trip.id].extend(default_categories(trip.id))
        if activate or trip.is_active:
            self.activate_trip(trip.id)
        return self._trips[trip.id]

    def create_trip(self, entry: TripIn, *, activate: bool = False) -> Trip:
        """Create a trip from a validated user entry, seeding default categories."""
        trip = self.add_trip(entry.to_record(uuid.uuid4().hex), activate=activate)
        logger.info("trip created", extra={"trip_id": trip.id})
        return trip

    def activate_trip(self, trip_id: str) -> Trip:
        """Mark `trip_id` active and every other trip inactive."""
        self._require(trip_id)
        self._trips = {
            tid: t.model_copy(update={"is_active": tid == trip_id})
            for tid, t in self._trips.items()
        }
        return self._trips[trip_id]

    def active_trip(self) -> Optional[Trip]:
        return next((t for t in self._trips.values() if t.is_active), None)

    def delete_trip(self, trip_id: str) -> None:
        self._require(trip_id)
        self._trips.pop(trip_id)
        removed = len(self._transactions.pop(trip_id, []))
        self._recurring.pop(trip_id, None)
        self._categories.pop(trip_id, None)
        logger.info("trip deleted with %d transaction(s)", removed, extra={"trip_id": trip_id})

    def list_trips(self) -> List[Trip]:
        return list(self._trips.values())

    # Writes ----------------------------------------------------
    def add_transaction(self, txn: Transaction) -> Transaction:
        trip_id = txn.trip_id or ""
        self._require(trip_id)
        self._transactions[trip_id].append(txn)
        return txn

    def record_transaction(self, trip_id: str, entry: TransactionIn) -> Transaction:
        """Store a validated user entry under a fresh id."""
        self._require(trip_id)
        return self.add_transaction(entry.to_record(uuid.uuid4().hex, trip_id))

    def add_recurring(self, item: RecurringTransaction) -> RecurringTransaction:
        trip_id = item.trip_id or ""
        self._require(trip_id)
        self._recurring[trip_id].append(item)
        return item

    def add_category(self, category: Category) -> Category:
        trip_id = category.trip_id or ""
        self._require(trip_id)
        self._categories[trip_id].append(category)
        return category

    # TripReadModel ---------------------------------------------
    def get_trip(self, trip_id: str) -> Trip:
        return self._require(trip_id)

    def _list_kind(self, trip_id: str, kind: str) -> List[Transaction]:
        self._require(trip_id)
        rows = [t for t in self._transactions[trip_id] if t.kind == kind]
        return sorted(rows, key=lambda t: t.date, reverse=True)

    def list_incomes(self, trip_id: str) -> List[Transaction]:
        return self._list_kind(trip_id, "income")

    def list_outcomes(self, trip_id: str) -> List[Transaction]:
        return self._list_kind(trip_id, "outcome")

    def list_recurring(self, trip_id: str) -> List[RecurringTransaction]:
        self._require(trip_id)
        return list(self._recurring[trip_id])

    def list_categories(self, trip_id: str, kind: Optional[str] = None) -> List[Category]:
        self._require(trip_id)
        return [c for c in self._categories[trip_id] if kind is None or c.kind == kind]


def build_trip_summary(
    store: TripReadModel,
    trip_id: str,
    as_of: Optional[date] = None,
    thresholds: Optional[BudgetThresholds] = None,
    rates: Optional[ExchangeRateTable] = None,
) -> BalanceSummary:
    """Read one trip from `store` and run the balance engine over it.

    With a rate table, foreign-currency records are converted into the trip
    currency first; without one, they make the engine raise
    CurrencyMismatchError.
    """
    trip = store.get_trip(trip_id)
    incomes = store.list_incomes(trip_id)
    outcomes = store.list_outcomes(trip_id)
    recurring = store.list_recurring(trip_id)
    if rates is not None:
        incomes = convert_transactions(incomes, trip.currency, rates)
        outcomes = convert_transactions(outcomes, trip.currency, rates)
        recurring = convert_transactions(recurring, trip.currency, rates)
    return summarize_balance(trip, incomes, outcomes, recurring, as_of, thresholds)
