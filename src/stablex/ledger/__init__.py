"""Ledger — внешние коллабораторы движка: часы, хранилище, площадка."""

from .clock import Clock, ManualClock, SystemClock
from .storage import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    AccountStorage,
    InMemoryAccountStorage,
    MarketAlreadyInitializedError,
)
from .venue import UnauthorizedPriceUpdateError, Venue, VenueConfig

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "AccountStorage",
    "InMemoryAccountStorage",
    "AccountNotFoundError",
    "AccountAlreadyExistsError",
    "MarketAlreadyInitializedError",
    "Venue",
    "VenueConfig",
    "UnauthorizedPriceUpdateError",
]
