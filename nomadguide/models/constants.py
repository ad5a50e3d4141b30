"""Domain constants and enumerations for validation."""

from enum import Enum
from typing import Dict, List, Set


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUAL = "biannual"


# Fixed day length of each recurrence step. Monthly is a flat 30 days, not
# calendar-month aware.
FREQUENCY_DAYS: Dict[Frequency, int] = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.MONTHLY: 30,
    Frequency.QUARTERLY: 90,
    Frequency.BIANNUAL: 180,
}

ZERO_DECIMAL_CURRENCIES: Set[str] = {"JPY", "KRW", "VND", "CLP", "ISK", "HUF"}

# Currencies whose symbol is written after the amount.
SUFFIX_SYMBOL_CURRENCIES: Set[str] = {"EUR", "NOK", "SEK", "DKK", "PLN", "CZK", "HUF"}

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "Fr",
    "CNY": "¥",
    "SEK": "kr",
    "NZD": "NZ$",
    "MXN": "$",
    "SGD": "S$",
    "HKD": "HK$",
    "NOK": "kr",
    "KRW": "₩",
    "TRY": "₺",
    "RUB": "₽",
    "INR": "₹",
    "BRL": "R$",
    "ZAR": "R",
    "PLN": "zł",
    "CZK": "Kč",
    "DKK": "kr",
    "HUF": "Ft",
    "ILS": "₪",
    "CLP": "$",
    "PHP": "₱",
    "AED": "د.إ",
    "COP": "$",
    "SAR": "﷼",
    "MYR": "RM",
    "RON": "lei",
    "THB": "฿",
    "BGN": "лв",
    "ISK": "kr",
    "VND": "₫",
}

MAX_AMOUNT = 1_000_000

UNCATEGORIZED_ID = "uncategorized"
UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_ICON = "help-circle"
UNCATEGORIZED_COLOR = "#757575"

# Seeded for every new trip
DEFAULT_INCOME_CATEGORIES: List[Dict[str, str]] = [
    {"name": "Salary", "icon": "account-cash", "color": "#4CAF50"},
    {"name": "Bonus", "icon": "gift", "color": "#FF9800"},
    {"name": "Investment", "icon": "trending-up", "color": "#2196F3"},
    {"name": "Other Income", "icon": "cash-plus", "color": "#9C27B0"},
]

DEFAULT_OUTCOME_CATEGORIES: List[Dict[str, str]] = [
    {"name": "Food & Dining", "icon": "food", "color": "#FF5722"},
    {"name": "Transportation", "icon": "car", "color": "#607D8B"},
    {"name": "Accommodation", "icon": "bed", "color": "#795548"},
    {"name": "Entertainment", "icon": "movie", "color": "#E91E63"},
    {"name": "Shopping", "icon": "shopping", "color": "#9C27B0"},
    {"name": "Health & Medical", "icon": "medical-bag", "color": "#009688"},
    {"name": "Other Expenses", "icon": "cash-minus", "color": "#757575"},
]
