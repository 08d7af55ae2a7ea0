"""
Shared constants for the configuration engine and the rate cache.

Persisted keys carry a schema version suffix. Bump it whenever the shape
of a stored record changes so stale entries are ignored instead of parsed.
"""

STORAGE_VERSION = "v5"

STORAGE_KEYS = {
    # Active UI locale ("en", "da", "no", "sv")
    'LANGUAGE': f'voltstore_language_{STORAGE_VERSION}',

    # ExchangeRates record (EUR-based, with epoch-ms timestamp)
    'EXCHANGE_RATES': f'voltstore_exchange_rates_{STORAGE_VERSION}',

    # Epoch-ms deadline before which non-forced refreshes are skipped
    'RATE_SUPPRESS_UNTIL': f'voltstore_rate_suppress_until_{STORAGE_VERSION}',

    # Credential fingerprint + reason recorded when the rate quote was blocked
    'RATE_BLOCK': f'voltstore_rate_block_{STORAGE_VERSION}',
}

# Catalog categories as stored in the products table
CATEGORY_INVERTERS = "Inverters"
CATEGORY_BATTERIES = "Batteries"
CATEGORY_SOLAR_PANELS = "Solar Panels"
CATEGORY_CHARGING_STATIONS = "Charging Stations"
CATEGORY_KITS = "Kits"

# Max catalog items sent to the generation service as inventory context
INVENTORY_CONTEXT_LIMIT = 15

# Used by the fallback selector when a category has no in-stock items
DEFAULT_COMPONENTS = {
    CATEGORY_INVERTERS: {
        "id": "default-inverter",
        "name": "Hybrid Inverter 5 kW",
        "price_eur": 1200.0,
    },
    CATEGORY_BATTERIES: {
        "id": "default-battery",
        "name": "LiFePO4 Battery 5 kWh",
        "price_eur": 1500.0,
    },
}

# Built-in rates used until a quote has been fetched. Timestamp 0 makes a
# cold start without persisted rates Stale, so it refreshes once.
STABLE_RATES = {
    "EUR": 1.0,
    "DKK": 7.46,
    "NOK": 11.38,
    "SEK": 11.23,
    "USD": 1.08,
    "timestamp": 0,
}

# USD is optional in a rate quote
DEFAULT_USD_RATE = 1.08
