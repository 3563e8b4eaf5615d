"""Static rate tables for the three served countries.

Tax rates are percentages. Flat shipping rates and carrier quotes are in
USD (the origin currency) and converted at presentation time.
"""

COUNTRY_CURRENCIES = {
    "US": "USD",
    "CA": "CAD",
    "MX": "MXN",
}

# Units of each currency per 1 USD
EXCHANGE_RATES = {
    "USD": 1.0,
    "CAD": 1.35,
    "MXN": 17.50,
}

# country -> (cost in USD, min days, max days)
FLAT_SHIPPING_RATES = {
    "US": (9.99, 5, 8),
    "CA": (19.99, 7, 12),
    "MX": (24.99, 10, 15),
}

COUNTRY_DEFAULT_TAX_RATES = {
    "US": (6.0, "Sales Tax"),
    "CA": (10.0, "GST/HST"),
    "MX": (16.0, "IVA"),
}

_US_STATE_SALES_TAX = {
    "AL": 4.0,
    "AK": 0.0,
    "AZ": 5.6,
    "AR": 6.5,
    "CA": 7.25,
    "CO": 2.9,
    "CT": 6.35,
    "DE": 0.0,
    "FL": 6.0,
    "GA": 4.0,
    "HI": 4.17,
    "ID": 6.0,
    "IL": 6.25,
    "IN": 7.0,
    "IA": 6.0,
    "KS": 6.5,
    "KY": 6.0,
    "LA": 4.45,
    "ME": 5.5,
    "MD": 6.0,
    "MA": 6.25,
    "MI": 6.0,
    "MN": 6.875,
    "MS": 7.0,
    "MO": 4.225,
    "MT": 0.0,
    "NE": 5.5,
    "NV": 6.85,
    "NH": 0.0,
    "NJ": 6.625,
    "NM": 5.125,
    "NY": 4.0,
    "NC": 4.75,
    "ND": 5.0,
    "OH": 5.75,
    "OK": 4.5,
    "OR": 0.0,
    "PA": 6.0,
    "RI": 7.0,
    "SC": 6.0,
    "SD": 4.5,
    "TN": 7.0,
    "TX": 6.25,
    "UT": 6.1,
    "VT": 6.0,
    "VA": 5.3,
    "WA": 6.5,
    "WV": 6.0,
    "WI": 5.0,
    "WY": 4.0,
    "DC": 6.0,
}

_CA_PROVINCE_TAX = {
    "AB": (5.0, "GST"),
    "BC": (12.0, "GST + PST"),
    "MB": (12.0, "GST + PST"),
    "NB": (15.0, "HST"),
    "NL": (15.0, "HST"),
    "NT": (5.0, "GST"),
    "NS": (15.0, "HST"),
    "NU": (5.0, "GST"),
    "ON": (13.0, "HST"),
    "PE": (15.0, "HST"),
    "QC": (14.975, "GST + QST"),
    "SK": (11.0, "GST + PST"),
    "YT": (5.0, "GST"),
}

_MX_STATES = (
    "AGU", "BCN", "BCS", "CAM", "CHP", "CHH", "COA", "COL",
    "DIF", "DUR", "GUA", "GRO", "HID", "JAL", "MEX", "MIC",
    "MOR", "NAY", "NLE", "OAX", "PUE", "QUE", "ROO", "SLP",
    "SIN", "SON", "TAB", "TAM", "TLA", "VER", "YUC", "ZAC",
)  # fmt: skip

# (country, state) -> (rate, tax name)
STATE_TAX_RATES = {
    **{("US", state): (rate, "Sales Tax") for state, rate in _US_STATE_SALES_TAX.items()},
    **{("CA", province): entry for province, entry in _CA_PROVINCE_TAX.items()},
    **{("MX", state): (16.0, "IVA") for state in _MX_STATES},
}

# Destinations USPS accepts from a US origin
USPS_INTERNATIONAL_COUNTRIES = frozenset(
    {
        "US", "CA", "MX",
        "GB", "FR", "DE", "IT", "ES", "NL", "BE", "CH", "AT", "SE", "NO", "DK", "FI",
        "AU", "NZ", "JP", "KR", "CN", "HK", "SG", "TW",
        "BR", "AR", "CL", "CO", "PE",
    }
)  # fmt: skip
