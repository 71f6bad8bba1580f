"""Parsing of ``key=value;`` connection strings and conversion to ODBC form."""

import re

QUOTES = {'"': '"', "'": "'", "{": "}"}

SERVER_KEYS = ("server", "data source", "address", "addr", "network address")
DATABASE_KEYS = ("initial catalog", "database")
USER_KEYS = ("user id", "uid", "user")
PASSWORD_KEYS = ("password", "pwd")
TIMEOUT_KEYS = ("connect timeout", "connection timeout", "timeout")
BOOLEAN_KEYS = {
    "encrypt": "Encrypt",
    "trustservercertificate": "TrustServerCertificate",
    "trust server certificate": "TrustServerCertificate",
    "multisubnetfailover": "MultiSubnetFailover",
    "multi subnet failover": "MultiSubnetFailover",
}
INTEGRATED_KEYS = ("integrated security", "trusted_connection")
# ADO.NET keywords that have no ODBC counterpart
DROPPED_KEYS = ("persist security info", "pooling", "max pool size", "min pool size",
                "multipleactiveresultsets", "multiple active result sets", "version")

FALLBACK_DRIVER = "SQL Server"
_DRIVER_RE = re.compile(r"^ODBC Driver (\d+) for SQL Server$", re.IGNORECASE)


def parse_connection_string(text):
    """Split a connection string into ``(key, value)`` pairs.

    Values may be wrapped in double quotes, single quotes or braces, in
    which case they can contain ``;`` and a doubled closing character
    stands for one literal character. Segments without ``=`` are returned
    as ``(segment, None)``.
    """
    pairs = []
    if not text:
        return pairs
    i, length = 0, len(text)
    while i < length:
        end = text.find("=", i)
        semi = text.find(";", i)
        if end < 0 or (0 <= semi < end):
            stop = semi if semi >= 0 else length
            segment = text[i:stop].strip()
            if segment:
                pairs.append((segment, None))
            i = stop + 1
            continue

        key = text[i:end].strip()
        j = end + 1
        while j < length and text[j] in " \t":
            j += 1

        if j < length and text[j] in QUOTES:
            closing = QUOTES[text[j]]
            close = text.find(closing, j + 1)
            # a doubled closing character ("" '' }}) is an escaped one
            while close >= 0 and text[close + 1:close + 2] == closing:
                close = text.find(closing, close + 2)
            if close < 0:
                raise ValueError(f"Unterminated value for '{key}' in connection string")
            value = text[j + 1:close].replace(closing * 2, closing)
            semi = text.find(";", close + 1)
            i = semi + 1 if semi >= 0 else length
        else:
            semi = text.find(";", j)
            stop = semi if semi >= 0 else length
            value = text[j:stop].strip()
            i = stop + 1

        if key:
            pairs.append((key, value))
    return pairs


def connection_keys(text):
    """Return the lowercased keys present in a connection string."""
    try:
        pairs = parse_connection_string(text)
    except ValueError:
        return set()
    return {key.lower() for key, value in pairs if value is not None}


def get_value(text, *keys):
    """Return the first value stored under any of ``keys`` (case-insensitive)."""
    wanted = [k.lower() for k in keys]
    pairs = {key.lower(): value for key, value in parse_connection_string(text)
             if value is not None}
    for key in wanted:
        if key in pairs:
            return pairs[key]
    return None


def is_true(value):
    return str(value).strip().lower() in ("true", "yes", "sspi", "1")


def quote_odbc_value(value):
    """Brace-quote an ODBC attribute value when it needs it."""
    if value and (";" in value or "{" in value or "}" in value or value != value.strip()):
        return "{" + value.replace("}", "}}") + "}"
    return value


def pick_driver(drivers):
    """Choose the newest installed Microsoft ODBC driver for SQL Server."""
    best, best_version = None, -1
    for name in drivers or ():
        match = _DRIVER_RE.match(name.strip())
        if match and int(match.group(1)) > best_version:
            best, best_version = name.strip(), int(match.group(1))
    if best:
        return best
    return FALLBACK_DRIVER


def to_odbc(text, drivers=()):
    """Rewrite an ADO.NET style SQL Server string into an ODBC string.

    Returns ``(odbc_string, timeout)`` where ``timeout`` is the login
    timeout in seconds or None. Strings that already name a DRIVER are
    passed through unchanged.
    """
    pairs = [(k, v) for k, v in parse_connection_string(text) if v is not None]
    if not pairs:
        raise ValueError("Connection string has no key=value pairs")

    timeout = None
    for key, value in pairs:
        if key.lower() in TIMEOUT_KEYS and value.strip().isdigit():
            timeout = int(value.strip())

    if any(key.lower() == "driver" for key, _ in pairs):
        return text, timeout

    attrs = [("DRIVER", "{" + pick_driver(drivers) + "}")]
    for key, value in pairs:
        lowered = key.lower()
        if lowered in SERVER_KEYS:
            attrs.append(("SERVER", quote_odbc_value(value)))
        elif lowered in DATABASE_KEYS:
            attrs.append(("DATABASE", quote_odbc_value(value)))
        elif lowered in USER_KEYS:
            attrs.append(("UID", quote_odbc_value(value)))
        elif lowered in PASSWORD_KEYS:
            attrs.append(("PWD", quote_odbc_value(value)))
        elif lowered in INTEGRATED_KEYS:
            if is_true(value):
                attrs.append(("Trusted_Connection", "yes"))
        elif lowered in BOOLEAN_KEYS:
            attrs.append((BOOLEAN_KEYS[lowered], "yes" if is_true(value) else "no"))
        elif lowered in TIMEOUT_KEYS or lowered in DROPPED_KEYS:
            continue
        else:
            attrs.append((key, quote_odbc_value(value)))

    return "".join(f"{key}={value};" for key, value in attrs), timeout
