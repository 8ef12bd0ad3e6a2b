"""Host:port address normalization.

Some server versions report IPv6 hosts without brackets (``::1:27017``).
Addresses read back from the store are normalized so that they compare
equal to the bracketed form callers write (``[::1]:27017``).
"""

from __future__ import annotations

import ipaddress


def normalize_address(address: str) -> str:
    """Return the canonical form of a host:port address.

    IPv6 hosts are bracketed; IPv4 addresses and hostnames are returned
    unchanged. Normalization is idempotent.

    Args:
        address: Raw address as reported by the store.

    Returns:
        The canonical address.
    """
    if address.startswith("[") or address.count(":") < 2:
        return address

    host, _, port = address.rpartition(":")
    if not port.isdigit():
        return address

    try:
        parsed = ipaddress.ip_address(host)
    except ValueError:
        return address

    if parsed.version != 6:
        return address

    return f"[{host}]:{port}"


def normalize_addresses(addresses: list[str] | None) -> list[str]:
    """Normalize every address in a list, treating None as empty."""
    return [normalize_address(address) for address in addresses or []]
