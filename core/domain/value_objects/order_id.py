"""Order id canonicalization."""
from ..exceptions import MalformedRequestError

INT64_MAX = 2**63 - 1


def canonical_order_id(raw: object) -> str:
    """
    Validate an order id and return its canonical decimal form.

    Order ids are digit strings that fit a signed 64-bit integer. The
    canonical form drops leading zeros, so "007" becomes "7".

    Raises:
        MalformedRequestError: If the id is empty, not a string, contains
            anything but ASCII digits, or overflows int64.
    """
    if not isinstance(raw, str) or not raw:
        raise MalformedRequestError(f"Order id must be a non-empty string, got: {raw!r}")

    if not (raw.isascii() and raw.isdigit()):
        raise MalformedRequestError(f"Order id must contain digits only: {raw!r}", order_id=raw)

    value = int(raw)
    if value > INT64_MAX:
        raise MalformedRequestError(f"Order id out of range: {raw}", order_id=raw)

    return str(value)
