import re
import secrets
import string
import time


BASE36_ALPHABET = string.digits + string.ascii_uppercase
RANDOM_PART_LENGTH = 6

# PREFIX-<base36 ms timestamp>-<base36 random>, scanned from QR codes so the shape must stay stable
TICKET_NUMBER_PATTERN = re.compile(r'^[A-Z0-9]+-[0-9A-Z]+-[0-9A-Z]{6}$')


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError('base36 encoding needs a non-negative integer')
    if value == 0:
        return '0'
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return ''.join(reversed(digits))


def generate_ticket_number(*, prefix: str, now_ms: int | None = None) -> str:
    """
    Human-readable ticket identifier, e.g. MIP-M1ZK3J2Q-7XQ0BD.

    Uniqueness is only probabilistic; the unique constraint on
    ticket.ticket_number is what finally rejects a collision.
    """
    timestamp_ms = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    random_part = ''.join(secrets.choice(BASE36_ALPHABET) for _ in range(RANDOM_PART_LENGTH))
    return f'{prefix.upper()}-{to_base36(timestamp_ms)}-{random_part}'


def is_well_formed_ticket_number(ticket_number: str) -> bool:
    return bool(TICKET_NUMBER_PATTERN.match(ticket_number))
