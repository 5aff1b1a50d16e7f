from enum import StrEnum


class PaymentMethod(StrEnum):
    CASH = 'cash'
    MOMO = 'momo'  # MTN mobile money
    ORANGE = 'orange'  # Orange money
    CARD = 'card'
    OTHER = 'other'
