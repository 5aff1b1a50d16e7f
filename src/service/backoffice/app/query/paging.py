from src.platform.exception.exceptions import ValidationError


MAX_PAGE_SIZE = 200


def validate_paging(*, limit: int, offset: int) -> None:
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f'limit must be between 1 and {MAX_PAGE_SIZE}')
    if offset < 0:
        raise ValidationError('offset must not be negative')
