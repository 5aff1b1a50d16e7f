from enum import StrEnum


class AuditStatus(StrEnum):
    SUCCESS = 'success'
    FAILED = 'failed'
