from enum import StrEnum


class ArchiveReason(StrEnum):
    AUTOMATIC = 'automatic'
    MANUAL = 'manual'
    CANCELLED = 'cancelled'
    RESTORED = 'restored'  # audit log only
