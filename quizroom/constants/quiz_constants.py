"""Quiz-related constants shared across the core and server layers."""

DEFAULT_TIME_LIMIT_SECONDS: int = 30
MULTIPLE_CHOICE_TYPE: str = "multiple"
MIN_MULTIPLE_CHOICE_OPTIONS: int = 2

JOIN_CODE_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
JOIN_CODE_LENGTH: int = 6
JOIN_CODE_MAX_ATTEMPTS: int = 5
