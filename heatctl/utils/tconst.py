"""Time related constants."""

__all__ = ['SEC_PER_DAY', 'SEC_PER_HOUR', 'SEC_PER_MIN']

SEC_PER_DAY = 86_400
SEC_PER_HOUR = 3_600
SEC_PER_MIN = 60
