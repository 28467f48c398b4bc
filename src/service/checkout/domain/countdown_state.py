from enum import StrEnum


class CountdownState(StrEnum):
    IDLE = 'idle'
    RUNNING = 'running'
    EXPIRED = 'expired'
    STOPPED = 'stopped'


def format_remaining(seconds: int) -> str:
    """Render remaining time as M:SS (minutes unpadded)."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f'{minutes}:{secs:02d}'
