from gamecenter.core.clock import Clock, SystemClock

_system_clock = SystemClock()


def get_clock() -> Clock:
    """Time source for request handlers. Tests override this dependency with a FixedClock."""
    return _system_clock
