from datetime import date, datetime


class Clock:
    """Source of the current date and time for the service layer."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """A clock pinned to one instant, for tests and replays."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


system_clock = SystemClock()


def get_clock() -> Clock:
    return system_clock
