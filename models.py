from dataclasses import dataclass


@dataclass(frozen=True)
class DailyContribution:
    date: str  # YYYY-MM-DD
    count: int

    @classmethod
    def coerce(cls, item):
        """Accept either a DailyContribution or a {"date", "count"} mapping."""
        if isinstance(item, cls):
            return item
        return cls(date=item["date"], count=int(item["count"]))

    def to_dict(self):
        return {"date": self.date, "count": self.count}


@dataclass(frozen=True)
class Streak:
    length: int
    start_date: str
    end_date: str

    def to_dict(self):
        return {"length": self.length, "startDate": self.start_date, "endDate": self.end_date}


@dataclass(frozen=True)
class RollingPoint:
    date: str
    rolling_sum: int

    def to_dict(self):
        return {"date": self.date, "rollingSum": self.rolling_sum}
