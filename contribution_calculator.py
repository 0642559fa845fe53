import math
from datetime import timedelta

from date_ranges import parse_date
from models import DailyContribution, RollingPoint, Streak

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
INTENSITY_BUCKETS = ["0", "1-3", "4-10", "11-20", "21+"]
MAX_STREAK_BUCKET = 30
STREAK_OVERFLOW_BUCKET = "31+"

# Metrics compared between the current and previous period
SUMMARY_CHANGE_KEYS = ["totalCommits", "totalIssues", "totalPRs", "totalReviews", "activeDays", "totalContributions"]
STREAK_CHANGE_KEYS = ["longestStreak", "totalStreaks", "averageStreakLength"]


def round_half_up(value):
    return int(math.floor(value + 0.5))


def intensity_bucket(count):
    if count == 0:
        return "0"
    if count <= 3:
        return "1-3"
    if count <= 10:
        return "4-10"
    if count <= 20:
        return "11-20"
    return "21+"


class ContributionCalculator:
    """Turns a per-day contribution series into summaries, rolling sums, streaks and analytics."""

    @staticmethod
    def build_lookup(days):
        """Map date -> count. When a date repeats, the later entry wins."""
        lookup = {}
        for day in days:
            day = DailyContribution.coerce(day)
            lookup[day.date] = day.count
        return lookup

    @staticmethod
    def normalize_series(days):
        """Sort ascending by date and drop duplicate dates, keeping the later entry."""
        lookup = ContributionCalculator.build_lookup(days)
        return [DailyContribution(date=date, count=lookup[date]) for date in sorted(lookup)]

    def build_summary(self, days, totals):
        """Combine upstream category totals with counts derived from the series."""
        days = self.normalize_series(days)
        return {
            "totalCommits": totals.get("totalCommits", 0),
            "totalIssues": totals.get("totalIssues", 0),
            "totalPRs": totals.get("totalPRs", 0),
            "totalReviews": totals.get("totalReviews", 0),
            "totalDays": len(days),
            "activeDays": sum(1 for day in days if day.count > 0),
            "totalContributions": sum(day.count for day in days),
        }

    def calculate_rolling_sums(self, days, window_days):
        """
        Sum each day's count with the window_days - 1 calendar days before it.

        One RollingPoint is produced per date present in the series. Days absent
        from the series, including those before its first date, count as zero.
        """
        days = self.normalize_series(days)
        lookup = self.build_lookup(days)
        points = []
        for day in days:
            current = parse_date(day.date)
            total = 0
            for offset in range(window_days):
                total += lookup.get((current - timedelta(days=offset)).isoformat(), 0)
            points.append(RollingPoint(date=day.date, rolling_sum=total))
        return points

    def summarize_rolling(self, points, account_created=None, now=None):
        values = [point.rolling_sum for point in points]
        account_age = 0
        if account_created is not None and now is not None:
            account_age = max((now - account_created).days, 0)
        if not values:
            return {"maxRolling": 0, "minRolling": 0, "avgRolling": 0, "totalDays": 0, "accountAge": account_age}
        return {
            "maxRolling": max(values),
            "minRolling": min(values),
            "avgRolling": round_half_up(sum(values) / len(values)),
            "totalDays": len(values),
            "accountAge": account_age,
        }

    def calculate_streaks(self, days):
        """
        Find the runs of consecutive active entries in the date-sorted series.

        Only an entry with a zero count ends a streak; a date missing from the
        series does not.
        """
        days = self.normalize_series(days)
        streaks = []
        length = 0
        start = None
        previous = None

        for day in days:
            if day.count > 0:
                if length == 0:
                    start = day.date
                length += 1
            elif length > 0:
                streaks.append(Streak(length=length, start_date=start, end_date=previous.date))
                length = 0
                start = None
            previous = day

        if length > 0:
            streaks.append(Streak(length=length, start_date=start, end_date=days[-1].date))

        frequency = {n: 0 for n in range(1, MAX_STREAK_BUCKET + 1)}
        frequency[STREAK_OVERFLOW_BUCKET] = 0
        for streak in streaks:
            if streak.length <= MAX_STREAK_BUCKET:
                frequency[streak.length] += 1
            else:
                frequency[STREAK_OVERFLOW_BUCKET] += 1

        return {
            "streaks": [streak.to_dict() for streak in streaks],
            "streakFrequency": frequency,
            "longestStreak": max((streak.length for streak in streaks), default=0),
            "totalStreaks": len(streaks),
            "averageStreakLength": sum(s.length for s in streaks) / len(streaks) if streaks else 0,
        }

    def calculate_analytics(self, days):
        """Weekly pattern, intensity distribution and yearly totals in a single pass."""
        weekly = [0] * 7
        intensity = {bucket: 0 for bucket in INTENSITY_BUCKETS}
        yearly = {}

        for day in days:
            day = DailyContribution.coerce(day)
            date = parse_date(day.date)
            # Sunday = 0
            weekly[(date.weekday() + 1) % 7] += day.count
            intensity[intensity_bucket(day.count)] += 1
            yearly[date.year] = yearly.get(date.year, 0) + day.count

        return {
            "weeklyPattern": [
                {"day": name, "dayShort": name[:3], "count": weekly[index]} for index, name in enumerate(DAY_NAMES)
            ],
            "intensityDistribution": intensity,
            "yearlyData": yearly,
        }

    @staticmethod
    def calculate_change(current, previous):
        """Percentage change from previous to current. 0 -> n counts as +100%."""
        if previous == 0:
            return 100 if current > 0 else 0
        return (current - previous) / previous * 100

    def calculate_changes(self, current_summary, previous_summary, current_streaks, previous_streaks):
        changes = {}
        for key in SUMMARY_CHANGE_KEYS:
            changes[key] = self.calculate_change(current_summary[key], previous_summary[key])
        for key in STREAK_CHANGE_KEYS:
            changes[key] = self.calculate_change(current_streaks[key], previous_streaks[key])
        return changes
