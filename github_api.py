import logging
from datetime import timezone

import requests

from contribution_calculator import ContributionCalculator
from date_ranges import format_date, parse_instant, subtract_year
from errors import TransportError, UpstreamError
from models import DailyContribution

CONTRIBUTIONS_QUERY = """
query ($username: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
      totalCommitContributions
      totalIssueContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
    }
  }
}
"""


def to_github_datetime(instant):
    return instant.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def flatten_calendar(collection):
    """Flatten the weeks -> contributionDays calendar into a list of DailyContribution."""
    days = []
    for week in collection["contributionCalendar"]["weeks"]:
        for day in week["contributionDays"]:
            days.append(DailyContribution(date=day["date"], count=day["contributionCount"]))
    return days


def category_totals(collection):
    return {
        "totalCommits": collection["totalCommitContributions"],
        "totalIssues": collection["totalIssueContributions"],
        "totalPRs": collection["totalPullRequestContributions"],
        "totalReviews": collection["totalPullRequestReviewContributions"],
    }


class GitHubAPI:
    """Handles communication with the GitHub GraphQL and REST APIs."""

    def __init__(self, config, session=None):
        self.api_url = config.api_url
        self.rest_url = config.rest_url
        self.username = config.username
        self.timeout = config.timeout
        self.session = session or requests.Session()
        self.headers = {"Authorization": f"Bearer {config.token}"}

    def _request(self, method, url, accept=None, **kwargs):
        headers = dict(self.headers)
        if accept:
            headers["Accept"] = accept
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
            if response.status_code != 200:
                logging.error(f"Error {response.status_code}: {response.text}")
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            raise TransportError(str(e), status=e.response.status_code, body=e.response.text) from e
        except requests.exceptions.JSONDecodeError as e:
            logging.error(f"Invalid JSON from {url}: {e}")
            raise TransportError(f"Invalid JSON from {url}: {e}") from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Request to {url} failed: {e}")
            raise TransportError(str(e)) from e

    def execute_query(self, query, variables):
        """Executes a GraphQL query. Errors are raised, never retried."""
        data = self._request("POST", self.api_url, json={"query": query, "variables": variables})
        if not isinstance(data, dict):
            logging.error(f"Unexpected GitHub API response: {data!r}")
            raise UpstreamError("Unexpected GitHub API response", details=data)
        if data.get("errors"):
            logging.error(f"GitHub API errors: {data['errors']}")
            raise UpstreamError("GitHub API error", details=data["errors"])
        return data

    def fetch_user(self):
        """Fetches the authenticated user's account metadata."""
        return self._request("GET", f"{self.rest_url}/user", accept="application/vnd.github.v3+json")

    def fetch_account_created(self):
        user = self.fetch_user()
        if not user.get("created_at"):
            raise UpstreamError("GitHub user has no created_at", details=user)
        return parse_instant(user["created_at"])

    def fetch_contributions(self, from_, to):
        """
        Fetches the contribution calendar and category totals for one window.

        Returns a tuple (days, totals) with the calendar flattened to a list of
        DailyContribution. GitHub rejects windows longer than a year.
        """
        variables = {"username": self.username, "from": to_github_datetime(from_), "to": to_github_datetime(to)}
        data = self.execute_query(CONTRIBUTIONS_QUERY, variables)
        user = (data.get("data") or {}).get("user")
        if user is None:
            raise UpstreamError(f"GitHub user {self.username!r} not found")
        collection = user["contributionsCollection"]
        return flatten_calendar(collection), category_totals(collection)

    def fetch_all_contributions(self, account_created, now):
        """
        Fetches every day from account creation up to now in yearly chunks.

        Windows walk backward from now; the oldest one starts at account_created.
        Overlapping days are merged by date, the last fetched value winning.
        """
        all_days = []
        current = now

        while current > account_created:
            window_end = current
            window_start = max(subtract_year(current), account_created)

            logging.info(f"Fetching contributions from {format_date(window_start)} to {format_date(window_end)}")
            days, _ = self.fetch_contributions(window_start, window_end)
            all_days.extend(days)

            current = subtract_year(current)

        return ContributionCalculator.normalize_series(all_days)
