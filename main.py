import argparse
import json
import logging
import sys

import contributions
from config import Config
from errors import ContributionsError
from github_api import GitHubAPI

PERIOD_CHOICES_HELP = "1week, 1month, 90day, 6month or 1year (anything else means 1month)"


def build_parser():
    parser = argparse.ArgumentParser(description="GitHub contribution graphs: daily series, rolling sums, comparisons.")
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: search from the current directory)")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("contributions", help="Daily contributions, summary and analytics for a period")
    p.add_argument("period", nargs="?", default="1month", help=PERIOD_CHOICES_HELP)

    p = sub.add_parser("rolling", help="Rolling-window sums over the whole account history")
    p.add_argument("time_range", nargs="?", default="all")
    p.add_argument("rolling_period", nargs="?", default="1month", help=PERIOD_CHOICES_HELP)

    p = sub.add_parser("compare", help="Current period against the previous period of equal length")
    p.add_argument("period", nargs="?", default="1month", help=PERIOD_CHOICES_HELP)

    sub.add_parser("user", help="Authenticated user's profile")
    sub.add_parser("health", help="Liveness check; does not call GitHub")
    return parser


def run(args):
    if args.command == "health":
        return contributions.health()

    github = GitHubAPI(Config.from_env(args.env_file))
    if args.command == "contributions":
        return contributions.get_contributions(github, args.period)
    if args.command == "rolling":
        return contributions.get_rolling_contributions(github, args.time_range, args.rolling_period)
    if args.command == "compare":
        return contributions.get_comparison(github, args.period)
    return contributions.get_user_info(github)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        result = run(args)
    except ContributionsError as e:
        logging.error(f"{e.kind.value} error: {e.message}")
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
