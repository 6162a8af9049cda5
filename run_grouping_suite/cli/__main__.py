"""
CLI entry point for running subcommands.

Allows execution via: python -m run_grouping_suite.cli <command>
"""

from __future__ import annotations

import sys


def main():
    """Main CLI dispatcher."""
    if len(sys.argv) < 2:
        print("Run Grouping Suite CLI")
        print("\nAvailable commands:")
        print("  group      - Group runs and aggregate metrics/params per group")
        print("\nUsage:")
        print("  python -m run_grouping_suite.cli group --runs runs.yaml [options]")
        print("\nOr use the installed console script:")
        print("  run-grouping --runs runs.yaml [options]")
        sys.exit(1)

    command = sys.argv[1]
    # Remove the command from argv so subcommands see clean arguments
    sys.argv = [sys.argv[0]] + sys.argv[2:]

    if command == "group":
        from .group import main as group_main
        group_main()
    else:
        print(f"Unknown command: {command}")
        print("Available commands: group")
        sys.exit(1)


if __name__ == "__main__":
    main()
