"""Main CLI entry point for prconsensus."""

import argparse
import sys
from pathlib import Path

from ..report_config import DEFAULT_OUTPUT, ConfigError, ReportConfig


def init_config(output: Path) -> None:
    """Write a starter config, refusing to overwrite an existing one."""
    if output.exists():
        print(f"Error: {output} already exists", file=sys.stderr)
        sys.exit(1)

    from ..repo import detect_repo_from_git

    config = ReportConfig.default()
    repo = detect_repo_from_git()
    if repo:
        # Placeholder PR number; edit before running
        config.targets.append(repo.target(1))

    output.write_text(config.to_yaml())
    print(f"Wrote {output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prconsensus",
        description="Review thread consensus and reviewer engagement report",
        epilog="Run 'prconsensus <command> --help' for more information on a command.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser(
        "init",
        help="Generate a starter prconsensus.yaml",
    )
    init_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("prconsensus.yaml"),
        help="Output file path (default: prconsensus.yaml)",
    )

    report_parser = subparsers.add_parser(
        "report",
        help="Fetch review threads and build the report",
        description="Score review threads of the configured pull requests and write the report.",
    )
    report_parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Config file (default: prconsensus.yaml in current directory)",
    )
    report_parser.add_argument(
        "--pr",
        "-p",
        type=int,
        nargs="+",
        default=None,
        help="Pull request numbers in the current repository (overrides configured list)",
    )
    report_parser.add_argument(
        "--format",
        "-f",
        choices=["xlsx", "terminal"],
        default="xlsx",
        help="Output format (default: xlsx)",
    )
    report_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help=f"Workbook path for xlsx format (default: {DEFAULT_OUTPUT})",
    )
    report_parser.add_argument(
        "--body-limit",
        type=int,
        default=None,
        help="Truncate comment text beyond this many characters",
    )

    return parser


def main():
    """Main CLI entry point for prconsensus."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "init":
        init_config(args.output)

    elif args.command == "report":
        try:
            config = ReportConfig.load(args.config)
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        if args.body_limit is not None:
            if args.body_limit < 1:
                print("Error: --body-limit must be positive", file=sys.stderr)
                sys.exit(1)
            config.body_char_limit = args.body_limit

        targets = None
        if args.pr:
            from ..repo import get_repo

            try:
                repo = get_repo(args.config)
            except ValueError as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(1)
            targets = [repo.target(number) for number in args.pr]

        # Import here to keep `init` and `--help` fast
        import trio

        from ..main import main as report_main

        trio.run(report_main, config, targets, args.format, args.output)

    elif args.command is None:
        parser.print_help()
        sys.exit(0)

    else:
        print(f"Unknown command: {args.command}")
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
