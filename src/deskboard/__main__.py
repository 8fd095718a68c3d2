"""CLI entry point for deskboard."""

from __future__ import annotations

from deskboard.cli.commands.root import cli


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
