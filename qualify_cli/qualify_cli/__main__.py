"""Entry point for `python -m qualify_cli` and `sqlqualify` console script."""

from __future__ import annotations

from qualify_cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
