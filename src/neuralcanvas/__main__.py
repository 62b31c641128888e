"""Entry point for `python -m neuralcanvas` and the `neuralcanvas` console script."""

from __future__ import annotations

from .cli import app


def main() -> None:
    app(prog_name="neuralcanvas")


if __name__ == "__main__":
    main()
