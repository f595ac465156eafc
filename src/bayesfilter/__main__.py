"""Module entrypoint for ``python -m bayesfilter``."""

from __future__ import annotations

from .cli import app


def main() -> None:
    app(prog_name="bayesfilter")


if __name__ == "__main__":  # pragma: no cover - module execution guard
    main()
