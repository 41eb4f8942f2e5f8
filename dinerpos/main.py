"""Entry point for the diner-pos command line."""

from __future__ import annotations

from dinerpos.cli import app


def run() -> None:
    app(prog_name="diner-pos")


if __name__ == "__main__":
    run()
