"""Allow ``python -m pansync``; the sql-query dispatch relies on it."""

from pansync.cli import cli

if __name__ == "__main__":
    cli(prog_name="pansync")
