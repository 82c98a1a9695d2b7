"""pansync — pull Pantheon database snapshots into a local database."""

__version__ = "0.1.0"
