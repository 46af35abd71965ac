from mdmerge.cli.cli import app

__all__ = ["app"]
