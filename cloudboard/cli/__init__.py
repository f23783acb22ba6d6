"""Command line interface for cloudboard."""

from cloudboard.cli.main import CloudBoardCLI

__all__ = ["CloudBoardCLI"]
