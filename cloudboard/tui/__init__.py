"""Textual front end for cloudboard."""

from cloudboard.tui.app import CloudBoardTUI

__all__ = ["CloudBoardTUI"]
