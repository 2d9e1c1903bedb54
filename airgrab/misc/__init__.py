"""
Miscellaneous helpers shared by the pipeline and the CLI.

Modules
-------
- progress : rich progress bars for streamed downloads.
"""

from .progress import ProgressFactory, no_progress, transfer_progress

__all__ = ["ProgressFactory", "no_progress", "transfer_progress"]
