"""Filesystem discovery, preservation and deletion.

This module provides the directory scanner with its size/age probe,
backup and archive helpers, and the deletion operator.
"""

from dirpurge.filesystem.operator import DeletionOperator
from dirpurge.filesystem.preservation import Preserver, archive_directory, backup_directory
from dirpurge.filesystem.probe import SubtreeStats, age_days, count_items, directory_size, measure
from dirpurge.filesystem.scanner import DirectoryScanner

__all__ = [
    "DeletionOperator",
    "DirectoryScanner",
    "Preserver",
    "SubtreeStats",
    "age_days",
    "archive_directory",
    "backup_directory",
    "count_items",
    "directory_size",
    "measure",
]
