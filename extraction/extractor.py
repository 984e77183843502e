"""
High-level orchestrator for Go source harvesting.

This module provides the main entry points for harvesting a single file or a
directory of Go files into one cross-linked ``Harvest``.
"""

import contextvars
import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Tuple

from core.structured_logging import file_scope
from extraction.config import (
    DEFAULT_FILENAME_REGEX,
    DEFAULT_MAX_WORKERS,
    GO_EXTENSION,
)
from extraction.models import Harvest, Struct
from extraction.parser import dump_tree, ensure_valid_encoding, ensure_well_formed, parse_file
from extraction.traversal import SourceWalker, walk_tree

logger = logging.getLogger(__name__)


class HarvestStats:
    """Statistics for a harvest operation."""

    def __init__(self):
        self.files_processed = 0
        self.structs = 0
        self.operations = 0
        self.interfaces = 0
        self.linked_operations = 0
        self.unresolved_receivers = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "structs": self.structs,
            "operations": self.operations,
            "interfaces": self.interfaces,
            "linked_operations": self.linked_operations,
            "unresolved_receivers": self.unresolved_receivers,
        }

    def __str__(self) -> str:
        return (
            f"HarvestStats(files={self.files_processed}, structs={self.structs}, "
            f"operations={self.operations}, interfaces={self.interfaces}, "
            f"linked={self.linked_operations}, unresolved={self.unresolved_receivers})"
        )


def discover_go_files(directory: str, filename_regex: str = DEFAULT_FILENAME_REGEX) -> List[str]:
    """List the Go files of one directory whose base name matches a pattern.

    Subdirectories are not descended into; every directory is its own
    package.

    Args:
        directory: Directory to list.
        filename_regex: Regular expression searched in each base file name.

    Returns:
        Sorted absolute paths of the matching ``.go`` files.

    Raises:
        FileNotFoundError: If the directory does not exist.
        ValueError: If ``filename_regex`` is not a valid regular expression.
    """
    directory = os.path.abspath(directory)
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    try:
        pattern = re.compile(filename_regex)
    except re.error as e:
        raise ValueError(f"Invalid filename pattern {filename_regex!r}: {e}") from e

    go_files = []
    for name in sorted(os.listdir(directory)):
        path = os.path.join(directory, name)
        if not os.path.isfile(path) or not name.endswith(GO_EXTENSION):
            continue
        if pattern.search(name) is None:
            continue
        go_files.append(path)

    logger.debug("Found %d Go files in %s matching %r", len(go_files), directory, filename_regex)
    return go_files


def _walk_file(file_path: str) -> SourceWalker:
    """Parse and walk one file; raises ParseError on syntax errors."""
    with file_scope(file_path):
        tree, source_bytes = parse_file(file_path)
        ensure_valid_encoding(source_bytes, file_path)
        ensure_well_formed(tree, file_path)
        walker = walk_tree(tree, file_path)
        logger.info(
            "Harvested %d structs, %d operations, %d interfaces from %s",
            len(walker.structs),
            len(walker.operations),
            len(walker.interfaces),
            os.path.basename(file_path),
        )
    return walker


def _walk_files(files: List[str], max_workers: int) -> List[SourceWalker]:
    """Walk every file, optionally on a thread pool.

    Results come back in ``files`` order whatever the completion order.
    The first failure cancels the files not yet started and is re-raised.
    """
    if max_workers <= 1 or len(files) < 2:
        return [_walk_file(path) for path in files]

    results: List[Optional[SourceWalker]] = [None] * len(files)
    with ThreadPoolExecutor(max_workers=min(max_workers, len(files))) as executor:
        future_to_index = {
            executor.submit(contextvars.copy_context().run, _walk_file, path): i
            for i, path in enumerate(files)
        }
        try:
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()
        except BaseException:
            for future in future_to_index:
                future.cancel()
            raise

    return results


def _merge(walkers: List[SourceWalker]) -> Harvest:
    harvest = Harvest()
    for walker in walkers:
        harvest.structs.extend(walker.structs)
        harvest.operations.extend(walker.operations)
        harvest.interfaces.extend(walker.interfaces)
    return harvest


def cross_link(harvest: Harvest) -> Tuple[int, int]:
    """Attach every method to the struct it is declared on.

    Structs are looked up by (package name, receiver type name), since a Go
    method is always declared in the package of its receiver type. Receivers
    whose struct is not part of the harvest are skipped.

    Args:
        harvest: Fully merged harvest; its structs' ``operations`` lists are
            appended to. Operations themselves are not modified.

    Returns:
        A tuple of (linked, unresolved) receiver counts.
    """
    by_key: Dict[Tuple[str, str], Struct] = {}
    for struct in harvest.structs:
        by_key.setdefault((struct.package_name, struct.name), struct)

    linked = 0
    unresolved = 0
    for operation in harvest.operations:
        receiver = operation.related_struct
        if receiver is None:
            continue

        struct = by_key.get((operation.package_name, receiver.type_name))
        if struct is None:
            unresolved += 1
            logger.debug(
                "No struct %s.%s for method %s; skipping",
                operation.package_name,
                receiver.type_name or "?",
                operation.name,
            )
            continue

        struct.operations.append(operation)
        linked += 1

    return linked, unresolved


def harvest_directory_with_stats(
    directory: str,
    filename_regex: str = DEFAULT_FILENAME_REGEX,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Tuple[Harvest, HarvestStats]:
    """Harvest every matching Go file of a directory.

    The call is all-or-nothing: if any file fails to parse no harvest is
    returned.

    Args:
        directory: Directory holding the Go files.
        filename_regex: Regular expression searched in each base file name.
        max_workers: Number of files parsed concurrently. Merging and
            cross-linking always happen on the calling thread once every file
            has been walked.

    Returns:
        A tuple of (harvest, stats).

    Raises:
        FileNotFoundError: If directory does not exist.
        ParseError: If any selected file contains a syntax error.
    """
    stats = HarvestStats()
    go_files = discover_go_files(directory, filename_regex)

    if not go_files:
        logger.warning("No Go files matching %r found in %s", filename_regex, directory)
        return Harvest(), stats

    logger.info("Harvesting %d Go files from %s", len(go_files), os.path.abspath(directory))

    walkers = _walk_files(go_files, max_workers)
    harvest = _merge(walkers)
    linked, unresolved = cross_link(harvest)

    stats.files_processed = len(walkers)
    stats.structs = len(harvest.structs)
    stats.operations = len(harvest.operations)
    stats.interfaces = len(harvest.interfaces)
    stats.linked_operations = linked
    stats.unresolved_receivers = unresolved

    logger.info("Harvest complete: %s", stats)
    return harvest, stats


def harvest_directory(
    directory: str,
    filename_regex: str = DEFAULT_FILENAME_REGEX,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Harvest:
    """Harvest every matching Go file of a directory into one model.

    Example:
        >>> harvest = harvest_directory("./operations", r"\\.go$")
        >>> [op.name for op in harvest.operations]
        ['getPersons', 'getPerson']
    """
    harvest, _ = harvest_directory_with_stats(directory, filename_regex, max_workers)
    return harvest


def harvest_file(file_path: str) -> Harvest:
    """Harvest a single Go file.

    Methods are only linked to structs declared in the same file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a Go source file.
        ParseError: If the file contains a syntax error.
    """
    file_path = os.path.abspath(file_path)
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")
    if not file_path.endswith(GO_EXTENSION):
        raise ValueError(f"File {file_path} is not a Go source file")

    harvest = _merge([_walk_file(file_path)])
    cross_link(harvest)
    return harvest


def dump_file(file_path: str) -> str:
    """Render the syntax tree of one file, for debugging extraction rules."""
    tree, _ = parse_file(file_path)
    return dump_tree(tree)


def dump_directory(directory: str, filename_regex: str = DEFAULT_FILENAME_REGEX) -> Dict[str, str]:
    """Render the syntax tree of every matching file, keyed by path."""
    return {path: dump_file(path) for path in discover_go_files(directory, filename_regex)}
