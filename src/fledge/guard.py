"""Output directory guard.

Server bundles build into subdirectories of the server build directory,
so stale bundles from a previous build have to be cleared by fledge
rather than by each bundle build.  The directory is only removed when
the user asked for it, or, absent a preference, when it lives inside
the project root.  An output directory pointing elsewhere (a shared or
external path) is left alone.
"""

import logging
import os
import shutil
from pathlib import Path

from fledge.errors import GuardFailure

logger = logging.getLogger("fledge.build")


def is_within_root(root_directory: str | Path, directory: str | Path) -> bool:
    """True if *directory* is strictly inside *root_directory*."""
    try:
        relative = os.path.relpath(os.path.abspath(directory), os.path.abspath(root_directory))
    except ValueError:
        # Different drives on Windows
        return False
    if relative == os.curdir:
        return False
    return not relative.startswith(os.pardir) and not os.path.isabs(relative)


def should_empty_server_build_directory(
    root_directory: str | Path,
    server_build_directory: str | Path,
    empty_out_dir: bool | None,
) -> bool:
    """Decide whether the previous server build output may be deleted.

    Args:
        root_directory: Project root.
        server_build_directory: Top-level server output directory.
        empty_out_dir: Explicit preference.  ``None`` means unset.
    """
    if empty_out_dir is not None:
        return empty_out_dir
    return is_within_root(root_directory, server_build_directory)


def clean_server_build_directory(
    root_directory: str | Path,
    server_build_directory: str | Path,
    empty_out_dir: bool | None,
) -> bool:
    """Remove the server build directory if the guard allows it.

    A directory that does not exist yet is not an error.

    Returns:
        True if the directory was removed (or was already absent).

    Raises:
        GuardFailure: The directory could not be removed.
    """
    if not should_empty_server_build_directory(root_directory, server_build_directory, empty_out_dir):
        logger.debug(
            "Keeping %s: outside %s and empty_out_dir not set",
            server_build_directory,
            root_directory,
        )
        return False

    path = Path(server_build_directory)
    logger.debug("Removing previous server build output %s", path)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as exc:
        msg = f"Could not remove server build directory {path}: {exc}"
        raise GuardFailure(msg) from exc
    return True
