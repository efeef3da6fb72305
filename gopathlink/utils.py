"""Filesystem helpers shared by the locator and the linker"""

import os
from pathlib import Path

from gopathlink.constants import GIT_DIR


def is_repo(path: Path) -> bool:
    """True if path, resolved through symlinks, holds repository metadata."""
    return (Path(os.path.realpath(path)) / GIT_DIR).is_dir()


def is_broken_symlink(path: Path) -> bool:
    return path.is_symlink() and not path.exists()


def is_generated_tree(path: Path) -> bool:
    """
    True for a directory holding nothing but directories and symlinks.

    Such trees are what earlier runs leave behind when nested module paths
    get linked before their parent; they carry no content of their own.
    """
    for root, dirs, files in os.walk(path):
        for name in files:
            if not os.path.islink(os.path.join(root, name)):
                return False
        if GIT_DIR in dirs:
            return False
    return True
