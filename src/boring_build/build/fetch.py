"""Fetch the BoringSSL git submodule when the source tree is missing."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from boring_build.errors import SourceFetchError
from boring_build.link.directives import CargoDirectives

log = logging.getLogger(__name__)


def source_tree_present(source_dir: Path) -> bool:
    return (source_dir / "CMakeLists.txt").exists()


def ensure_source_tree(
    project_root: Path,
    source_rel: str,
    directives: CargoDirectives,
    git: str = "git",
) -> bool:
    """Run `git submodule update --init --recursive <source_rel>` unless the tree exists.

    Returns True when a fetch was performed.
    """
    if source_tree_present(project_root / source_rel):
        return False

    directives.warning("fetching boringssl git submodule")
    cmd = [git, "submodule", "update", "--init", "--recursive", source_rel]
    hint = f"consider running `git submodule update --init --recursive {source_rel}` yourself"
    try:
        result = subprocess.run(
            cmd,
            cwd=str(project_root),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        msg = f"failed to fetch submodule: {e}"
        raise SourceFetchError(msg, hint=hint, context={"path": source_rel}) from e
    if result.returncode != 0:
        msg = f"failed to fetch submodule (git exited with {result.returncode})"
        raise SourceFetchError(
            msg,
            hint=hint,
            context={"path": source_rel, "stderr": (result.stderr or "").strip()},
        )
    log.info("Fetched %s", source_rel)
    return True
