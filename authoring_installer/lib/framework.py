from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

from ..errors import DependencyError
from .command import CommandError, run_command

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


class FrameworkSource(Protocol):
    def latest_tag(self, repository: str) -> str:
        ...

    def install(self, repository: str, revision: str, *, force: bool = True) -> None:
        ...


def _version_key(tag: str) -> Optional[Tuple[int, int, int]]:
    m = _TAG_RE.match(tag)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def parse_release_tags(ls_remote_output: str) -> List[str]:
    """Release tags from ``git ls-remote --tags`` output, newest first.

    Pre-release tags (``v5.0.0-rc.1``) and other non-version refs are ignored.
    """
    tags = []
    for line in ls_remote_output.splitlines():
        parts = line.split()
        if len(parts) != 2 or not parts[1].startswith("refs/tags/"):
            continue
        tag = parts[1][len("refs/tags/"):]
        if tag.endswith("^{}"):
            continue
        if _version_key(tag) is not None:
            tags.append(tag)
    return sorted(set(tags), key=lambda t: _version_key(t), reverse=True)


class GitFramework:
    """Installs the framework by cloning it into ``dest`` and checking out a revision."""

    def __init__(self, dest: str | Path, *, npm_install: bool = True) -> None:
        self.dest = Path(dest)
        self.npm_install = npm_install

    def latest_tag(self, repository: str) -> str:
        try:
            r = run_command(["git", "ls-remote", "--tags", "--refs", repository])
        except CommandError as e:
            raise DependencyError(str(e), message="Failed to get latest framework version") from e

        tags = parse_release_tags(r.stdout)
        if not tags:
            raise DependencyError(
                f"No release tags found in {repository}",
                message="Failed to get latest framework version",
            )
        logger.info("Latest framework release: %s", tags[0])
        return tags[0]

    def install(self, repository: str, revision: str, *, force: bool = True) -> None:
        message = "Framework install failed. See console output for possible reasons."
        logger.info("Installing framework %s@%s into %s", repository, revision, self.dest)

        if self.dest.exists():
            if not force:
                raise DependencyError(f"{self.dest} already exists", message=message)
            shutil.rmtree(self.dest)
        self.dest.parent.mkdir(parents=True, exist_ok=True)

        steps: List[Sequence[str]] = [
            ["git", "clone", repository, str(self.dest)],
            ["git", "-C", str(self.dest), "fetch", "--tags"],
            ["git", "-C", str(self.dest), "checkout", revision],
        ]
        if self.npm_install:
            if shutil.which("npm"):
                steps.append(["npm", "install", "--prefix", str(self.dest)])
            else:
                logger.warning("npm not found on PATH; skipping framework dependency install")

        try:
            for argv in steps:
                run_command(argv)
        except CommandError as e:
            raise DependencyError(str(e), message=message) from e
