"""Artifact discovery.

Looks for the build file in the artifact archive first and then in the job
workspace. A missing file is reported as ``None``; only the caller decides
whether that is an error.
"""

from __future__ import annotations

import glob
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Optional

from dtupload.models.upload import ArtifactLocation

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

DEFAULT_ARTIFACTS_SUBDIR = "archive"


def _iter_matches(root: Path, name: str) -> Iterator[Path]:
    """Yield files named exactly ``name`` under ``root``, shallowest first."""
    if not root.is_dir():
        return
    matches = [p for p in root.rglob(glob.escape(name)) if p.name == name and p.is_file()]
    yield from sorted(matches, key=lambda p: (len(p.relative_to(root).parts), str(p)))


class ArtifactLocator:
    """Find a build artifact by file name."""

    def __init__(
        self,
        build_name: str,
        workspace: Path,
        artifacts_dir: Optional[Path] = None,
    ) -> None:
        """Initialize the locator.

        Args:
            build_name: Exact file name to look for.
            workspace: Job workspace root.
            artifacts_dir: Artifact archive directory. Defaults to
                ``<workspace>/archive``.
        """
        self.build_name = build_name
        self.workspace = Path(workspace)
        self.artifacts_dir = (
            Path(artifacts_dir) if artifacts_dir else self.workspace / DEFAULT_ARTIFACTS_SUBDIR
        )

    def find(self) -> Optional[ArtifactLocation]:
        """Return the first match, preferring the artifact archive."""
        for match in _iter_matches(self.artifacts_dir, self.build_name):
            logger.info("Found %s in the artifact folder", self.build_name)
            return ArtifactLocation(path=match, found_in_artifact_folder=True)

        for match in _iter_matches(self.workspace, self.build_name):
            logger.info("Found %s in the workspace", self.build_name)
            return ArtifactLocation(path=match, found_in_artifact_folder=False)

        logger.info(
            "No file named %s under %s or %s",
            self.build_name,
            self.artifacts_dir,
            self.workspace,
        )
        return None


def find_artifact(
    build_name: str,
    workspace: Path,
    artifacts_dir: Optional[Path] = None,
) -> Optional[ArtifactLocation]:
    """Locate ``build_name`` in the artifact archive or the workspace."""
    return ArtifactLocator(build_name, workspace, artifacts_dir).find()
