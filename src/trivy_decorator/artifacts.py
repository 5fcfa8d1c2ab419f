from __future__ import annotations

import io
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .context import ActionContext
from .errors import ArtifactError
from .github import GitHubClient
from .logging import DecoratorLogger

TEMP_DIR_PREFIX = "trivy-artifacts-"


@dataclass(frozen=True)
class DownloadedArtifacts:
    results_file_path: Optional[Path]
    event_file_path: Optional[Path]
    temp_dir: Path


def _first_file(directory: Path) -> Optional[Path]:
    files = sorted(p for p in directory.rglob("*") if p.is_file())
    return files[0] if files else None


class ArtifactHandler:
    """
    Fetches the scan report and event payload uploaded by the triggering workflow.

    Used by the two-stage (workflow_run) pattern where the untrusted fork
    workflow uploads artifacts and a privileged workflow posts the comment.
    """

    def __init__(self, gh: GitHubClient, context: ActionContext, logger: Optional[DecoratorLogger] = None):
        self.gh = gh
        self.context = context
        self.logger = logger or DecoratorLogger("artifacts")

    def is_workflow_run_context(self) -> bool:
        return self.context.is_workflow_run

    async def download_artifacts(
        self,
        artifact_name: Optional[str],
        event_artifact_name: Optional[str],
    ) -> DownloadedArtifacts:
        if not self.is_workflow_run_context():
            raise ArtifactError("Not in workflow_run context")

        run_id = self.context.workflow_run_id
        temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
        self.logger.info("Downloading artifacts from workflow run", run_id=run_id)

        try:
            artifacts = await self._list_artifacts(run_id)
            results_path = await self._fetch(artifacts, artifact_name, temp_dir)
            event_path = await self._fetch(artifacts, event_artifact_name, temp_dir)
        except Exception:
            self.cleanup(temp_dir)
            raise

        return DownloadedArtifacts(
            results_file_path=results_path,
            event_file_path=event_path,
            temp_dir=temp_dir,
        )

    async def _list_artifacts(self, run_id: Optional[int]) -> List[Dict[str, Any]]:
        if run_id is None:
            raise ArtifactError("Failed to list artifacts: workflow_run.id missing from payload")
        try:
            return await self.gh.list_workflow_run_artifacts(run_id)
        except Exception as exc:
            raise ArtifactError(f"Failed to list artifacts: {exc}") from exc

    async def _fetch(self, artifacts: List[Dict[str, Any]], name: Optional[str], temp_dir: Path) -> Optional[Path]:
        if not name:
            return None

        artifact = next((a for a in artifacts if a.get("name") == name), None)
        if artifact is None:
            self.logger.warning(f"Artifact '{name}' not found", artifact=name)
            return None

        self.logger.info("Downloading artifact", artifact=name)
        try:
            archive = await self.gh.download_artifact(artifact["id"])
        except Exception as exc:
            raise ArtifactError(f"Failed to download artifact: {exc}") from exc

        extract_dir = temp_dir / name
        self.extract_zip(archive, extract_dir)

        path = _first_file(extract_dir)
        if path is not None:
            self.logger.info("Artifact extracted", artifact=name, path=str(path))
        return path

    @staticmethod
    def extract_zip(archive: bytes, dest: Path) -> None:
        try:
            with zipfile.ZipFile(io.BytesIO(archive)) as zf:
                zf.extractall(dest)
        except (zipfile.BadZipFile, OSError) as exc:
            raise ArtifactError(f"Failed to extract ZIP: {exc}") from exc

    def cleanup(self, temp_dir: Optional[Path]) -> None:
        """Remove the download directory. Never raises."""
        if not temp_dir:
            return
        try:
            if Path(temp_dir).exists():
                shutil.rmtree(temp_dir)
                self.logger.info("Cleaned up temporary directory", path=str(temp_dir))
        except OSError as exc:
            self.logger.warning(f"Failed to cleanup temporary directory: {exc}", path=str(temp_dir))
