"""
Output Manager

Creates and manages the run directory structure, saves report artifacts
and run metadata.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import hashlib
import importlib.metadata
import json
import logging
import platform
import subprocess
import sys

import pandas as pd
import yaml

from credit_mutate.config.schema import PipelineConfig
from credit_mutate.core.exceptions import ArtifactError


logger = logging.getLogger(__name__)

RUN_SUBDIRS = ["config", "data", "reports", "plots", "logs"]

TRACKED_PACKAGES = [
    "numpy",
    "pandas",
    "statsmodels",
    "scikit-learn",
    "matplotlib",
    "pydantic",
]


def _get_package_version(package: str) -> str:
    """Installed version of a package, or 'not installed'."""
    try:
        return importlib.metadata.version(package)
    except importlib.metadata.PackageNotFoundError:
        return "not installed"


def _get_git_hash() -> str:
    """
    Short commit hash, suffixed '-dirty' for uncommitted changes,
    or 'no-git' outside a repository.
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode != 0:
            return "no-git"
        commit = result.stdout.strip()

        dirty_check = subprocess.run(
            ["git", "diff", "--quiet"],
            capture_output=True,
            timeout=5,
        )
        if dirty_check.returncode != 0:
            return f"{commit}-dirty"
        return commit
    except (OSError, subprocess.SubprocessError):
        return "no-git"


def _compute_input_hash(input_path: str) -> str:
    """MD5 of the input file bytes, or 'unknown' if it cannot be read."""
    try:
        digest = hashlib.md5()
        with open(input_path, "rb") as f:
            for chunk in iter(lambda: f.read(1 << 20), b""):
                digest.update(chunk)
        return digest.hexdigest()
    except OSError:
        return "unknown"


class OutputManager:
    """Manages the output directory of one study run.

    Creates a unique run directory under the configured base_dir:
        {base_dir}/{run_id}/
            config/  data/  reports/  plots/  logs/

    The run_id format is {YYYYMMDD}_{HHMMSS}_{short_hash} where short_hash
    is derived from the config.

    Args:
        config: The study configuration.
        run_start: Optional datetime for the run start. Defaults to now.
    """

    def __init__(self, config: PipelineConfig, run_start: Optional[datetime] = None):
        self._config = config
        self._run_start = run_start or datetime.now()
        self._run_end: Optional[datetime] = None
        self._status = "running"
        self._extra_metadata: dict = {}

        config_json = config.model_dump_json()
        short_hash = hashlib.md5(config_json.encode()).hexdigest()[:6]
        timestamp = self._run_start.strftime("%Y%m%d_%H%M%S")
        self._run_id = f"{timestamp}_{short_hash}"

        self._base_dir = Path(config.output.base_dir)
        self._run_dir = self._base_dir / self._run_id
        for sub in RUN_SUBDIRS:
            (self._run_dir / sub).mkdir(parents=True, exist_ok=True)

        logger.info("Output directory: %s", self._run_dir)

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def run_dir(self) -> Path:
        return self._run_dir

    @property
    def status(self) -> str:
        return self._status

    def subdir(self, name: str) -> Path:
        path = self._run_dir / name
        path.mkdir(parents=True, exist_ok=True)
        return path

    def save_config_snapshot(self, config: PipelineConfig) -> Path:
        """Save the frozen config to config/study_config.yaml."""
        config_path = self._run_dir / "config" / "study_config.yaml"
        with open(config_path, "w") as f:
            yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)

        logger.debug("Config snapshot saved to %s", config_path)
        return config_path

    def save_artifact(
        self,
        name: str,
        obj: Any,
        fmt: str = "csv",
        subdir: str = "data",
        index: bool = False,
    ) -> Path:
        """Save a report artifact to the run directory.

        Args:
            name: Artifact name (without extension).
            obj: DataFrame for 'csv', JSON-serializable object for 'json',
                anything with a str() for 'txt'.
            fmt: Format - 'csv', 'json' or 'txt'.
            subdir: Subdirectory within the run dir.
            index: Write the DataFrame index (csv only).

        Returns:
            Path to the saved artifact.

        Raises:
            ArtifactError: Unsupported format/object combination or write failure.
        """
        target_dir = self.subdir(subdir)

        try:
            if fmt == "csv" and isinstance(obj, pd.DataFrame):
                path = target_dir / f"{name}.csv"
                obj.to_csv(path, index=index)
            elif fmt == "json":
                path = target_dir / f"{name}.json"
                with open(path, "w") as f:
                    json.dump(obj, f, indent=2, default=str)
            elif fmt == "txt":
                path = target_dir / f"{name}.txt"
                with open(path, "w", encoding="utf-8") as f:
                    f.write(str(obj))
            else:
                raise ArtifactError(
                    f"Cannot save {type(obj).__name__} as '{fmt}'",
                    artifact_path=str(target_dir / name),
                )
        except OSError as e:
            raise ArtifactError(
                "Failed to write artifact", artifact_path=str(target_dir / name), cause=e
            )

        logger.debug("Artifact saved: %s", path)
        return path

    def add_metadata(self, **kwargs: Any) -> None:
        """Extra key/values recorded in run_metadata.json."""
        self._extra_metadata.update(kwargs)

    def save_run_metadata(self) -> Path:
        """Collect and save run metadata to run_metadata.json.

        Includes git info, package versions, OS info, timing and input hash.
        """
        self._run_end = self._run_end or datetime.now()
        duration = (self._run_end - self._run_start).total_seconds()

        metadata = {
            "run_id": self._run_id,
            "git_commit": _get_git_hash(),
            "python_version": sys.version,
            "package_versions": {
                pkg: _get_package_version(pkg) for pkg in TRACKED_PACKAGES
            },
            "os_info": {
                "system": platform.system(),
                "release": platform.release(),
                "machine": platform.machine(),
            },
            "run_start": self._run_start.isoformat(),
            "run_end": self._run_end.isoformat(),
            "duration_seconds": round(duration, 2),
            "status": self._status,
            "input_file_hash": _compute_input_hash(self._config.data.input_path),
            **self._extra_metadata,
        }

        path = self._run_dir / "run_metadata.json"
        with open(path, "w") as f:
            json.dump(metadata, f, indent=2, default=str)

        logger.info("Run metadata saved to %s", path)
        return path

    def get_log_path(self) -> Path:
        return self._run_dir / "logs" / "mutate.log"

    def mark_complete(self, status: str = "success") -> None:
        self._status = status
        self._run_end = datetime.now()

    def mark_failed(self) -> None:
        self.mark_complete(status="failed")
