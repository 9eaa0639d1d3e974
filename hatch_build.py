"""Hatchling build hook that records the git commit for sshhost.__version__."""

import subprocess
from pathlib import Path

from hatchling.builders.hooks.plugin.interface import BuildHookInterface


class CustomBuildHook(BuildHookInterface):
    """Writes sshhost/_version.txt before the build."""

    def initialize(self, version, build_data):
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--short=7", "HEAD"],
                capture_output=True,
                text=True,
                timeout=5,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            print(f"Warning: Could not capture git commit: {e}")
            return

        commit = result.stdout.strip() if result.returncode == 0 else ""
        if commit:
            (Path(self.root) / "sshhost" / "_version.txt").write_text(commit)
            print(f"Embedded git commit: {commit}")
