"""sshhost - Point SSH host aliases at freshly provisioned machines."""

import subprocess
from pathlib import Path

BASE_VERSION = "0.1.0"


def _get_version() -> str:
    """
    Get version string.

    Returns:
        - "dev" if running from a git checkout
        - "0.1.0+git.<commit>" if installed (commit embedded by hatch_build.py)
        - "0.1.0" if the commit cannot be determined
    """
    package_dir = Path(__file__).parent

    if (package_dir.parent / ".git").exists():
        return "dev"

    version_file = package_dir / "_version.txt"
    try:
        commit = version_file.read_text().strip()
    except OSError:
        commit = ""
    if commit:
        return f"{BASE_VERSION}+git.{commit}"

    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short=7", "HEAD"],
            capture_output=True,
            text=True,
            timeout=1,
            cwd=package_dir,
        )
    except (OSError, subprocess.SubprocessError):
        return BASE_VERSION
    commit = result.stdout.strip() if result.returncode == 0 else ""
    return f"{BASE_VERSION}+git.{commit}" if commit else BASE_VERSION


__version__ = _get_version()
