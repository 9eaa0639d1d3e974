"""Update host entries in the SSH client config file."""

import enum
import os
import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from sshhost.ssh_config import Document, HostBlock, KeyValue, decode

# Mode for a config file created by write_document; existing files keep theirs
CONFIG_FILE_MODE = 0o644


class UpdateOptions(BaseModel):
    """Values to apply to the matching host blocks."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str = Field(default="", description="Host alias to match against Host patterns")
    hostname: str = Field(default="", description="New HostName value (empty = keep)")
    identity_file: str = Field(default="", description="New IdentityFile value (empty = keep)")
    user: str = Field(default="", description="New User value (empty = keep)")
    backup: bool = Field(default=False, description="Keep config.bak before overwriting")

    def replacements(self) -> dict[str, str]:
        """Map of lowercased directive name to its new value, for non-empty options."""
        fields = {
            "user": self.user,
            "hostname": self.hostname,
            "identityfile": self.identity_file,
        }
        return {name: value for name, value in fields.items() if value}


class UpdateResult(enum.Enum):
    """Outcome of update_ssh_config."""

    UPDATED = "updated"
    CONFIG_MISSING = "config_missing"
    HOST_NOT_FOUND = "host_not_found"


def default_config_path() -> Path:
    """Return $HOME/.ssh/config."""
    home = os.environ.get("HOME")
    base = Path(home) if home else Path.home()
    return base / ".ssh" / "config"


def _is_wildcard_only(host: HostBlock) -> bool:
    return len(host.patterns) == 1 and str(host.patterns[0]) == "*"


def apply_updates(document: Document, options: UpdateOptions) -> bool:
    """
    Overwrite User/HostName/IdentityFile in every block matching options.key.

    Blocks whose only pattern is '*' are never touched. Only directives that
    already exist in a block are rewritten.

    Args:
        document: Parsed SSH config, modified in place
        options: Key to match and replacement values

    Returns:
        True if at least one block matched, False otherwise
    """
    replacements = options.replacements()
    matched = False

    for host in document.hosts:
        if _is_wildcard_only(host) or not host.matches(options.key):
            continue

        matched = True
        for node in host.nodes:
            if not isinstance(node, KeyValue):
                continue
            new_value = replacements.get(node.key.lower())
            if new_value is not None:
                node.value = new_value

    return matched


def _backup_config(config_file: Path) -> None:
    """
    Create a backup of the SSH config file.

    Args:
        config_file: Path to the SSH config file
    """
    backup_file = config_file.parent / f"{config_file.name}.bak"
    shutil.copy2(config_file, backup_file)

    # Ensure backup has same permissions as original
    backup_file.chmod(config_file.stat().st_mode)


def load_document(config_file: Path) -> Document | None:
    """
    Read and parse the SSH config file.

    Returns:
        Parsed document, or None if the file does not exist

    Raises:
        OSError: If the file exists but cannot be read
        SSHConfigError: If the file cannot be parsed
    """
    try:
        with open(config_file, encoding="utf-8", newline="") as f:
            content = f.read()
    except FileNotFoundError:
        return None

    return decode(content)


def write_document(config_file: Path, document: Document) -> None:
    """Overwrite the SSH config file with the serialized document."""
    fd = os.open(config_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
    with os.fdopen(fd, "wb") as f:
        f.write(document.marshal_text())


def update_ssh_config(
    config_path: str | Path | None,
    options: UpdateOptions,
    dry_run: bool = False,
) -> tuple[UpdateResult, Document | None]:
    """
    Apply options to the SSH config file at config_path.

    Args:
        config_path: Path to SSH config file (None = $HOME/.ssh/config)
        options: Key to match and replacement values
        dry_run: Update the document in memory only, never write

    Returns:
        Tuple of (result, document). document is None when the file is missing.

    Raises:
        OSError: If the file cannot be read or written
        SSHConfigError: If the file cannot be parsed
    """
    config_file = Path(config_path).expanduser() if config_path else default_config_path()

    document = load_document(config_file)
    if document is None:
        return UpdateResult.CONFIG_MISSING, None

    if not apply_updates(document, options):
        return UpdateResult.HOST_NOT_FOUND, document

    if not dry_run:
        if options.backup:
            _backup_config(config_file)
        write_document(config_file, document)

    return UpdateResult.UPDATED, document
