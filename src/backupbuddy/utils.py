import shutil
import subprocess

from typing import List

from backupbuddy.log import logger
from backupbuddy.globals import Globals
from backupbuddy.settings import BackupSettings, ArchiveArtifact, EncryptedArtifact, CommandResult


def check_system_dependencies():
    """
    Checks whether all required system binaries are available in the system's PATH.

    This function iterates over the list of required system binaries defined in
    `Globals.REQUIRED_SYSTEM_BINS` and uses `shutil.which` to verify their presence.
    If any binary is missing, an error is logged and the function returns False.

    Returns:
        bool: True if all required binaries are found, False otherwise.
    """
    for current_bin in Globals.REQUIRED_SYSTEM_BINS:
        path = shutil.which(current_bin)
        if path is None:
            logger.error(f"BackupBuddy requires {current_bin}. Please install it on your system.")
            return False
    return True


def run_command(cmd: List[str]) -> CommandResult:
    """
    Runs an external command (no shell) and captures its exit status and output.

    A binary that cannot be found is reported like a shell would, with exit status 127.
    No timeout is applied.
    """
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except FileNotFoundError:
        return CommandResult(cmd=list(cmd), returncode=127, stderr=f"{cmd[0]}: command not found")

    command = CommandResult(cmd=list(cmd), returncode=result.returncode,
                            stdout=result.stdout, stderr=result.stderr)
    if command.stdout.strip():
        logger.debug(command.stdout.strip())

    return command


def report_command_failure(step: str, result: CommandResult):
    logger.error(f"{step} failed with exit code {result.returncode}: {result.describe()}")
    if result.stderr.strip():
        logger.error(result.stderr.strip())


def clean_up(settings: BackupSettings, archive: ArchiveArtifact, encrypted: EncryptedArtifact):
    """
    Removes the local archive and/or encrypted file after a successful upload,
    depending on the cleanup flags of the configuration.

    Failing to remove a file is logged as a warning; the upload already succeeded.
    """
    targets = []
    if settings.cleanup_archive:
        targets.append(archive.path)
    if settings.cleanup_encrypted:
        targets.append(encrypted.path)

    for path in targets:
        try:
            path.unlink(missing_ok=True)
            logger.debug(f"Removed \"{path}\".")
        except OSError as e:
            logger.warning(f"Failed to remove \"{path}\": {e}")


def format_size(num_bytes: int) -> str:
    size = float(num_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.2f} {unit}"
        size /= 1024


def print_welcome_banner(args):
    banner = fr"""
 ____             _                ____            _     _
| __ )  __ _  ___| | ___   _ _ __ | __ ) _   _  __| | __| |_   _
|  _ \ / _` |/ __| |/ / | | | '_ \|  _ \| | | |/ _` |/ _` | | | |
| |_) | (_| | (__|   <| |_| | |_) | |_) | |_| | (_| | (_| | |_| |
|____/ \__,_|\___|_|\_\\__,_| .__/|____/ \__,_|\__,_|\__,_|\__, |
                            |_|                            |___/

Config: {args["config_file"]}
"""
    print(banner)
