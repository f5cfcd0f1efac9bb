from datetime import datetime
from pathlib import Path
from typing import List, Optional

from backupbuddy.log import logger
from backupbuddy.globals import Globals
from backupbuddy.settings import BackupSettings, ArchiveArtifact
from backupbuddy.utils import run_command, report_command_failure


def check_archive_format(extension: str) -> bool:
    """
    Checks whether an archive extension can be produced with tar.

    zip and 7z are recognized but not implemented; every other unknown
    extension is rejected as unsupported.
    """
    if extension in Globals.NOT_IMPLEMENTED_FORMATS:
        logger.error(f"Archive format '{extension}' (field 'extension' in section 'archive') is not implemented yet.")
        return False

    if extension not in Globals.ARCHIVE_FORMATS:
        logger.error(
            f"Unsupported archive format '{extension}' (field 'extension' in section 'archive'). "
            f"Supported formats: {', '.join(Globals.ARCHIVE_FORMATS)}."
        )
        return False

    return True


def build_archive_path(settings: BackupSettings, now: Optional[datetime] = None) -> Path:
    """Returns <backup_dir>/<name>-<timestamp>.<extension>."""
    now = now or datetime.now()
    timestamp = now.strftime(settings.timestamp_format)
    return settings.backup_dir / f"{settings.name}-{timestamp}.{settings.extension}"


def assemble_tar_cmd(settings: BackupSettings, paths: List[Path], archive_path: Path) -> List[str]:
    """
    Assemble the tar command compressing all input paths into a single archive.

    Each input is added relative to its parent directory (`-C parent name`) so that
    the archive does not contain absolute paths.
    """
    tar_cmd = ["tar", Globals.ARCHIVE_FORMATS[settings.extension], str(archive_path.resolve())]

    for path in paths:
        abs_path = Path(path).resolve()
        tar_cmd += ["-C", str(abs_path.parent), abs_path.name]

    return tar_cmd


def create_archive(settings: BackupSettings, paths: List[Path], archive_path: Path) -> Optional[ArchiveArtifact]:
    """
    Compress the requested input paths into `archive_path`.

    Parameters:
        settings (BackupSettings): Settings of the current run.
        paths (list[Path]): Files and directories to archive.
        archive_path (Path): Target file, see `build_archive_path`.

    Returns:
        ArchiveArtifact | None: The archive, or None if tar failed.
    """
    settings.backup_dir.mkdir(parents=True, exist_ok=True)

    # Remove archive from previous run with the same timestamp
    if archive_path.exists():
        archive_path.unlink()
        logger.debug(f"Old archive removed: {archive_path}")

    result = run_command(assemble_tar_cmd(settings, paths, archive_path))
    if not result.succeeded:
        report_command_failure("Archiving", result)
        return None

    if not archive_path.exists():
        logger.error(f"Tar succeeded but archive not found: {archive_path}")
        return None

    archive = ArchiveArtifact.from_path(archive_path)
    logger.debug(f"Created archive \"{archive.path}\" ({archive.size} bytes).")
    return archive
