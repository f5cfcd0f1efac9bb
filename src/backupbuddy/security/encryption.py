from pathlib import Path
from typing import List, Optional

from backupbuddy.globals import Globals
from backupbuddy.log import logger
from backupbuddy.settings import BackupSettings, ArchiveArtifact, EncryptedArtifact
from backupbuddy.security.encryption_method import EncryptionMethod
from backupbuddy.utils import run_command, report_command_failure


def encrypted_path_for(archive_path: Path) -> Path:
    return archive_path.with_name(archive_path.name + Globals.CIPHERTEXT_ENDING)


def assemble_gpg_cmd(settings: BackupSettings, archive_path: Path, out_file: Path) -> List[str]:
    """
    Assemble the gpg command that encrypts or signs the archive.

    - encrypt: encrypt for `recipient`, additionally signed if a `user_id` is configured.
    - sign:    wrap the archive into a signed message, using `user_id` as signer if given.

    Returns:
        list[str]: gpg command components ready to be executed via subprocess.
    """
    gpg_cmd = ["gpg", "--batch", "--yes", "--output", str(out_file)]

    if settings.user_id:
        gpg_cmd += ["--local-user", settings.user_id]

    if settings.encryption_method == EncryptionMethod.ENCRYPT:
        gpg_cmd += ["--encrypt", "--recipient", settings.recipient]
        if settings.user_id:
            gpg_cmd.append("--sign")

    elif settings.encryption_method == EncryptionMethod.SIGN:
        gpg_cmd.append("--sign")

    else:
        raise ValueError(f"Unsupported encryption method: {settings.encryption_method}")

    gpg_cmd.append(str(archive_path))
    return gpg_cmd


def encrypt_archive(settings: BackupSettings, archive: ArchiveArtifact) -> Optional[EncryptedArtifact]:
    """
    Encrypts or signs the archive with GPG. The output is written next to the archive
    with the ending `Globals.CIPHERTEXT_ENDING` and becomes the upload payload.

    Parameters:
        settings (BackupSettings): Settings providing method, recipient and signer.
        archive (ArchiveArtifact): Archive created by the archiver.

    Returns:
        EncryptedArtifact | None: The gpg output, or None if gpg failed.
    """
    out_file = encrypted_path_for(archive.path)

    # Remove ciphertext from previous run
    if out_file.exists():
        out_file.unlink()
        logger.debug(f"Old ciphertext removed: {out_file}")

    result = run_command(assemble_gpg_cmd(settings, archive.path, out_file))
    if not result.succeeded:
        report_command_failure("GPG " + settings.encryption_method.value, result)
        return None

    if not out_file.exists():
        logger.error(f"GPG succeeded but output file not found: {out_file}")
        return None

    encrypted = EncryptedArtifact.from_path(out_file)
    logger.debug(f"Created \"{encrypted.path}\" ({encrypted.size} bytes).")
    return encrypted
