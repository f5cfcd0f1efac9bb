from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from backupbuddy.globals import Globals
from backupbuddy.security.encryption_method import EncryptionMethod


@dataclass(frozen=True)
class BackupSettings:
    """
    Settings of a single backup run, loaded once from the YAML configuration.

    Attributes:
        name (str): Base name of the archive (e.g. "nightly").
        extension (str): Archive extension, selects the tar compression (e.g. "tar.gz").
        timestamp_format (str): strftime pattern appended to the archive name.
        backup_dir (Path): Directory receiving the archive and the encrypted file.
        cleanup_archive (bool): Remove the archive after a successful upload.
        cleanup_encrypted (bool): Remove the encrypted file after a successful upload.
        bucket (str): Name of the target bucket.
        access_key (str): Access key sent in the Authorization header.
        secret_key (str): Shared secret used to sign the request. Never logged.
        encryption_method (EncryptionMethod): Sign or encrypt the archive.
        recipient (Optional[str]): GPG recipient (required for encryption).
        user_id (Optional[str]): GPG signer identity (--local-user).
        storage_domain (str): Domain of the storage service.
    """
    name: str
    extension: str
    timestamp_format: str
    backup_dir: Path
    cleanup_archive: bool
    cleanup_encrypted: bool
    bucket: str
    access_key: str
    secret_key: str
    encryption_method: EncryptionMethod
    recipient: Optional[str] = None
    user_id: Optional[str] = None
    storage_domain: str = Globals.DEFAULT_STORAGE_DOMAIN

    def __repr__(self) -> str:
        # Keep the secret out of logs and tracebacks
        return (f"BackupSettings(name={self.name!r}, extension={self.extension!r}, "
                f"backup_dir={str(self.backup_dir)!r}, bucket={self.bucket!r}, "
                f"encryption_method={self.encryption_method.value!r})")


@dataclass(frozen=True)
class ArchiveArtifact:
    path: Path
    size: int

    @classmethod
    def from_path(cls, path: Path) -> "ArchiveArtifact":
        return cls(path=path, size=path.stat().st_size)


@dataclass(frozen=True)
class EncryptedArtifact:
    """
    The encrypted (or signed) archive, i.e. the exact payload sent to the bucket.

    The size is captured once, right after gpg wrote the file. `read_bytes`
    refuses to return a payload whose length no longer matches it.
    """
    path: Path
    size: int

    @classmethod
    def from_path(cls, path: Path) -> "EncryptedArtifact":
        return cls(path=path, size=path.stat().st_size)

    @property
    def object_key(self) -> str:
        return self.path.name

    def read_bytes(self) -> bytes:
        payload = self.path.read_bytes()
        if len(payload) != self.size:
            raise ValueError(
                f"Encrypted file \"{self.path}\" changed size since it was created "
                f"({self.size} -> {len(payload)} bytes)."
            )
        return payload


@dataclass(frozen=True)
class CommandResult:
    cmd: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        return " ".join(self.cmd)


@dataclass
class UploadResult:
    success: bool
    status_code: Optional[int]
    message: str
    elapsed: float = 0.0
    bytes_sent: int = 0
