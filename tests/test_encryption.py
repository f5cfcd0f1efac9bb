import dataclasses

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from backupbuddy.archive import build_archive_path, assemble_tar_cmd, create_archive
from backupbuddy.security.encryption import assemble_gpg_cmd, encrypt_archive, encrypted_path_for
from backupbuddy.security.encryption_method import EncryptionMethod
from backupbuddy.settings import ArchiveArtifact, CommandResult


def test_build_archive_path(settings):
    path = build_archive_path(settings, datetime(2026, 10, 18, 3, 0, 0))
    assert path == settings.backup_dir / "nightly-20261018-030000.tar.gz"


def test_assemble_tar_cmd(settings, tmp_path):
    data = tmp_path / "data"
    notes = tmp_path / "docs" / "notes.txt"
    archive_path = tmp_path / "out.tar.gz"

    cmd = assemble_tar_cmd(settings, [data, notes], archive_path)

    assert cmd == [
        "tar", "-czf", str(archive_path.resolve()),
        "-C", str(tmp_path.resolve()), "data",
        "-C", str((tmp_path / "docs").resolve()), "notes.txt",
    ]


def test_assemble_tar_cmd_compression_follows_extension(settings, tmp_path):
    settings = dataclasses.replace(settings, extension="tar.bz2")
    assert assemble_tar_cmd(settings, [tmp_path], tmp_path / "a.tar.bz2")[1] == "-cjf"


def test_gpg_encrypt_cmd(settings):
    cmd = assemble_gpg_cmd(settings, Path("/b/a.tar.gz"), Path("/b/a.tar.gz.gpg"))

    assert cmd == ["gpg", "--batch", "--yes", "--output", "/b/a.tar.gz.gpg",
                   "--encrypt", "--recipient", "backup@example.org", "/b/a.tar.gz"]


def test_gpg_encrypt_and_sign_cmd(settings):
    settings = dataclasses.replace(settings, user_id="ops@example.org")

    cmd = assemble_gpg_cmd(settings, Path("/b/a.tar.gz"), Path("/b/a.tar.gz.gpg"))

    assert cmd == ["gpg", "--batch", "--yes", "--output", "/b/a.tar.gz.gpg",
                   "--local-user", "ops@example.org",
                   "--encrypt", "--recipient", "backup@example.org", "--sign", "/b/a.tar.gz"]


def test_gpg_sign_cmd(settings):
    settings = dataclasses.replace(settings, encryption_method=EncryptionMethod.SIGN, recipient=None)

    cmd = assemble_gpg_cmd(settings, Path("/b/a.tar.gz"), Path("/b/a.tar.gz.gpg"))

    assert cmd == ["gpg", "--batch", "--yes", "--output", "/b/a.tar.gz.gpg", "--sign", "/b/a.tar.gz"]


def test_encrypted_path_keeps_archive_name():
    assert encrypted_path_for(Path("/b/nightly.tar.gz")) == Path("/b/nightly.tar.gz.gpg")


def test_create_archive_reports_tar_failure(settings, tmp_path, caplog):
    failed = CommandResult(cmd=["tar", "-czf", "x"], returncode=2, stderr="tar: data: Cannot stat")

    with patch("backupbuddy.archive.run_command", return_value=failed):
        archive = create_archive(settings, [tmp_path], settings.backup_dir / "x.tar.gz")

    assert archive is None
    assert "exit code 2" in caplog.text
    assert "Cannot stat" in caplog.text


def test_encrypt_archive_reports_gpg_failure(settings, tmp_path, caplog):
    archive_path = tmp_path / "nightly.tar.gz"
    archive_path.write_bytes(b"archive")
    failed = CommandResult(cmd=["gpg"], returncode=2, stderr="gpg: backup@example.org: skipped: No public key")

    with patch("backupbuddy.security.encryption.run_command", return_value=failed):
        encrypted = encrypt_archive(settings, ArchiveArtifact.from_path(archive_path))

    assert encrypted is None
    assert "exit code 2" in caplog.text
    assert "No public key" in caplog.text


def test_encrypt_archive_returns_artifact(settings, tmp_path):
    archive_path = tmp_path / "nightly.tar.gz"
    archive_path.write_bytes(b"archive")

    def fake_gpg(cmd):
        Path(cmd[cmd.index("--output") + 1]).write_bytes(b"ciphertext")
        return CommandResult(cmd=cmd, returncode=0)

    with patch("backupbuddy.security.encryption.run_command", side_effect=fake_gpg):
        encrypted = encrypt_archive(settings, ArchiveArtifact.from_path(archive_path))

    assert encrypted.path == tmp_path / "nightly.tar.gz.gpg"
    assert encrypted.size == len(b"ciphertext")
    assert encrypted.object_key == "nightly.tar.gz.gpg"
