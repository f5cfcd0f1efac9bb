import time

from pathlib import Path

from backupbuddy.log import logger
from backupbuddy.archive import build_archive_path, create_archive
from backupbuddy.security.encryption import encrypt_archive
from backupbuddy.storage.uploader import upload_artifact
from backupbuddy.utils import clean_up, format_size


def check_input_paths(paths):
	"""
	Verify that every path to archive exists.

	Returns:
		list[Path]: The paths as Path objects, or None if one of them is missing.
	"""
	checked = []
	for raw_path in paths:
		path = Path(raw_path).expanduser()
		if not path.exists():
			logger.error(f"Path to back up does not exist: {path}")
			return None
		checked.append(path)
	return checked


def run_backup(settings, paths, transport=None):
	"""
	Archives the given paths, encrypts or signs the archive and uploads it to the bucket.

	The steps run strictly in order and the first failing step ends the run;
	nothing is retried.

	Parameters:
		settings (BackupSettings): Validated settings of this run.
		paths (list): Files and directories to back up.
		transport (httpx.BaseTransport, optional): Transport override for the upload.

	Returns:
		bool: True if the encrypted archive was uploaded.
	"""
	start = time.monotonic()

	input_paths = check_input_paths(paths)
	if input_paths is None:
		return False

	# 1. Archive
	archive_path = build_archive_path(settings)
	logger.info(f"Creating archive \"{archive_path}\" from {len(input_paths)} path(s).")

	archive = create_archive(settings, input_paths, archive_path)
	if archive is None:
		return False

	logger.info(f"Archive created ({format_size(archive.size)}).")

	# 2. Encrypt or sign
	encrypted = encrypt_archive(settings, archive)
	if encrypted is None:
		return False

	logger.info(f"Archive {settings.encryption_method.value}ed: \"{encrypted.path}\" ({format_size(encrypted.size)}).")

	# 3. Upload
	logger.info(f"Uploading \"{encrypted.object_key}\" to bucket \"{settings.bucket}\".")
	result = upload_artifact(settings, encrypted, transport=transport)

	if not result.success:
		status = f" (HTTP {result.status_code})" if result.status_code is not None else ""
		print(f"Upload of \"{encrypted.object_key}\" failed{status}:")
		print(result.message)
		return False

	# 4. Clean up
	clean_up(settings, archive, encrypted)

	elapsed = time.monotonic() - start
	print(f"Upload of \"{encrypted.object_key}\" completed in {elapsed:.2f} s "
		  f"({result.bytes_sent} bytes transmitted).")
	return True
