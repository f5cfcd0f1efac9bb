import argparse
import sys
import yaml

from pathlib import Path

from backupbuddy.log import logger
from backupbuddy.globals import Globals
from backupbuddy.archive import check_archive_format
from backupbuddy.settings import BackupSettings
from backupbuddy.security.encryption_method import EncryptionMethod

REQUIRED_FIELDS = {
	"archive": ["name", "extension", "timestamp-format", "backup-dir"],
	"bucket": ["secret", "bucket", "key"],
	"encryption": ["method"],
}

TRUE_VALUES = {"yes", "true", "on", "1"}
FALSE_VALUES = {"no", "false", "off", "0", ""}


class BackupArgumentParser(argparse.ArgumentParser):
	"""ArgumentParser printing the usage line and exiting with status 1 on bad input."""

	def error(self, message):
		self.print_usage(sys.stderr)
		print(f"{self.prog}: error: {message}", file=sys.stderr)
		sys.exit(1)


def parse_config(path_to_config):
	"""
	Parses the YAML configuration file of a backup run.

	Returns:
		dict: The raw configuration with the sections 'archive', 'bucket' and 'encryption',
			  or None if the file is missing or not valid YAML.
	"""
	try:
		with open(path_to_config) as f:
			config = yaml.safe_load(f)
	except FileNotFoundError:
		logger.error(f"Configuration file \"{path_to_config}\" not found.")
		return None
	except yaml.YAMLError as e:
		logger.error(f"Configuration file \"{path_to_config}\" is not valid YAML: {e}")
		return None

	if not isinstance(config, dict):
		logger.error(f"Configuration file \"{path_to_config}\" does not contain any sections.")
		return None

	logger.debug(f"Configuration contains the sections: {', '.join(config.keys())}.")

	return config


def _get_field(values, section, field, required=True):
	value = values.get(field)
	if value is None or str(value).strip() == "":
		if required:
			logger.error(f"Missing required field '{field}' in section '{section}'.")
		return None
	return str(value).strip()


def _get_flag(values, section, field):
	value = values.get(field, False)
	if isinstance(value, bool):
		return value

	normalized = str(value).strip().lower()
	if normalized in TRUE_VALUES:
		return True
	if normalized in FALSE_VALUES:
		return False

	logger.error(f"Invalid value '{value}' for field '{field}' in section '{section}' (expected yes or no).")
	return None


def load_settings(config):
	"""
	Validates the raw configuration and converts it into an immutable BackupSettings record.

	Every problem is reported with the offending field and section. Nothing is archived,
	encrypted or uploaded before this check has passed.

	Parameters:
		config (dict): Configuration as returned by `parse_config`.

	Returns:
		BackupSettings: The validated settings, or None if the configuration is invalid.
	"""
	sections = {}
	for section, fields in REQUIRED_FIELDS.items():
		values = config.get(section)
		if not isinstance(values, dict):
			logger.error(f"Missing section '{section}' in configuration.")
			return None

		for field in fields:
			if _get_field(values, section, field) is None:
				return None

		sections[section] = values

	archive = sections["archive"]
	bucket = sections["bucket"]
	encryption = sections["encryption"]

	# Encryption method must be one of exactly two values
	raw_method = _get_field(encryption, "encryption", "method")
	try:
		method = EncryptionMethod(raw_method)
	except ValueError:
		logger.error(
			f"Invalid value '{raw_method}' for field 'method' in section 'encryption' "
			f"(expected one of: {', '.join(m.value for m in EncryptionMethod)})."
		)
		return None

	recipient = _get_field(encryption, "encryption", "recipient", required=False)
	if method == EncryptionMethod.ENCRYPT and recipient is None:
		logger.error("Missing required field 'recipient' in section 'encryption' (required for method 'encrypt').")
		return None

	extension = _get_field(archive, "archive", "extension").lstrip(".")
	if not check_archive_format(extension):
		return None

	cleanup_archive = _get_flag(archive, "archive", "cleanup")
	cleanup_encrypted = _get_flag(encryption, "encryption", "cleanup")
	if cleanup_archive is None or cleanup_encrypted is None:
		return None

	settings = BackupSettings(
		name=_get_field(archive, "archive", "name"),
		extension=extension,
		timestamp_format=_get_field(archive, "archive", "timestamp-format"),
		backup_dir=Path(_get_field(archive, "archive", "backup-dir")).expanduser(),
		cleanup_archive=cleanup_archive,
		cleanup_encrypted=cleanup_encrypted,
		bucket=_get_field(bucket, "bucket", "bucket"),
		access_key=_get_field(bucket, "bucket", "key"),
		secret_key=_get_field(bucket, "bucket", "secret"),
		encryption_method=method,
		recipient=recipient,
		user_id=_get_field(encryption, "encryption", "user-id", required=False),
		storage_domain=_get_field(bucket, "bucket", "domain", required=False) or Globals.DEFAULT_STORAGE_DOMAIN,
	)

	logger.debug(f"Loaded {settings!r}")
	return settings


def get_backup_arguments(argv=None):
	"""
	Parses the command-line arguments of BackupBuddy.

	Exits with status 1 and a usage message if the configuration file or
	the paths to back up are missing.

	Returns:
		dict: A dictionary with the keys 'config_file', 'paths' and 'verbose'.
	"""
	parser = BackupArgumentParser(
		prog="backupbuddy",
		description="Archives files, encrypts or signs the archive with GPG and uploads it to a storage bucket.")
	parser.add_argument("config", help="Path to the configuration YAML file")
	parser.add_argument("paths", nargs="+", help="Files or directories to include in the archive")
	parser.add_argument("-v", "--verbose", action="store_true", help="Print debug output.")
	args = parser.parse_args(argv)

	return {
		"config_file": args.config,
		"paths": args.paths,
		"verbose": args.verbose}
