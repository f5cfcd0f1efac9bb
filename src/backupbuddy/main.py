import sys

from backupbuddy.log import logger, set_verbose
from backupbuddy.parser import get_backup_arguments, parse_config, load_settings
from backupbuddy.backup import run_backup
from backupbuddy.utils import check_system_dependencies, print_welcome_banner


def init(argv=None):
	"""
	Initializes BackupBuddy by parsing CLI arguments, loading and validating
	the configuration and performing system checks.

	Returns:
		tuple: (settings, args) if successful, otherwise (None, None)
	"""
	# Parse command-line arguments (exits with status 1 on usage errors)
	args = get_backup_arguments(argv)
	set_verbose(args["verbose"])

	print_welcome_banner(args)

	# Parse configuration
	config = parse_config(args["config_file"])
	if config is None:
		return None, None

	settings = load_settings(config)
	if settings is None:
		return None, None

	# Check system dependencies
	if not check_system_dependencies():
		return None, None

	return settings, args


def main(argv=None):

	# 1. Init BackupBuddy
	settings, args = init(argv)
	if settings is None or args is None:
		return 1

	# 2. Archive, encrypt and upload
	if not run_backup(settings, args["paths"]):
		logger.debug("Backup aborted.")
		return 1

	return 0


if __name__ == "__main__":
	sys.exit(main())
