# tests/test_cli.py

import pytest

from unittest.mock import patch
from backupbuddy.parser import get_backup_arguments


@patch("sys.argv", ["prog", "config.yaml", "/etc/hosts", "/var/www"])
def test_minimal_required_arguments():
    args = get_backup_arguments()
    assert args.get("config_file") == "config.yaml"
    assert args.get("paths") == ["/etc/hosts", "/var/www"]
    assert args.get("verbose") == False


@patch("sys.argv", ["prog", "-v", "config.yaml", "/etc/hosts"])
def test_verbose_flag():
    args = get_backup_arguments()
    assert args.get("verbose") == True
    assert args.get("paths") == ["/etc/hosts"]


@pytest.mark.parametrize("argv", [[], ["config.yaml"]])
def test_missing_arguments_print_usage_and_exit_1(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        get_backup_arguments(argv)

    assert exc.value.code == 1
    assert "usage: backupbuddy" in capsys.readouterr().err
