#!/usr/bin/env python3

"""
main.py

Archives files and directories, encrypts or signs the archive and uploads it to a
storage bucket with a signed HTTP PUT. Utilizes tar and gpg for archiving and encryption.

Usage:    main.py CONFIG PATH [PATH ...]
"""

import sys

from backupbuddy.main import main

if __name__ == "__main__":
    sys.exit(main())
