class Globals:
    CIPHERTEXT_ENDING = ".gpg"
    DEFAULT_STORAGE_DOMAIN = "s3.amazonaws.com"
    UPLOAD_TIMEOUT = 5.0  # seconds (5000 ms)
    REQUIRED_SYSTEM_BINS = ["tar", "gpg"]

    # Extension -> tar create flags
    ARCHIVE_FORMATS = {
        "tar": "-cf",
        "tar.gz": "-czf",
        "tgz": "-czf",
        "tar.bz2": "-cjf",
        "tar.xz": "-cJf",
    }
    NOT_IMPLEMENTED_FORMATS = ["zip", "7z"]
