from enum import Enum


class EncryptionMethod(Enum):
    SIGN = "sign"
    ENCRYPT = "encrypt"
