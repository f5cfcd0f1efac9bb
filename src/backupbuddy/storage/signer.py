""" Request signing for the bucket's HMAC-SHA1 ("AWS <key>:<signature>") authentication """

import base64
import hashlib
import hmac

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional
from urllib.parse import quote


def http_date(now: Optional[datetime] = None) -> str:
    """RFC 1123 date in UTC, e.g. 'Tue, 27 Mar 2007 21:15:45 +0000'"""
    now = now or datetime.now(timezone.utc)
    return format_datetime(now.astimezone(timezone.utc).replace(microsecond=0))


def quote_key(key: str) -> str:
    """URL-encodes the object key exactly as it appears in the request path"""
    return quote(key, safe="/")


def resource_path(bucket: str, key: str) -> str:
    return f"/{bucket}/{quote_key(key)}"


def string_to_sign(method: str, bucket: str, key: str, date: str) -> str:
    """
    Create the string to sign.

    Format:
    HTTPVerb\n
    Content-MD5\n      (empty)
    Content-Type\n     (empty)
    Date\n
    /bucket/key
    """
    content_md5 = ""
    content_type = ""
    return f"{method}\n{content_md5}\n{content_type}\n{date}\n{resource_path(bucket, key)}"


def sign(secret_key: str, message: str) -> str:
    """HMAC-SHA1 of the message keyed with the secret, base64-encoded"""
    digest = hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def authorization_header(access_key: str, signature: str) -> str:
    return f"AWS {access_key}:{signature}"


def sign_request(method: str, bucket: str, key: str, date: str, access_key: str, secret_key: str) -> str:
    """Returns the Authorization header value for the given request"""
    signature = sign(secret_key, string_to_sign(method, bucket, key, date))
    return authorization_header(access_key, signature)


@dataclass(frozen=True)
class SignedRequest:
    """A signed PUT for one upload attempt; never reused."""
    method: str
    host: str
    path: str
    date: str
    authorization: str
    content_length: int

    @classmethod
    def build(cls, bucket: str, key: str, domain: str, access_key: str, secret_key: str,
              content_length: int, now: Optional[datetime] = None, method: str = "PUT") -> "SignedRequest":
        date = http_date(now)
        return cls(
            method=method,
            host=f"{bucket}.{domain}",
            path=f"/{quote_key(key)}",
            date=date,
            authorization=sign_request(method, bucket, key, date, access_key, secret_key),
            content_length=content_length,
        )
