import time
import httpx

from datetime import datetime
from typing import Optional

from backupbuddy.log import logger
from backupbuddy.globals import Globals
from backupbuddy.settings import BackupSettings, EncryptedArtifact, UploadResult
from backupbuddy.storage.signer import SignedRequest, quote_key


def object_url(bucket: str, key: str, domain: str = Globals.DEFAULT_STORAGE_DOMAIN) -> str:
    return f"http://{bucket}.{domain}/{quote_key(key)}"


def build_headers(request: SignedRequest) -> dict:
    return {
        "Date": request.date,
        "Content-Length": str(request.content_length),
        "Authorization": request.authorization,
    }


def format_header_block(headers: dict) -> str:
    """
    Renders headers the way they go on the wire: one CRLF-terminated line per header,
    the block closed by an empty line. The signature is masked.
    """
    lines = []
    for name, value in headers.items():
        if name.lower() == "authorization":
            value = value.split(":", 1)[0] + ":****"
        lines.append(f"{name}: {value}\r\n")
    return "".join(lines) + "\r\n"


def classify_response(response: httpx.Response) -> UploadResult:
    """
    Any 2xx is a successful upload. This includes 202 Accepted with an empty body,
    which is how the storage service usually acknowledges a PUT.

    Everything else is a failure and the raw response body is handed back unmodified.
    """
    if response.is_success:
        if not response.content:
            logger.debug(f"Upload acknowledged with {response.status_code} and an empty body.")
        return UploadResult(success=True, status_code=response.status_code, message=response.text)

    return UploadResult(success=False, status_code=response.status_code, message=response.text)


def upload_artifact(settings: BackupSettings, artifact: EncryptedArtifact,
                    now: Optional[datetime] = None, transport: Optional[httpx.BaseTransport] = None) -> UploadResult:
    """
    Uploads the encrypted file with a single signed PUT.

    No retries and no redirects; the request is bounded by `Globals.UPLOAD_TIMEOUT`.

    Parameters:
        settings (BackupSettings): Provides bucket, domain and credentials.
        artifact (EncryptedArtifact): Payload; its file name is the object key.
        now (datetime, optional): Time used for the Date header (defaults to the current time).
        transport (httpx.BaseTransport, optional): Transport override for the HTTP client.

    Returns:
        UploadResult: Outcome, including the raw response or error text on failure.
    """
    try:
        payload = artifact.read_bytes()
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read \"{artifact.path}\" for upload: {e}")
        return UploadResult(success=False, status_code=None, message=str(e))

    request = SignedRequest.build(
        bucket=settings.bucket,
        key=artifact.object_key,
        domain=settings.storage_domain,
        access_key=settings.access_key,
        secret_key=settings.secret_key,
        content_length=len(payload),
        now=now,
    )
    headers = build_headers(request)
    url = object_url(settings.bucket, artifact.object_key, settings.storage_domain)

    logger.debug(f"{request.method} {url}\n{format_header_block(headers)}")

    start = time.monotonic()
    try:
        with httpx.Client(timeout=Globals.UPLOAD_TIMEOUT, transport=transport, follow_redirects=False) as client:
            response = client.request(request.method, url, headers=headers, content=payload)
    except httpx.HTTPError as e:
        return UploadResult(success=False, status_code=None, message=str(e) or e.__class__.__name__,
                            elapsed=time.monotonic() - start)

    result = classify_response(response)
    result.elapsed = time.monotonic() - start
    if result.success:
        result.bytes_sent = len(payload)

    return result
