"""
Uploaded file helpers.
"""

import base64


def encode_base64(content: bytes) -> str:
    """Encode raw file bytes as base64 text for storage."""
    return base64.b64encode(content).decode("ascii")


async def upload_to_base64(upload) -> str:
    """
    Read an uploaded file fully and return its base64 text.

    Args:
        upload: Anything with an async `read()` (e.g. FastAPI `UploadFile`).
    """
    try:
        content = await upload.read()
    finally:
        await upload.close()
    return encode_base64(content)
