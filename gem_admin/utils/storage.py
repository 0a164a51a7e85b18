import os
import uuid
from typing import Optional, Tuple
from fastapi import UploadFile

from gem_admin.config import get_settings

KIND_LABELS = {
    "image": "Please select an image file (PNG, JPG, GIF).",
    "video": "Please select a video file (MP4, MOV, AVI, etc.).",
}


class UploadRejected(ValueError):
    pass


def _pick_ext_from_content_type(ct: Optional[str]) -> str:
    mapping = {
        "image/jpeg": ".jpg",
        "image/png": ".png",
        "image/gif": ".gif",
        "image/webp": ".webp",
        "video/mp4": ".mp4",
        "video/quicktime": ".mov",
        "video/webm": ".webm",
        "video/x-msvideo": ".avi",
    }
    return mapping.get((ct or "").split(";")[0].strip(), ".bin")


def read_upload(upload_file: UploadFile, kind: str = "image", max_bytes: Optional[int] = None) -> Tuple[str, bytes, str]:
    """Check an incoming file and return (filename, content, content_type) ready to forward.

    Only ``image/*`` or ``video/*`` content types are accepted, up to
    MAX_UPLOAD_BYTES.
    """
    if not upload_file or not upload_file.filename:
        raise UploadRejected("No file provided")
    content_type = (upload_file.content_type or "").lower()
    if not content_type.startswith(f"{kind}/"):
        raise UploadRejected(KIND_LABELS.get(kind, "Unsupported file type"))
    limit = max_bytes if max_bytes is not None else get_settings().MAX_UPLOAD_BYTES
    # One byte past the limit is enough to reject; the rest is never buffered
    content = upload_file.file.read(limit + 1)
    if len(content) > limit:
        raise UploadRejected(f"Please select a {kind} smaller than {format_file_size(limit)}.")
    ext = os.path.splitext(upload_file.filename)[1].lower() or _pick_ext_from_content_type(content_type)
    filename = f"{uuid.uuid4().hex}{ext}"
    return filename, content, content_type


def format_file_size(size: Optional[int]) -> str:
    if not size:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"
