"""
File Upload Utility - validate and buffer a single uploaded file.

Supported formats:
- Documents: .doc, .docx, .rtf, .pdf
- Images: .png, .jpg, .jpeg

Max file size: 2MB (MAX_UPLOAD_SIZE_MB). The file is read fully into memory
and never written to disk; storage_service forwards the bytes.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile

from jobboard.core.config import get_settings
from jobboard.core.errors import BadRequestError

settings = get_settings()

ALLOWED_TYPES = {
    ".doc": {"application/msword"},
    ".docx": {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"},
    ".rtf": {"application/rtf", "text/rtf"},
    ".pdf": {"application/pdf"},
    ".png": {"image/png"},
    ".jpg": {"image/jpeg"},
    ".jpeg": {"image/jpeg"},
}


@dataclass
class BufferedUpload:
    """An accepted upload held in memory."""
    filename: str
    content_type: str
    content: bytes

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_upload(file: Optional[UploadFile]) -> Optional[BufferedUpload]:
    """
    Validate and buffer an optional upload.

    Returns None when no file was sent. Raises BadRequest when the
    extension/MIME pair is not allowed or the file exceeds the size ceiling.
    """
    if file is None or not file.filename:
        return None

    ext = get_file_extension(file.filename)
    content_type = (file.content_type or "").lower()
    allowed_mimes = ALLOWED_TYPES.get(ext)
    if not allowed_mimes or content_type not in allowed_mimes:
        raise BadRequestError(
            "Unsupported file type. Only doc, docx, rtf, pdf, png, jpg, jpeg files are allowed."
        )

    # One byte past the limit is enough to detect an oversize file
    content = await file.read(settings.max_upload_size_bytes + 1)
    if len(content) > settings.max_upload_size_bytes:
        raise BadRequestError(
            f"File too large. Maximum size: {settings.max_upload_size_mb}MB"
        )

    return BufferedUpload(
        filename=file.filename,
        content_type=content_type,
        content=content,
    )
