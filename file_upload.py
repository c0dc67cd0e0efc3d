import logging
import mimetypes
from typing import Optional, Sequence
from pydantic import BaseModel

from exceptions import InvalidUpload

logger = logging.getLogger(__name__)


class UploadedFile(BaseModel):
    name: str
    size: int  # bytes
    content_type: Optional[str] = None
    path: Optional[str] = None  # local copy of the document, when there is one

    @property
    def extension(self) -> str:
        return self.name.rsplit('.', 1)[-1].lower() if '.' in self.name else ''

    @property
    def size_mb(self) -> float:
        return self.size / 1024 / 1024


def is_accepted_type(upload: UploadedFile, accepted_types: Sequence[str]) -> bool:
    content_type = upload.content_type or mimetypes.guess_type(upload.name)[0] or ''
    extension = f".{upload.extension}" if upload.extension else None
    for accepted in accepted_types:
        accepted = accepted.strip().lower()
        if content_type and content_type.lower() == accepted:
            return True
        if extension and extension == accepted:
            return True
    return False


def validate_upload(upload: UploadedFile, accepted_types: Sequence[str], max_size_mb: float) -> UploadedFile:
    """Check a document against the accepted types and size limit"""
    if not is_accepted_type(upload, accepted_types):
        logger.warning(f"Rejected upload {upload.name}: unsupported type")
        raise InvalidUpload(f"Invalid file type. Please upload {','.join(accepted_types)} files.")

    if upload.size > max_size_mb * 1024 * 1024:
        logger.warning(f"Rejected upload {upload.name}: {upload.size_mb:.2f} MB")
        raise InvalidUpload(f"File size exceeds the maximum limit of {max_size_mb:g}MB.")

    return upload
