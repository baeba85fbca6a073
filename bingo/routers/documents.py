import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from bingo.config import settings
from bingo.database import get_db
from bingo.dependencies import get_current_user
from bingo.core.exceptions import DependencyError, NotFoundError, ValidationError
from bingo.core.security import generate_id
from bingo.models.user import User
from bingo.repos import document_repo
from bingo.schemas.document import DocumentResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/documents", tags=["documents"])

ALLOWED_EXTENSIONS = {".pdf", ".doc", ".docx", ".txt", ".rtf"}


def _safe_name(filename: str) -> str:
    name = Path(filename).name
    return "".join(c if c.isalnum() or c in "._-" else "_" for c in name) or "upload"


@router.get("", response_model=list[DocumentResponse])
def list_documents(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return document_repo.list_for_user(db, user.id)


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def upload_document(
    title: str = Form(..., min_length=1, max_length=200),
    file: UploadFile = File(..., description="Resume, cover letter or other document"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Upload a document. Analysis status starts as pending."""
    if not file.filename:
        raise ValidationError("File is required")
    suffix = Path(file.filename).suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        raise ValidationError("Unsupported file type")

    max_bytes = settings.max_document_upload_mb * 1024 * 1024
    # one byte past the cap is enough to know it is too large
    content = file.file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Max allowed is {settings.max_document_upload_mb}MB.",
        )
    if not content:
        raise ValidationError("File is empty")

    document_id = generate_id()
    target = Path(settings.upload_dir) / user.id / f"{document_id}-{_safe_name(file.filename)}"
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except Exception as e:
        logger.exception("Failed to store upload for user=%s: %s", user.id, e)
        raise DependencyError("Failed to upload document") from e

    try:
        document = document_repo.create(
            db,
            user.id,
            title.strip(),
            file.filename,
            str(target),
            file.content_type,
            len(content),
            document_id=document_id,
        )
    except Exception as e:
        target.unlink(missing_ok=True)
        logger.exception("Failed to record document for user=%s: %s", user.id, e)
        raise DependencyError("Failed to upload document") from e
    logger.info("Document uploaded: id=%s user=%s size=%d", document.id, user.id, len(content))
    return document


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    document = document_repo.get_for_user(db, document_id, user.id)
    if not document:
        raise NotFoundError("Document not found")
    return document


@router.delete("/{document_id}")
def delete_document(
    document_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        document = document_repo.delete(db, document_id, user.id)
    except Exception as e:
        logger.exception("Failed to delete document=%s for user=%s: %s", document_id, user.id, e)
        raise DependencyError("Failed to delete document") from e
    if not document:
        raise NotFoundError("Document not found")
    Path(document.file_url).unlink(missing_ok=True)
    logger.info("Document deleted: id=%s user=%s", document_id, user.id)
    return {"deleted": True}
