from sqlalchemy.orm import Session

from bingo.models.document import Document, ANALYZE_PENDING
from bingo.core.security import generate_id


def create(
    db: Session,
    user_id: str,
    title: str,
    file_name: str,
    file_url: str,
    file_type: str | None,
    file_size: int | None,
    document_id: str | None = None,
) -> Document:
    document = Document(
        id=document_id or generate_id(),
        user_id=user_id,
        title=title,
        file_name=file_name,
        file_url=file_url,
        file_type=file_type,
        file_size=file_size,
        analyze_status=ANALYZE_PENDING,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document


def get_by_id(db: Session, document_id: str) -> Document | None:
    return db.query(Document).filter(Document.id == document_id).first()


def get_for_user(db: Session, document_id: str, user_id: str) -> Document | None:
    return (
        db.query(Document)
        .filter(Document.id == document_id, Document.user_id == user_id)
        .first()
    )


def list_for_user(db: Session, user_id: str) -> list[Document]:
    return (
        db.query(Document)
        .filter(Document.user_id == user_id)
        .order_by(Document.created_at.desc())
        .all()
    )


def delete(db: Session, document_id: str, user_id: str) -> Document | None:
    """Delete an owned document. Returns the deleted row so the caller can remove the file."""
    document = get_for_user(db, document_id, user_id)
    if not document:
        return None
    db.delete(document)
    db.commit()
    return document
