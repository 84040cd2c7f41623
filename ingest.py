import logging
import os
import uuid

from werkzeug.utils import secure_filename

from evaluator import extract_text, parse_resume_text
from models import db, FileMetadata, Resume

logger = logging.getLogger(__name__)


def file_extension(filename):
    name = secure_filename(filename or '')
    return name.rsplit('.', 1)[1].lower() if '.' in name else ''


def allowed_file(filename, allowed):
    return file_extension(filename) in allowed


def store_upload(file, folder):
    """Write the upload under a generated name; returns (path, size)."""
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, f'{uuid.uuid4().hex}.{file_extension(file.filename)}')
    file.save(path)
    return path, os.path.getsize(path)


def ingest_resume(file, upload_folder):
    """Store an uploaded resume, parse it and save metadata plus record together.

    Both rows are committed in one transaction. If anything fails the stored
    file is removed again and the error propagates.
    """
    path, size = store_upload(file, upload_folder)
    logger.info('Stored upload %r at %s (%d bytes)', file.filename, path, size)

    try:
        metadata = FileMetadata(
            original_name=file.filename,
            mime_type=file.mimetype,
            path=path,
            size=size,
        )
        db.session.add(metadata)
        db.session.flush()

        fields = parse_resume_text(extract_text(path))
        resume = Resume(file_id=metadata.id, **fields)
        db.session.add(resume)
        db.session.commit()
    except Exception:
        db.session.rollback()
        if os.path.exists(path):
            os.remove(path)
        logger.error('Discarded upload %s after failed ingestion', path)
        raise

    return metadata, resume
