"""
Profile picture storage.

Pictures live in a local "bucket" folder under UPLOAD_FOLDER and are
served back by the /uploads/<bucket>/<filename> route.
"""
import logging
import os
import time
from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..utils.exceptions import ValidationError, StorageError

logger = logging.getLogger(__name__)

PROFILE_BUCKET = 'member-profiles'

# Allowed image extensions
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed."""
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def get_bucket_folder(bucket: str = PROFILE_BUCKET) -> str:
    """Get (and create) the folder backing a bucket."""
    folder = os.path.join(current_app.config['UPLOAD_FOLDER'], bucket)
    os.makedirs(folder, exist_ok=True)
    return folder


def get_public_url(filename: str, bucket: str = PROFILE_BUCKET) -> str:
    """Get the public URL for an uploaded file."""
    return f'/uploads/{bucket}/{filename}'


def build_filename(owner_id, original_name: str) -> str:
    """<owner>-<epoch millis>.<ext>, so re-uploads never collide."""
    ext = original_name.rsplit('.', 1)[1].lower()
    return f'{owner_id}-{int(time.time() * 1000)}.{ext}'


def upload_profile_picture(file: FileStorage, owner_id) -> str:
    """
    Store a profile picture and return its public URL.

    Raises:
        ValidationError: wrong extension or file too large
        StorageError: the file could not be written
    """
    original_name = secure_filename(file.filename or '')
    if not original_name or not allowed_file(original_name):
        raise ValidationError(
            f"Invalid file type. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
            field='profile_picture'
        )

    data = file.read()
    max_size = current_app.config['MAX_UPLOAD_BYTES']
    if len(data) > max_size:
        raise ValidationError(
            f'File too large. Maximum size: {max_size // (1024 * 1024)}MB',
            field='profile_picture'
        )

    filename = build_filename(owner_id, original_name)
    path = os.path.join(get_bucket_folder(), filename)
    try:
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        logger.error(f'Failed to store profile picture {filename}: {e}')
        raise StorageError(f'Failed to upload profile picture: {e}')

    logger.info(f'Stored profile picture {filename} ({len(data)} bytes)')
    return get_public_url(filename)
