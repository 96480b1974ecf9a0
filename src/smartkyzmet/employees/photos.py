from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..core.constants import ALLOWED_PHOTO_MIMETYPES

logger = logging.getLogger(__name__)


class PhotoStorage:
    """Saves uploaded employee photos under `upload_dir/photos`.

    Returned paths are relative to `upload_dir` and are what gets stored in
    `employees.photo`.
    """

    def __init__(self, upload_dir: str | Path):
        self._upload_dir = Path(upload_dir)

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def save(self, file: Optional[FileStorage]) -> Optional[str]:
        if file is None or not file.filename:
            return None
        if file.mimetype not in ALLOWED_PHOTO_MIMETYPES:
            logger.info("Rejected photo upload with mimetype %s", file.mimetype)
            return None

        target_dir = self._upload_dir / "photos"
        target_dir.mkdir(parents=True, exist_ok=True)

        file_name = f"photo_{uuid.uuid4().hex}_{secure_filename(file.filename)}"
        file.save(str(target_dir / file_name))
        return f"photos/{file_name}"
