"""
Temporary storage for uploaded videos.

Uploads live in a per-request directory under $DEPTHJUDGE_TMP_DIR (default
/tmp/depthjudge-uploads) and are removed once the analysis finishes.
"""

from __future__ import annotations

import os
import shutil
import uuid
from pathlib import Path
from typing import Tuple

from fastapi import UploadFile

DEFAULT_TMP_BASE = Path(os.getenv("DEPTHJUDGE_TMP_DIR", "/tmp/depthjudge-uploads"))
CHUNK_SIZE = 1024 * 1024  # 1 MiB


async def persist_upload(upload: UploadFile, base: Path = DEFAULT_TMP_BASE) -> Tuple[Path, Path]:
    """
    Stream an uploaded video into a fresh job directory.

    Returns:
        job_dir: directory owning the upload.
        path: the persisted video file.
    """
    base.mkdir(parents=True, exist_ok=True)
    job_dir = base / uuid.uuid4().hex
    job_dir.mkdir(parents=True, exist_ok=False)

    suffix = Path(upload.filename or "").suffix or ".bin"
    dest = job_dir / f"video{suffix}"
    try:
        with dest.open("wb") as fh:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                fh.write(chunk)
    except BaseException:
        # Cancellation lands here too.
        cleanup_job_dir(job_dir)
        raise
    finally:
        await upload.close()
    return job_dir, dest


def cleanup_job_dir(job_dir: Path) -> None:
    if job_dir.exists():
        shutil.rmtree(job_dir, ignore_errors=True)
