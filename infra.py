# infra.py
import os
import time
import logging

logger = logging.getLogger(__name__)


# ---------- stale temp-upload sweep (files leaked by a crash mid-request) ----------
def purge_stale_uploads(upload_dir: str, max_age_seconds: int = 3600) -> int:
    """
    Delete files under `upload_dir` older than `max_age_seconds` by mtime.
    Request handlers delete their own temp file; this only catches leftovers.
    """
    removed = 0
    if not os.path.isdir(upload_dir):
        return removed

    cutoff = time.time() - max_age_seconds
    for root, _dirs, files in os.walk(upload_dir):
        for name in files:
            path = os.path.join(root, name)
            try:
                if os.path.getmtime(path) < cutoff:
                    os.remove(path)
                    removed += 1
            except OSError as e:
                logger.warning("Could not purge %s: %s", path, e)

    if removed:
        logger.info("Purged %d stale upload(s) from %s", removed, upload_dir)
    return removed
