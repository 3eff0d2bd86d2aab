"""
Stage rendered reports on disk and hand them to the response.

The file lives in ``settings.EXPORT_TEMP_DIR`` only for as long as the
download is being streamed: it is unlinked when the response closes it.
"""
import io
import logging
import os
import time
from pathlib import Path

from django.conf import settings

logger = logging.getLogger(__name__)


def export_filename(extension, now_ms=None):
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f'time-report-{now_ms}.{extension}'


class TemporaryExportFile(io.FileIO):
    """A read handle that deletes its file once closed."""

    def close(self):
        path = self.name
        already_closed = self.closed
        super().close()
        if already_closed:
            return
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not remove export file %s", path, exc_info=True)


def stage_export(content, filename):
    """Write ``content`` to the export directory and reopen it for streaming."""
    export_dir = Path(settings.EXPORT_TEMP_DIR)
    export_dir.mkdir(parents=True, exist_ok=True)
    path = export_dir / filename
    path.write_bytes(content)
    logger.debug("Staged export %s (%s bytes)", path, len(content))
    return TemporaryExportFile(str(path), 'rb')
