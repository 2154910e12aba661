import os
import tempfile
from pathlib import Path

from coa_processor.logging.logger import Log
from coa_processor.rendering.exceptions import OutputWriteError
from coa_processor.rendering.models import RenderedDocument


class OutputWriter:
    """Persists finished certificates under a single output directory."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir

    def write(self, document: RenderedDocument) -> Path:
        """Write atomically; a failed write leaves nothing behind.

        Raises:
            OutputWriteError: if the directory or file cannot be written.
        """
        target = self._output_dir / Path(document.filename).name
        tmp_path: str | None = None
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._output_dir, prefix=".coa-", suffix=".pdf.part"
            )
            with os.fdopen(fd, "wb") as handle:
                handle.write(document.content)
            os.replace(tmp_path, target)
        except OSError as exc:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise OutputWriteError(f"Failed to write {target}: {exc}") from exc
        Log.info(f"Wrote {len(document.content)} bytes to {target}")
        return target
