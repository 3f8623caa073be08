import os
import sys
import stat
import logging
import tempfile
from typing import Optional, Union

from ..exceptions import FileSystemError

logger = logging.getLogger("cwe-dictgen")


def _output_mode(output_path: str) -> int:
    """Mode of the file being replaced, or 0666 minus the umask for a new file."""
    if os.path.exists(output_path):
        return stat.S_IMODE(os.stat(output_path).st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def deliver_output(content: str, output_path: Optional[str] = None) -> None:
    """
    Writes the generated source to output_path, or to STDOUT when no path is given.

    The file is written to a temporary sibling first and moved into place,
    so an existing file is either fully replaced or left untouched.

    Raises:
        FileSystemError: If the output file cannot be written
    """
    if not output_path:
        sys.stdout.write(content)
        sys.stdout.flush()
        return

    target_dir = os.path.dirname(os.path.abspath(output_path))
    try:
        fd, temp_path = tempfile.mkstemp(dir=target_dir, prefix=".cwe_dictgen_", suffix=".tmp")
    except OSError as e:
        raise FileSystemError(f"Failed to create temporary output file in {target_dir}: {e}") from e

    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as temp_file:
            temp_file.write(content)
        # mkstemp creates the file as 0600
        os.chmod(temp_path, _output_mode(output_path))
        os.replace(temp_path, output_path)
    except OSError as e:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise FileSystemError(f"Failed to write output file {output_path}: {e}", details={"path": output_path}) from e

    logger.info(f"Wrote generated source to {output_path}")


def format_duration(duration_seconds: Optional[Union[int, float]]) -> str:
    """Formats a duration in seconds into a 'X minutes, Y seconds' string."""
    if duration_seconds is None: return "N/A"
    try:
        duration_seconds = round(float(duration_seconds))
    except (ValueError, TypeError):
        return "Invalid Duration"

    minutes, seconds = divmod(int(duration_seconds), 60)
    if minutes > 0 and seconds > 0: return f"{minutes} minutes, {seconds} seconds"
    elif minutes > 0: return f"{minutes} minutes"
    elif seconds == 1: return f"1 second"
    else: return f"{seconds} seconds"
