"""Small text-file helpers shared by the manifest, ledger and mirror readers."""
import os
import tempfile
from pathlib import Path
from typing import List, Union


def read_text_file_cleanly(path: Union[str, Path]) -> List[str]:
    """Read a text file as a list of stripped, non-blank lines (undecodable bytes replaced)."""
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return [line.strip() for line in f if line.strip()]


def strip_blank_lines(lines: List[str]) -> List[str]:
    return [line for line in lines if line.strip()]


def delete_if_exists(path: Union[str, Path]) -> bool:
    """Delete a file, returning True if it is gone afterwards."""
    path = Path(path)
    if not path.exists():
        return True
    try:
        path.unlink()
        return True
    except OSError:
        return False


def create_temp_file(prefix: str) -> Path:
    """Create an empty temp file and return its path. Raises OSError on failure."""
    temp_fd, temp_path = tempfile.mkstemp(prefix=prefix)
    os.close(temp_fd)
    return Path(temp_path)
