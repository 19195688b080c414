"""
Utilities for placing uploaded and derived artifacts on disk.

Uploads land in the incoming directory as ``{millis}_{token}_{name}``;
encoded outputs land in the derived directory as
``{stem}_compressed_{percentage}%.avif``.
"""
import os
import time
import uuid
import logging
import tempfile
from pathlib import Path
from typing import Optional, Union

from avifpress.errors import FilesystemError

# Set up logging
logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

DEFAULT_UPLOAD_NAME = "upload"


def ensure_dir(name: PathLike) -> Path:
    """
    Resolve a working directory and create it if it is missing.

    Relative names are resolved against the current working directory.

    Args:
        name: Directory name or path

    Returns:
        Absolute path to the existing directory

    Raises:
        FilesystemError: If the directory cannot be created
    """
    path = Path(name)
    if not path.is_absolute():
        path = Path.cwd() / path

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot create directory {path}: {e}") from e

    return path


def sanitize_filename(original_name: Optional[str]) -> str:
    """Strip any directory components from a client-supplied filename."""
    name = (original_name or "").replace("\\", "/").split("/")[-1].strip()
    if name in ("", ".", ".."):
        return DEFAULT_UPLOAD_NAME
    return name


def incoming_filename(original_name: Optional[str]) -> str:
    """Build a unique on-disk name for an upload arriving now."""
    millis = int(time.time() * 1000)
    token = uuid.uuid4().hex[:8]
    return f"{millis}_{token}_{sanitize_filename(original_name)}"


def save_incoming(incoming_dir: PathLike, original_name: Optional[str], content: bytes) -> Path:
    """
    Persist an uploaded blob in the incoming directory.

    Args:
        incoming_dir: Directory for raw uploads (must already exist)
        original_name: Filename supplied by the client
        content: Uploaded bytes

    Returns:
        Path of the written file

    Raises:
        FilesystemError: If the file cannot be written
    """
    path = Path(incoming_dir) / incoming_filename(original_name)
    try:
        with open(path, "wb") as f:
            f.write(content)
    except OSError as e:
        raise FilesystemError(f"Cannot write upload {path}: {e}") from e

    logger.debug(f"Saved upload {original_name!r} ({len(content)} bytes) to {path}")
    return path


def format_percentage(quality_percentage: float) -> str:
    """Render a percentage without a trailing ``.0`` for whole numbers."""
    if float(quality_percentage).is_integer():
        return str(int(quality_percentage))
    return str(quality_percentage)


def resolve_derived_path(
    source_path: PathLike,
    quality_percentage: float,
    explicit_override: Optional[PathLike] = None,
    derived_dir: PathLike = "compressed"
) -> Path:
    """
    Work out where the AVIF output for a source file goes.

    No filesystem access happens here; the same arguments always give the
    same path.

    Args:
        source_path: Path of the uploaded source image
        quality_percentage: Requested compression percentage
        explicit_override: Caller-supplied output path, returned verbatim
        derived_dir: Directory for derived artifacts

    Returns:
        Output path for the encoded image
    """
    if explicit_override:
        return Path(explicit_override)

    stem = Path(source_path).stem
    return Path(derived_dir) / f"{stem}_compressed_{format_percentage(quality_percentage)}%.avif"


def write_derived(output_path: PathLike, data: bytes) -> Path:
    """
    Atomically write encoded bytes to their final location.

    The bytes go to a temporary file in the same directory first and are
    then renamed over ``output_path``, so readers never see a partial file.

    Raises:
        FilesystemError: If the file cannot be written
    """
    output_path = Path(output_path)
    try:
        fd, temp_path = tempfile.mkstemp(
            dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".part"
        )
    except OSError as e:
        raise FilesystemError(f"Cannot write output {output_path}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(temp_path, output_path)
    except OSError as e:
        try:
            os.remove(temp_path)
        except OSError as cleanup_error:
            logger.warning(f"Could not remove partial output {temp_path}: {cleanup_error}")
        raise FilesystemError(f"Cannot write output {output_path}: {e}") from e

    return output_path
