"""Atomic filesystem operations for safe file writes and YAML/JSON handling.

Provides:
    - Atomic writes: tmp file -> fsync -> rename (prevents partial files)
    - In-memory image encoding (whole PNG buffer before any disk I/O)
    - YAML load/save
    - Strict JSON text parsing
    - Directory creation with exist_ok semantics

Every export is built as one complete byte buffer and handed to
atomic_write_bytes(), so a failed export never leaves a truncated file
behind.

Usage:
    from eightsix.utils import fs
    fs.atomic_write_bytes(out_dir / "logo.svg", markup.encode("utf-8"))
    fs.atomic_write_bytes(out_dir / "logo.png", fs.encode_image(rgba))
    fs.atomic_yaml_dump(config_dict, "pattern.yaml")

Note: Module named `fs.py` to avoid shadowing stdlib `io`.
"""

import io
import json
import os
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import yaml
from PIL import Image


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp -> fsync -> rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    RuntimeError
        If the write or rename fails; the temporary file is removed first

    Notes
    -----
    Uses same directory for tmp file to ensure atomic rename on same filesystem.
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        # Atomic rename (overwrites existing file on POSIX)
        tmp_path.replace(path)
    except Exception as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def encode_image(img: Union[np.ndarray, Image.Image], fmt: str = "PNG") -> bytes:
    """Encode an image into an in-memory byte buffer.

    Parameters
    ----------
    img : Union[np.ndarray, Image.Image]
        (H, W, 4) or (H, W, 3) uint8 array, or a PIL image
    fmt : str
        PIL format name, default "PNG"

    Returns
    -------
    bytes
        Complete encoded file contents
    """
    if isinstance(img, np.ndarray):
        if img.dtype != np.uint8:
            img = np.clip(img, 0, 255).astype(np.uint8)
        img = Image.fromarray(img)

    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def atomic_yaml_dump(obj: Any, path: Union[str, Path]) -> None:
    """Save object as YAML atomically.

    Notes
    -----
    Uses PyYAML safe_dump; key order is preserved.
    """
    yaml_str = yaml.safe_dump(
        obj,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True
    )
    atomic_write_bytes(path, yaml_str.encode('utf-8'))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON literal: {name}")


def load_json_text(text: str) -> Any:
    """Parse JSON text strictly.

    Unlike json.loads, the non-standard literals NaN, Infinity and
    -Infinity are rejected.

    Raises
    ------
    ValueError
        If the text is not valid JSON (json.JSONDecodeError is a subclass)
    """
    return json.loads(text, parse_constant=_reject_constant)
