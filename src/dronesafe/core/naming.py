import os
import re
from pathlib import Path

# roots can be overridden through the environment
DEFAULT_RESULT_ROOT = str((Path.cwd() / "dronesafe_data" / "output").resolve())


def result_root() -> Path:
    return Path(os.getenv("DRONESAFE_RESULT_ROOT") or DEFAULT_RESULT_ROOT)


def meta_root() -> Path:
    return Path(os.getenv("DRONESAFE_META_ROOT") or str(result_root() / "meta"))


def _sanitize(text: str) -> str:
    sanitized = re.sub(r"[^0-9A-Za-z._-]+", "-", text.strip())
    sanitized = re.sub(r"-+", "-", sanitized).strip("-")
    return sanitized or "untitled"


def build_basename(filename: str, dt: str, ver: str) -> str:
    # filename – datetime – _ver
    return f"{_sanitize(filename)}-{_sanitize(dt)}_{_sanitize(ver)}"


def result_path(kind: str, prefix: str, basename: str) -> str:
    """
    Absolute output path for one artefact.
    Root: DRONESAFE_RESULT_ROOT, falling back to DEFAULT_RESULT_ROOT.
    """
    subdir_map = {"image": "images", "table": "tables", "report": "reports"}
    ext_map = {"image": "png", "table": "csv", "report": "txt"}
    if kind not in subdir_map:
        raise ValueError(f"unknown artefact kind: {kind}")

    out_dir = result_root() / subdir_map[kind]
    out_dir.mkdir(parents=True, exist_ok=True)
    return str(out_dir / f"{prefix}-{basename}.{ext_map[kind]}")


def meta_paths(dt: str, ver: str) -> dict:
    root = meta_root()
    return {
        "config_path": os.path.join(root, "configs", f"run_{_sanitize(ver)}_params.json"),
        "log_path": os.path.join(root, "logs", f"run_{_sanitize(dt)}.log"),
    }
