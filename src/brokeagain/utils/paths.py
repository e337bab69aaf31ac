"""Application data directory resolution."""
import os
from pathlib import Path


def app_data_dir() -> Path:
    """Return (and create) the per-user data directory."""
    override = os.getenv("BROKEAGAIN_HOME")
    if override:
        base = Path(override)
    elif os.getenv("LOCALAPPDATA"):
        base = Path(os.getenv("LOCALAPPDATA")) / "BrokeAgain"
    else:
        base = Path.home() / ".local" / "share" / "BrokeAgain"
    base.mkdir(parents=True, exist_ok=True)
    return base
