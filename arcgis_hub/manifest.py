import json
from pathlib import Path
from typing import Any, Dict

MANIFEST_PATH = Path(__file__).resolve().parent / "manifest.json"


def load_manifest() -> Dict[str, Any]:
    """Static discovery document describing the available actions."""
    with MANIFEST_PATH.open("r", encoding="utf-8") as fh:
        return json.load(fh)
