from __future__ import annotations

from pathlib import Path
from platformdirs import user_data_dir

KEYHINT_DATA_DIR = Path(user_data_dir("qt-keyhint"))
KEYHINT_PREFERENCE_FILE = KEYHINT_DATA_DIR / "preferences.json"
