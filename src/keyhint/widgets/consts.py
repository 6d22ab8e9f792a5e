from __future__ import annotations

class ColorPreset:
    HINT = "#808080"
