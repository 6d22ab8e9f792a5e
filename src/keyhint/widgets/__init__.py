from .hint_label import QHintLabel
from .preference_dialog import QPreferenceDialog

__all__ = [
    "QHintLabel",
    "QPreferenceDialog",
]
