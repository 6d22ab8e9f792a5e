from __future__ import annotations

import timeit
import warnings
from .user_data import KEYHINT_DATA_DIR, KEYHINT_PREFERENCE_FILE
from .consts import DEFAULT_IDLE_DELAY, DEFAULT_UPDATE_INTERVAL
import json
from typing import Literal
from dataclasses import dataclass, asdict

_SCOPES = ("local", "all")
_DISPLAYS = ("status-bar", "label")

@dataclass
class Preference:
    idle_delay: float = DEFAULT_IDLE_DELAY
    update_interval: float = DEFAULT_UPDATE_INTERVAL
    scope: Literal["local", "all"] = "all"
    display: Literal["status-bar", "label"] = "status-bar"
    rich_text: bool = True

    def __post_init__(self):
        for name in ("idle_delay", "update_interval"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValueError(f"{name} must be a positive number, got {value!r}")
            setattr(self, name, float(value))
        if self.scope not in _SCOPES:
            raise ValueError(f"Invalid scope {self.scope!r}, must be one of {_SCOPES}")
        if self.display not in _DISPLAYS:
            raise ValueError(f"Invalid display {self.display!r}, must be one of {_DISPLAYS}")

    def as_repr(self) -> str:
        return "\n".join(f"{k} = {v!r}" for k, v in asdict(self).items())

    def __eq__(self, other):
        return asdict(self) == asdict(other)

_CACHED_PREFERENCE: Preference | None = None
_LAST_LOADED: float = -1

def load_preference(force: bool = True) -> Preference:
    global _CACHED_PREFERENCE, _LAST_LOADED

    now = timeit.default_timer()
    if _CACHED_PREFERENCE is not None and now - _LAST_LOADED < 0.25 and not force:
        return _CACHED_PREFERENCE
    _LAST_LOADED = now

    prepare_preference_file()
    with KEYHINT_PREFERENCE_FILE.open("r") as f:
        try:
            js = json.load(f)
        except json.JSONDecodeError:
            js = None
    if not isinstance(js, dict):
        warnings.warn("Invalid preference file, using default preference")
        out = Preference()
    else:
        kwargs = {}
        for key, value in js.items():
            if key in Preference.__annotations__:
                kwargs[key] = value
        try:
            out = Preference(**kwargs)
        except ValueError as e:
            warnings.warn(f"Invalid preference file ({e}), using default preference")
            out = Preference()
    _CACHED_PREFERENCE = out
    return out

def save_preference(**kwargs) -> Preference:
    prepare_preference_file()
    pref = asdict(load_preference())
    for k, v in kwargs.items():
        if v is not None:
            pref[k] = v
    # validate before writing
    out = Preference(**pref)
    with KEYHINT_PREFERENCE_FILE.open("w") as f:
        json.dump(asdict(out), f)
    global _CACHED_PREFERENCE
    _CACHED_PREFERENCE = out
    return out

def prepare_preference_file():
    """Create directory and file if not exists."""
    if not KEYHINT_DATA_DIR.exists():
        KEYHINT_DATA_DIR.mkdir(parents=True)
    if not KEYHINT_PREFERENCE_FILE.exists():
        with KEYHINT_PREFERENCE_FILE.open("w") as f:
            json.dump(asdict(Preference()), f)
    return None
