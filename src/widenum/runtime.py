# runtime.py
from __future__ import annotations

import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import TYPE_CHECKING, Any

from colorama import Fore, Style

if TYPE_CHECKING:
    from widenum.config import Settings


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False  # controls stderr diagnostics / tracebacks

    def apply(self, settings: Settings | dict[str, Any]) -> None:
        """Install a loaded profile, or a bare settings dict (tests, overrides)."""
        if isinstance(settings, dict):
            self.profile_name = "default"
            self.settings = dict(settings)
        else:
            self.profile_name = settings.name or "default"
            self.settings = dict(settings.as_dict())

        dbg = self.get("BEHAVIOUR.DEBUG", None)
        if isinstance(dbg, bool):
            self.debug = dbg

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted lookup into the profile sections, e.g. 'DISTRIBUTION.WORKERS'."""
        if not key:
            return default
        cur: Any = self.settings
        for part in key.split("."):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur


# --- Context management ---

_current_runtime: ContextVar[Runtime | None] = ContextVar("widenum_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = Runtime()
        _current_runtime.set(rt)
    return rt


def APPLY(settings: Settings | dict[str, Any]) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


def debug_print(tag: str, msg: str) -> None:
    """One '[tag] msg' line on stderr, only when the runtime debug flag is set."""
    if current().debug:
        print(f"[{tag}] {msg}", file=sys.stderr)


# ---- Dependency check --------------------------------------------------------

def ensure_runtime_deps(strict: bool = True) -> bool:
    """
    Verify the reference-check deps are available (used by `widenum verify`).
    If strict=True, prints a friendly error and returns False when missing.
    """
    required = ("sympy", "gmpy2")
    missing = [name for name in required if find_spec(name) is None]

    if not missing:
        return True

    msg = (
        f"{Fore.RED}{Style.BRIGHT}\nMissing dependencies:{Style.RESET_ALL} "
        + ", ".join(missing)
        + "\nInstall with: "
        + f"{Fore.YELLOW}pip install " + " ".join(missing) + f"{Style.RESET_ALL}"
    )
    print(msg)
    return not strict
