from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except Exception:
    import tomli as toml  # type: ignore

from widenum.errors import UserInputError
from widenum.widefloat import FLOAT_WIDTHS
from widenum.widths import WIDTHS
from widenum.workspace import ensure_workspace_seeded, workspace_dir


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [_PROFILE_] section).
    .as_dict() feeds runtime.apply().

      - name:        resolved profile name (FILE.stem if not provided in [_PROFILE_])
      - description: one-line description from [_PROFILE_] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return _profiles_dir() / f"{name}.toml"


# --- I/O -------------------------------------------------------------------


def _load_toml(path: Path) -> dict[str, object]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except Exception as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        # No traceback chaining
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None


# --- Metadata handling -----------------------------------------------------


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    meta = raw.get("_PROFILE_") or {}
    if "_PROFILE_" in raw:
        raw = {k: v for k, v in raw.items() if k != "_PROFILE_"}

    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))

    return raw, name, description


def _validate(data: dict[str, Any], source: str) -> None:
    """Reject values the numeric core cannot honour (bad widths, non-positive counts)."""
    beh = data.get("BEHAVIOUR", {}) or {}
    dist = data.get("DISTRIBUTION", {}) or {}
    div = data.get("DIVISION", {}) or {}

    width = beh.get("DEFAULT_WIDTH")
    if width is not None and width not in WIDTHS:
        raise UserInputError(f"{source}: BEHAVIOUR.DEFAULT_WIDTH={width!r} is not a supported width.")
    fwidth = dist.get("FLOAT_WIDTH")
    if fwidth is not None and fwidth not in FLOAT_WIDTHS:
        raise UserInputError(f"{source}: DISTRIBUTION.FLOAT_WIDTH={fwidth!r} is not a supported float width.")
    for section, key, val in (
        ("DISTRIBUTION", "WORKERS", dist.get("WORKERS")),
        ("DIVISION", "MAX_ITERATIONS", div.get("MAX_ITERATIONS")),
    ):
        if val is not None and (not isinstance(val, int) or isinstance(val, bool) or val < 1):
            raise UserInputError(f"{source}: {section}.{key} must be a positive integer.")


# --- Public API ------------------------------------------------------------


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """
    Return [(name, description), ...] for all profiles.
    Profiles lacking [_PROFILE_] get "(no description)".
    """
    ensure_workspace_seeded()
    items: list[tuple[str, str]] = []
    for p in _profiles_dir().glob("*.toml"):
        try:
            raw = _load_toml(p)
            _, nm, desc = _split_profile_data(raw, p.stem)
            items.append((nm, desc))
        except UserInputError:
            # Best-effort listing; fall back to filename
            items.append((p.stem, "(no description)"))
    return sorted(items, key=lambda t: t[0].lower())


def has_profile(name: str) -> bool:
    return _profile_path(name).exists()


def load_settings(name: str | None = None) -> Settings:
    """
    Load a profile by name (default 'default'), strip the [_PROFILE_] metadata,
    validate the numeric keys and return Settings(data=..., name=..., description=..., _source=path).
    """
    if not name:
        name = "default"

    ensure_workspace_seeded()
    path = _profile_path(name)
    if not path.exists():
        raise FileNotFoundError(f"Profile '{name}' not found at {path}")

    raw = _load_toml(path)
    data, resolved_name, description = _split_profile_data(raw, path.stem)
    _validate(data, path.name)

    return Settings(
        data=data,
        name=resolved_name,
        description=description,
        _source=path,
    )
