"""Composer configuration.

Stored in ``~/.proposalkit/config.json`` for CLI use; embedders usually
construct :class:`ComposerConfig` directly.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from proposalkit.authority import RESET_MODES
from proposalkit.instructions import AVAILABLE_AFTER_PROGRAM_GOVERNANCE

__all__ = ["ComposerConfig", "DEFAULT_BASE_DIR", "load_config", "save_config"]

DEFAULT_BASE_DIR = Path.home() / ".proposalkit"


@dataclass
class ComposerConfig:
    """Configuration for a proposal composer."""

    authority_reset_mode: str = "identity"
    program_governance_allow_list: frozenset[str] = field(
        default_factory=lambda: frozenset(AVAILABLE_AFTER_PROGRAM_GOVERNANCE)
    )
    require_title: bool = True
    symbol: str = ""
    cluster: str = ""
    can_choose_who_vote: bool = False

    def __post_init__(self) -> None:
        if self.authority_reset_mode not in RESET_MODES:
            raise ValueError(
                f"authority_reset_mode must be one of {RESET_MODES}, "
                f"got {self.authority_reset_mode!r}"
            )
        self.program_governance_allow_list = frozenset(
            str(t).strip().lower() for t in self.program_governance_allow_list
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "authority_reset_mode": self.authority_reset_mode,
            "program_governance_allow_list": sorted(self.program_governance_allow_list),
            "require_title": self.require_title,
            "symbol": self.symbol,
            "cluster": self.cluster,
            "can_choose_who_vote": self.can_choose_who_vote,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ComposerConfig:
        """Build a config from a dict; unknown keys are ignored."""
        kwargs: dict[str, Any] = {}
        if "authority_reset_mode" in d:
            kwargs["authority_reset_mode"] = str(d["authority_reset_mode"])
        if "program_governance_allow_list" in d:
            allow = d["program_governance_allow_list"]
            if isinstance(allow, str) or not hasattr(allow, "__iter__"):
                raise ValueError("program_governance_allow_list must be a list of instruction ids")
            kwargs["program_governance_allow_list"] = frozenset(allow)
        for key in ("require_title", "can_choose_who_vote"):
            if key in d:
                if not isinstance(d[key], bool):
                    raise ValueError(f"{key} must be true or false, got {d[key]!r}")
                kwargs[key] = d[key]
        for key in ("symbol", "cluster"):
            if key in d:
                kwargs[key] = str(d[key])
        return cls(**kwargs)


def load_config(base: Path | None = None) -> ComposerConfig:
    """Load ``<base>/config.json``, or defaults if it does not exist."""
    path = (base or DEFAULT_BASE_DIR) / "config.json"
    if not path.exists():
        return ComposerConfig()
    data = json.loads(path.read_text(encoding="utf-8"))
    return ComposerConfig.from_dict(data)


def save_config(base: Path, config: ComposerConfig) -> Path:
    base.mkdir(parents=True, exist_ok=True)
    path = base / "config.json"
    path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    return path
