from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

DEFAULT_FALLBACK_SPEEDS_KMH: Dict[str, float] = {
    "driving": 35.0,
    "transit": 28.0,
    "walking": 4.5,
}


@dataclass
class RoutingConfig:
    kakao_api_key: Optional[str] = None
    odsay_api_key: Optional[str] = None
    kakao_timeout_s: float = 4.0
    odsay_timeout_s: float = 4.5
    detour_factor: float = 1.25
    fallback_speeds_kmh: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_FALLBACK_SPEEDS_KMH))
    two_opt_max_passes: Optional[int] = 50

    @property
    def has_provider_keys(self) -> bool:
        return bool(self.kakao_api_key or self.odsay_api_key)

    def fallback_speed_kmh(self, mode: str) -> float:
        return self.fallback_speeds_kmh.get(mode, DEFAULT_FALLBACK_SPEEDS_KMH["driving"])

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RoutingConfig":
        env = os.environ if environ is None else environ
        return cls(
            kakao_api_key=_first_key(env, "KAKAO_REST_API_KEY", "KAKAO_API_KEY", "KAKAO_KEY"),
            odsay_api_key=_first_key(env, "ODSAY_API_KEY", "ODSAY_KEY"),
            two_opt_max_passes=_passes_from_env(env.get("ROUTE_TWO_OPT_MAX_PASSES")),
        )


def _first_key(env: Mapping[str, str], *names: str) -> Optional[str]:
    # First variable that is set wins, even when it is blank.
    for name in names:
        value = env.get(name)
        if value is not None:
            return value.strip() or None
    return None


def _passes_from_env(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return 50
    try:
        value = int(raw)
    except ValueError:
        return 50
    # 0 or a negative number disables the cap.
    return value if value > 0 else None
