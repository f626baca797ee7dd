"""Daily strain target derived from the morning's recovery."""

from __future__ import annotations

from dataclasses import dataclass

from pulsescore.analytics.recovery import RecoveryScore


@dataclass(frozen=True)
class StrainTarget:
    target_min: float
    target_max: float
    label: str
    description: str


_TARGETS = {
    "green": StrainTarget(
        14.0, 21.0, "PUSH HARD",
        "High recovery: your body is ready for intense training.",
    ),
    "yellow": StrainTarget(
        7.0, 14.0, "MODERATE",
        "Moderate recovery: maintain steady effort, avoid overreaching.",
    ),
    "red": StrainTarget(
        0.0, 7.0, "ACTIVE RECOVERY",
        "Low recovery: focus on light movement and rest.",
    ),
}

NO_DATA_TARGET = StrainTarget(
    7.0, 14.0, "MODERATE", "No recovery data: aim for a balanced effort.",
)


def strain_target(recovery: RecoveryScore | None) -> StrainTarget:
    if recovery is None:
        return NO_DATA_TARGET
    return _TARGETS.get(recovery.level, NO_DATA_TARGET)
