from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""TrekRecord model: the canonical trek shape consumed by every query.

Empty string is the "absent" sentinel for all textual fields; no field is None.
"""

__all__ = [
    "TrekRecord",
    "GUIDE_YES",
    "GUIDE_NO",
    "GUIDE_RECOMMENDED",
    "GUIDE_OPTIONAL",
    "SNOW_YES",
    "SNOW_NO",
]

GUIDE_YES = "YES"
GUIDE_NO = "NO"
GUIDE_RECOMMENDED = "RECOMMENDED"
GUIDE_OPTIONAL = "OPTIONAL"

SNOW_YES = "YES"
SNOW_NO = "NO"


@dataclass(frozen=True)
class TrekRecord:
    """One normalized trek row.

    A record only exists when both ``trek_name`` and ``state`` are non-empty.
    Identity is positional: ``serial_number`` falls back to the 1-based row
    position when the source value is not an integer.
    """
    serial_number: int
    state: str
    trek_name: str
    trek_type: str = ""
    difficulty_level: str = ""
    season: str = ""
    duration: str = ""
    distance: str = ""
    max_altitude: str = ""
    description: str = ""
    age_group: str = ""
    recommended_gear: str = ""
    guide_needed: str = ""  # YES | NO | RECOMMENDED | OPTIONAL | 生値の大文字
    snow_trek: str = SNOW_NO  # YES | NO
    image_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape served by the API."""
        return {
            "serialNumber": self.serial_number,
            "state": self.state,
            "trekName": self.trek_name,
            "trekType": self.trek_type,
            "difficultyLevel": self.difficulty_level,
            "season": self.season,
            "duration": self.duration,
            "distance": self.distance,
            "maxAltitude": self.max_altitude,
            "description": self.description,
            "ageGroup": self.age_group,
            "recommendedGear": self.recommended_gear,
            "guideNeeded": self.guide_needed,
            "snowTrek": self.snow_trek,
            "imageUrl": self.image_url,
        }
