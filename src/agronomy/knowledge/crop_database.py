"""
Crop Knowledge Base
===================

Static catalog of crop profiles used by the condition-based recommender:
varieties, season and soil compatibility, yield/profit/price ranges and the
agronomic attributes shown on recommendation cards.

Ranges are per hectare for yield (kg/ha), per acre for profit (₹/acre) and per
kg for market price (₹/kg).
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Optional, Tuple

from agronomy.models import Level


Range = Tuple[float, float]


@dataclass(frozen=True)
class CropProfile:
    """One knowledge-base entry. Seasons and soil types are stored lower-case."""

    name: str
    varieties: Tuple[str, ...]
    seasons: FrozenSet[str]
    soil_types: FrozenSet[str]
    yield_range: Range
    profit_range: Range
    price_range: Range
    water_requirement: Level
    temperature_range: str
    growing_period: str
    fertilizer_needs: str
    pest_resistance: Level

    def __post_init__(self):
        if not self.varieties:
            raise ValueError(f"{self.name}: at least one variety is required")
        for label in ("yield_range", "profit_range", "price_range"):
            low, high = getattr(self, label)
            if low > high:
                raise ValueError(f"{self.name}: {label} min {low} exceeds max {high}")
        # Normalise for case-insensitive matching
        object.__setattr__(self, "seasons", frozenset(s.strip().lower() for s in self.seasons))
        object.__setattr__(self, "soil_types", frozenset(s.strip().lower() for s in self.soil_types))
        object.__setattr__(self, "varieties", tuple(self.varieties))

    def grows_in(self, season: str, soil_type: str) -> bool:
        return (season or "").strip().lower() in self.seasons and \
            (soil_type or "").strip().lower() in self.soil_types


def _profile(name, varieties, seasons, soils, yield_range, profit_range, price_range,
             water, temperature, period, fertilizer, resistance) -> CropProfile:
    return CropProfile(
        name=name,
        varieties=tuple(varieties),
        seasons=frozenset(seasons),
        soil_types=frozenset(soils),
        yield_range=yield_range,
        profit_range=profit_range,
        price_range=price_range,
        water_requirement=water,
        temperature_range=temperature,
        growing_period=period,
        fertilizer_needs=fertilizer,
        pest_resistance=resistance,
    )


DEFAULT_CROP_PROFILES: Tuple[CropProfile, ...] = (
    _profile("Rice", ["Jaya", "Swarna", "Uma", "Jyothi"],
             ["monsoon", "post-monsoon"], ["loamy", "clay"],
             (3500, 5500), (25000, 45000), (20, 35),
             Level.HIGH, "20-35°C", "120-150 days", "High nitrogen, moderate phosphorus", Level.MEDIUM),
    _profile("Wheat", ["HD 2967", "PBW 725", "DBW 187"],
             ["winter", "post-monsoon"], ["loamy", "sandy"],
             (3000, 5000), (20000, 40000), (22, 30),
             Level.MEDIUM, "15-25°C", "110-130 days", "Balanced NPK", Level.MEDIUM),
    _profile("Maize", ["HQPM-1", "DHM 117", "Vivek QPM 9"],
             ["monsoon", "summer"], ["loamy", "sandy", "alluvial"],
             (4000, 6500), (18000, 35000), (18, 25),
             Level.MEDIUM, "21-30°C", "90-110 days", "High nitrogen", Level.MEDIUM),
    _profile("Banana", ["Robusta", "Nendran", "Grand Naine"],
             ["monsoon", "post-monsoon", "summer"], ["loamy", "alluvial", "laterite"],
             (20000, 30000), (60000, 110000), (25, 45),
             Level.HIGH, "20-35°C", "10-12 months", "High potassium, regular organic manure", Level.LOW),
    _profile("Pepper", ["Panniyur 1", "Karimunda", "Sreekara"],
             ["monsoon"], ["laterite", "loamy", "red"],
             (1500, 2500), (50000, 90000), (350, 550),
             Level.MEDIUM, "20-30°C", "3 years to first harvest", "Organic manure, moderate NPK", Level.LOW),
    _profile("Coconut", ["West Coast Tall", "Chowghat Orange Dwarf", "Kera Sankara"],
             ["monsoon", "post-monsoon"], ["laterite", "sandy", "loamy", "alluvial"],
             (8000, 14000), (40000, 80000), (25, 40),
             Level.MEDIUM, "20-32°C", "5-6 years to bearing", "Annual NPK with FYM", Level.MEDIUM),
    _profile("Turmeric", ["Erode local", "Prathibha", "Alleppey Finger"],
             ["monsoon"], ["loamy", "clay", "red", "laterite"],
             (20000, 30000), (60000, 120000), (70, 120),
             Level.MEDIUM, "20-30°C", "7-9 months", "Heavy organic manure", Level.HIGH),
    _profile("Ginger", ["Nadia", "Varada", "Rio-de-Janeiro"],
             ["monsoon"], ["loamy", "laterite", "red"],
             (12000, 20000), (70000, 150000), (40, 90),
             Level.MEDIUM, "19-28°C", "8-10 months", "Mulching with organic manure", Level.LOW),
    _profile("Tomato", ["Pusa Ruby", "Arka Rakshak", "Arka Vikas"],
             ["winter", "post-monsoon", "summer"], ["loamy", "sandy", "red"],
             (20000, 30000), (40000, 80000), (15, 40),
             Level.MEDIUM, "18-27°C", "90-120 days", "Balanced NPK with calcium", Level.LOW),
    _profile("Potato", ["Kufri Jyoti", "Kufri Pukhraj", "Kufri Chipsona 1"],
             ["winter"], ["loamy", "sandy", "alluvial"],
             (20000, 30000), (35000, 70000), (12, 25),
             Level.MEDIUM, "15-20°C", "90-110 days", "High potassium", Level.MEDIUM),
    _profile("Onion", ["Agrifound Dark Red", "Bhima Super", "N-53"],
             ["winter", "post-monsoon"], ["loamy", "sandy", "alluvial"],
             (18000, 28000), (30000, 65000), (15, 45),
             Level.MEDIUM, "13-25°C", "120-150 days", "Nitrogen and sulphur", Level.MEDIUM),
    _profile("Groundnut", ["GG 20", "TG 37A", "TAG 24"],
             ["monsoon", "summer"], ["sandy", "red", "loamy"],
             (1200, 2000), (15000, 30000), (50, 70),
             Level.LOW, "25-30°C", "100-120 days", "Gypsum at pegging, low nitrogen", Level.MEDIUM),
    _profile("Sugarcane", ["Co 86032", "CoJ 85", "Co 0238"],
             ["monsoon", "summer"], ["clay", "loamy", "black", "alluvial"],
             (70000, 100000), (50000, 90000), (3, 4),
             Level.HIGH, "20-35°C", "10-12 months", "High nitrogen and potassium", Level.MEDIUM),
    _profile("Cotton", ["Suraj", "RCH 2 BG II", "Bunny BG II"],
             ["monsoon"], ["black", "loamy", "clay"],
             (1500, 2500), (20000, 40000), (60, 75),
             Level.MEDIUM, "21-30°C", "150-180 days", "Moderate nitrogen, split doses", Level.LOW),
    _profile("Chili", ["Pusa Jwala", "Byadgi", "Jwala Sakhi"],
             ["winter", "post-monsoon", "summer"], ["loamy", "sandy", "red", "black"],
             (1500, 2500), (30000, 60000), (80, 150),
             Level.MEDIUM, "20-30°C", "120-150 days", "Balanced NPK with micronutrients", Level.LOW),
    _profile("Cowpea", ["Pusa Komal", "Kanakamony", "Bhagyalakshmi"],
             ["summer", "post-monsoon"], ["sandy", "loamy", "laterite"],
             (800, 1500), (12000, 25000), (40, 70),
             Level.LOW, "25-35°C", "70-90 days", "Low nitrogen, phosphorus at sowing", Level.HIGH),
    _profile("Cassava", ["M-4", "Sree Jaya", "H-226"],
             ["monsoon", "summer"], ["laterite", "sandy", "red"],
             (25000, 35000), (25000, 50000), (10, 18),
             Level.LOW, "25-32°C", "8-10 months", "Moderate potassium", Level.HIGH),
    _profile("Mustard", ["Pusa Bold", "RH 749", "Kranti"],
             ["winter"], ["loamy", "sandy", "alluvial"],
             (1200, 1800), (15000, 28000), (50, 60),
             Level.LOW, "10-25°C", "110-140 days", "Sulphur and nitrogen", Level.MEDIUM),
)


class CropKnowledgeBase:
    """
    Read-only, injectable collection of crop profiles keyed by crop name.

    Several knowledge bases (e.g. per-region catalogs) can coexist; nothing
    here is a module-level singleton.
    """

    def __init__(self, profiles: Iterable[CropProfile] = DEFAULT_CROP_PROFILES):
        by_name = {}
        for profile in profiles:
            if profile.name in by_name:
                raise ValueError(f"Duplicate crop profile: {profile.name}")
            by_name[profile.name] = profile
        self._profiles = MappingProxyType(by_name)

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self):
        return iter(self._profiles.values())

    def __contains__(self, name: str) -> bool:
        return name in self._profiles

    def get(self, name: str) -> Optional[CropProfile]:
        return self._profiles.get(name)

    def matching(self, season: str, soil_type: str) -> List[CropProfile]:
        """Profiles compatible with both the season and the soil type, in catalog order."""
        return [p for p in self._profiles.values() if p.grows_in(season, soil_type)]
