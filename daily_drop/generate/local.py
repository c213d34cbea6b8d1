"""Offline recipe generator used when no provider produced a document.

Structure is fixed per season; only the oils and the mood word are drawn from
the injected random source.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Sequence

from daily_drop.models.recipe_schema import APP_NAME
from daily_drop.seasons import Hemisphere, parse_hemisphere, resolve_season

logger = logging.getLogger(__name__)

# Common, broadly available oils with Latin names.
OIL_POOLS: Dict[str, List[str]] = {
    "Winter": [
        "Sweet Orange (Citrus sinensis)",
        "Cedarwood Atlas (Cedrus atlantica)",
        "Frankincense (Boswellia carterii)",
        "Cinnamon Leaf (Cinnamomum verum)",
        "Cardamom (Elettaria cardamomum)",
    ],
    "Spring": [
        "Lavender (Lavandula angustifolia)",
        "Lemon (Citrus limon)",
        "Geranium (Pelargonium graveolens)",
        "Spearmint (Mentha spicata)",
        "Eucalyptus Radiata (Eucalyptus radiata)",
    ],
    "Summer": [
        "Peppermint (Mentha × piperita)",
        "Lime (Citrus aurantifolia)",
        "Grapefruit (Citrus × paradisi)",
        "Lavender (Lavandula angustifolia)",
        "Tea Tree (Melaleuca alternifolia)",
    ],
    "Autumn": [
        "Sweet Orange (Citrus sinensis)",
        "Cedarwood Atlas (Cedrus atlantica)",
        "Clove Bud (Syzygium aromaticum)",
        "Ginger (Zingiber officinale)",
        "Patchouli (Pogostemon cablin)",
    ],
}

MOODS: Dict[str, List[str]] = {
    "Winter": ["Cozy", "Calm", "Grounded"],
    "Spring": ["Renew", "Fresh", "Bright"],
    "Summer": ["Energize", "Uplift", "Cool"],
    "Autumn": ["Warmth", "Focus", "Comfort"],
}
DEFAULT_MOODS = ["Balance"]

WHY_IT_WORKS: Dict[str, str] = {
    "Summer": "Cool mint lifts and bright citrus brightens while herbal floral keeps it soft.",
    "Winter": "Warm woods and resin provide a cozy base while sweet citrus adds lift.",
    "Spring": "Fresh citrus and green floral notes evoke renewal and clean air.",
    "Autumn": "Comforting spice and wood pair with sweet notes for a grounded, focused feel.",
}

SAFETY = [
    "Patch test; dilute for skin.",
    "Avoid eyes/mucosa; keep from children & pets.",
    "Do not ingest oils.",
    "Consult a qualified professional if pregnant, nursing, or under medical care.",
]

DIFFUSER_NOTES = "Use in a well-ventilated area; adjust water per manufacturer."
ROLLER_CARRIER = "fractionated coconut or jojoba"
SPRAY_BASE = "distilled water + 95% ethanol"
SPRAY_NOTE = "Shake well before each use; avoid fabrics that spot."

DIFFUSER_COUNTS = (3, 2, 1)
ROLLER_COUNTS = (4, 3)
SPRAY_COUNTS = (6, 4)


def _season_label(season) -> str:
    return getattr(season, "value", season)


def oil_pool(season) -> List[str]:
    return OIL_POOLS.get(_season_label(season), OIL_POOLS["Autumn"])


def pick(items: Sequence[str], n: int, rng) -> List[str]:
    """Draw up to n distinct items without replacement, keeping draw order."""
    pool = list(items)
    out: List[str] = []
    for _ in range(min(n, len(pool))):
        out.append(pool.pop(rng.randrange(len(pool))))
    return out


def seasonal_mood(season, rng) -> str:
    return rng.choice(MOODS.get(_season_label(season), DEFAULT_MOODS))


def _drops(chosen: List[str], counts: Sequence[int]) -> Dict[str, int]:
    # zip stops early when fewer oils were drawn than counts
    return {oil: count for oil, count in zip(chosen, counts)}


def build_local_recipe(date_iso: str, season, hemisphere, rng=None) -> dict:
    """Build a complete recipe document for an already-resolved season.

    Unknown season labels fall back to the Autumn oils and sentence and the
    "Balance" mood; this never raises.
    """
    rng = rng or random.Random()
    label = _season_label(season)
    chosen = pick(oil_pool(label), 3, rng)
    mood = seasonal_mood(label, rng)
    logger.debug("Local draw | season=%s mood=%s oils=%s", label, mood, chosen)

    return {
        "app": APP_NAME,
        "date": date_iso,
        "season": label,
        "hemisphere": _season_label(hemisphere),
        "title": f"{label} {mood} Blend",
        "oils": chosen,
        "formats": {
            "diffuser": {
                "drops": _drops(chosen, DIFFUSER_COUNTS),
                "notes": DIFFUSER_NOTES,
            },
            "roller": {
                "size_ml": 10,
                "dilution_percent": 2.0 if label == "Winter" else 3.0,
                "drops": _drops(chosen, ROLLER_COUNTS),
                "carrier": ROLLER_CARRIER,
            },
            "spray_optional": {
                "size_ml": 30,
                "drops": _drops(chosen, SPRAY_COUNTS),
                "base": SPRAY_BASE,
                "note": SPRAY_NOTE,
            },
        },
        "why_it_works": WHY_IT_WORKS.get(label, WHY_IT_WORKS["Autumn"]),
        "safety": list(SAFETY),
        "tags": [f"Season:{label}", f"Mood:{mood}", "Use:Home"],
    }


def generate_local(date_iso: str, hemisphere=Hemisphere.NORTHERN, rng: Optional[random.Random] = None) -> dict:
    hemi = parse_hemisphere(hemisphere)
    season = resolve_season(date_iso, hemi)
    return build_local_recipe(date_iso, season, hemi, rng=rng)
