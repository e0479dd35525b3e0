"""City evaluator: geographic risk and coverage scoring.

Score = Annexure A penalty (−30) + coverage (+40 both / +20 one / +0) + cluster
bonus (30..5), clamped to [0, 100]. Never a hard stop.
"""

from __future__ import annotations

import logging

from cardscore.models.enums import Cluster, ModuleName
from cardscore.schemas.applicant import Address
from cardscore.schemas.scoring import ModuleScore

logger = logging.getLogger(__name__)

MODULE = ModuleName.CITY
FLAG_ANNEXURE_A = "AnnexureA"

ANNEXURE_A_PENALTY = -30
COVERAGE_BOTH = 40
COVERAGE_ONE = 20

FULL_COVERAGE_CITIES: frozenset[str] = frozenset(
    {"karachi", "lahore", "islamabad", "rawalpindi", "peshawar"}
)

CLUSTER_SCORES: dict[Cluster, int] = {
    Cluster.FEDERAL: 30,
    Cluster.SOUTH: 25,
    Cluster.NORTHERN_PUNJAB: 20,
    Cluster.NORTH: 15,
    Cluster.SOUTHERN_PUNJAB: 10,
    Cluster.KP: 5,
}

# Annexure A: named high-risk localities, matched as case-insensitive substrings
ANNEXURE_A_AREAS: tuple[str, ...] = (
    "Meekh Pur", "Arazi Khudas Yar", "Badam", "Dhoori", "Malata Dandi",
    "Mohallah Sufi Pura", "Mohallah Sattar Pura", "Mohallah Dadanda Mar",
    "Khaoon", "Buchal Kalan", "Sarat", "Mangwal", "Kural Karahi", "Janda Chichi",
    "Total Tank", "Outskirts of Bannu", "North & South Waziristan Agencies",
    "Lakki Marwat", "All Trible area Agencies", "Hangu", "Parachinar", "Matta",
    "Gadoon", "Qutab Garh", "Pirssada", "Mukhanpura", "Muftpura", "Sattokatla",
    "Ghandia Wala Mission Chowk", "Tibba Hammad Sahho Mission Chowk",
    "Allah Dad Colony", "Massani Bagh", "Hajwairy Town", "Bolay Di Jughi",
    "Rehmat Abad", "Mehmood boti Baghbanpura", "Chaprar Mujahid Road",
    "Gulbhar Mujahid Road", "Faqir Pura", "Mohalla Noor Bawa", "Kot Ishaq",
    "Siraj Pura", "Abadi Bawa-e-Wali", "Mohalla Ghosse Park Wala",
    "Mohalla Aslam Parak Wala", "Sabharwal Colony", "Guniya Wala", "Tariqabad",
    "Baou Mohala", "Namy Wali", "Islam Pura Joharabad", "Mali Colony Bhalwal",
    "Fort Manru", "Tribal Area Azmat Road", "Shahdra Chowk", "Chak 87",
    "Chak Bahader Pur", "Landhi", "Sultanabad", "Lines Area Plaza",
    "Gulshan-e-Hadeed", "Lyari", "Ziaul-Haq Colony", "Latifabad No-12", "Phuleli",
)
_ANNEXURE_A_LOWER = tuple(area.lower() for area in ANNEXURE_A_AREAS)


def annexure_a_match(current: Address, office: Address) -> str | None:
    """First Annexure A area found in either address, or None."""
    haystack = " | ".join(current.lines() + office.lines()).lower()
    for area, needle in zip(ANNEXURE_A_AREAS, _ANNEXURE_A_LOWER):
        if needle in haystack:
            return area
    return None


def cluster_score(cluster: str | None) -> int:
    """Cluster bonus; unknown or missing clusters score 0."""
    if not cluster:
        return 0
    try:
        return CLUSTER_SCORES[Cluster(cluster.strip().upper())]
    except ValueError:
        return 0


def is_full_coverage(city: str) -> bool:
    return city.strip().lower() in FULL_COVERAGE_CITIES


def evaluate_city(current: Address, office: Address, cluster: str | None) -> ModuleScore:
    """Score geography: Annexure A penalty, coverage of both cities, cluster bonus."""
    notes: list[str] = []
    flags: list[str] = []
    score = 0

    hit = annexure_a_match(current, office)
    if hit is not None:
        score += ANNEXURE_A_PENALTY
        flags.append(FLAG_ANNEXURE_A)
        notes.append(f"Address matches Annexure A high-risk area '{hit}' → {ANNEXURE_A_PENALTY} points")

    living = is_full_coverage(current.city)
    working = is_full_coverage(office.city)
    notes.append(f"Living city: '{current.city}' → {'Full Coverage' if living else 'Not Full Coverage'}")
    notes.append(f"Working city: '{office.city}' → {'Full Coverage' if working else 'Not Full Coverage'}")

    if living and working:
        score += COVERAGE_BOTH
        notes.append(f"Both cities Full Coverage → +{COVERAGE_BOTH}")
    elif living or working:
        score += COVERAGE_ONE
        notes.append(f"One city Full Coverage → +{COVERAGE_ONE}")
    else:
        notes.append("No Full Coverage city → +0")

    bonus = cluster_score(cluster)
    score += bonus
    notes.append(f"Cluster '{cluster or ''}' → +{bonus}/30")

    logger.debug("City score %s (annexure=%s, cluster=%s)", score, hit, cluster)
    return ModuleScore.ok(MODULE, max(0, min(100, score)), notes=notes, flags=flags)
