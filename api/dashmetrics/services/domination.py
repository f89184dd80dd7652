from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..rows import ProfileRow, WaitlistCityRow
from ..schemas import (
    CityDetailStats,
    CityDomination,
    CityGenderBreakdown,
    DominationResponse,
    DominationStats,
    TopCity,
)
from .numeric import finite_or_none, finite_or_zero, mean_or_none
from .populations import CITY_POPULATIONS

# Lower bounds on penetration (percent of population), checked in order.
DOMINATION_THRESHOLDS: tuple[tuple[str, float], ...] = (
    ("dominating", 0.1),
    ("strong", 0.05),
    ("growing", 0.01),
    ("early", 0.001),
)


def lookup_population(city_name: str | None) -> int | None:
    if not city_name:
        return None
    return CITY_POPULATIONS.get(city_name) or None


def penetration_rate(waitlist_count: int, population: int | None) -> float | None:
    if not population or population <= 0:
        return None
    return finite_or_none(waitlist_count * 100.0 / population)


def domination_status(rate: float | None) -> str:
    if rate is None:
        return "unknown"
    for status, lower in DOMINATION_THRESHOLDS:
        if rate >= lower:
            return status
    return "starting"


def city_domination(city: WaitlistCityRow) -> CityDomination:
    population = city.population if city.population else lookup_population(city.name)
    rate = penetration_rate(city.waitlist_count, population)
    return CityDomination(
        id=city.id,
        name=city.name,
        state=city.state,
        population=population,
        waitlist_count=city.waitlist_count,
        penetration_rate=rate,
        status=domination_status(rate),
    )


def compute_domination(cities: Iterable[WaitlistCityRow]) -> DominationResponse:
    rows = sorted((city_domination(c) for c in cities), key=lambda c: c.waitlist_count, reverse=True)
    ranked = [c for c in rows if c.penetration_rate is not None]

    top: TopCity | None = None
    if ranked:
        best = ranked[0]
        for c in ranked[1:]:
            if c.penetration_rate > best.penetration_rate:
                best = c
        top = TopCity(name=best.name, state=best.state, penetration_rate=best.penetration_rate)

    return DominationResponse(
        cities=rows,
        stats=DominationStats(
            total_market=sum(c.population or 0 for c in rows),
            total_waitlist=sum(c.waitlist_count for c in rows),
            top_city=top,
            avg_penetration=finite_or_zero(mean_or_none(c.penetration_rate for c in ranked)),
        ),
    )


def city_detail_stats(city: WaitlistCityRow, profiles: Sequence[ProfileRow]) -> CityDetailStats:
    """Stats for one city from all of its profiles; waitlist count is re-derived from them."""
    waitlisted = sum(1 for p in profiles if p.status == "waitlisted")
    breakdown = CityGenderBreakdown()
    for p in profiles:
        g = (p.gender or "").strip().lower()
        if g == "woman":
            breakdown.woman += 1
        elif g == "man":
            breakdown.man += 1
        elif g in ("non_binary", "nonbinary"):
            breakdown.nonbinary += 1
        else:
            breakdown.other += 1

    scoped = WaitlistCityRow(
        id=city.id,
        name=city.name,
        state=city.state,
        latitude=city.latitude,
        longitude=city.longitude,
        population=city.population,
        waitlist_count=waitlisted,
    )
    return CityDetailStats(
        city=city_domination(scoped),
        total_signups=len(profiles),
        waitlisted=waitlisted,
        gender_breakdown=breakdown,
    )
