"""Scenario catalog: YAML loader and startup validation.

The catalog is static content shared read-only by every session. Validation
runs once at startup so that the selector can never be handed an empty pool
for a (track, phase) pair reachable in play.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from careersim.core.schemas import JOB_HUNT_STATES, GameScenario
from careersim.pipeline.matcher import difficulty_ceiling
from careersim.profile.schema import TRACKS

logger = logging.getLogger(__name__)

PACKAGED_CATALOG = Path(__file__).with_name("catalog.yaml")


class CatalogError(ValueError):
    """The scenario catalog is malformed or does not cover a reachable pair."""


class ScenarioCatalog:
    """Ordered, immutable collection of scenarios with lookup by id."""

    def __init__(self, scenarios: Iterable[GameScenario]) -> None:
        self._scenarios = tuple(scenarios)
        self._by_id = {s.id: s for s in self._scenarios}

    def __iter__(self) -> Iterator[GameScenario]:
        return iter(self._scenarios)

    def __len__(self) -> int:
        return len(self._scenarios)

    @property
    def scenarios(self) -> tuple[GameScenario, ...]:
        return self._scenarios

    def get(self, scenario_id: str) -> GameScenario | None:
        return self._by_id.get(scenario_id)

    def ids(self) -> list[str]:
        return [s.id for s in self._scenarios]


def load_catalog(path: str | Path | None = None) -> ScenarioCatalog:
    """Load scenarios from a YAML file (the packaged catalog by default).

    Raises:
        FileNotFoundError: If the file does not exist.
        CatalogError: If the file is not a scenario list or an entry is invalid.
    """
    path = Path(path) if path is not None else PACKAGED_CATALOG
    if not path.exists():
        msg = f"Scenario catalog not found: {path}"
        raise FileNotFoundError(msg)

    raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
    entries = raw.get("scenarios")
    if not isinstance(entries, list):
        msg = f"{path}: expected a top-level 'scenarios' list"
        raise CatalogError(msg)

    scenarios: list[GameScenario] = []
    errors: list[str] = []
    for idx, entry in enumerate(entries):
        try:
            scenarios.append(GameScenario.model_validate(entry))
        except ValidationError as e:
            label = entry.get("id", f"#{idx}") if isinstance(entry, dict) else f"#{idx}"
            errors.append(f"scenario {label}: {e}")
    if errors:
        msg = f"{path}: invalid scenarios\n" + "\n".join(errors)
        raise CatalogError(msg)

    logger.info("Loaded %d scenarios from %s", len(scenarios), path)
    return ScenarioCatalog(scenarios)


def find_problems(catalog: ScenarioCatalog) -> list[str]:
    """Return every consistency problem in the catalog (empty when valid)."""
    problems: list[str] = []

    id_counts = Counter(s.id for s in catalog)
    for scenario_id, count in sorted(id_counts.items()):
        if count > 1:
            problems.append(f"duplicate scenario id '{scenario_id}' ({count} entries)")

    for scenario in catalog:
        choice_counts = Counter(c.id for c in scenario.choices)
        for choice_id, count in sorted(choice_counts.items()):
            if count > 1:
                problems.append(f"scenario '{scenario.id}': duplicate choice id '{choice_id}'")

    for track in TRACKS:
        for state in JOB_HUNT_STATES:
            ceiling = difficulty_ceiling(state)
            if not any(
                s.applies_to_track(track) and s.applies_to_phase(state) and s.difficulty <= ceiling
                for s in catalog
            ):
                problems.append(
                    f"no scenario for track '{track}' in phase '{state}' "
                    f"at difficulty <= {ceiling}"
                )

    return problems


def validate_catalog(catalog: ScenarioCatalog) -> None:
    """Raise CatalogError listing every problem found by ``find_problems``."""
    problems = find_problems(catalog)
    if problems:
        msg = "Scenario catalog failed validation:\n  " + "\n  ".join(problems)
        raise CatalogError(msg)
    logger.debug("Catalog valid: %d scenarios", len(catalog))


@lru_cache(maxsize=1)
def default_catalog() -> ScenarioCatalog:
    """The packaged catalog, loaded and validated once per process."""
    catalog = load_catalog()
    validate_catalog(catalog)
    return catalog
