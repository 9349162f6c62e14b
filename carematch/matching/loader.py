"""Scenario file loading: a job, its family, children and a caregiver pool."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from carematch.matching.converters import (
    RecordConversionError,
    select_job_children,
    to_caregiver_profile,
    to_child_record,
    to_family_profile,
    to_job_request,
)
from carematch.matching.models import (
    CaregiverProfile,
    ChildRecord,
    FamilyProfile,
    JobRequest,
)
from carematch.utils.logging import get_logger

logger = get_logger("matching.loader")


@dataclass
class Scenario:
    """A matching problem ready to be scored."""

    job: JobRequest
    family: FamilyProfile
    children: list[ChildRecord] = field(default_factory=list)
    caregivers: list[CaregiverProfile] = field(default_factory=list)

    def get_caregiver(self, caregiver_id: int) -> CaregiverProfile | None:
        for caregiver in self.caregivers:
            if caregiver.id == caregiver_id:
                return caregiver
        return None


class ScenarioLoader:
    """Load scenario files holding storage-shaped records.

    Expected top-level keys: `job`, `family`, `children`, `caregivers` and
    optionally `review_stats` (caregiver id -> {average_rating, review_count}).
    """

    def load(self, path: Path | str) -> Scenario:
        """Load a scenario from YAML or JSON and convert its records."""
        scenario_path = Path(path)
        if not scenario_path.exists():
            raise FileNotFoundError(f"Scenario not found: {scenario_path}")

        suffix = scenario_path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            data = self._load_yaml(scenario_path)
        elif suffix == ".json":
            data = self._load_json(scenario_path)
        else:
            data = self._load_unknown(scenario_path)

        return self.from_dict(data)

    def from_dict(self, data: Mapping) -> Scenario:
        """Convert a decoded scenario mapping into profiles."""
        for key in ("job", "family"):
            if not isinstance(data.get(key), Mapping):
                raise ValueError(f"Scenario is missing a '{key}' mapping")

        children_data = data.get("children") or []
        caregivers_data = data.get("caregivers") or []
        if not isinstance(children_data, list) or not isinstance(caregivers_data, list):
            raise ValueError("Scenario 'children' and 'caregivers' must be lists")

        review_stats = self._review_stats(data.get("review_stats"))

        try:
            job = to_job_request(data["job"])
            family = to_family_profile(data["family"])
            all_children = [to_child_record(record) for record in children_data]
            caregivers = [
                to_caregiver_profile(record, review_stats.get(_record_id(record)))
                for record in caregivers_data
            ]
        except RecordConversionError:
            raise
        except ValueError as e:
            raise ValueError(f"Invalid scenario record: {e}") from e

        children = select_job_children(job, all_children)
        logger.debug(
            "Loaded scenario for job %s: %d children, %d caregivers",
            job.id,
            len(children),
            len(caregivers),
        )
        return Scenario(job=job, family=family, children=children, caregivers=caregivers)

    def _review_stats(self, raw: object) -> dict[int, Mapping]:
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError("Scenario 'review_stats' must be a mapping")
        stats: dict[int, Mapping] = {}
        for key, value in raw.items():
            try:
                stats[int(key)] = value
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid caregiver id in review_stats: {key!r}") from e
            if value is not None and not isinstance(value, Mapping):
                raise ValueError(
                    f"review_stats for caregiver {key!r} must be a mapping"
                )
        return stats

    def _load_yaml(self, path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML scenario: {path}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Scenario must be a mapping/dict: {path}")
        return data

    def _load_json(self, path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON scenario: {path}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Scenario must be a mapping/dict: {path}")
        return data

    def _load_unknown(self, path: Path) -> dict:
        """Auto-detect and load a scenario when the file extension is unknown."""
        raw = path.read_text(encoding="utf-8")

        # Try JSON first if it looks like JSON, otherwise fall back to YAML.
        if raw.lstrip().startswith(("{", "[")):
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                data = None
            else:
                if not isinstance(data, dict):
                    raise ValueError(f"Scenario must be a mapping/dict: {path}")
                return data

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid scenario format: {path}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Scenario must be a mapping/dict: {path}")
        return data


def _record_id(record: object) -> int | None:
    value = record.get("id") if isinstance(record, Mapping) else None
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
