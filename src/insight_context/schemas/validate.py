"""Schema loading and validation for AnalysisResult snapshots."""

from __future__ import annotations

from importlib import resources
import json

import jsonschema


class ContractViolation(ValueError):
    """Raised when a snapshot does not have the shape the upstream analyzer guarantees."""


def load_schema() -> dict:
    """Load and return the AnalysisResult JSON schema."""
    schema_path = resources.files("insight_context.schemas").joinpath("analysis_result.schema.json")
    with schema_path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def validate_snapshot(data: object) -> None:
    """Validate a raw snapshot against the schema.

    Raises:
        ContractViolation: If the snapshot does not conform to the schema.
    """
    validator = jsonschema.Draft202012Validator(load_schema())

    errors = sorted(validator.iter_errors(data), key=lambda err: list(err.path))
    if errors:
        first = errors[0]
        path = ".".join(str(part) for part in first.path) or "<root>"
        raise ContractViolation(f"Snapshot validation failed at {path}: {first.message}")
