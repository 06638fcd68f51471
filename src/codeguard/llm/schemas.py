"""JSON schemas for structured model responses.

One schema per ReportKind. The schemas are sent as the structured-output
response format and reused locally to check that a parsed payload carries
every required top-level field with the expected JSON type.
"""

from typing import Any

from codeguard.models.report import FINDING_CATEGORIES, ReportKind

_CATEGORY = {
    "type": "string",
    "enum": list(FINDING_CATEGORIES),
    "description": "The architectural layer this issue belongs to.",
}


def _string_list() -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}}


def _object(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required if required is not None else list(properties),
    }


AUDIT_SCHEMA: dict[str, Any] = {
    "title": "audit_report",
    **_object(
        {
            "highRiskHotspots": {
                "type": "array",
                "items": _object(
                    {
                        "file": {"type": "string"},
                        "issue": {"type": "string"},
                        "impact": {"type": "string"},
                        "category": _CATEGORY,
                    }
                ),
            },
            "bottlenecks": {
                "type": "array",
                "items": _object(
                    {
                        "location": {"type": "string"},
                        "pattern": {"type": "string"},
                        "reason": {"type": "string"},
                        "suggestion": {"type": "string"},
                        "category": _CATEGORY,
                    }
                ),
            },
            "antiPatterns": _string_list(),
            "architecturalObservations": _string_list(),
            "optimizedCodeExample": {"type": "string"},
            "summary": {"type": "string"},
        }
    ),
}

ARCHITECTURE_SCHEMA: dict[str, Any] = {
    "title": "architecture_report",
    **_object(
        {
            "healthScore": {"type": "number", "minimum": 0, "maximum": 100},
            "dimensionScores": _object(
                {
                    name: {"type": "number", "minimum": 0, "maximum": 100}
                    for name in (
                        "reliability",
                        "scalability",
                        "maintainability",
                        "security",
                        "performance",
                    )
                }
            ),
            "topIssues": {
                "type": "array",
                "items": _object(
                    {
                        "title": {"type": "string"},
                        "severity": {"type": "string", "enum": ["Critical", "High", "Medium"]},
                        "description": {"type": "string"},
                    }
                ),
            },
            "recommendations": _string_list(),
            "quickWins": _string_list(),
            "summary": {"type": "string"},
        }
    ),
}

IMPACT_SCHEMA: dict[str, Any] = {
    "title": "impact_report",
    **_object(
        {
            "targetSymbol": {"type": "string"},
            "directDependencies": _string_list(),
            "indirectDependencies": _string_list(),
            "blastRadius": {"type": "string", "enum": ["Critical", "High", "Medium", "Low"]},
            "affectedFlows": _string_list(),
            "refactorPlan": _string_list(),
            "requiredTests": _string_list(),
            "summary": {"type": "string"},
        }
    ),
}

COST_SCHEMA: dict[str, Any] = {
    "title": "cost_report",
    **_object(
        {
            "estimatedMonthlyWaste": {"type": "string"},
            "topSavings": {
                "type": "array",
                "items": _object(
                    {
                        "item": {"type": "string"},
                        "savings": {"type": "string"},
                        "risk": {"type": "string", "enum": ["High", "Medium", "Low"]},
                    }
                ),
            },
            "resourceTable": {
                "type": "array",
                "items": _object(
                    {
                        "resource": {"type": "string"},
                        "usage": {"type": "string"},
                        "inefficiency": {"type": "string"},
                    }
                ),
            },
            "implementationRisk": {"type": "string"},
            "summary": {"type": "string"},
        }
    ),
}

SECURITY_SCHEMA: dict[str, Any] = {
    "title": "security_report",
    **_object(
        {
            "vulnerabilities": {
                "type": "array",
                "items": _object(
                    {
                        "id": {"type": "string"},
                        "severity": {
                            "type": "string",
                            "enum": ["Critical", "High", "Medium", "Low"],
                        },
                        "file": {"type": "string"},
                        "evidence": {"type": "string"},
                        "remediation": {"type": "string"},
                    }
                ),
            },
            "secretsFound": _string_list(),
            "hardeningChecklist": _string_list(),
            "summary": {"type": "string"},
        }
    ),
}

SCHEMAS: dict[ReportKind, dict[str, Any]] = {
    ReportKind.AUDIT: AUDIT_SCHEMA,
    ReportKind.ARCHITECTURE: ARCHITECTURE_SCHEMA,
    ReportKind.IMPACT: IMPACT_SCHEMA,
    ReportKind.COST: COST_SCHEMA,
    ReportKind.SECURITY: SECURITY_SCHEMA,
}


def get_schema(kind: ReportKind) -> dict[str, Any]:
    """Get the response schema for a report kind."""
    return SCHEMAS[kind]


def check_required_fields(kind: ReportKind, data: Any) -> list[str]:
    """List the required top-level fields missing from a payload.

    Args:
        kind: Report kind the payload should match
        data: Parsed JSON payload

    Returns:
        Missing field names (empty if the payload is complete). A payload that
        is not a JSON object is missing every field.
    """
    required = list(SCHEMAS[kind]["required"])
    if not isinstance(data, dict):
        return required
    return [name for name in required if name not in data]


# JSON schema type name -> accepted Python types
_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "array": (list,),
    "object": (dict,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
}


def _matches_type(value: Any, type_name: str) -> bool:
    # bool is an int subclass but never a JSON number
    if isinstance(value, bool) and type_name != "boolean":
        return False
    return isinstance(value, _JSON_TYPES.get(type_name, (object,)))


def check_field_types(kind: ReportKind, data: Any) -> list[str]:
    """List the top-level fields whose JSON type does not match the schema.

    Only fields present in the payload are checked; absent fields are the
    concern of check_required_fields.

    Args:
        kind: Report kind the payload should match
        data: Parsed JSON payload

    Returns:
        Mistyped field names in schema order (empty if all types match).
    """
    if not isinstance(data, dict):
        return []
    properties = SCHEMAS[kind]["properties"]
    return [
        name
        for name, prop in properties.items()
        if name in data and "type" in prop and not _matches_type(data[name], prop["type"])
    ]
