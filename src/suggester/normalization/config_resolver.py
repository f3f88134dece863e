"""Resolve effective engine configuration from layered inputs."""

from __future__ import annotations

from typing import Any

from suggester.engine.config import DEFAULT_ENGINE_CONFIG, is_valid_config_value
from suggester.validation import ValidationReport


def resolve_engine_config(request: dict[str, Any], validation_report: ValidationReport) -> dict[str, Any]:
    """Merge request overrides over the defaults.

    Unknown keys and invalid values are reported and fall back to defaults.
    """

    config = dict(DEFAULT_ENGINE_CONFIG)
    overrides = request.get("config") if isinstance(request, dict) else None
    if not isinstance(overrides, dict):
        return config

    for key, value in overrides.items():
        if key not in DEFAULT_ENGINE_CONFIG:
            validation_report.add_error(
                code="INVALID_CONFIG_KEY",
                message=f"Config key {key!r} is not supported",
                field_path=f"$.suggest_request.config.{key}",
                suggested_fix=f"Use one of: {', '.join(sorted(DEFAULT_ENGINE_CONFIG))}",
            )
            continue
        if not is_valid_config_value(key, value):
            validation_report.add_error(
                code="INVALID_CONFIG_VALUE",
                message=f"Invalid value {value!r} for config key {key!r}",
                field_path=f"$.suggest_request.config.{key}",
                extra={"default_value": DEFAULT_ENGINE_CONFIG[key]},
            )
            continue
        config[key] = value

    if float(config["repeat_triple_threshold"]) < float(config["repeat_once_threshold"]):
        validation_report.add_error(
            code="INVALID_CONFIG_VALUE",
            message="repeat_triple_threshold must be >= repeat_once_threshold",
            field_path="$.suggest_request.config.repeat_triple_threshold",
        )
        config["repeat_once_threshold"] = DEFAULT_ENGINE_CONFIG["repeat_once_threshold"]
        config["repeat_triple_threshold"] = DEFAULT_ENGINE_CONFIG["repeat_triple_threshold"]

    if config["urgency_ladder"] != DEFAULT_ENGINE_CONFIG["urgency_ladder"]:
        validation_report.add_info(
            code="INFO_URGENCY_LADDER_OVERRIDDEN",
            message=f"Using the {config['urgency_ladder']!r} urgency ladder",
            field_path="$.suggest_request.config.urgency_ladder",
        )

    return config
