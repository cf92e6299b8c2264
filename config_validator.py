"""
Configuration loading and validation for the triage service.

Settings come from environment variables (optionally a ``.env`` file loaded
by main.py). This module provides:
- TriageSettings: typed view of the environment
- Validation of environment variables, rate-limit and timeout settings
- A printable report, also available as ``python config_validator.py``
"""

import os
import sys
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field


@dataclass
class ValidationResult:
    """Outcome of one validation category. Valid means no errors; warnings never fail it."""
    is_valid: bool
    errors: List[str]
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def collect(cls, errors: List[str], warnings: List[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors, warnings=warnings)


CATALOG_SOURCES = ["file", "dynamodb"]

# At least one of these is used to pick the model; defaults apply otherwise
BEDROCK_ENV_VARS = [
    "BEDROCK_MODEL",
    "BEDROCK_INFERENCE_PROFILE_ARN",
]

INTEGER_ENV_VARS = {
    "RATE_LIMIT_WINDOW_SECONDS": 3600,
    "RATE_LIMIT_MAX_REQUESTS": 20,
}

FLOAT_ENV_VARS = {
    "GENERATION_TIMEOUT_SECONDS": 8.0,
}

TRUE_VALUES = ("1", "true", "yes", "on")


def _get_int(env: Dict[str, str], name: str) -> int:
    raw = env.get(name)
    if raw in (None, ""):
        return INTEGER_ENV_VARS[name]
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be an integer, got '{raw}'")


def _get_float(env: Dict[str, str], name: str) -> float:
    raw = env.get(name)
    if raw in (None, ""):
        return FLOAT_ENV_VARS[name]
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable '{name}' must be a number, got '{raw}'")


def _get_origins(env: Dict[str, str]) -> List[str]:
    raw = env.get("ALLOWED_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class TriageSettings:
    """Typed view of the service configuration."""
    aws_region: str = "us-east-1"
    bedrock_region: str = "us-east-1"
    bedrock_model_id: Optional[str] = None
    enable_ai_advisory: bool = True
    generation_timeout_seconds: float = 8.0
    rate_limit_window_seconds: int = 3600
    rate_limit_max_requests: int = 20
    rate_limit_table_name: Optional[str] = None
    catalog_source: str = "file"
    catalog_path: Optional[str] = None
    symptoms_table_name: str = "symptoms"
    diseases_table_name: str = "diseases"
    disease_symptoms_table_name: str = "disease_symptoms"
    emergency_keywords_table_name: Optional[str] = None
    query_log_lambda_arn: Optional[str] = None
    environment: str = "development"
    allowed_origins: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, env_vars: Optional[Dict[str, str]] = None) -> "TriageSettings":
        """
        Build settings from environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = dict(os.environ) if env_vars is None else env_vars
        aws_region = env.get("AWS_REGION") or "us-east-1"

        return cls(
            aws_region=aws_region,
            bedrock_region=env.get("BEDROCK_REGION") or aws_region,
            bedrock_model_id=env.get("BEDROCK_INFERENCE_PROFILE_ARN") or env.get("BEDROCK_MODEL") or None,
            enable_ai_advisory=env.get("ENABLE_AI_ADVISORY", "true").strip().lower() in TRUE_VALUES,
            generation_timeout_seconds=_get_float(env, "GENERATION_TIMEOUT_SECONDS"),
            rate_limit_window_seconds=_get_int(env, "RATE_LIMIT_WINDOW_SECONDS"),
            rate_limit_max_requests=_get_int(env, "RATE_LIMIT_MAX_REQUESTS"),
            rate_limit_table_name=env.get("RATE_LIMIT_TABLE_NAME") or None,
            catalog_source=(env.get("CATALOG_SOURCE") or "file").strip().lower(),
            catalog_path=env.get("CATALOG_PATH") or None,
            symptoms_table_name=env.get("SYMPTOMS_TABLE_NAME") or "symptoms",
            diseases_table_name=env.get("DISEASES_TABLE_NAME") or "diseases",
            disease_symptoms_table_name=env.get("DISEASE_SYMPTOMS_TABLE_NAME") or "disease_symptoms",
            emergency_keywords_table_name=env.get("EMERGENCY_KEYWORDS_TABLE_NAME") or None,
            query_log_lambda_arn=env.get("QUERY_LOG_LAMBDA_ARN") or None,
            environment=(env.get("ENVIRONMENT") or "development").strip().lower(),
            allowed_origins=_get_origins(env),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def validate_environment_variables(env_vars: Optional[Dict[str, str]] = None) -> ValidationResult:
    """
    Validate the raw environment: parseable numbers, known catalog source,
    region present where AWS-backed components are switched on, and a CORS
    policy that is safe for the environment.
    """
    if env_vars is None:
        env_vars = dict(os.environ)

    errors = []
    warnings = []

    for name in INTEGER_ENV_VARS:
        try:
            _get_int(env_vars, name)
        except ValueError as e:
            errors.append(str(e))

    for name in FLOAT_ENV_VARS:
        try:
            _get_float(env_vars, name)
        except ValueError as e:
            errors.append(str(e))

    catalog_source = (env_vars.get("CATALOG_SOURCE") or "file").strip().lower()
    if catalog_source not in CATALOG_SOURCES:
        errors.append(
            f"Invalid CATALOG_SOURCE '{catalog_source}'. Must be one of {CATALOG_SOURCES}"
        )

    uses_dynamodb = (
        catalog_source == "dynamodb"
        or env_vars.get("RATE_LIMIT_TABLE_NAME")
        or env_vars.get("EMERGENCY_KEYWORDS_TABLE_NAME")
    )
    if uses_dynamodb and not env_vars.get("AWS_REGION"):
        errors.append(
            "Required environment variable 'AWS_REGION' is missing or empty "
            "(DynamoDB-backed components are enabled)"
        )

    if catalog_source == "file" and env_vars.get("CATALOG_PATH"):
        if not os.path.isfile(env_vars["CATALOG_PATH"]):
            errors.append(f"CATALOG_PATH '{env_vars['CATALOG_PATH']}' does not exist")

    ai_enabled = env_vars.get("ENABLE_AI_ADVISORY", "true").strip().lower() in TRUE_VALUES
    if ai_enabled and not any(env_vars.get(var) for var in BEDROCK_ENV_VARS):
        warnings.append(
            f"None of {BEDROCK_ENV_VARS} set, the default Bedrock model will be used"
        )

    if ai_enabled and "BEDROCK_REGION" not in env_vars:
        warnings.append("BEDROCK_REGION not set, will default to AWS_REGION")

    if "ENVIRONMENT" not in env_vars:
        warnings.append("ENVIRONMENT not set, will default to 'development'")

    environment = (env_vars.get("ENVIRONMENT") or "development").strip().lower()
    origins = _get_origins(env_vars)
    if environment == "production":
        if "*" in origins:
            errors.append("ALLOWED_ORIGINS must not contain '*' in production")
        elif not origins:
            errors.append("ALLOWED_ORIGINS must be explicitly set in production")
        if not env_vars.get("RATE_LIMIT_TABLE_NAME"):
            warnings.append(
                "RATE_LIMIT_TABLE_NAME not set, rate limits are per instance (in-memory)"
            )

    return ValidationResult.collect(errors, warnings)


def validate_rate_limit_configuration(settings: TriageSettings) -> ValidationResult:
    """Window and quota must be positive; flag values that effectively disable limiting."""
    errors = []
    warnings = []

    if settings.rate_limit_window_seconds <= 0:
        errors.append(
            f"Rate limit window must be positive, got {settings.rate_limit_window_seconds}"
        )

    if settings.rate_limit_max_requests <= 0:
        errors.append(
            f"Rate limit max requests must be positive, got {settings.rate_limit_max_requests}"
        )

    if 0 < settings.rate_limit_window_seconds < 60:
        warnings.append(
            f"Rate limit window of {settings.rate_limit_window_seconds}s is very short"
        )

    if settings.rate_limit_max_requests > 1000:
        warnings.append(
            f"Rate limit of {settings.rate_limit_max_requests} requests per window is very high"
        )

    return ValidationResult.collect(errors, warnings)


def validate_timeout_configuration(settings: TriageSettings) -> ValidationResult:
    """Collaborator calls must be bounded; generation has to fit in a chat round trip."""
    errors = []
    warnings = []

    timeout = settings.generation_timeout_seconds
    if timeout <= 0:
        errors.append(f"Generation timeout must be positive, got {timeout}")
    elif timeout > 30:
        errors.append(f"Generation timeout of {timeout}s exceeds the 30s limit")
    elif timeout < 2:
        warnings.append(
            f"Generation timeout of {timeout}s is very short, most advisories will use fallback text"
        )

    return ValidationResult.collect(errors, warnings)


def validate_all_configurations(
    env_vars: Optional[Dict[str, str]] = None
) -> Tuple[bool, Dict[str, ValidationResult]]:
    """
    Run every check against ``env_vars`` (default: the process environment).

    Returns:
        ``(all_valid, results)`` with one ValidationResult per category:
        environment, rate_limit, timeouts
    """
    try:
        settings = TriageSettings.from_env(env_vars)
    except ValueError:
        # Unparseable numbers are reported by the environment check
        settings = TriageSettings()

    results = {
        "environment": validate_environment_variables(env_vars),
        "rate_limit": validate_rate_limit_configuration(settings),
        "timeouts": validate_timeout_configuration(settings),
    }
    return all(result.is_valid for result in results.values()), results


def print_validation_results(results: Dict[str, ValidationResult]) -> None:
    """One block per category: status line, then errors (E) and warnings (W)."""
    for category, result in results.items():
        status = "ok" if result.is_valid else "INVALID"
        print(f"[{category}] {status}")
        for error in result.errors:
            print(f"  E {error}")
        for warning in result.warnings:
            print(f"  W {warning}")


if __name__ == "__main__":
    from dotenv import load_dotenv

    load_dotenv()
    valid, validation_results = validate_all_configurations()
    print_validation_results(validation_results)
    sys.exit(0 if valid else 1)
