"""Command-line tool to validate sample JSON against a pydantic model."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import importlib
import json
import logging
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError

from validation_response.core.config import SUPPORTED_FORMATS
from validation_response.core.config import ConfigurationError
from validation_response.core.config import get_settings
from validation_response.core.config import load_settings
from validation_response.formatting.formatters import create_formatter
from validation_response.violations.mapper import map_pydantic_errors

logger = logging.getLogger(__name__)

DEFAULT_MODULE_PREFIXES = ("app.dto", "app.schemas", "app.models", "app.requests")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class ClassResolutionError(LookupError):
    """Raised when a model name cannot be resolved to a pydantic model class."""


class DeserializationError(ValueError):
    """Raised when sample data is not valid JSON."""


def resolve_model_class(name: str, module_prefixes: Sequence[str] = DEFAULT_MODULE_PREFIXES) -> type[BaseModel]:
    """Resolve ``module.Class`` directly, or a bare class name via ``module_prefixes``."""
    if "." in name:
        candidates = [name]
    else:
        candidates = [f"{prefix}.{name}" for prefix in module_prefixes]

    for candidate in candidates:
        model = _import_model(candidate)
        if model is not None:
            return model

    raise ClassResolutionError(f'Class "{name}" does not exist')


def _import_model(qualified_name: str) -> type[BaseModel] | None:
    module_name, _, class_name = qualified_name.rpartition(".")
    if not module_name:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        logger.debug("Module %s is not importable", module_name)
        return None

    candidate = getattr(module, class_name, None)
    if isinstance(candidate, type) and issubclass(candidate, BaseModel):
        return candidate
    return None


def decode_sample(raw: str) -> Any:
    """Decode the JSON sample passed on the command line."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DeserializationError(str(exc)) from exc


def run_validation_test(
    class_name: str,
    raw_data: str,
    *,
    format_name: str | None = None,
    module_prefixes: Sequence[str] = DEFAULT_MODULE_PREFIXES,
) -> int:
    """Validate ``raw_data`` against ``class_name`` and print the formatted result."""
    try:
        model = resolve_model_class(class_name, module_prefixes)
    except ClassResolutionError as exc:
        print(f"✗ {exc}")
        return EXIT_FAILURE

    try:
        data = decode_sample(raw_data)
    except DeserializationError as exc:
        print("✗ Failed to deserialize JSON")
        print(f"Error: {exc}")
        return EXIT_FAILURE

    try:
        model.model_validate(data)
    except ValidationError as exc:
        violations = map_pydantic_errors(exc.errors(), schema=model)
    else:
        print("✓ Validation passed! No errors found.")
        return EXIT_SUCCESS

    try:
        settings = get_settings() if format_name is None else load_settings(format=format_name)
    except ConfigurationError as exc:
        print(f"✗ {exc}")
        return EXIT_FAILURE
    formatter = create_formatter(settings)

    count = len(violations)
    print(f"✗ Validation Failed ({count} error{'s' if count > 1 else ''})")
    print()
    for violation in violations:
        print(f"  ✗ {violation.path or '(root)'}: {violation.message}")

    print()
    print("Formatted Output:")
    print(json.dumps(formatter.format(violations), indent=4, ensure_ascii=False))
    return EXIT_FAILURE


def _cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validation response tooling.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    test_parser = subparsers.add_parser(
        "test",
        help="Test validation on a model with sample data",
        epilog=(
            "examples:\n"
            "  validation-response test CreateProductDto '{\"name\":\"\",\"price\":-100}'\n"
            "  validation-response test app.dto.CreateProductDto '{\"name\":\"Laptop\",\"price\":1000}'"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    test_parser.add_argument("model", help="Model class name (e.g. CreateProductDto or app.dto.CreateProductDto)")
    test_parser.add_argument("data", help="JSON data to validate")
    test_parser.add_argument("--format", choices=SUPPORTED_FORMATS, default=None, help="Override the configured format")
    test_parser.add_argument(
        "--module-prefix",
        action="append",
        dest="module_prefixes",
        default=None,
        help="Module searched for bare class names (repeatable)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    return run_validation_test(
        args.model,
        args.data,
        format_name=args.format,
        module_prefixes=tuple(args.module_prefixes or DEFAULT_MODULE_PREFIXES),
    )


def main() -> None:
    """CLI entrypoint."""
    raise SystemExit(_cli())


if __name__ == "__main__":
    main()
