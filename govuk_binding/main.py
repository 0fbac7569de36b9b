"""CLI entrypoint for checking binding declarations and trying form input."""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from typing import List, Optional

from .binders import BindingError
from .binding_loader import BindingDeclarationError, load_bindings
from .config import load_config
from .form_binder import FormBinder
from .logging_setup import setup_logging
from .value_provider import QueryStringValueProvider


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="GOV.UK form field binding")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate-bindings", help="Validate bindings file")
    validate_parser.add_argument("--bindings", help="Override bindings file path")

    bind_parser = subparsers.add_parser("bind", help="Bind a query string against a declared form")
    bind_parser.add_argument("container", help="Declared form container name")
    bind_parser.add_argument("--query", default="", help="URL-encoded form data, e.g. 'age=42'")
    bind_parser.add_argument("--bindings", help="Override bindings file path")

    args = parser.parse_args(argv)

    config = load_config()
    bindings_path = args.bindings or config.bindings_file

    logger = setup_logging(config.log_file, config.log_level, str(uuid.uuid4()))

    try:
        declarations = load_bindings(bindings_path)
    except (BindingDeclarationError, OSError) as exc:
        logger.error("bindings_invalid", extra={"event": "bindings_invalid", "detail": str(exc)})
        print(f"Bindings validation failed: {exc}")
        return 2

    if args.command == "validate-bindings":
        print(f"Bindings validation: OK ({len(declarations.forms)} forms)")
        return 0

    if args.command == "bind":
        binder = FormBinder(declarations, logger, max_allowed_errors=config.max_model_errors)
        try:
            result = binder.bind(args.container, QueryStringValueProvider(args.query))
        except BindingError as exc:
            print(f"Binding failed: {exc}")
            return 2
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0 if result.is_valid else 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
