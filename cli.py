from __future__ import annotations

import argparse
import json
import sys

from lookup_gateway.api.services import build_services
from lookup_gateway.api.responses import Outcome, build_response
from lookup_gateway.utils.settings import load_settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="One-off mobile number lookup (no quota)")
    parser.add_argument("--number", required=True, help="Mobile number, with or without +91")
    parser.add_argument("--config", default=None, help="Gateway config YAML path")
    parser.add_argument("--compact", action="store_true", help="Print compact JSON")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    settings = load_settings(args.config)
    services = build_services(settings)

    cleaned = services.mobile_validator.validate(args.number)
    if cleaned is None:
        response = build_response(Outcome.INVALID_INPUT, settings.branding, message=services.mobile_validator.error)
    else:
        result = services.orchestrator.resolve(cleaned)
        if result.success:
            response = build_response(
                Outcome.SUCCESS,
                settings.branding,
                result=result.items,
                remaining=settings.quota.limit,
            )
        else:
            response = build_response(Outcome.NOT_FOUND, settings.branding)

    print(json.dumps(response.body, ensure_ascii=False, indent=None if args.compact else 2))
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
