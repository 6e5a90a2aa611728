"""Main entry point for the hotel onboarding wizard runner."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from src.config import configure_logging, get_logger, settings
from src.services import HotelOnboardingService, OnboardingError

logger = get_logger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m src.main",
        description="Submit wizard steps from a JSON file to the hotel CMS API.",
    )
    parser.add_argument(
        "--input",
        required=True,
        type=Path,
        help="JSON object mapping step names (hotel, roomInfo, ...) to step payloads",
    )
    parser.add_argument(
        "--hotel-id",
        type=int,
        default=None,
        help="Edit this existing hotel instead of onboarding a new one",
    )
    return parser.parse_args(argv)


def load_payloads(path: Path) -> dict[str, Any]:
    with path.open(encoding="utf-8") as handle:
        payloads = json.load(handle)
    if not isinstance(payloads, dict):
        raise ValueError(f"{path} must contain a JSON object keyed by step name")
    return payloads


async def main(argv: Optional[list[str]] = None) -> int:
    """Run the wizard for the steps in the input file and print a JSON summary.

    Returns:
        0 when every submitted step succeeded, 1 otherwise
    """
    args = parse_args(argv)

    logger.info(
        "Starting hotel onboarding wizard",
        environment=settings.environment,
        hotel_id=args.hotel_id,
    )

    missing = settings.validate_api_auth()
    if missing:
        logger.error("API auth config incomplete", missing=missing)
        print(json.dumps({"success": False, "error": f"Missing: {', '.join(missing)}"}))
        return 1

    try:
        payloads = load_payloads(args.input)
    except (OSError, ValueError) as e:
        logger.error("Could not read wizard input", path=str(args.input), error=str(e))
        print(json.dumps({"success": False, "error": str(e)}))
        return 1

    service = HotelOnboardingService()
    try:
        if args.hotel_id is not None:
            session = await service.load_for_edit(args.hotel_id)
        else:
            session = service.start_add()

        results = await service.run_steps(session, payloads)
        success = bool(results) and all(result.success for result in results)

        summary = {
            "success": success,
            "hotel_id": next(
                (result.hotel_id for result in reversed(results) if result.hotel_id), None
            ),
            "steps": [result.model_dump(mode="json") for result in results],
            "session": session.snapshot(),
        }
        logger.info(
            "Wizard run complete",
            success=success,
            submitted_steps=len(results),
            finished=session.finished,
        )
        print(json.dumps(summary, indent=2, default=str))
        return 0 if success else 1

    except OnboardingError as e:
        logger.error("Could not start wizard session", error=str(e))
        print(json.dumps({"success": False, "error": str(e)}))
        return 1
    except Exception as e:
        logger.error(
            "Fatal error in main application",
            error=str(e),
            exc_info=True,
        )
        return 1
    finally:
        await service.close()


def run_sync(argv: Optional[list[str]] = None) -> int:
    """Run the async main function synchronously.

    Returns:
        Exit code from main()
    """
    return asyncio.run(main(argv))


def cli() -> None:
    """Console script entry point."""
    # Configure logging
    configure_logging()

    # Run main function and exit with returned code
    sys.exit(run_sync())


if __name__ == "__main__":
    cli()
