#!/usr/bin/env python3
"""
Local Run Script

Convenience script for running the intervention server locally and poking
at a running instance.

Usage:
    python scripts/local_run.py --serve
    python scripts/local_run.py --force hand --duration 8000
    python scripts/local_run.py --poll
    python scripts/local_run.py --history
"""

import argparse
import json
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def main():
    parser = argparse.ArgumentParser(
        description="Run or query the intervention server locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the Flask server on HOST:PORT",
    )
    parser.add_argument(
        "--force",
        metavar="TYPE",
        help="Force an intervention on a running server (hand, ball, collision)",
    )
    parser.add_argument(
        "--duration",
        type=int,
        help="Duration in ms for --force (default: server setting)",
    )
    parser.add_argument(
        "--poll",
        action="store_true",
        help="Poll the running server for the current intervention",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Show intervention history and cooldown status",
    )
    parser.add_argument(
        "--url",
        help="Server URL (default: INTERVENTION_SERVER_URL)",
    )

    args = parser.parse_args()

    # Import after path setup
    from core.config import get_settings

    settings = get_settings()

    if args.serve:
        from adapters.flask_app import create_app

        try:
            settings.validate_for_server()
        except ValueError as e:
            print(e)
            sys.exit(1)

        print(f"Causal Intervention Server running on http://{settings.host}:{settings.port}")
        print(f"Intervention cooldown period: {settings.cooldown_ms / 1000:g} seconds")
        print("Available intervention types:")
        print("  1. handPosition - Fixes the hand at a specific position")
        print("  2. ballPosition - Fixes the ball at a specific position")
        print("  3. collision - Prevents collisions between hand and ball")
        print("\nTEST ENDPOINTS:")
        print("  - To force an intervention: GET /force_intervention/:type")
        print("    Available types: hand, ball, collision")
        print(f"    Example: http://localhost:{settings.port}/force_intervention/hand?duration=8000")

        app = create_app(settings=settings)
        app.run(host=settings.host, port=settings.port, threaded=True)
        return

    if not (args.force or args.poll or args.history):
        parser.print_help()
        return

    import requests
    from core.clients.intervention_client import InterventionClient, get_client

    client = InterventionClient(args.url) if args.url else get_client(settings)

    try:
        if args.force:
            output = client.force(args.force, duration=args.duration)
        elif args.poll:
            output = {"interventions": client.poll()}
        else:
            output = client.debug_history()
    except requests.RequestException as e:
        print(f"\nRequest failed: {e}")
        sys.exit(1)

    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
