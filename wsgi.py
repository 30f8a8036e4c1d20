"""WSGI entry point for the redev application.

Serve ``wsgi:app`` with any WSGI server, or run this module directly for the
Flask development server.
"""

import argparse
import os
from typing import List, Optional

from redev import create_app

app = create_app()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse development server options; PORT from the environment is the default."""
    parser = argparse.ArgumentParser(description="Run the redev development server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", 5000)))
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    app.run(debug=app.config["DEBUG"], host=args.host, port=args.port)
