#!/usr/bin/env python3
"""
Run script for the RigAsset API
"""

import argparse
import os
import sys
from dotenv import load_dotenv

# Load environment variables from .env file before the app reads them
load_dotenv()

from rigasset import create_app
from rigasset.build import build_database
from rigasset.logger import get_logger

logger = get_logger("rigasset.run")


def parse_arguments():
    parser = argparse.ArgumentParser(description='RigAsset API server')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables (and demo data) then exit without starting the server')
    parser.add_argument('--no-demo-data', action='store_false', dest='with_data',
                        help='Create tables only; skip demo reference data')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()
    app = create_app()

    build_database(app, with_data=args.with_data)

    if args.build_only:
        logger.info("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode})")
    app.run(debug=debug_mode, host=host, port=port)
