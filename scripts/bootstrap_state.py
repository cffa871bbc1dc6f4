#!/usr/bin/env python3
"""
Create the Terraform remote state bucket and lock table.

Run once per environment before the first ``cdktf deploy``:

    python scripts/bootstrap_state.py --environment dev
"""

import argparse
import os
import sys

import boto3

# Add repo root and src to path for imports
ROOT = os.path.join(os.path.dirname(__file__), '..')
sys.path.append(ROOT)
sys.path.append(os.path.join(ROOT, 'src'))

from infrastructure.config.environment_config import EnvironmentConfig
from state_backend.bootstrap import StateBackendError, bootstrap_state_backend


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--environment",
        default=os.environ.get("ENVIRONMENT", "dev"),
        help="Deployment environment (dev, staging, production)"
    )
    parser.add_argument("--profile", default=None, help="AWS profile to use")
    return parser.parse_args(argv)


def main(argv=None):
    """Main bootstrap function."""
    args = parse_args(argv)

    try:
        config = EnvironmentConfig.get_config(args.environment)
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    session = boto3.Session(profile_name=args.profile)

    try:
        status = bootstrap_state_backend(config, session=session)
    except StateBackendError as e:
        print(f"Error bootstrapping state backend ({e.error_code}): {e}")
        return 1

    print(f"State bucket: {status.bucket} ({'created' if status.bucket_created else 'existing'})")
    print(f"Lock table:   {status.table} ({'created' if status.table_created else 'existing'})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
