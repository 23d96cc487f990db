"""
Command line entry point: run one Athena query and print its rows as JSON.

Usage:
    athena-query "SELECT * FROM users LIMIT 10" \\
        --output-location s3://my-bucket/athena-results/ \\
        --database my_database --region us-east-1
"""

import argparse
import contextlib
import json
import sys
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .errors import QueryFailedError, QueryTimeoutError
from .executor import AthenaExecutor


def build_params(args: argparse.Namespace) -> dict:
    """Build StartQueryExecution parameters from parsed arguments."""
    params = {'QueryString': args.query}
    if args.output_location:
        params['ResultConfiguration'] = {'OutputLocation': args.output_location}
    if args.database:
        params['QueryExecutionContext'] = {'Database': args.database}
    if args.workgroup:
        params['WorkGroup'] = args.workgroup
    return params


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='athena-query',
        description='Run an Athena query and print the result rows as JSON'
    )
    parser.add_argument('query', help='SQL query string')
    parser.add_argument('--output-location', help='S3 URI for query results')
    parser.add_argument('--database', help='Database for the query context')
    parser.add_argument('--workgroup', help='Athena workgroup')
    parser.add_argument('--region', help='AWS region (defaults to boto3 resolution)')
    parser.add_argument('--poll-interval', type=float, default=1.0,
                        help='Seconds between status checks (default: 1.0)')
    parser.add_argument('--timeout', type=float, default=None,
                        help='Give up after this many seconds')
    parser.add_argument('--verbose', action='store_true', help='Print polling progress to stderr')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    configs = {}
    if args.region:
        configs['region_name'] = args.region

    executor = AthenaExecutor(configs=configs, verbose=args.verbose)
    params = build_params(args)

    try:
        # stdout carries only the JSON rows
        with contextlib.redirect_stdout(sys.stderr):
            rows = executor.run_query(
                params,
                poll_interval=args.poll_interval,
                timeout_seconds=args.timeout
            )
    except (QueryFailedError, QueryTimeoutError, ClientError, BotoCoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(rows, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
