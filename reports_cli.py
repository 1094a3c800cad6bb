#!/usr/bin/env python3
"""Run one Salesforce report operation from the command line.

Examples:
    python reports_cli.py list
    python reports_cli.py list --query-filter "Format = 'MATRIX'" --limit 20
    python reports_cli.py execute --report-id 00O5e000000abcd --details \\
        --filter AMOUNT:greaterThan:10000
    python reports_cli.py getInstanceResults --report-id 00O... --instance-id 0LG...
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

# sfreports reads the environment on import; import it only after .env is loaded


def _parse_filter(raw: str) -> dict:
    # Values may themselves contain ':' (times, URLs)
    parts = raw.split(':', 2)
    if len(parts) != 3 or not all(parts[:2]):
        raise argparse.ArgumentTypeError(f"filter must be column:operator:value, got '{raw}'")
    column, operator, value = parts
    return {'column': column, 'operator': operator, 'value': value}


def build_parser() -> argparse.ArgumentParser:
    from sfreports.utils.config.constants import REPORT_OPERATIONS

    parser = argparse.ArgumentParser(description="Salesforce report operations")
    parser.add_argument('operation', choices=REPORT_OPERATIONS)
    parser.add_argument('--report-id', dest='report_id')
    parser.add_argument('--instance-id', dest='instance_id')
    parser.add_argument('--details', dest='include_details', action='store_true',
                        help='Include detail rows in execution results')
    parser.add_argument('--filter', dest='filters', action='append', type=_parse_filter,
                        help='Runtime filter override as column:operator:value (repeatable)')
    parser.add_argument('--query-filter', dest='query_filter',
                        help='SOQL WHERE clause for searching reports')
    parser.add_argument('--limit', type=int)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))

    from sfreports.tools.salesforce import SalesforceReports
    from sfreports.utils.logging import log_operation

    args = build_parser().parse_args(argv)
    tool_input = {k: v for k, v in vars(args).items() if v not in (None, False)}

    with log_operation("reports", "cli_run", report_operation=args.operation):
        result = asyncio.run(SalesforceReports().ainvoke(tool_input))

    print(result["content"][0]["text"])
    return 1 if result["isError"] else 0


if __name__ == "__main__":
    sys.exit(main())
