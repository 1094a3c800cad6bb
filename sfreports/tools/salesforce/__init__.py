"""Salesforce report tools."""

from .reports import (
    SalesforceReports,
    ManageReportsArgs,
    handle_manage_reports,
    UNIFIED_REPORT_TOOLS
)
from .report_formatter import format_report_results
from .analytics import SalesforceReportsConnection

__all__ = [
    'SalesforceReports',
    'ManageReportsArgs',
    'handle_manage_reports',
    'format_report_results',
    'SalesforceReportsConnection',
    'UNIFIED_REPORT_TOOLS'
]
