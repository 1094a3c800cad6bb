"""Tool implementations."""

from .salesforce import SalesforceReports, UNIFIED_REPORT_TOOLS

__all__ = [
    'SalesforceReports',
    'UNIFIED_REPORT_TOOLS',
]
