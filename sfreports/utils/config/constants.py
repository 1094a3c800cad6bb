"""
Central constants for the Salesforce reports tooling.

Single source of truth for operation names, Analytics API keys, fixed SOQL
field sets and the placeholder strings used in rendered output.
"""

# Tool identity
REPORTS_TOOL_NAME = "salesforce_manage_reports"

# Report operations
OPERATION_LIST = "list"
OPERATION_DESCRIBE = "describe"
OPERATION_EXECUTE = "execute"
OPERATION_EXECUTE_ASYNC = "executeAsync"
OPERATION_GET_INSTANCES = "getInstances"
OPERATION_GET_INSTANCE_RESULTS = "getInstanceResults"

REPORT_OPERATIONS = (
    OPERATION_LIST,
    OPERATION_DESCRIBE,
    OPERATION_EXECUTE,
    OPERATION_EXECUTE_ASYNC,
    OPERATION_GET_INSTANCES,
    OPERATION_GET_INSTANCE_RESULTS,
)

# SOQL over the Report object
REPORT_OBJECT = "Report"
REPORT_LIST_FIELDS = (
    "Id", "Name", "Description", "Format", "DeveloperName",
    "FolderName", "LastRunDate", "CreatedDate", "LastModifiedDate",
)
DEFAULT_REPORT_LIST_LIMIT = 200

# Analytics REST API
DEFAULT_SALESFORCE_API_VERSION = "59.0"
ANALYTICS_REPORTS_PATH = "analytics/reports"
REPORT_ID_PREFIX = "00O"

# Fact map keys
GRAND_TOTAL_KEY = "T!T"
SUBTOTAL_SUFFIX = "!T"

# Error message markers
ACCESS_ERROR_MARKERS = ("INSUFFICIENT_ACCESS", "INVALID_CROSS_REFERENCE")
NOT_FOUND_ERROR_MARKERS = ("INVALID_ID_FIELD", "NOT_FOUND")

# Rendered placeholders
NOT_AVAILABLE = "N/A"
NO_DATA_TEXT = "No data returned."
NO_INSTANCES_TEXT = "No async report instances found for this report."
