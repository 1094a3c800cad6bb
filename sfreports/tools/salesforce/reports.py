"""Salesforce report operations: list, describe, execute and async instances.

``handle_manage_reports`` is the request dispatcher. It validates the
per-operation required fields, issues exactly one call to the connection,
renders the response and always returns the tool envelope::

    {"content": [{"type": "text", "text": "..."}], "isError": False}

Failures raised by the connection are reported in the same envelope with
``isError`` set, enriched with remediation hints for access and not-found
errors.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from sfreports.utils.config import config
from sfreports.utils.config.constants import (
    ACCESS_ERROR_MARKERS,
    NO_INSTANCES_TEXT,
    NOT_FOUND_ERROR_MARKERS,
    OPERATION_DESCRIBE,
    OPERATION_EXECUTE,
    OPERATION_EXECUTE_ASYNC,
    OPERATION_GET_INSTANCE_RESULTS,
    OPERATION_GET_INSTANCES,
    OPERATION_LIST,
    REPORT_ID_PREFIX,
    REPORT_LIST_FIELDS,
    REPORT_OBJECT,
    REPORT_OPERATIONS,
    REPORTS_TOOL_NAME,
)
from sfreports.utils.logging.framework import SmartLogger
from sfreports.utils.platform.salesforce import SOQLQueryBuilder
from .base import BaseSalesforceTool
from .report_formatter import (
    format_async_instance,
    format_recent_reports,
    format_report_description,
    format_report_instances,
    format_report_list,
    format_report_results,
)
from .report_models import (
    RecentReport,
    ReportDescription,
    ReportFilter,
    ReportInstance,
    ReportRecord,
)

logger = SmartLogger("reports")


REPORTS_TOOL_DESCRIPTION = """Manage Salesforce Reports: list, describe metadata, execute (run), and retrieve async instance results.

Operations:
1. list - List recently viewed reports (up to 200) or query reports via SOQL for broader results
   - Use query_filter to search reports by name, format, folder, or other Report object fields
   - Without query_filter, returns recently viewed reports

2. describe - Get report metadata (columns, filters, groupings, report type) without executing
   - Requires report_id

3. execute - Run a report synchronously and get results
   - Requires report_id
   - Use include_details=true to get individual row data (not just aggregates)
   - Use filters to override report filters at runtime without modifying the saved report

4. executeAsync - Run a report asynchronously (for large/long-running reports)
   - Requires report_id
   - Returns an instance ID to retrieve results later

5. getInstances - List all async execution instances for a report
   - Requires report_id
   - Returns instance IDs with their status and completion timestamps

6. getInstanceResults - Retrieve results from an async report execution
   - Requires report_id and instance_id

Examples:
- List recent reports: {"operation": "list"}
- Search reports by name: {"operation": "list", "query_filter": "Name LIKE '%Revenue%'"}
- Get report metadata: {"operation": "describe", "report_id": "00O..."}
- Run report with details: {"operation": "execute", "report_id": "00O...", "include_details": true}
- Run with filter override: {"operation": "execute", "report_id": "00O...", "filters": [{"column": "AMOUNT", "operator": "greaterThan", "value": "10000"}]}
- Async execution: {"operation": "executeAsync", "report_id": "00O...", "include_details": true}
- Get async results: {"operation": "getInstanceResults", "report_id": "00O...", "instance_id": "0LG..."}"""


class ManageReportsArgs(BaseModel):
    """Request for one report operation.

    Accepts snake_case names or the camelCase names of the JSON tool schema.
    """
    operation: str = Field(description="The report operation to perform: " + ", ".join(REPORT_OPERATIONS))
    report_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('report_id', 'reportId'),
        description="The Salesforce Report ID (required for describe, execute, executeAsync, getInstances, getInstanceResults)"
    )
    instance_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('instance_id', 'instanceId'),
        description="The async report instance ID (required for getInstanceResults)"
    )
    include_details: Optional[bool] = Field(
        None,
        validation_alias=AliasChoices('include_details', 'includeDetails'),
        description="Include detail rows in execution results (default: false, only aggregates returned)"
    )
    filters: Optional[List[ReportFilter]] = Field(
        None,
        description="Runtime filter overrides for report execution (does not modify the saved report)"
    )
    query_filter: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('query_filter', 'queryFilter'),
        description="SOQL WHERE clause to filter reports in list operation (e.g., \"Name LIKE '%Revenue%'\" or \"Format = 'MATRIX'\")"
    )
    limit: Optional[int] = Field(
        None,
        description="Maximum number of reports to return in list operation (default: 200)"
    )


def _text_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    return {
        "content": [{"type": "text", "text": text}],
        "isError": is_error,
    }


def build_execution_options(request: ManageReportsArgs) -> Dict[str, Any]:
    """Options for execute/executeAsync.

    Filters become a ``reportMetadata.reportFilters`` override that replaces
    the saved filters for this run only.
    """
    options: Dict[str, Any] = {}

    if request.include_details:
        options['details'] = True

    if request.filters:
        options['metadata'] = {
            'reportMetadata': {
                'reportFilters': [
                    {'column': f.column, 'operator': f.operator, 'value': f.value}
                    for f in request.filters
                ]
            }
        }

    return options


def build_report_search_query(query_filter: str, limit: Optional[int] = None) -> str:
    return (SOQLQueryBuilder()
            .select(*REPORT_LIST_FIELDS)
            .from_object(REPORT_OBJECT)
            .where_raw(query_filter)
            .limit(limit or config.report_list_limit)
            .build())


def enhance_error_message(message: str) -> str:
    """Append remediation hints for access and not-found errors."""
    if any(marker in message for marker in ACCESS_ERROR_MARKERS):
        return (f"Access error: {message}\n\n"
                "Ensure the user has:\n"
                '1. "Run Reports" permission\n'
                "2. Access to the report's folder\n"
                "3. The report ID is correct")
    if any(marker in message for marker in NOT_FOUND_ERROR_MARKERS):
        return (f"Report not found: {message}\n\n"
                f'Check that the report ID is valid and starts with "{REPORT_ID_PREFIX}".')
    return message


# ---------------------------------------------------------------------------
# Operation handlers
# ---------------------------------------------------------------------------

async def _list_reports(conn: Any, request: ManageReportsArgs) -> str:
    if request.query_filter:
        soql = build_report_search_query(request.query_filter, request.limit)
        logger.info("report_search_query",
                    operation=OPERATION_LIST,
                    query=soql,
                    query_length=len(soql))
        result = await conn.query(soql)
        records = [ReportRecord.model_validate(r) for r in result.get('records', [])]
        return format_report_list(records)

    reports = await conn.analytics.reports()
    return format_recent_reports([RecentReport.model_validate(r) for r in reports or []])


async def _describe_report(conn: Any, request: ManageReportsArgs) -> str:
    meta = await conn.analytics.report(request.report_id).describe()
    return format_report_description(ReportDescription.validate_sections(meta or {}))


async def _execute_report(conn: Any, request: ManageReportsArgs) -> str:
    report = conn.analytics.report(request.report_id)
    result = await report.execute(build_execution_options(request))
    return format_report_results(result, bool(request.include_details))


async def _execute_report_async(conn: Any, request: ManageReportsArgs) -> str:
    report = conn.analytics.report(request.report_id)
    instance = await report.execute_async(build_execution_options(request))
    return format_async_instance(ReportInstance.model_validate(instance or {}))


async def _get_instances(conn: Any, request: ManageReportsArgs) -> str:
    instances = await conn.analytics.report(request.report_id).instances()
    formatted = format_report_instances([ReportInstance.model_validate(i) for i in instances or []])
    return formatted if formatted is not None else NO_INSTANCES_TEXT


async def _get_instance_results(conn: Any, request: ManageReportsArgs) -> str:
    report = conn.analytics.report(request.report_id)
    result = await report.instance(request.instance_id).retrieve()
    return format_report_results(result, bool(request.include_details))


_HANDLERS: Dict[str, Callable[[Any, ManageReportsArgs], Awaitable[str]]] = {
    OPERATION_LIST: _list_reports,
    OPERATION_DESCRIBE: _describe_report,
    OPERATION_EXECUTE: _execute_report,
    OPERATION_EXECUTE_ASYNC: _execute_report_async,
    OPERATION_GET_INSTANCES: _get_instances,
    OPERATION_GET_INSTANCE_RESULTS: _get_instance_results,
}


def _missing_field(request: ManageReportsArgs) -> Optional[str]:
    if request.operation != OPERATION_LIST and not request.report_id:
        return 'reportId'
    if request.operation == OPERATION_GET_INSTANCE_RESULTS and not request.instance_id:
        return 'instanceId'
    return None


async def handle_manage_reports(conn: Any,
                                args: Union[ManageReportsArgs, Mapping[str, Any]]) -> Dict[str, Any]:
    """Dispatch one report operation and return the tool envelope.

    Args:
        conn: Connection exposing ``query`` and ``analytics`` (see analytics.py)
        args: A ``ManageReportsArgs`` or an equivalent mapping

    Returns:
        ``{"content": [{"type": "text", "text": ...}], "isError": bool}``
    """
    if isinstance(args, ManageReportsArgs):
        request = args
    else:
        try:
            request = ManageReportsArgs.model_validate(dict(args))
        except ValidationError as e:
            logger.warning("report_request_invalid", error=str(e))
            return _text_result(f"Invalid report request: {e}", is_error=True)

    operation = request.operation
    handler = _HANDLERS.get(operation)
    if handler is None:
        logger.warning("report_operation_unknown", operation=operation)
        return _text_result(
            f"Unknown report operation: {operation}. Valid operations: {', '.join(REPORT_OPERATIONS)}",
            is_error=True
        )

    missing = _missing_field(request)
    if missing:
        logger.warning("report_request_missing_field", operation=operation, field=missing)
        return _text_result(f"{missing} is required for {operation} operation", is_error=True)

    logger.info("report_operation_start",
                operation=operation,
                report_id=request.report_id,
                instance_id=request.instance_id,
                include_details=bool(request.include_details),
                filter_count=len(request.filters or []))

    try:
        text = await handler(conn, request)
    except Exception as e:
        logger.error("report_operation_error",
                     operation=operation,
                     report_id=request.report_id,
                     error=str(e),
                     error_type=type(e).__name__)
        return _text_result(f"Error in report {operation}: {enhance_error_message(str(e))}", is_error=True)

    logger.info("report_operation_complete",
                operation=operation,
                report_id=request.report_id,
                text_length=len(text))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("report_operation_output", operation=operation, text_preview=text[:500])
    return _text_result(text)


class SalesforceReports(BaseSalesforceTool):
    """List, describe and run Salesforce reports."""
    name: str = REPORTS_TOOL_NAME
    description: str = REPORTS_TOOL_DESCRIPTION
    args_schema: type = ManageReportsArgs  # pyright: ignore[reportIncompatibleVariableOverride]

    async def _execute(self, **kwargs) -> Dict[str, Any]:
        """Resolve the connection and dispatch the request."""
        try:
            conn = self.connection
        except Exception as e:
            self._log_error(e)
            operation = kwargs.get('operation', 'request')
            return _text_result(f"Error in report {operation}: unable to connect to Salesforce: {e}",
                                is_error=True)

        return await handle_manage_reports(conn, kwargs)


UNIFIED_REPORT_TOOLS = [
    SalesforceReports(),
]
