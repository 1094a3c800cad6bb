"""Plain-text rendering of Salesforce report payloads.

``format_report_results`` turns an execution result (a fact map plus optional
row/column groupings) into a fixed sequence of sections:

1. metadata summary (name, format, active filters)
2. ``No data returned.`` when there is no fact map at all
3. grouping counts
4. grand totals from the ``T!T`` bucket
5. detail rows as a Markdown table (only when details were requested)
6. grouped results, rendered depth-first with per-group subtotals

Aggregates are labelled positionally: the n-th aggregate takes the n-th key of
``aggregateColumnInfo``. The API returns both in the same order today; nothing
else ties them together.

The remaining ``format_*`` helpers render the listing, describe and async
instance responses. All functions are pure.
"""

from typing import Any, Dict, List, Optional, Sequence

from sfreports.utils.config.constants import (
    GRAND_TOTAL_KEY,
    NO_DATA_TEXT,
    NOT_AVAILABLE,
    SUBTOTAL_SUFFIX,
)
from .report_models import (
    ColumnInfo,
    FactMapBucket,
    Grouping,
    GroupingColumn,
    RecentReport,
    ReportCell,
    ReportDescription,
    ReportInstance,
    ReportRecord,
    ReportResult,
)


def _text(value: Any, default: str = NOT_AVAILABLE) -> str:
    if value is None:
        return default
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _or_na(value: Any) -> str:
    """Empty strings count as missing, as for optional record fields."""
    return _text(value) if value not in (None, '') else NOT_AVAILABLE


def cell_display(cell: ReportCell) -> str:
    """Display label, else raw value, else N/A."""
    if cell.label is not None:
        return _text(cell.label)
    return _text(cell.value)


def aggregate_label(index: int, aggregate_keys: Sequence[str],
                    aggregate_info: Dict[str, Optional[ColumnInfo]]) -> str:
    if index < len(aggregate_keys):
        key = aggregate_keys[index]
        info = aggregate_info.get(key)
        return (info.label if info else None) or key
    return f"Aggregate {index}"


def column_label(index: int, detail_columns: Sequence[str],
                 column_info: Dict[str, Optional[ColumnInfo]]) -> str:
    column = detail_columns[index] if index < len(detail_columns) else None
    if not column:
        return f"Col{index}"
    info = column_info.get(column)
    return (info.label if info else None) or column


class _RenderContext:
    """Lookups shared by every level of the grouping walk."""

    def __init__(self, result: ReportResult, include_details: bool):
        extended = result.report_extended_metadata
        metadata = result.report_metadata

        self.fact_map: Dict[str, FactMapBucket] = result.fact_map or {}
        self.aggregate_info = extended.aggregate_column_info if extended else {}
        self.aggregate_keys = list(self.aggregate_info.keys())
        self.column_info = extended.detail_column_info if extended else {}
        self.detail_columns = metadata.detail_columns if metadata else []
        self.include_details = include_details

    def aggregate_lines(self, bucket: FactMapBucket, indent: str) -> List[str]:
        return [
            f"{indent}{aggregate_label(i, self.aggregate_keys, self.aggregate_info)}: {cell_display(agg)}"
            for i, agg in enumerate(bucket.aggregates)
        ]


def _render_groupings(groupings: List[Grouping], ctx: _RenderContext, depth: int) -> List[str]:
    """Render one level of groupings, recursing into children after each node."""
    indent = '  ' * (depth + 1)
    lines: List[str] = []

    for group in groupings:
        lines.append(f"{indent}{_text(group.label, '')} ({_text(group.value, '')}):")

        bucket = ctx.fact_map.get(f"{group.key}{SUBTOTAL_SUFFIX}") if group.key is not None else None
        if bucket is not None:
            lines.extend(ctx.aggregate_lines(bucket, indent + '  '))

            if ctx.include_details and bucket.rows:
                lines.append(f"{indent}  Rows ({len(bucket.rows)}):")
                for row in bucket.rows:
                    pairs = [
                        f"{column_label(idx, ctx.detail_columns, ctx.column_info)}: {cell_display(cell)}"
                        for idx, cell in enumerate(row.data_cells)
                    ]
                    lines.append(f"{indent}    {', '.join(pairs)}")

        if group.groupings:
            lines.extend(_render_groupings(group.groupings, ctx, depth + 1))

    return lines


def format_report_results(result: Any, include_details: bool) -> str:
    """Render a report execution result as text.

    Args:
        result: Raw Analytics API payload (dict) or a validated ``ReportResult``
        include_details: Whether detail rows were requested and should be shown

    Returns:
        Newline-joined text; ``No data returned.`` for unusable payloads
    """
    report = ReportResult.from_raw(result)
    if report is None:
        return NO_DATA_TEXT

    lines: List[str] = []

    metadata = report.report_metadata
    if metadata is not None:
        lines.append(f"Report: {_text(metadata.name)}")
        lines.append(f"Format: {_text(metadata.report_format)}")
        if metadata.report_filters:
            lines.append(f"Active Filters: {len(metadata.report_filters)}")
            for report_filter in metadata.report_filters:
                lines.append(f"  - {_text(report_filter.column, '')} {_text(report_filter.operator, '')} "
                             f"{_text(report_filter.value, '')}")
        lines.append('')

    if report.fact_map is None:
        lines.append(NO_DATA_TEXT)
        return '\n'.join(lines)

    ctx = _RenderContext(report, include_details)
    groupings_down = report.groupings_down.groupings if report.groupings_down else []
    groupings_across = report.groupings_across.groupings if report.groupings_across else []

    if groupings_down:
        lines.append(f"Row Groupings: {len(groupings_down)}")
    if groupings_across:
        lines.append(f"Column Groupings: {len(groupings_across)}")

    grand_totals = ctx.fact_map.get(GRAND_TOTAL_KEY)
    if grand_totals is not None and grand_totals.aggregates:
        lines.append('')
        lines.append('Grand Totals:')
        lines.extend(ctx.aggregate_lines(grand_totals, '  '))

    if include_details and grand_totals is not None and grand_totals.rows is not None:
        rows = grand_totals.rows
        lines.append('')
        lines.append(f"Detail Rows ({len(rows)}):")

        headers = [column_label(i, ctx.detail_columns, ctx.column_info)
                   for i in range(len(ctx.detail_columns))]
        if headers:
            lines.append(f"  | {' | '.join(headers)} |")
            lines.append(f"  | {' | '.join('---' for _ in headers)} |")

        for row in rows:
            lines.append(f"  | {' | '.join(cell_display(cell) for cell in row.data_cells)} |")

    if groupings_down:
        lines.append('')
        lines.append('Grouped Results:')
        lines.extend(_render_groupings(groupings_down, ctx, 0))

    return '\n'.join(lines)


# ---------------------------------------------------------------------------
# Listing, describe and instance renderers
# ---------------------------------------------------------------------------

def format_report_list(records: List[ReportRecord]) -> str:
    """Render SOQL search results over the Report object."""
    blocks = []
    for index, record in enumerate(records, start=1):
        parts = [
            f"{index}. {_text(record.Name)}",
            f"   ID: {_text(record.Id)}",
            f"   Developer Name: {_or_na(record.DeveloperName)}",
            f"   Format: {_or_na(record.Format)}",
            f"   Folder: {_or_na(record.FolderName)}",
        ]
        if record.Description:
            parts.append(f"   Description: {record.Description}")
        if record.LastRunDate:
            parts.append(f"   Last Run: {record.LastRunDate}")
        blocks.append('\n'.join(parts))

    return f"Found {len(records)} reports:\n\n" + '\n\n'.join(blocks)


def format_recent_reports(reports: List[RecentReport]) -> str:
    blocks = []
    for index, report in enumerate(reports, start=1):
        parts = [
            f"{index}. {_text(report.name)}",
            f"   ID: {_text(report.id)}",
        ]
        if report.url:
            parts.append(f"   URL: {report.url}")
        blocks.append('\n'.join(parts))

    return f"Recently viewed reports ({len(reports)}):\n\n" + '\n\n'.join(blocks)


def _grouping_column_lines(title: str, columns: List[GroupingColumn]) -> List[str]:
    lines = ['', f"{title}:"]
    for column in columns:
        lines.append(f"  - {_text(column.name)} (sort: {_text(column.sort_order)}, "
                     f"agg: {column.date_granularity or 'none'})")
    return lines


def format_report_description(description: ReportDescription) -> str:
    """Render report metadata from a describe call; empty sections are omitted."""
    rm = description.report_metadata
    extended = description.report_extended_metadata

    lines = [
        f"Report: {_text(rm.name)}",
        f"ID: {_text(rm.id)}",
        f"Format: {_text(rm.report_format)}",
        f"Report Type: {_or_na(rm.report_type.type if rm.report_type else None)}",
        f"Description: {_or_na(rm.description)}",
    ]

    if rm.detail_columns:
        lines.extend(['', 'Detail Columns:'])
        for column in rm.detail_columns:
            info = extended.detail_column_info.get(column)
            if info is not None:
                lines.append(f"  - {_text(info.label)} ({column}) [{_text(info.data_type)}]")
            else:
                lines.append(f"  - {column}")

    if rm.groupings_down:
        lines.extend(_grouping_column_lines('Row Groupings', rm.groupings_down))
    if rm.groupings_across:
        lines.extend(_grouping_column_lines('Column Groupings', rm.groupings_across))

    if rm.report_filters:
        lines.extend(['', 'Filters:'])
        for report_filter in rm.report_filters:
            lines.append(f"  - {_text(report_filter.column, '')} {_text(report_filter.operator, '')} "
                         f"{_text(report_filter.value, '')}")

    if extended.aggregate_column_info:
        lines.extend(['', 'Aggregates:'])
        for key, info in extended.aggregate_column_info.items():
            if info is not None:
                lines.append(f"  - {_text(info.label)} ({key}) [{_text(info.data_type)}]")
            else:
                lines.append(f"  - {key}")

    type_metadata = description.report_type_metadata
    if type_metadata is not None and type_metadata.categories:
        lines.extend(['', 'Available Categories/Objects:'])
        for category in type_metadata.categories:
            lines.append(f"  - {_text(category.label)} ({_text(category.name)})")

    return '\n'.join(lines)


def format_async_instance(instance: ReportInstance) -> str:
    return (
        "Report execution started asynchronously.\n\n"
        f"Instance ID: {_text(instance.id)}\n"
        f"Status: {_text(instance.status)}\n"
        f"Request Date: {_or_na(instance.request_date)}\n\n"
        'Use operation "getInstanceResults" with this instanceId to retrieve results once complete.'
    )


def format_report_instances(instances: List[ReportInstance]) -> Optional[str]:
    """Render async instances; None when there are none."""
    if not instances:
        return None

    blocks = []
    for index, instance in enumerate(instances, start=1):
        blocks.append('\n'.join([
            f"{index}. Instance ID: {_text(instance.id)}",
            f"   Status: {_text(instance.status)}",
            f"   Request Date: {_or_na(instance.request_date)}",
            f"   Completion Date: {_or_na(instance.completion_date)}",
        ]))

    return f"Found {len(instances)} report instance(s):\n\n" + '\n\n'.join(blocks)
