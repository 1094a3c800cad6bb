"""Typed views over the Salesforce Analytics API payloads.

Every field is optional: the API omits or nulls whole sections depending on
report format (tabular, summary, matrix) and on whether detail rows were
requested. Null values are dropped before validation so that defaults apply,
unknown keys are ignored, and mapping order is preserved. A section that still
fails validation is dropped on its own (``validate_sections``) so the rest
of the payload can be rendered. The order of ``aggregateColumnInfo`` keys is
what pairs each aggregate with its label.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel


class AnalyticsModel(BaseModel):
    """Base for API payload models: camelCase aliases, nulls treated as absent."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    @model_validator(mode='before')
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @classmethod
    def validate_sections(cls, raw: Dict[str, Any]):
        """Validate ``raw``, dropping top-level sections that do not validate on their own."""
        try:
            return cls.model_validate(raw)
        except ValidationError:
            pass

        kept = {}
        for key, value in raw.items():
            try:
                cls.model_validate({key: value})
            except ValidationError:
                continue
            kept[key] = value
        return cls.model_validate(kept)


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

class ReportFilter(BaseModel):
    """One runtime filter override clause."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    column: str = Field(description="API name of the column to filter")
    operator: str = Field(description="Filter operator: equals, notEqual, lessThan, greaterThan, lessOrEqual, greaterOrEqual, contains, notContain, startsWith, includes, excludes")
    value: str = Field(description="Filter value")


# ---------------------------------------------------------------------------
# Report metadata (shared by describe and execution results)
# ---------------------------------------------------------------------------

class FilterClause(AnalyticsModel):
    """A filter as saved on the report or echoed back in results."""
    column: Optional[str] = None
    operator: Optional[str] = None
    value: Optional[Any] = None


class GroupingColumn(AnalyticsModel):
    name: Optional[str] = None
    sort_order: Optional[str] = None
    date_granularity: Optional[str] = None


class ReportTypeInfo(AnalyticsModel):
    type: Optional[str] = None
    label: Optional[str] = None


class ReportMetadata(AnalyticsModel):
    id: Optional[str] = None
    name: Optional[str] = None
    report_format: Optional[str] = None
    description: Optional[str] = None
    report_type: Optional[ReportTypeInfo] = None
    detail_columns: List[str] = []
    groupings_down: List[GroupingColumn] = []
    groupings_across: List[GroupingColumn] = []
    report_filters: List[FilterClause] = []


class ColumnInfo(AnalyticsModel):
    label: Optional[str] = None
    data_type: Optional[str] = None


class ExtendedMetadata(AnalyticsModel):
    # Entries may be null; the key still counts for positional aggregate labels
    detail_column_info: Dict[str, Optional[ColumnInfo]] = {}
    aggregate_column_info: Dict[str, Optional[ColumnInfo]] = {}


class Category(AnalyticsModel):
    label: Optional[str] = None
    name: Optional[str] = None


class ReportTypeMetadata(AnalyticsModel):
    categories: List[Category] = []


class ReportDescription(AnalyticsModel):
    """Response of ``GET analytics/reports/<id>/describe``."""
    report_metadata: ReportMetadata = Field(default_factory=ReportMetadata)
    report_extended_metadata: ExtendedMetadata = Field(default_factory=ExtendedMetadata)
    report_type_metadata: Optional[ReportTypeMetadata] = None


# ---------------------------------------------------------------------------
# Execution results
# ---------------------------------------------------------------------------

class ReportCell(AnalyticsModel):
    """An aggregate or a detail cell: display label plus raw value."""
    label: Optional[Any] = None
    value: Optional[Any] = None


class ReportRow(AnalyticsModel):
    data_cells: List[ReportCell] = []


class FactMapBucket(AnalyticsModel):
    aggregates: List[ReportCell] = []
    # None means the API sent no rows key; an empty list is still a row section
    rows: Optional[List[ReportRow]] = None


class Grouping(AnalyticsModel):
    """A grouping node; ``key`` addresses its ``<key>!T`` subtotal bucket."""
    key: Optional[str] = None
    label: Optional[Any] = None
    value: Optional[Any] = None
    groupings: List['Grouping'] = []


class GroupingSet(AnalyticsModel):
    groupings: List[Grouping] = []


class ReportResult(AnalyticsModel):
    """Response of a synchronous run or a retrieved async instance."""
    report_metadata: Optional[ReportMetadata] = None
    report_extended_metadata: Optional[ExtendedMetadata] = None
    fact_map: Optional[Dict[str, FactMapBucket]] = None
    groupings_down: Optional[GroupingSet] = None
    groupings_across: Optional[GroupingSet] = None

    @classmethod
    def from_raw(cls, raw: Any) -> Optional['ReportResult']:
        """Validate a raw payload once; None when it is not a usable result tree."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, dict):
            return None
        return cls.validate_sections(raw)


Grouping.model_rebuild()


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

class RecentReport(AnalyticsModel):
    id: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None


class ReportRecord(BaseModel):
    """A Report sObject row from SOQL (PascalCase field names)."""

    model_config = ConfigDict(extra='ignore')

    Id: Optional[str] = None
    Name: Optional[str] = None
    Description: Optional[str] = None
    Format: Optional[str] = None
    DeveloperName: Optional[str] = None
    FolderName: Optional[str] = None
    LastRunDate: Optional[str] = None


class ReportInstance(AnalyticsModel):
    id: Optional[str] = None
    status: Optional[str] = None
    request_date: Optional[str] = None
    completion_date: Optional[str] = None
