"""
Global pytest configuration and fixtures for the Salesforce reports tests.

Provides a mocked Analytics connection (AsyncMock collaborators) and sample
Analytics API payloads for tabular, summary and matrix reports.
"""

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

# Keep test logs out of the working tree; must be set before sfreports is imported
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="sfreports-logs-"))

sys.path.insert(0, str(Path(__file__).parent))


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def mock_env_vars(monkeypatch):
    """Salesforce credentials in the environment."""
    env_vars = {
        "SFDC_USER": "test@example.com",
        "SFDC_PASS": "test-password",
        "SFDC_TOKEN": "test-token",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars


# ============================================================================
# Sample Analytics Payloads
# ============================================================================

@pytest.fixture
def tabular_result():
    """Tabular report run with detail rows."""
    return {
        "reportMetadata": {
            "id": "00O5e000000TabAAA",
            "name": "Open Opportunities",
            "reportFormat": "TABULAR",
            "detailColumns": ["OPPORTUNITY_NAME", "AMOUNT"],
            "reportFilters": [
                {"column": "STAGE_NAME", "operator": "notEqual", "value": "Closed Lost"}
            ],
        },
        "reportExtendedMetadata": {
            "detailColumnInfo": {
                "OPPORTUNITY_NAME": {"label": "Opportunity Name", "dataType": "string"},
                "AMOUNT": {"label": "Amount", "dataType": "currency"},
            },
            "aggregateColumnInfo": {
                "s!AMOUNT": {"label": "Sum of Amount", "dataType": "currency"},
                "RowCount": {"label": "Record Count", "dataType": "int"},
            },
        },
        "factMap": {
            "T!T": {
                "aggregates": [
                    {"label": "$150,000.00", "value": 150000},
                    {"label": "2", "value": 2},
                ],
                "rows": [
                    {"dataCells": [
                        {"label": "Acme Renewal", "value": "006A"},
                        {"label": "$100,000.00", "value": 100000},
                    ]},
                    {"dataCells": [
                        {"label": "Globex Expansion", "value": "006B"},
                        {"label": "$50,000.00", "value": 50000},
                    ]},
                ],
            }
        },
        "groupingsDown": {"groupings": []},
        "groupingsAcross": {"groupings": []},
    }


@pytest.fixture
def summary_result():
    """Summary report grouped two levels deep (Region > Stage)."""
    return {
        "reportMetadata": {
            "name": "Pipeline by Region",
            "reportFormat": "SUMMARY",
            "detailColumns": ["OPPORTUNITY_NAME", "AMOUNT"],
        },
        "reportExtendedMetadata": {
            "detailColumnInfo": {
                "OPPORTUNITY_NAME": {"label": "Opportunity Name"},
                "AMOUNT": {"label": "Amount"},
            },
            "aggregateColumnInfo": {
                "s!AMOUNT": {"label": "Sum of Amount"},
            },
        },
        "factMap": {
            "T!T": {"aggregates": [{"label": "$300", "value": 300}]},
            "0!T": {
                "aggregates": [{"label": "$200", "value": 200}],
                "rows": [
                    {"dataCells": [{"label": "Acme", "value": "006A"}, {"label": "$200", "value": 200}]}
                ],
            },
            "0_0!T": {"aggregates": [{"label": "$120", "value": 120}]},
            "1!T": {"aggregates": [{"value": 100}]},
        },
        "groupingsDown": {
            "groupings": [
                {
                    "key": "0",
                    "label": "EMEA",
                    "value": "EMEA",
                    "groupings": [
                        {"key": "0_0", "label": "Prospecting", "value": "Prospecting", "groupings": []}
                    ],
                },
                {"key": "1", "label": "APAC", "value": "APAC", "groupings": []},
            ]
        },
        "groupingsAcross": {"groupings": []},
    }


@pytest.fixture
def describe_result():
    """Response of the describe endpoint."""
    return {
        "reportMetadata": {
            "id": "00O5e000000DesAAA",
            "name": "Pipeline by Region",
            "reportFormat": "SUMMARY",
            "description": "Open pipeline grouped by region",
            "reportType": {"type": "Opportunity", "label": "Opportunities"},
            "detailColumns": ["OPPORTUNITY_NAME", "CUSTOM_COL"],
            "groupingsDown": [
                {"name": "REGION", "sortOrder": "Asc", "dateGranularity": "None"}
            ],
            "groupingsAcross": [
                {"name": "CLOSE_DATE", "sortOrder": "Desc", "dateGranularity": "Month"}
            ],
            "reportFilters": [
                {"column": "AMOUNT", "operator": "greaterThan", "value": "0"}
            ],
        },
        "reportExtendedMetadata": {
            "detailColumnInfo": {
                "OPPORTUNITY_NAME": {"label": "Opportunity Name", "dataType": "string"},
            },
            "aggregateColumnInfo": {
                "s!AMOUNT": {"label": "Sum of Amount", "dataType": "currency"},
            },
        },
        "reportTypeMetadata": {
            "categories": [
                {"label": "Opportunity Information", "name": "Opportunity"},
            ]
        },
    }


# ============================================================================
# Connection Fixtures
# ============================================================================

@pytest.fixture
def mock_report():
    """A report handle whose remote calls are AsyncMocks."""
    report = Mock()
    report.describe = AsyncMock(return_value={})
    report.execute = AsyncMock(return_value={})
    report.execute_async = AsyncMock(return_value={
        "id": "0LG5e000000InsAAA",
        "status": "New",
        "requestDate": "2024-05-01T10:00:00Z",
    })
    report.instances = AsyncMock(return_value=[])

    instance = Mock()
    instance.retrieve = AsyncMock(return_value={})
    report.instance = Mock(return_value=instance)
    return report


@pytest.fixture
def mock_connection(mock_report):
    """Connection exposing ``query`` and ``analytics`` like SalesforceReportsConnection."""
    conn = Mock()
    conn.query = AsyncMock(return_value={"totalSize": 0, "records": []})
    conn.analytics = Mock()
    conn.analytics.reports = AsyncMock(return_value=[])
    conn.analytics.report = Mock(return_value=mock_report)
    return conn
