"""
Unit tests for the Reports REST client.

Verifies the REST paths, query parameters and request bodies sent through
simple_salesforce for every report call.
"""

from unittest.mock import Mock

import pytest
from simple_salesforce import Salesforce

from sfreports.tools.salesforce.analytics import (
    AnalyticsAPI,
    ReportHandle,
    SalesforceReportsConnection,
)


@pytest.fixture
def mock_sf():
    """simple_salesforce session with a mocked ``restful``."""
    sf = Mock(spec=Salesforce)
    sf.restful.return_value = {}
    sf.query.return_value = {"totalSize": 0, "records": []}
    return sf


class TestReportHandle:
    """Test single-report calls."""

    @pytest.mark.asyncio
    async def test_describe(self, mock_sf):
        mock_sf.restful.return_value = {"reportMetadata": {"name": "X"}}

        result = await ReportHandle(mock_sf, "00O1").describe()

        mock_sf.restful.assert_called_once_with("analytics/reports/00O1/describe")
        assert result == {"reportMetadata": {"name": "X"}}

    @pytest.mark.asyncio
    async def test_execute_without_override_is_get(self, mock_sf):
        """Test a plain run is a GET with includeDetails."""
        await ReportHandle(mock_sf, "00O1").execute({"details": True})

        mock_sf.restful.assert_called_once_with("analytics/reports/00O1",
                                                params={"includeDetails": "true"})

    @pytest.mark.asyncio
    async def test_execute_defaults_to_no_details(self, mock_sf):
        await ReportHandle(mock_sf, "00O1").execute()

        mock_sf.restful.assert_called_once_with("analytics/reports/00O1",
                                                params={"includeDetails": "false"})

    @pytest.mark.asyncio
    async def test_execute_with_override_posts_metadata(self, mock_sf):
        """Test a metadata override is sent as the POST body."""
        metadata = {"reportMetadata": {"reportFilters": [
            {"column": "AMOUNT", "operator": "greaterThan", "value": "10"}
        ]}}

        await ReportHandle(mock_sf, "00O1").execute({"metadata": metadata})

        mock_sf.restful.assert_called_once_with("analytics/reports/00O1",
                                                params={"includeDetails": "false"},
                                                method="POST",
                                                json=metadata)

    @pytest.mark.asyncio
    async def test_execute_async(self, mock_sf):
        """Test async runs POST to the instances collection."""
        mock_sf.restful.return_value = {"id": "0LG1", "status": "New"}

        result = await ReportHandle(mock_sf, "00O1").execute_async({"details": True})

        mock_sf.restful.assert_called_once_with("analytics/reports/00O1/instances",
                                                params={"includeDetails": "true"},
                                                method="POST")
        assert result["id"] == "0LG1"

    @pytest.mark.asyncio
    async def test_execute_async_with_override(self, mock_sf):
        metadata = {"reportMetadata": {"reportFilters": []}}

        await ReportHandle(mock_sf, "00O1").execute_async({"metadata": metadata})

        assert mock_sf.restful.call_args.kwargs["json"] == metadata

    @pytest.mark.asyncio
    async def test_instances(self, mock_sf):
        mock_sf.restful.return_value = [{"id": "0LG1"}]

        result = await ReportHandle(mock_sf, "00O1").instances()

        mock_sf.restful.assert_called_once_with("analytics/reports/00O1/instances")
        assert result == [{"id": "0LG1"}]

    @pytest.mark.asyncio
    async def test_instances_none_becomes_empty(self, mock_sf):
        mock_sf.restful.return_value = None

        assert await ReportHandle(mock_sf, "00O1").instances() == []

    @pytest.mark.asyncio
    async def test_instance_retrieve(self, mock_sf):
        """Test results of one instance are fetched by both IDs."""
        handle = ReportHandle(mock_sf, "00O1").instance("0LG1")

        await handle.retrieve()

        assert handle.report_id == "00O1"
        assert handle.instance_id == "0LG1"
        mock_sf.restful.assert_called_once_with("analytics/reports/00O1/instances/0LG1")

    @pytest.mark.asyncio
    async def test_errors_propagate(self, mock_sf):
        """Test client errors reach the caller unchanged."""
        mock_sf.restful.side_effect = RuntimeError("NOT_FOUND")

        with pytest.raises(RuntimeError, match="NOT_FOUND"):
            await ReportHandle(mock_sf, "00O1").describe()


class TestConnection:
    """Test the connection facade."""

    @pytest.mark.asyncio
    async def test_recent_reports(self, mock_sf):
        mock_sf.restful.return_value = [{"id": "00O1", "name": "Revenue"}]

        result = await AnalyticsAPI(mock_sf).reports()

        mock_sf.restful.assert_called_once_with("analytics/reports")
        assert result == [{"id": "00O1", "name": "Revenue"}]

    def test_report_handle(self, mock_sf):
        handle = AnalyticsAPI(mock_sf).report("00O1")

        assert isinstance(handle, ReportHandle)
        assert handle.report_id == "00O1"

    @pytest.mark.asyncio
    async def test_query(self, mock_sf):
        conn = SalesforceReportsConnection(mock_sf)

        result = await conn.query("SELECT Id FROM Report LIMIT 1")

        mock_sf.query.assert_called_once_with("SELECT Id FROM Report LIMIT 1")
        assert result == {"totalSize": 0, "records": []}
        assert isinstance(conn.analytics, AnalyticsAPI)
