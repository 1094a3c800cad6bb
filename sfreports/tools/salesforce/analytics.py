"""Async client for the Salesforce Reports and Dashboards REST API.

``SalesforceReportsConnection`` is the collaborator the report dispatcher
talks to. It exposes SOQL through ``query`` and the Reports and Dashboards
REST API through ``analytics``:

    conn.analytics.reports()                              GET  analytics/reports
    conn.analytics.report(id).describe()                  GET  analytics/reports/<id>/describe
    conn.analytics.report(id).execute(options)            GET/POST analytics/reports/<id>
    conn.analytics.report(id).execute_async(options)      POST analytics/reports/<id>/instances
    conn.analytics.report(id).instances()                 GET  analytics/reports/<id>/instances
    conn.analytics.report(id).instance(iid).retrieve()    GET  analytics/reports/<id>/instances/<iid>

``options`` accepts ``details`` (bool) and ``metadata`` (a body such as
``{"reportMetadata": {"reportFilters": [...]}}``). simple_salesforce is
synchronous, so every call runs in a worker thread.
"""

import asyncio
from typing import Any, Dict, List, Optional

from simple_salesforce.api import Salesforce

from sfreports.utils.config.constants import ANALYTICS_REPORTS_PATH
from sfreports.utils.logging.framework import log_execution


def _details_params(options: Optional[Dict[str, Any]]) -> Dict[str, str]:
    details = bool(options and options.get('details'))
    return {'includeDetails': 'true' if details else 'false'}


class InstanceHandle:
    """One asynchronous run of a report."""

    def __init__(self, sf: Salesforce, report_id: str, instance_id: str):
        self._sf = sf
        self.report_id = report_id
        self.instance_id = instance_id

    @log_execution("salesforce", "retrieve_report_instance", include_result=False)
    async def retrieve(self) -> Dict[str, Any]:
        path = f"{ANALYTICS_REPORTS_PATH}/{self.report_id}/instances/{self.instance_id}"
        return await asyncio.to_thread(self._sf.restful, path)


class ReportHandle:
    """Operations on a single saved report."""

    def __init__(self, sf: Salesforce, report_id: str):
        self._sf = sf
        self.report_id = report_id

    @property
    def _path(self) -> str:
        return f"{ANALYTICS_REPORTS_PATH}/{self.report_id}"

    @log_execution("salesforce", "describe_report", include_result=False)
    async def describe(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._sf.restful, f"{self._path}/describe")

    @log_execution("salesforce", "execute_report", include_result=False)
    async def execute(self, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run the report synchronously.

        A metadata override is POSTed as the request body; it applies to this
        run only and leaves the saved report untouched.
        """
        params = _details_params(options)
        metadata = (options or {}).get('metadata')
        if metadata:
            return await asyncio.to_thread(self._sf.restful, self._path,
                                           params=params, method='POST', json=metadata)
        return await asyncio.to_thread(self._sf.restful, self._path, params=params)

    @log_execution("salesforce", "execute_report_async", include_result=False)
    async def execute_async(self, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {'params': _details_params(options), 'method': 'POST'}
        metadata = (options or {}).get('metadata')
        if metadata:
            kwargs['json'] = metadata
        return await asyncio.to_thread(self._sf.restful, f"{self._path}/instances", **kwargs)

    @log_execution("salesforce", "list_report_instances", include_result=False)
    async def instances(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._sf.restful, f"{self._path}/instances") or []

    def instance(self, instance_id: str) -> InstanceHandle:
        return InstanceHandle(self._sf, self.report_id, instance_id)


class AnalyticsAPI:
    """Entry point for the Reports REST API."""

    def __init__(self, sf: Salesforce):
        self._sf = sf

    @log_execution("salesforce", "list_recent_reports", include_result=False)
    async def reports(self) -> List[Dict[str, Any]]:
        """Recently viewed reports for the running user."""
        return await asyncio.to_thread(self._sf.restful, ANALYTICS_REPORTS_PATH) or []

    def report(self, report_id: str) -> ReportHandle:
        return ReportHandle(self._sf, report_id)


class SalesforceReportsConnection:
    """Async facade over a simple_salesforce session."""

    def __init__(self, sf: Salesforce):
        self.sf = sf
        self.analytics = AnalyticsAPI(sf)

    @log_execution("salesforce", "soql_query", include_result=False)
    async def query(self, soql: str) -> Dict[str, Any]:
        return await asyncio.to_thread(self.sf.query, soql)

