"""Base classes for Salesforce tools.

- ``SalesforceConnectionManager`` keeps one simple_salesforce session per process
- ``BaseSalesforceTool`` provides the Analytics connection, consistent
  call/result/error logging and the sync-to-async bridge for LangChain
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict

from langchain_core.tools import BaseTool
from simple_salesforce.api import Salesforce

from sfreports.utils.config import config
from sfreports.utils.logging.framework import SmartLogger
from .analytics import SalesforceReportsConnection

logger = SmartLogger("salesforce")


class SalesforceConnectionManager:
    """Singleton connection manager for Salesforce.

    Ensures we only create one session per process and reuse it. Credentials
    come from the environment (SFDC_USER, SFDC_PASS, SFDC_TOKEN, optional
    SFDC_DOMAIN such as ``test`` for sandboxes).
    """
    _instance = None
    _connection = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def connection(self) -> Salesforce:
        """Get or create Salesforce session."""
        if self._connection is None:
            config.validate_required_secrets(['salesforce_user', 'salesforce_pass', 'salesforce_token'])
            type(self)._connection = Salesforce(
                username=config.get_secret('salesforce_user'),
                password=config.get_secret('salesforce_pass'),
                security_token=config.get_secret('salesforce_token'),
                domain=config.get_secret('salesforce_domain', required=False),
                version=config.salesforce_api_version,
            )
            logger.info("salesforce_connection_created",
                        operation="connection_manager",
                        api_version=config.salesforce_api_version)
        return self._connection

    def reset(self):
        """Drop the cached session; the next access logs in again."""
        type(self)._connection = None


class BaseSalesforceTool(BaseTool, ABC):
    """Base class for Salesforce tools.

    Subclasses implement ``_execute`` as a coroutine returning the tool
    envelope; ``_run`` and ``_arun`` add logging around it.
    """

    @property
    def connection(self) -> SalesforceReportsConnection:
        """Analytics-capable connection over the shared session."""
        return SalesforceReportsConnection(SalesforceConnectionManager().connection)

    def _log_call(self, **kwargs):
        logger.info("tool_call",
                    tool_name=self.name,
                    tool_args=kwargs)

    def _log_result(self, result: Any):
        logger.info("tool_result",
                    tool_name=self.name,
                    result_type=type(result).__name__,
                    result_preview=str(result)[:200] if result else "None")

    def _log_error(self, error: Exception):
        logger.error("tool_error",
                     tool_name=self.name,
                     error=str(error),
                     error_type=type(error).__name__)

    def _run(self, **kwargs) -> Dict[str, Any]:
        """Synchronous wrapper for async execution."""
        return asyncio.run(self._arun(**kwargs))

    async def _arun(self, **kwargs) -> Dict[str, Any]:
        """Execute tool with automatic logging."""
        self._log_call(**kwargs)
        result = await self._execute(**kwargs)
        self._log_result(result)
        return result

    @abstractmethod
    async def _execute(self, **kwargs) -> Dict[str, Any]:
        """Execute the tool's main logic. Must be implemented by subclasses."""
        pass
