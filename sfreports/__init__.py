"""Salesforce Reports tooling.

Lists, describes and runs Salesforce reports through the Analytics REST API
and renders the returned fact maps as readable text:

- tools.salesforce: the ``salesforce_manage_reports`` tool, its request
  dispatcher, result formatter, result types and Analytics API client
- utils: configuration, structured logging and SOQL construction
"""

__version__ = "0.1.0"
