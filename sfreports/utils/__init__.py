"""Cross-cutting utilities: configuration, logging and SOQL construction."""
