"""
Utils module - Shared utilities for proofdesk

This module provides common utilities used across the project:
- io_helpers: File I/O with proper encoding
- text_processing: Text escaping, counting and JSON extraction
- logging_helper: Consistent logging setup
- llm_client: Unified LLM client interface
- settings: Layered configuration (defaults, YAML, environment)
- paths: Common path definitions
"""
