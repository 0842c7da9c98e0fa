"""Integração HTTP com o CRM."""

from app.infra.crm.client import CrmHttpClient, describe_error_body, format_megabytes

__all__ = ["CrmHttpClient", "describe_error_body", "format_megabytes"]
