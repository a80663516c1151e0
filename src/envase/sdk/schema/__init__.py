################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""Pydantic models describing the Envase wire format and local configuration."""
