"""
Certify Backend - Services Module

Business logic layer.
"""

from certify.services import certificate_service
from certify.services import csv_import
from certify.services import email_service
from certify.services import render_service
from certify.services import storage_service

__all__ = [
    "certificate_service",
    "csv_import",
    "email_service",
    "render_service",
    "storage_service",
]
