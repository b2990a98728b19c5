# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Common constants for the GCP client library.

This module contains shared constants used across the API clients.
"""

__all__ = []
