# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Data access layer for the GCP client library.

This module contains the private wrappers around the generated Google API
services. They are not part of the public API.
"""

__all__ = []
