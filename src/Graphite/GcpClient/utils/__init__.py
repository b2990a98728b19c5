# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Utilities for working with resources returned by the Google API clients.

List filtering and sorting, self-link parsing, and filter-string builders.
"""

from ._resources import (
    build_filter_string,
    build_labels_filter_string,
    name_from_self_link,
    parse_instance_resource_data,
    process_resource_list,
    sort_key,
)

__all__ = [
    "build_filter_string",
    "build_labels_filter_string",
    "name_from_self_link",
    "parse_instance_resource_data",
    "process_resource_list",
    "sort_key",
]
