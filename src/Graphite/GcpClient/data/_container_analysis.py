# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Container Analysis v1beta1 request wrapper."""

from __future__ import annotations

from typing import Any, Dict, List

from ._base import _ApiWrapper


class _ContainerAnalysisWrapper(_ApiWrapper):
    def _occurrences(self) -> Any:
        return self.service.projects().occurrences()

    def list_occurrences(self, project_id: str, filter_string: str) -> List[Dict[str, Any]]:
        return self._list_all(
            self._occurrences(), "occurrences", parent=f"projects/{project_id}", filter=filter_string
        )

    def get_occurrence(self, project_id: str, occurrence_id: str) -> Dict[str, Any]:
        return self._execute(self._occurrences().get(name=f"projects/{project_id}/occurrences/{occurrence_id}"))

    def create_occurrence(self, project_id: str, occurrence: Dict[str, Any]) -> Dict[str, Any]:
        return self._execute(self._occurrences().create(parent=f"projects/{project_id}", body=occurrence))
