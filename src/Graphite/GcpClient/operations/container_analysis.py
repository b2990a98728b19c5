# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Container Analysis client for the GCP client library."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Tuple

from ..common.constants import (
    ATTESTATION_KIND,
    FINISHED_SCAN_STATUSES,
    VULNERABILITY_KIND,
    VULNERABILITY_NOTE_ID,
    VULNERABILITY_NOTE_PROJECT_ID,
)
from ..core._polling import _poll_until, _retry_all_errors, _retry_transient_errors
from ..core._validation import _require_non_negative_timeout, _require_text
from ..core.config import GcpClientConfig
from ..data._container_analysis import _ContainerAnalysisWrapper
from ..utils._resources import build_filter_string, name_from_self_link, process_resource_list, sort_key

_logger = logging.getLogger(__name__)

__all__ = ["ContainerAnalysisClient"]


def _to_attestation_occurrence(
    resource_url: str,
    note_project_id: str,
    note_id: str,
    signature: str,
    public_key_id: Optional[str],
    payload: str,
) -> Dict[str, Any]:
    signature_entry = {"signature": signature}
    if public_key_id:
        signature_entry["publicKeyId"] = public_key_id
    return {
        "resource": {"uri": resource_url},
        "noteName": f"projects/{note_project_id}/notes/{note_id}",
        "kind": ATTESTATION_KIND,
        "attestation": {
            "attestation": {
                "genericSignedAttestation": {
                    "signatures": [signature_entry],
                    "serializedPayload": payload,
                }
            }
        },
    }


class ContainerAnalysisClient:
    """Client for Container Analysis occurrences: vulnerability scans and attestations.

    :param container_analysis: Wrapper around the generated ``containeranalysis`` service.
    :type container_analysis: ~Graphite.GcpClient.data._container_analysis._ContainerAnalysisWrapper
    :param config: Polling configuration.
    :type config: ~Graphite.GcpClient.core.config.GcpClientConfig

    Example::

        analysis = factory.container_analysis_client()
        url = "https://gcr.io/my-project/app@sha256:..."
        status = analysis.get_vulnerability_scan_status_sync("my-project", url, timeout_millis=60_000)
        if status == "FINISHED_SUCCESS":
            findings = analysis.list_vulnerability_scan_occurrences("my-project", url)
    """

    def __init__(
        self, container_analysis: _ContainerAnalysisWrapper, config: Optional[GcpClientConfig] = None
    ) -> None:
        self._container_analysis = container_analysis
        self._config = config or GcpClientConfig()

    def list_vulnerability_scan_occurrences(self, project_id: str, resource_url: str) -> Tuple[Dict[str, Any], ...]:
        """List vulnerability occurrences reported for an image, sorted by name."""
        _require_text(project_id=project_id, resource_url=resource_url)
        filter_string = build_filter_string({"resourceUrl": resource_url, "kind": VULNERABILITY_KIND})
        return process_resource_list(
            self._container_analysis.list_occurrences(project_id, filter_string), sort_key("name")
        )

    def create_attestation(
        self,
        project_id: str,
        resource_url: str,
        note_project_id: str,
        note_id: str,
        signature: str,
        public_key_id: Optional[str],
        payload: str,
    ) -> Dict[str, Any]:
        """Attest an image with a generic signed attestation.

        :param project_id: Project that will own the occurrence.
        :type project_id: str
        :param resource_url: Image the attestation is about.
        :type resource_url: str
        :param note_project_id: Project of the attestation note (the attestor's authority).
        :type note_project_id: str
        :param note_id: ID of the attestation note.
        :type note_id: str
        :param signature: Signature over ``payload``.
        :type signature: str
        :param public_key_id: ID of the public key that verifies ``signature``. Optional.
        :type public_key_id: str or None
        :param payload: The serialized payload that was signed.
        :type payload: str
        :return: The created occurrence.
        :rtype: dict
        """
        _require_text(
            project_id=project_id,
            resource_url=resource_url,
            note_project_id=note_project_id,
            note_id=note_id,
            signature=signature,
            payload=payload,
        )
        occurrence = _to_attestation_occurrence(
            resource_url, note_project_id, note_id, signature, public_key_id, payload
        )
        return self._container_analysis.create_occurrence(project_id, occurrence)

    def get_vulnerability_scan_status_sync(self, project_id: str, resource_url: str, timeout_millis: int) -> str:
        """Wait for the vulnerability scan of an image to finish and return its status.

        First waits for the discovery occurrence of the ``goog-analysis`` scanner to
        exist, then polls it in the remaining time until its ``analysisStatus`` is one of
        ``FINISHED_SUCCESS``, ``FINISHED_FAILED`` or ``FINISHED_UNSUPPORTED``.

        :param timeout_millis: Total time budget in milliseconds. ``0`` checks once.
        :type timeout_millis: int
        :rtype: str
        :raises ~Graphite.GcpClient.core.errors.OperationTimeoutError: If no finished status
            appears before the deadline.
        """
        _require_text(project_id=project_id, resource_url=resource_url)
        _require_non_negative_timeout(timeout_millis)
        retry_error = (
            _retry_all_errors if self._config.poll_retry_non_transient_errors else _retry_transient_errors
        )
        start = time.monotonic()
        occurrence = _poll_until(
            lambda: self._discovery_occurrence(project_id, resource_url),
            timeout_millis=timeout_millis,
            interval=self._config.scan_poll_interval,
            description=f"discovery occurrence of {resource_url}",
            retry_error=retry_error,
        )
        occurrence_id = name_from_self_link(occurrence["name"])
        remaining = max(0.0, timeout_millis - (time.monotonic() - start) * 1000.0)
        return _poll_until(
            lambda: self._finished_scan_status(project_id, occurrence_id),
            timeout_millis=remaining,
            interval=self._config.scan_poll_interval,
            description=f"vulnerability scan of {resource_url}",
            retry_error=retry_error,
        )

    def _discovery_occurrence(self, project_id: str, resource_url: str) -> Optional[Dict[str, Any]]:
        filter_string = build_filter_string(
            {
                "resourceUrl": resource_url,
                "noteProjectId": VULNERABILITY_NOTE_PROJECT_ID,
                "noteId": VULNERABILITY_NOTE_ID,
            }
        )
        for occurrence in self._container_analysis.list_occurrences(project_id, filter_string):
            if occurrence.get("discovered") is not None:
                return occurrence
        _logger.debug("Did not find a discovery occurrence for %s.", resource_url)
        return None

    def _finished_scan_status(self, project_id: str, occurrence_id: str) -> Optional[str]:
        occurrence = self._container_analysis.get_occurrence(project_id, occurrence_id) or {}
        status = ((occurrence.get("discovered") or {}).get("discovered") or {}).get("analysisStatus")
        if status in FINISHED_SCAN_STATUSES:
            return status
        _logger.debug("Vulnerability scan is not finished. Current status is %s.", status)
        return None
