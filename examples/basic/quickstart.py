# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Read-only tour of the GCP client library.

Lists projects, regions, zones, GKE clusters and KMS key rings visible to the
application default credentials. Nothing is created or deleted.

    gcloud auth application-default login
    python examples/basic/quickstart.py [project-id]
"""

import logging
import sys

import google.auth

from Graphite.GcpClient import ClientFactory, GcpClientConfig, GcpClientError


def log_call(call: str) -> None:
    print({"call": call})


def main() -> int:
    logging.basicConfig(level=logging.WARNING)
    credentials, default_project = google.auth.default(scopes=["https://www.googleapis.com/auth/cloud-platform"])
    project_id = sys.argv[1] if len(sys.argv) > 1 else default_project
    if not project_id:
        print("No project given and no default project configured; exiting.")
        return 1

    config = GcpClientConfig.from_env()
    with ClientFactory(credentials, "graphite-quickstart", config) as factory:
        try:
            log_call("cloud_resource_manager_client().list_projects()")
            for project in factory.cloud_resource_manager_client().list_projects()[:10]:
                print(f"  project: {project['projectId']}")

            compute = factory.compute_client()
            log_call(f"compute_client().list_regions({project_id!r})")
            regions = compute.list_regions(project_id)
            print(f"  {len(regions)} regions")
            if regions:
                region = regions[0]
                log_call(f"compute_client().list_zones({project_id!r}, {region['name']!r})")
                for zone in compute.list_zones(project_id, region["selfLink"]):
                    print(f"  zone: {zone['name']}")

            log_call(f"container_client().list_all_clusters({project_id!r})")
            for cluster in factory.container_client().list_all_clusters(project_id):
                print(f"  cluster: {cluster['name']} ({cluster.get('location')})")

            log_call(f"cloud_kms_client().list_key_rings({project_id!r}, 'global')")
            for key_ring in factory.cloud_kms_client().list_key_rings(project_id, "global"):
                print(f"  key ring: {key_ring['name']}")
        except GcpClientError as exc:
            print(f"Request failed: {exc.to_dict()}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
