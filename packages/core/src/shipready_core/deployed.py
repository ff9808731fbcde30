"""Resolve the revision currently deployed to an environment.

The deploy config repository holds one document per service. The image tag
stored in it has the shape ``<anything>-<revision>``.
"""

from __future__ import annotations

import json
import logging

import yaml

from shipready_core.errors import ImageTagError, PathNotFoundError, UpstreamError
from shipready_core.models import RevisionId

logger = logging.getLogger(__name__)

SIMPLE_POINTER = "/service/{service}/env/{env}/imageTag"
CLUSTER_POINTER = "/spec/workloads/{service}/clusters/{cluster}/envs/{env}/tracks/main/containers/{sub}/imageTag"


def image_tag_pointer(service_name: str, env: str, sub_name: str | None = None, cluster: str | None = None) -> str:
    if cluster:
        return CLUSTER_POINTER.format(service=service_name, cluster=cluster, env=env, sub=sub_name or service_name)
    return SIMPLE_POINTER.format(service=service_name, env=env)


def resolve_pointer(document, pointer: str, source: str = ""):
    """Resolve an RFC 6901 JSON pointer, raising PathNotFoundError when absent."""
    if pointer == "":
        return document
    if not pointer.startswith("/"):
        raise PathNotFoundError(pointer, document=source)

    node = document
    for token in pointer[1:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise PathNotFoundError(pointer, document=source)
    return node


def revision_from_image_tag(tag) -> RevisionId:
    """``release-abc123`` -> ``abc123``; the revision follows the last dash."""
    if not isinstance(tag, str):
        raise ImageTagError(f"Image tag must be a string, got {type(tag).__name__}: {tag!r}")
    _, sep, revision = tag.rpartition("-")
    if not sep or not revision:
        raise ImageTagError(f"Image tag {tag!r} does not end in '-<revision>'")
    return revision


def parse_document(text: str, path: str) -> dict:
    try:
        if path.endswith((".yml", ".yaml")):
            document = yaml.safe_load(text)
        else:
            document = json.loads(text)
    except (ValueError, yaml.YAMLError) as e:
        raise UpstreamError(f"Could not parse config document {path}: {e}") from e

    if not isinstance(document, dict):
        raise UpstreamError(f"Config document {path} is not a mapping")
    return document


class ConfigRevisionResolver:
    def __init__(self, client, owner: str, repo: str = "config", path_template: str = "apps/{service}/config.json"):
        self.client = client
        self.owner = owner
        self.repo = repo
        self.path_template = path_template

    def resolve(
        self,
        service_name: str,
        env: str,
        sub_name: str | None = None,
        cluster: str | None = None,
    ) -> RevisionId:
        path = self.path_template.format(service=service_name)
        text = self.client.get_file_contents(self.owner, self.repo, path)
        document = parse_document(text, path)

        pointer = image_tag_pointer(service_name, env, sub_name=sub_name, cluster=cluster)
        tag = resolve_pointer(document, pointer, source=f"{self.owner}/{self.repo}:{path}")
        revision = revision_from_image_tag(tag)
        logger.info("%s is running %s in %s (image tag %s)", service_name, revision, env, tag)
        return revision
