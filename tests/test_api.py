"""
Tests for the high-level browse functions.
"""

import json
import logging
import warnings

import httpx
import pytest

from snaptreelib import (
    BrowseConfig,
    ClientConfig,
    DomainContext,
    EmptyResultWarning,
    ROOT_NODE_KEY,
    TransportError,
    browse_snapshot_objects,
    discover_containers,
    list_domain_objects,
)
from snaptreelib.testing import InMemoryChildLister, three_level_tree


class TestBrowseSnapshotObjects:

    def test_returns_leaf_records_with_context(self):
        lister = InMemoryChildLister(three_level_tree())

        records = browse_snapshot_objects(
            "snap-1", {"domain_name": "corp.local", "domain_id": "dom-1"}, lister
        )

        assert [r.key for r in records] == [101, 102, 103, 104, 105]
        assert {r.domain_name for r in records} == {"corp.local"}
        assert {r.snapshot_id for r in records} == {"snap-1"}

    def test_progress_callback(self):
        levels = []
        lister = InMemoryChildLister(three_level_tree())

        browse_snapshot_objects("snap-1", DomainContext(), lister, on_level=levels.append)

        assert [level.depth for level in levels] == [1, 2, 3]

    def test_failure_returns_no_partial_result(self):
        lister = InMemoryChildLister(
            three_level_tree(), failures={21: TransportError("boom", status_code=500)}
        )

        with pytest.raises(TransportError):
            browse_snapshot_objects("snap-1", DomainContext(), lister)

    def test_warn_on_empty_reaches_lister(self):
        lister = InMemoryChildLister(three_level_tree())

        with pytest.warns(EmptyResultWarning):
            records = browse_snapshot_objects(
                "snap-1", DomainContext(), lister, BrowseConfig(warn_on_empty=True)
            )

        assert lister.warn_on_empty
        assert len(records) == 5

    def test_no_empty_warning_by_default(self):
        lister = InMemoryChildLister(three_level_tree())

        with warnings.catch_warnings():
            warnings.simplefilter("error", EmptyResultWarning)
            browse_snapshot_objects("snap-1", DomainContext(), lister)


class TestDiscoverContainers:

    def test_exposes_container_set(self):
        lister = InMemoryChildLister(three_level_tree())

        result = discover_containers("snap-1", lister, BrowseConfig(max_depth=1))

        assert result.container_keys == [1, 2]
        assert result.objects == []
        assert lister.expanded_keys() == [ROOT_NODE_KEY]


class FakeService:
    """GraphQL endpoint serving a three-level tree, one node per page."""

    def __init__(self, tree, fail_on=None):
        self.tree = tree
        self.fail_on = fail_on
        self.requests = 0

    def __call__(self, request):
        self.requests += 1
        variables = json.loads(request.content)["variables"]
        key = variables["nodeKey"]
        if key == self.fail_on:
            return httpx.Response(502)
        nodes = [n for n in self.tree.get(key, [])
                 if n.is_container or not variables["containersOnly"]]
        offset = int(variables["after"] or 0)
        page = nodes[offset:offset + 1]
        has_next = offset + 1 < len(nodes)
        return httpx.Response(200, json={"data": {"snapshotDirectoryChildren": {
            "nodes": [{"key": n.key, "displayName": n.display_name,
                       "objectType": n.kind, "distinguishedName": n.distinguished_name}
                      for n in page],
            "pageInfo": {"hasNextPage": has_next,
                         "endCursor": str(offset + 1) if has_next else None},
        }}})


@pytest.fixture
def mock_http(monkeypatch):
    """Route every httpx.Client created by the library to a FakeService."""
    service = FakeService(three_level_tree())
    real_client = httpx.Client

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(service)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "Client", client_factory)
    return service


CLIENT_CONFIG = ClientConfig(endpoint="https://service.example/api/graphql",
                             access_token="token", page_size=1)


class TestListDomainObjects:

    def test_end_to_end_over_http(self, mock_http):
        records = list_domain_objects(CLIENT_CONFIG, "snap-1", {"domain_name": "corp.local"})

        assert [r.key for r in records] == [101, 102, 103, 104, 105]
        assert records[0].as_row()["domain_name"] == "corp.local"
        assert mock_http.requests > 11

    def test_failure_logged_and_raised(self, mock_http, caplog):
        mock_http.fail_on = 12

        with caplog.at_level(logging.ERROR, logger="snaptreelib"):
            with pytest.raises(TransportError):
                list_domain_objects(CLIENT_CONFIG, "snap-1", DomainContext())

        assert "snap-1" in caplog.text
