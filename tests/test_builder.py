from __future__ import annotations

import logging

from npm_bom.graph.builder import build_graph, child_key_for
from npm_bom.graph.preprocess import preprocess_packages
from npm_bom.parsers.package_lock import VersionedRecord, VersionOnly, parse_lockfile


def _build(lock_data, ignore_dev=True, logger=None):
    lock = parse_lockfile(lock_data)
    root_key = f"{lock.name}-{lock.version}"
    packages = preprocess_packages(lock.packages, root_key, lock.name)
    return build_graph(packages, root_key, ignore_dev=ignore_dev, logger=logger)


def test_child_key_for_both_declaration_shapes():
    assert child_key_for("a", VersionOnly("^1.2.0")) == "a-1.2.0"
    assert child_key_for("a", VersionedRecord(version="1.2.0")) == "a-1.2.0"


def test_diamond_shares_one_node(diamond_lock):
    graph, versions = _build(diamond_lock)

    assert set(graph.nodes) == {"app-1.0.0", "left-1.0.0", "right-1.0.0", "shared-1.0.0"}
    assert graph["app-1.0.0"].children == ["left-1.0.0", "right-1.0.0"]
    assert graph["shared-1.0.0"].parents == ["left-1.0.0", "right-1.0.0"]
    assert graph["app-1.0.0"].child_count == 2
    assert graph["shared-1.0.0"].versions == ["1.0.0"]
    assert graph["shared-1.0.0"].name == "shared"
    assert graph.edge_count == 4
    assert versions.versions_of("shared") == ["1.0.0"]


def test_edges_are_symmetric(diamond_lock):
    graph, _ = _build(diamond_lock)

    for key, node in graph.nodes.items():
        for child in node.children:
            assert key in graph[child].parents
        for parent in node.parents:
            assert key in graph[parent].children


def test_subgraph_size_is_unset_after_building(diamond_lock):
    graph, _ = _build(diamond_lock)
    assert all(node.subgraph_size is None for node in graph.nodes.values())


def test_object_declarations_and_peer_dependencies(make_lock):
    data = make_lock(
        {
            "node_modules/a": {
                "version": "1.0.0",
                "dependencies": {"b": {"version": "2.0.0", "resolved": "https://example.test/b.tgz"}},
                "peerDependencies": {"c": "^3.0.0"},
            },
            "node_modules/b": {"version": "2.0.0"},
            "node_modules/c": {"version": "3.0.0"},
        },
        root_deps={"a": "1.0.0"},
    )

    graph, _ = _build(data)

    assert graph["a-1.0.0"].children == ["b-2.0.0", "c-3.0.0"]


def test_unknown_child_is_skipped_with_warning(make_lock, caplog, test_logger):
    data = make_lock(
        {"node_modules/a": {"version": "1.0.0"}},
        root_deps={"a": "1.0.0", "fsevents": "2.3.2"},
    )

    with caplog.at_level(logging.WARNING, logger=test_logger.name):
        graph, _ = _build(data, logger=test_logger)

    assert graph["app-1.0.0"].children == ["a-1.0.0"]
    assert graph["app-1.0.0"].child_count == 1
    assert "fsevents-2.3.2" not in graph
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "fsevents-2.3.2" in warnings[0].getMessage()


def test_ignore_dev_excludes_dev_nodes_and_edges(make_lock, caplog, test_logger):
    data = make_lock(
        {
            "node_modules/prod": {"version": "1.0.0", "peerDependencies": {"tool": "1.0.0"}},
            "node_modules/tool": {"version": "1.0.0", "dev": True, "dependencies": {"helper": "1.0.0"}},
            "node_modules/helper": {"version": "1.0.0", "dev": True},
        },
        root_deps={"prod": "1.0.0"},
        root_dev_deps={"tool": "1.0.0"},
    )

    with caplog.at_level(logging.WARNING, logger=test_logger.name):
        graph, versions = _build(data, ignore_dev=True, logger=test_logger)

    assert set(graph.nodes) == {"app-1.0.0", "prod-1.0.0"}
    assert not any(node.dev for node in graph.nodes.values())
    assert graph["prod-1.0.0"].children == []
    assert "tool" not in versions
    # dev children are filtered quietly, not reported as unknown
    assert not [r for r in caplog.records if r.levelno == logging.WARNING]


def test_include_dev_keeps_dev_nodes(make_lock):
    data = make_lock(
        {
            "node_modules/prod": {"version": "1.0.0"},
            "node_modules/tool": {"version": "1.0.0", "dev": True, "dependencies": {"helper": "1.0.0"}},
            "node_modules/helper": {"version": "1.0.0", "dev": True},
        },
        root_deps={"prod": "1.0.0"},
        root_dev_deps={"tool": "1.0.0"},
    )

    graph, _ = _build(data, ignore_dev=False)

    assert graph["app-1.0.0"].children == ["prod-1.0.0", "tool-1.0.0"]
    assert graph["tool-1.0.0"].dev is True
    assert graph["helper-1.0.0"].parents == ["tool-1.0.0"]


def test_versions_index_tracks_nested_versions(make_lock):
    data = make_lock(
        {
            "node_modules/a": {"version": "1.0.0"},
            "node_modules/b": {"version": "1.0.0", "dependencies": {"a": "2.0.0"}},
            "node_modules/b/node_modules/a": {"version": "2.0.0"},
        },
        root_deps={"a": "1.0.0", "b": "1.0.0"},
    )

    graph, versions = _build(data)

    assert graph["b-1.0.0"].children == ["a-2.0.0"]
    assert versions.versions_of("a") == ["1.0.0", "2.0.0"]
    assert versions.versions_of("b") == ["1.0.0"]
