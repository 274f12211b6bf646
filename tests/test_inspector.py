import asyncio
from pathlib import Path

import pytest
from classfiles import write_class_jar
from fakes import FakeResolver, StaticProvider, install_jar

from jarlens.config import Config
from jarlens.errors import DescriptorNotFoundError
from jarlens.inspector import MavenInspector
from jarlens.models import BomComponent

SOURCE = '''package com.acme.orders;

public class OrderService {
    public void place(OrderDto order) {
    }
}
'''


@pytest.fixture
def workspace(tmp_path: Path):
    repository = tmp_path / "repo"
    components = [
        BomComponent("com.acme", "orders", "1.0"),
        BomComponent("com.acme", "billing", "2.1"),
    ]
    install_jar(
        repository,
        components[0],
        lambda jar: write_class_jar(jar, {"com.acme.orders.OrderService": ["place", "cancel"]}),
    )
    install_jar(
        repository,
        components[1],
        lambda jar: write_class_jar(jar, {"com.acme.billing.InvoiceService": ["issue"]}),
    )
    pom = tmp_path / "app" / "pom.xml"
    pom.parent.mkdir()
    pom.write_text("<project/>", encoding="utf-8")

    config = Config(cache_dir=tmp_path / "cache", lock_timeout=0.5)
    resolver = FakeResolver(repository, components)
    return config, resolver, pom


def _inspector(config: Config, resolver: FakeResolver, provider: StaticProvider | None = None) -> MavenInspector:
    providers = [provider] if provider is not None else []
    return MavenInspector(config, resolver=resolver, providers=providers, max_workers=2)


def test_resolve_then_search(workspace) -> None:
    config, resolver, pom = workspace
    inspector = _inspector(config, resolver)

    result = inspector.resolve(pom)
    classes = inspector.search_classes(pom, "*Service")
    methods = inspector.search_methods(pom, "iss")

    assert [Path(p).name for p in result.jar_paths] == ["orders-1.0.jar", "billing-2.1.jar"]
    assert sorted(h.full_name for h in classes) == [
        "com.acme.billing.InvoiceService",
        "com.acme.orders.OrderService",
    ]
    assert [h.full_name for h in methods] == ["com.acme.billing.InvoiceService"]
    assert resolver.calls == 1


def test_caches_survive_restart(workspace) -> None:
    config, resolver, pom = workspace
    _inspector(config, resolver).search_classes(pom, "Order")

    restarted = _inspector(config, resolver)

    assert restarted.dependencies.cached_jar_paths(pom) is not None
    assert len(restarted.jar_index) == 2
    assert restarted.search_classes(pom, "Order")[0].simple_name == "OrderService"
    assert resolver.calls == 1
    assert config.dependency_cache_file.exists()
    assert config.jar_cache_file.exists()


def test_missing_descriptor(workspace, tmp_path: Path) -> None:
    config, resolver, _ = workspace

    with pytest.raises(DescriptorNotFoundError):
        _inspector(config, resolver).search_classes(tmp_path / "missing" / "pom.xml", "Order")


def test_inspect_by_name_uses_resolved_jars(workspace) -> None:
    config, resolver, pom = workspace
    provider = StaticProvider("static", text=SOURCE)
    inspector = _inspector(config, resolver, provider)

    before = inspector.inspect_by_name("com.acme.orders.OrderService")
    inspector.resolve(pom)
    after = inspector.inspect_by_name("com.acme.orders.OrderService")

    assert before.is_error
    assert not after.is_error
    assert [m.normalized_definition for m in after.methods] == ["place(OrderDto)"]
    assert provider.calls[0][0].endswith("orders-1.0.jar")


def test_inspect_without_providers_reports_unavailable(workspace) -> None:
    config, resolver, pom = workspace
    inspector = _inspector(config, resolver)
    jar = inspector.resolve(pom).jar_paths[0]

    detail = inspector.inspect(jar, "com.acme.orders.OrderService")

    assert detail.source_unavailable
    assert detail.raw_source is None


def test_default_providers_when_none_given(workspace) -> None:
    config, resolver, _ = workspace

    inspector = MavenInspector(config, resolver=resolver)

    assert [p.origin for p in inspector.extractor.providers] == ["sources-jar"]


def test_mcp_server_registers_tools(workspace) -> None:
    from jarlens.server import create_mcp_server

    config, resolver, _ = workspace
    server = create_mcp_server(_inspector(config, resolver))

    names = {tool.name for tool in asyncio.run(server.list_tools())}

    assert names == {
        "analyze_pom_dependencies",
        "search_class_in_dependencies",
        "search_method_in_dependencies",
        "inspect_java_class",
        "inspect_class_by_name",
        "find_method_usage",
    }
