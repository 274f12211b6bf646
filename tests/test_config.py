from pathlib import Path

from jarlens.config import DEFAULT_CACHE_DIR, Config
from jarlens.models import ClassDetail, MethodInfo, SearchHit
from jarlens.server.formatting import format_detail, format_hits, format_jar_names


def test_defaults_from_empty_environment() -> None:
    config = Config.from_env({})

    assert config.cache_dir == DEFAULT_CACHE_DIR
    assert config.maven_path == "mvn"
    assert config.java_path == "java"
    assert config.fernflower_path is None
    assert config.javap_path is None
    assert config.lock_timeout == 3.0


def test_environment_overrides(tmp_path: Path) -> None:
    config = Config.from_env(
        {
            "JARLENS_CACHE_DIR": str(tmp_path),
            "JARLENS_MAVEN_PATH": "/opt/maven/bin/mvn",
            "JARLENS_MAVEN_SETTINGS": "/etc/settings.xml",
            "JARLENS_MAVEN_REPOSITORY": "/data/m2",
            "JARLENS_FERNFLOWER_PATH": "/opt/fernflower.jar",
            "JARLENS_JAVAP_PATH": "javap",
            "JARLENS_LOCK_TIMEOUT": "1.5",
            "JARLENS_JAVA_PATH": "  ",
        }
    )

    assert config.cache_dir == tmp_path
    assert config.maven_path == "/opt/maven/bin/mvn"
    assert config.maven_settings == "/etc/settings.xml"
    assert config.maven_repository == "/data/m2"
    assert config.fernflower_path == "/opt/fernflower.jar"
    assert config.javap_path == "javap"
    assert config.lock_timeout == 1.5
    assert config.java_path == "java"
    assert config.dependency_cache_file == tmp_path / "dependency_cache.json"
    assert config.jar_cache_file == tmp_path / "jar_content_cache.json"
    assert config.log_file == tmp_path / "jarlens.log"


def test_format_hits() -> None:
    hits = [SearchHit("OrderService", "com.acme.OrderService", "/m2/orders-1.0.jar")]

    assert format_hits(hits, "Order") == "1. com.acme.OrderService\n   jar: /m2/orders-1.0.jar"
    assert format_hits([], "Nothing") == "No results found for: Nothing"


def test_format_jar_names() -> None:
    assert format_jar_names(["/m2/a/1.0/a-1.0.jar", "/m2/b/2.0/b-2.0.jar"]) == "a-1.0.jar\nb-2.0.jar"
    assert "No dependency jars" in format_jar_names([])


def test_format_detail() -> None:
    detail = ClassDetail(
        name="com.acme.OrderService",
        package="com.acme",
        fields=["private final OrderRepository repository"],
        methods=[MethodInfo("public void place(OrderDto order)", "place(OrderDto)")],
        raw_source="class OrderService {}",
        source_origin="sources-jar",
    )

    text = format_detail(detail)

    assert text.startswith("class com.acme.OrderService")
    assert "  Source: sources-jar" in text
    assert "Fields (1):" in text
    assert "    key: place(OrderDto)" in text
    assert "class OrderService {}" not in text
    assert format_detail(detail, include_source=True).endswith("class OrderService {}")


def test_format_error_detail() -> None:
    text = format_detail(ClassDetail.unavailable("com.acme.Gone", "tried sources-jar"))

    assert text == "Error: Source unavailable: tried sources-jar\n  Class: com.acme.Gone"
