from pathlib import Path

from classfiles import class_entry, write_class_jar, write_jar
from fakes import StaticProvider

from jarlens.config import Config
from jarlens.detail import ClassDetailExtractor
from jarlens.detail import extractor as extractor_module
from jarlens.detail.extractor import NOT_FOUND_MESSAGE
from jarlens.sources import SourcesJarProvider, default_providers
from jarlens.sources.sources_jar import source_entry_name, sources_jar_for

WIDGET_SOURCE = '''package com.acme.ui;

import java.util.List;

public class Widget {
    private final String label;

    public Widget(String label) {
        this.label = label;
    }

    public void render(Canvas canvas, int scale) {
        canvas.draw(label);
    }

    public static class Part {
        public List<Widget> children(Layout layout) {
            return List.of();
        }
    }
}
'''


def _binary_jar(tmp_path: Path) -> Path:
    return write_class_jar(
        tmp_path / "repo" / "ui-1.0.jar",
        {"com/acme/ui/Widget": ["render"], "com/acme/ui/Widget$Part": ["children"]},
    )


def test_sources_jar_naming() -> None:
    assert sources_jar_for("/m2/ui/1.0/ui-1.0.jar") == Path("/m2/ui/1.0/ui-1.0-sources.jar")
    assert source_entry_name("com.acme.ui.Widget$Part") == "com/acme/ui/Widget.java"
    assert source_entry_name("com.acme.ui.Widget") == "com/acme/ui/Widget.java"


def test_no_sources_and_no_decompiler_is_unavailable(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)
    extractor = ClassDetailExtractor([SourcesJarProvider()])

    detail = extractor.inspect(str(jar), "com.acme.ui.Widget")

    assert detail.is_error
    assert detail.source_unavailable
    assert detail.raw_source is None
    assert detail.methods == []
    assert "sources-jar" in detail.error


def test_recovers_from_sources_jar(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)
    write_jar(sources_jar_for(jar), {"com/acme/ui/Widget.java": WIDGET_SOURCE})
    extractor = ClassDetailExtractor([SourcesJarProvider()])

    detail = extractor.inspect(str(jar), "com.acme.ui.Widget")

    assert not detail.is_error
    assert detail.source_origin == "sources-jar"
    assert detail.package == "com.acme.ui"
    assert detail.imports == ["java.util.List"]
    assert detail.fields == ["private final String label"]
    assert [m.normalized_definition for m in detail.methods] == ["render(Canvas)", "children(Layout)"]
    assert detail.raw_source == WIDGET_SOURCE


def test_nested_class_reads_outer_source_file(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)
    write_jar(sources_jar_for(jar), {"com/acme/ui/Widget.java": WIDGET_SOURCE})
    extractor = ClassDetailExtractor([SourcesJarProvider()])

    detail = extractor.inspect(str(jar), "com.acme.ui.Widget$Part")

    assert detail.source_origin == "sources-jar"
    assert detail.package == "com.acme.ui"
    assert detail.imports == ["java.util.List"]
    assert [m.normalized_definition for m in detail.methods] == ["children(Layout)"]
    assert detail.fields == []
    assert detail.raw_source == WIDGET_SOURCE


def test_first_provider_with_source_wins(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)
    empty = StaticProvider("empty")
    first = StaticProvider("first", text="package a;\npublic class Widget {}\n")
    second = StaticProvider("second", text="package b;\npublic class Widget {}\n")
    extractor = ClassDetailExtractor([empty, first, second])

    detail = extractor.inspect(str(jar), "com.acme.ui.Widget")

    assert detail.source_origin == "first"
    assert detail.package == "a"
    assert len(empty.calls) == 1
    assert second.calls == []


def test_failing_provider_is_skipped(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)
    broken = StaticProvider("broken", error=RuntimeError("tool crashed"))
    backup = StaticProvider("backup", text="public interface Widget {}\n")
    extractor = ClassDetailExtractor([broken, backup])

    detail = extractor.inspect(str(jar), "com.acme.ui.Widget")

    assert detail.source_origin == "backup"
    assert detail.kind == "interface"
    # no package statement, so it comes from the class name
    assert detail.package == "com.acme.ui"


def test_unparsable_source_falls_through_to_next_provider(tmp_path: Path, monkeypatch) -> None:
    jar = _binary_jar(tmp_path)
    calls = []

    def broken_outline(text, nested=()):
        calls.append(text)
        raise IndexError("list index out of range")

    monkeypatch.setattr(extractor_module, "outline_source", broken_outline)
    extractor = ClassDetailExtractor(
        [
            StaticProvider("sources-jar", text="public class Widget {}\n"),
            StaticProvider("disassembly", text="public class com.acme.ui.Widget {\n  public void render();\n}\n"),
        ]
    )

    detail = extractor.inspect(str(jar), "com.acme.ui.Widget")

    assert len(calls) == 1
    assert detail.source_origin == "disassembly"
    assert [m.normalized_definition for m in detail.methods] == ["render()"]


def test_successful_details_are_cached(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)
    provider = StaticProvider("static", text="public class Widget {}\n")
    extractor = ClassDetailExtractor([provider])

    first = extractor.inspect(str(jar), "com.acme.ui.Widget")
    second = extractor.inspect(str(jar), "com.acme.ui.Widget")

    assert first is second
    assert len(provider.calls) == 1

    extractor.clear()
    extractor.inspect(str(jar), "com.acme.ui.Widget")
    assert len(provider.calls) == 2


def test_unavailable_details_are_not_cached(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)
    provider = StaticProvider("static")
    extractor = ClassDetailExtractor([provider])

    extractor.inspect(str(jar), "com.acme.ui.Widget")
    extractor.inspect(str(jar), "com.acme.ui.Widget")

    assert len(provider.calls) == 2


def test_missing_jar(tmp_path: Path) -> None:
    extractor = ClassDetailExtractor([StaticProvider("static", text="class A {}")])

    detail = extractor.inspect(str(tmp_path / "nope.jar"), "com.acme.A")

    assert detail.is_error
    assert detail.kind == "error"
    assert detail.error.startswith("Jar not found")
    assert not detail.source_unavailable


def test_no_providers(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)

    detail = ClassDetailExtractor([]).inspect(str(jar), "com.acme.ui.Widget")

    assert detail.source_unavailable
    assert "no source providers configured" in detail.error


def test_inspect_by_name_finds_containing_jar(tmp_path: Path) -> None:
    other = write_class_jar(tmp_path / "repo" / "other-1.0.jar", {"org/other/Thing": ["run"]})
    jar = _binary_jar(tmp_path)
    provider = StaticProvider("static", text="package com.acme.ui;\npublic class Widget {}\n")
    extractor = ClassDetailExtractor([provider])

    detail = extractor.inspect_by_name(
        "com.acme.ui.Widget",
        [str(tmp_path / "gone.jar"), str(other), str(jar)],
    )

    assert not detail.is_error
    assert provider.calls == [(str(jar), "com.acme.ui.Widget")]


def test_inspect_by_name_not_found(tmp_path: Path) -> None:
    jar = _binary_jar(tmp_path)
    corrupt = tmp_path / "repo" / "corrupt-1.0.jar"
    corrupt.write_bytes(b"not a zip")
    extractor = ClassDetailExtractor([StaticProvider("static", text="class X {}")])

    detail = extractor.inspect_by_name("com.acme.Missing", [str(corrupt), str(jar)])

    assert detail.is_error
    assert detail.error == NOT_FOUND_MESSAGE


def test_default_providers_follow_config() -> None:
    assert [p.origin for p in default_providers(Config())] == ["sources-jar"]

    config = Config(fernflower_path="/opt/fernflower.jar", javap_path="javap")
    assert [p.origin for p in default_providers(config)] == ["sources-jar", "decompiler", "disassembly"]


def test_class_entry_helper_matches_decompiler_entry() -> None:
    from jarlens.sources.decompiler import class_entry_name

    assert class_entry_name("com.acme.ui.Widget") == class_entry("com/acme/ui/Widget")
