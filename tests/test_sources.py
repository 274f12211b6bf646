from pathlib import Path

from classfiles import build_class, class_entry, write_jar

from jarlens.sources import DecompilerProvider, DisassemblyProvider, decompiler, disassembly
from jarlens.utils import CommandResult

DECOMPILED = "package com.acme.ui;\n\npublic class Widget {\n}\n"


def _jar(tmp_path: Path) -> tuple[Path, bytes]:
    widget = build_class("com.acme.ui.Widget", methods=["render"])
    jar = write_jar(
        tmp_path / "ui-1.0.jar",
        {
            class_entry("com.acme.ui.Widget"): widget,
            class_entry("com.acme.ui.Canvas"): build_class("com.acme.ui.Canvas", methods=["draw"]),
            "META-INF/MANIFEST.MF": "Manifest-Version: 1.0\n",
        },
    )
    return jar, widget


def _fake_fernflower(seen: dict, produce: str | None, result: CommandResult):
    def run(args, cwd=None, timeout=None):
        class_file, out_dir = Path(args[-2]), Path(args[-1])
        seen["args"] = list(args)
        seen["timeout"] = timeout
        seen["inputs"] = sorted(p.name for p in class_file.parent.iterdir())
        seen["bytes"] = class_file.read_bytes()
        if produce is not None:
            (out_dir / "Widget.java").write_text(produce, encoding="utf-8")
        return result

    return run


def test_decompiler_extracts_only_the_requested_class(tmp_path: Path, monkeypatch) -> None:
    jar, widget = _jar(tmp_path)
    seen: dict = {}
    monkeypatch.setattr(
        decompiler, "run_command", _fake_fernflower(seen, DECOMPILED, CommandResult(0, "", ""))
    )

    recovered = DecompilerProvider("/opt/fernflower.jar", "/usr/bin/java", timeout=30).recover(
        str(jar), "com.acme.ui.Widget"
    )

    assert recovered is not None
    assert recovered.text == DECOMPILED
    assert recovered.origin == "decompiler"
    assert seen["args"][:3] == ["/usr/bin/java", "-jar", "/opt/fernflower.jar"]
    assert Path(seen["args"][3]).name == "Widget.class"
    assert seen["inputs"] == ["Widget.class"]
    assert seen["bytes"] == widget
    assert seen["timeout"] == 30


def test_decompiler_missing_entry_skips_the_tool(tmp_path: Path, monkeypatch) -> None:
    jar, _ = _jar(tmp_path)
    seen: dict = {}
    monkeypatch.setattr(
        decompiler, "run_command", _fake_fernflower(seen, DECOMPILED, CommandResult(0, "", ""))
    )

    recovered = DecompilerProvider("/opt/fernflower.jar").recover(str(jar), "com.acme.ui.Missing")

    assert recovered is None
    assert seen == {}


def test_decompiler_without_output_falls_through(tmp_path: Path, monkeypatch) -> None:
    jar, _ = _jar(tmp_path)
    seen: dict = {}
    monkeypatch.setattr(
        decompiler,
        "run_command",
        _fake_fernflower(seen, None, CommandResult(1, "", "Error: Unable to access jarfile")),
    )

    recovered = DecompilerProvider("/opt/fernflower.jar").recover(str(jar), "com.acme.ui.Widget")

    assert recovered is None
    assert seen["inputs"] == ["Widget.class"]


def _fake_javap(result: CommandResult, calls: list):
    def run(args, cwd=None, timeout=None):
        calls.append(list(args))
        return result

    return run


def test_disassembly_runs_javap(tmp_path: Path, monkeypatch) -> None:
    jar, _ = _jar(tmp_path)
    calls: list = []
    output = "public class com.acme.ui.Widget {\n  public void render();\n}\n"
    monkeypatch.setattr(disassembly, "run_command", _fake_javap(CommandResult(0, output, ""), calls))

    recovered = DisassemblyProvider("/jdk/bin/javap").recover(str(jar), "com.acme.ui.Widget")

    assert recovered is not None
    assert recovered.text == output
    assert recovered.origin == "disassembly"
    assert calls == [["/jdk/bin/javap", "-p", "-s", "-cp", str(jar), "com.acme.ui.Widget"]]


def test_disassembly_failure_or_empty_output(tmp_path: Path, monkeypatch) -> None:
    jar, _ = _jar(tmp_path)
    provider = DisassemblyProvider()

    monkeypatch.setattr(
        disassembly,
        "run_command",
        _fake_javap(CommandResult(1, "", "Error: class not found: com.acme.ui.Nope"), []),
    )
    assert provider.recover(str(jar), "com.acme.ui.Nope") is None

    monkeypatch.setattr(disassembly, "run_command", _fake_javap(CommandResult(0, "  \n", ""), []))
    assert provider.recover(str(jar), "com.acme.ui.Widget") is None
