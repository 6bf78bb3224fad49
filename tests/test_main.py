import os

import registry_scanner
from main import main, parse_args


def test_parse_rules_arguments():
    args = parse_args(["rules", "Visio", "Project", "--folder", "a", "--folder", "b"])

    assert args.command == "rules"
    assert args.terms == ["Visio", "Project"]
    assert args.folders == ["a", "b"]


def test_cleanup_dry_run(tmp_path, make_file, monkeypatch):
    old = make_file(tmp_path / "Temp" / "old.tmp", mtime=1)
    xml = tmp_path / "targets.xml"
    xml.write_text('<Targets><Target Name="Temp"><Path Days="1">%PKTEST_TEMP%</Path></Target></Targets>')
    monkeypatch.setenv("PKTEST_TEMP", str(tmp_path / "Temp"))

    assert main(["cleanup", str(xml), "--dry-run"]) == 0
    assert os.path.exists(old)


def test_cleanup_bad_xml_exit_code(tmp_path):
    assert main(["cleanup", str(tmp_path / "missing.xml")]) == 1


def test_rules_command(tmp_path, make_file, monkeypatch, fake_registry):
    make_file(tmp_path / "apps" / "Visio.exe")
    monkeypatch.setattr(registry_scanner, "WinRegistryBackend", lambda: fake_registry())

    code = main(["rules", "Visio", "--folder", str(tmp_path / "apps"), "--output-dir", str(tmp_path / "out")])

    assert code == 0
    assert os.path.isfile(tmp_path / "out" / "Microsoft Visio.fxr")


def test_blank_search_term_exit_code(tmp_path):
    assert main(["rules", " ", "--output-dir", str(tmp_path / "out")]) == 1
