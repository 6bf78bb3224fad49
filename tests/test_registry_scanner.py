import logging

import pytest

from models import HidingType
from registry_scanner import WELL_KNOWN_KEYS, RegistryBackend, scan_registry

CLSID = r"HKEY_LOCAL_MACHINE\SOFTWARE\Classes\CLSID"
ADDINS = r"HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\Office\Visio\Addins"


def test_well_known_keys_cover_com_addins_and_click_to_run():
    assert CLSID in WELL_KNOWN_KEYS
    assert ADDINS in WELL_KNOWN_KEYS
    assert any("ClickToRun" in k and k.endswith("CLSID") for k in WELL_KNOWN_KEYS)


def test_children_matching_default_value_are_returned(fake_registry):
    registry = fake_registry({
        CLSID: {
            "{A}": "Microsoft Visio Drawing",
            "{B}": "Microsoft Word Document",
            "{C}": "",
        },
    })

    found = scan_registry(["visio"], key_paths=[CLSID], backend=registry)

    assert [c.path for c in found] == [CLSID + r"\{A}"]
    assert found[0].hiding_type == HidingType.FOLDER_OR_KEY
    assert found[0].source == "registry"
    assert registry.open_handles == []


def test_any_term_matches(fake_registry):
    registry = fake_registry({
        CLSID: {"{A}": "Visio Viewer", "{B}": "Project Server", "{C}": "Excel"},
    })

    found = scan_registry(["Visio", "Project"], key_paths=[CLSID], backend=registry)

    assert len(found) == 2


def test_missing_key_is_skipped_with_warning(fake_registry, caplog):
    registry = fake_registry({ADDINS: {"Visio.Addin": "Visio helper"}})

    with caplog.at_level(logging.WARNING):
        found = scan_registry(["Visio"], key_paths=[CLSID, ADDINS], backend=registry)

    assert [c.path for c in found] == [ADDINS + r"\Visio.Addin"]
    assert "not found" in caplog.text


def test_access_denied_key_is_skipped(fake_registry, caplog):
    registry = fake_registry(errors={CLSID: PermissionError("denied")})

    with caplog.at_level(logging.WARNING):
        found = scan_registry(["Visio"], key_paths=[CLSID], backend=registry)

    assert found == []
    assert "not accessible" in caplog.text


def test_nothing_found_when_no_key_exists(fake_registry):
    assert scan_registry(["Visio"], backend=fake_registry()) == []


def test_unexpected_error_propagates_and_releases_key(fake_registry):
    registry = fake_registry({CLSID: {"{A}": RuntimeError("corrupt hive")}})

    with pytest.raises(RuntimeError):
        scan_registry(["Visio"], key_paths=[CLSID], backend=registry)

    assert registry.open_handles == []


def test_unreadable_child_does_not_hide_its_siblings(fake_registry, caplog):
    registry = fake_registry({
        CLSID: {
            "{A}": "Visio Drawing",
            "{LOCKED}": PermissionError("Access is denied"),
            "{C}": "Visio Viewer",
        },
    })

    with caplog.at_level(logging.WARNING):
        found = scan_registry(["Visio"], key_paths=[CLSID], backend=registry)

    assert [c.path for c in found] == [CLSID + r"\{A}", CLSID + r"\{C}"]
    assert "{LOCKED}" in caplog.text
    assert "not accessible" not in caplog.text
    assert registry.open_handles == []


def test_fake_backend_provides_registry_backend_methods(fake_registry):
    methods = [name for name in vars(RegistryBackend) if not name.startswith("_")]

    assert sorted(methods) == ["close_key", "default_value", "open_key", "subkeys"]
    for name in methods:
        assert callable(getattr(fake_registry(), name))
