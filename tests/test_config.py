import os

from config import AppConfig, RULE_COMMENT, default_scan_folders, documents_folder, load_config, save_config


def test_missing_config_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "config.json"))

    assert config == AppConfig()
    assert config.comment == RULE_COMMENT


def test_config_is_saved_and_loaded(tmp_path):
    path = str(tmp_path / "ProfileKit" / "config.json")
    save_config(AppConfig(output_dir="D:\\Rules", scan_folders=["D:\\Apps"], log_dir="D:\\Logs"), path)

    config = load_config(path)

    assert config.output_dir == "D:\\Rules"
    assert config.scan_folders == ["D:\\Apps"]
    assert config.log_dir == "D:\\Logs"


def test_corrupt_config_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    assert load_config(str(path)) == AppConfig()


def test_default_scan_folders_cover_office_and_start_menu():
    env = {
        "ProgramFiles": "PF",
        "ProgramFiles(x86)": "PF86",
        "ProgramData": "PD",
    }

    folders = default_scan_folders(env)

    assert os.path.join("PF", "Microsoft Office", "root", "Office16") in folders
    assert os.path.join("PF86", "Microsoft Office", "root", "Office16") in folders
    assert os.path.join("PD", "Microsoft", "Windows", "Start Menu", "Programs") in folders


def test_documents_folder_uses_user_profile():
    assert documents_folder({"USERPROFILE": "home"}) == os.path.join("home", "Documents")
