import logging

from utils.app_config import get_db_folder, get_log_level, load_config, save_config, set_db_folder


def test_missing_config_is_empty(tmp_path):
    assert load_config(tmp_path / "nope.json") == {}


def test_corrupt_config_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) == {}


def test_non_object_config_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_config(path) == {}


def test_save_creates_directory_and_round_trips(tmp_path):
    path = tmp_path / "nested" / "config.json"
    save_config({"db_folder": "/data"}, path)
    assert load_config(path) == {"db_folder": "/data"}
    assert not path.with_suffix(".tmp").exists()


def test_set_and_clear_db_folder(tmp_path):
    path = tmp_path / "config.json"
    save_config({"log_level": "DEBUG"}, path)
    set_db_folder("/srv/ops", path)
    assert get_db_folder(path) == "/srv/ops"
    set_db_folder(None, path)
    assert get_db_folder(path) is None
    assert load_config(path) == {"log_level": "DEBUG"}


def test_log_level(tmp_path):
    path = tmp_path / "config.json"
    assert get_log_level(path) == logging.INFO
    save_config({"log_level": "debug"}, path)
    assert get_log_level(path) == logging.DEBUG
    save_config({"log_level": "chatty"}, path)
    assert get_log_level(path) == logging.INFO
