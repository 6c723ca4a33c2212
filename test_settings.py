"""
Settings Test Suite

Tests for persistent settings load/save.

Sections:
    1. Load — missing file, corrupt file, unknown keys
    2. Save — round-trip, bad path
    3. Atomic Writes
    4. Preference — typed cell with default
"""
import json

from settings import DEFAULTS, Preference, load_settings, save_settings, show_dots_on_dice

# ── 1. Load ──────────────────────────────────────────────────────────────────


def test_load_missing_file_returns_defaults(tmp_path):
    """Loading from a nonexistent file returns DEFAULTS."""
    path = tmp_path / "no_such_file.json"
    assert load_settings(path=path) == DEFAULTS


def test_load_corrupt_file_returns_defaults(tmp_path):
    """Loading from a corrupt (non-JSON) file returns DEFAULTS."""
    path = tmp_path / "bad.json"
    path.write_text("not json at all {{{")
    assert load_settings(path=path) == DEFAULTS


def test_load_non_dict_returns_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(["show_dots_on_dice"]))
    assert load_settings(path=path) == DEFAULTS


def test_unknown_keys_ignored(tmp_path):
    """Unknown keys in the file are dropped, not passed through."""
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"show_dots_on_dice": False, "unknown_key": 42}))
    result = load_settings(path=path)
    assert "unknown_key" not in result
    assert result["show_dots_on_dice"] is False


# ── 2. Save ──────────────────────────────────────────────────────────────────


def test_save_load_round_trip(tmp_path):
    """Settings survive a save/load round trip."""
    path = tmp_path / "settings.json"
    save_settings({"show_dots_on_dice": False}, path=path)
    assert load_settings(path=path) == {"show_dots_on_dice": False}


def test_save_to_bad_path_does_not_raise(tmp_path):
    """Writing to an invalid path silently fails."""
    bad_path = tmp_path / "nonexistent_dir" / "nested" / "settings.json"
    save_settings({"show_dots_on_dice": False}, path=bad_path)
    assert not bad_path.exists()


# ── 3. Atomic Writes ────────────────────────────────────────────────────────


def test_atomic_write_preserves_existing_settings(tmp_path):
    """Existing settings survive even if a .tmp file is left over from a crash."""
    path = tmp_path / "settings.json"
    save_settings({"show_dots_on_dice": False}, path=path)

    # Simulate a crashed partial write
    tmp_file = tmp_path / "settings.json.tmp"
    tmp_file.write_text("corrupted garbage")

    assert load_settings(path=path)["show_dots_on_dice"] is False


def test_save_leaves_no_tmp_files(tmp_path):
    path = tmp_path / "settings.json"
    save_settings({"show_dots_on_dice": True}, path=path)
    assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]


# ── 4. Preference ───────────────────────────────────────────────────────────


def test_preference_defaults_when_unset(tmp_path):
    pref = show_dots_on_dice(tmp_path / "settings.json")
    assert pref.get() is True


def test_preference_set_persists(tmp_path):
    path = tmp_path / "settings.json"
    show_dots_on_dice(path).set(False)
    assert show_dots_on_dice(path).get() is False
    assert json.loads(path.read_text())["show_dots_on_dice"] is False


def test_preference_wrong_type_falls_back_to_default(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"show_dots_on_dice": "yes"}))
    assert Preference("show_dots_on_dice", True, path).get() is True
