from desksetup.common.state import InstallState


def test_record_and_reload(tmp_path):
    state_file = tmp_path / "state/state.json"
    state = InstallState(state_file)

    state.record_install("cursor", "1.2.3", tmp_path / "cursor.AppImage")

    reloaded = InstallState(state_file)
    record = reloaded.get("cursor")
    assert record['version'] == "1.2.3"
    assert record['location'] == str(tmp_path / "cursor.AppImage")
    assert 'installed_at' in record
    assert 'last_updated' in reloaded.state
    assert list(reloaded.all()) == ["cursor"]


def test_corrupt_state_is_treated_as_empty(tmp_path):
    state_file = tmp_path / "state.json"
    state_file.write_text("{not json")

    state = InstallState(state_file)

    assert state.all() == {}
    assert state.get("cura") is None


def test_clear(tmp_path):
    state = InstallState(tmp_path / "state.json")
    state.record_install("cura", "5.9.0")

    state.clear()

    assert InstallState(tmp_path / "state.json").all() == {}
