from app.engines.closing import ClosingContext, get_settings, save_settings
from app.engines.closing.adapters import SettingsStore, SqliteFormProvider, SqliteTriggerPlatform
from app.engines.closing.errors import StorePlatformError
from app.engines.closing.orchestrator import ERROR_LOAD_FAILED, ERROR_SAVE_FAILED
from app.engines.closing.triggers import TriggerKind


class _RecordingStore(SettingsStore):
    def __init__(self):
        self.values: dict[str, str] = {}
        self.writes = 0

    def get_all(self):
        return dict(self.values)

    def set_all(self, values):
        self.writes += 1
        self.values = {key: value for key, value in values.items() if value}


class _BrokenStore(SettingsStore):
    def get_all(self):
        raise StorePlatformError("disk gone")

    def set_all(self, values):
        raise StorePlatformError("disk gone")


def _owned_count(ctx, kind=None) -> int:
    return len(ctx.triggers.owned_triggers(kind))


def test_get_settings_defaults_to_empty_strings(ctx):
    assert get_settings(ctx) == {"date": "", "time": "", "number": "", "success": True}


def test_rejects_missing_limits_without_writing(conn, now):
    store = _RecordingStore()
    ctx = ClosingContext(store, SqliteTriggerPlatform(conn), SqliteFormProvider(conn), clock=lambda: now)

    result = save_settings(ctx, "", "10:00", "")

    assert result["success"] is False
    assert "at least one limit" in result["error"].lower()
    assert store.writes == 0


def test_rejects_yesterday(ctx):
    result = save_settings(ctx, "2026-10-18", "09:00", "5")
    assert result == {"success": False, "error": "Date cannot be in the past."}
    assert _owned_count(ctx) == 0


def test_deadline_only_end_to_end(ctx):
    result = save_settings(ctx, "2026-10-20", "09:00", "")

    assert result["success"] is True
    assert "2026-10-20 09:00" in result["message"]
    assert _owned_count(ctx, TriggerKind.DEADLINE) == 1
    assert _owned_count(ctx, TriggerKind.SUBMISSION) == 0
    assert get_settings(ctx) == {"date": "2026-10-20", "time": "09:00", "number": "", "success": True}


def test_count_only_installs_submission_trigger(ctx):
    result = save_settings(ctx, "", "", "5")

    assert result["success"] is True
    assert "5 responses" in result["message"]
    assert _owned_count(ctx, TriggerKind.SUBMISSION) == 1
    assert _owned_count(ctx, TriggerKind.DEADLINE) == 0


def test_both_limits_install_both_triggers(ctx):
    result = save_settings(ctx, "2026-10-25", "18:30", 100)

    assert result["success"] is True
    assert _owned_count(ctx, TriggerKind.DEADLINE) == 1
    assert _owned_count(ctx, TriggerKind.SUBMISSION) == 1
    assert get_settings(ctx)["number"] == "100"


def test_repeated_saves_never_duplicate_triggers(ctx):
    for _ in range(3):
        assert save_settings(ctx, "2026-10-25", "18:30", "10")["success"] is True
    assert _owned_count(ctx, TriggerKind.DEADLINE) == 1
    assert _owned_count(ctx, TriggerKind.SUBMISSION) == 1

    assert save_settings(ctx, "", "", "3")["success"] is True
    assert _owned_count(ctx, TriggerKind.DEADLINE) == 0
    assert _owned_count(ctx, TriggerKind.SUBMISSION) == 1


def test_save_replaces_record_wholesale(ctx):
    save_settings(ctx, "2026-10-25", "18:30", "10")
    save_settings(ctx, "", "", "7")
    assert get_settings(ctx) == {"date": "", "time": "", "number": "7", "success": True}


def test_elapsed_time_today_fails_at_install_but_settings_persist(ctx):
    result = save_settings(ctx, "2026-10-19", "08:00", "5")

    assert result["success"] is False
    assert "must be in the future" in result["error"]
    # Remaining installs are skipped and the stored record is not rolled back.
    assert _owned_count(ctx) == 0
    assert get_settings(ctx)["date"] == "2026-10-19"


def test_date_without_time_uses_midnight(ctx):
    today_result = save_settings(ctx, "2026-10-19", "", "")
    tomorrow_result = save_settings(ctx, "2026-10-20", "", "")

    assert today_result["success"] is False
    assert tomorrow_result["success"] is True
    (trigger,) = ctx.triggers.owned_triggers(TriggerKind.DEADLINE)
    assert trigger.fire_at.isoformat() == "2026-10-20T00:00:00"


def test_foreign_triggers_survive_save(ctx, now):
    ctx.platform.create_event_trigger("export_to_sheet", ctx.forms.get_active())
    save_settings(ctx, "", "", "5")
    save_settings(ctx, "", "", "6")

    handlers = sorted(trigger.handler_name for trigger in ctx.platform.list_triggers())
    assert handlers == ["check_submission_limit", "export_to_sheet"]


def test_store_failures_become_generic_messages(conn, now):
    ctx = ClosingContext(_BrokenStore(), SqliteTriggerPlatform(conn), SqliteFormProvider(conn), clock=lambda: now)

    assert get_settings(ctx) == {"success": False, "error": ERROR_LOAD_FAILED}
    assert save_settings(ctx, "", "", "5") == {"success": False, "error": ERROR_SAVE_FAILED}
    assert _owned_count(ctx) == 0


def test_non_ascii_time_is_rejected_before_install(ctx):
    result = save_settings(ctx, "2026-10-20", "1٥:00", "")
    assert result == {"success": False, "error": "Invalid time format. Use HH:MM (24-hour)."}
    assert _owned_count(ctx) == 0
