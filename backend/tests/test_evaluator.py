from datetime import timedelta

from app.engines.closing import (
    close_form,
    evaluate_submission,
    fire_due_deadline_triggers,
    fire_submission_triggers,
    save_settings,
)
from app.engines.closing import evaluator
from app.engines.closing.adapters import FormRef, SubmissionEvent
from app.engines.closing.errors import FormPlatformError


class _BrokenForm(FormRef):
    id = "broken"

    def get_response_count(self):
        raise FormPlatformError("form store offline")

    def set_accepting_responses(self, accepting):
        raise FormPlatformError("form store offline")


def _submit(ctx, form, n=1):
    for _ in range(n):
        response_id = form.record_response({"name": "Ada"})
        fire_submission_triggers(ctx, form, response_id)


def test_close_form_sets_flag_and_clears_owned_triggers(ctx):
    save_settings(ctx, "2026-10-25", "12:00", "50")
    ctx.platform.create_event_trigger("export_to_sheet", ctx.forms.get_active())

    assert close_form(ctx) is True

    assert ctx.forms.get_active().is_accepting_responses() is False
    assert ctx.triggers.owned_triggers() == []
    assert [trigger.handler_name for trigger in ctx.platform.list_triggers()] == ["export_to_sheet"]


def test_close_form_swallows_errors(ctx):
    assert close_form(ctx, _BrokenForm()) is False


def test_evaluate_below_limit_keeps_form_open(ctx):
    save_settings(ctx, "", "", "3")
    form = ctx.forms.get_active()
    form.record_response({})
    form.record_response({})

    assert evaluate_submission(ctx, SubmissionEvent(form=form)) is False
    assert form.is_accepting_responses() is True


def test_evaluate_without_limit_is_a_no_op(ctx):
    form = ctx.forms.get_active()
    form.record_response({})
    ctx.store.set_all({"number": "not-a-number"})

    assert evaluate_submission(ctx, SubmissionEvent(form=form)) is False
    assert form.is_accepting_responses() is True


def test_evaluate_swallows_form_errors(ctx):
    save_settings(ctx, "", "", "3")
    assert evaluate_submission(ctx, SubmissionEvent(form=_BrokenForm())) is False


def test_count_limit_end_to_end(ctx, monkeypatch):
    calls = []
    real_close_form = evaluator.close_form

    def _spy(*args, **kwargs):
        calls.append(args)
        return real_close_form(*args, **kwargs)

    monkeypatch.setattr(evaluator, "close_form", _spy)

    assert save_settings(ctx, "", "", "5")["success"] is True
    form = ctx.forms.get_active()

    _submit(ctx, form, 4)
    assert calls == []
    assert form.is_accepting_responses() is True

    _submit(ctx, form, 1)
    assert len(calls) == 1
    assert form.get_response_count() == 5
    assert form.is_accepting_responses() is False
    assert ctx.triggers.owned_triggers() == []


def test_submission_handler_is_idempotent_after_close(ctx):
    save_settings(ctx, "", "", "1")
    form = ctx.forms.get_active()
    _submit(ctx, form, 1)
    assert form.is_accepting_responses() is False

    for _ in range(5):
        evaluator.handle_submission_fire(ctx, SubmissionEvent(form=form))
    # With no triggers left, host delivery is a no-op too.
    assert fire_submission_triggers(ctx, form) == 0
    assert form.is_accepting_responses() is False
    assert ctx.triggers.owned_triggers() == []


def test_submission_handler_without_event_is_ignored(ctx):
    assert evaluator.handle_submission_fire(ctx, None) is False


def test_deadline_dispatch_fires_only_due_owned_triggers(ctx, now):
    save_settings(ctx, "2026-10-19", "13:00", "")
    ctx.platform.create_time_trigger("nightly_backup", now - timedelta(minutes=1))

    assert fire_due_deadline_triggers(ctx, now) == 0
    assert ctx.forms.get_active().is_accepting_responses() is True

    assert fire_due_deadline_triggers(ctx, now + timedelta(hours=1)) == 1
    assert ctx.forms.get_active().is_accepting_responses() is False
    assert ctx.triggers.owned_triggers() == []
    assert [trigger.handler_name for trigger in ctx.platform.list_triggers()] == ["nightly_backup"]


def test_deadline_first_also_disarms_count_trigger(ctx, now):
    save_settings(ctx, "2026-10-19", "13:00", "100")
    form = ctx.forms.get_active()
    _submit(ctx, form, 2)

    fire_due_deadline_triggers(ctx, now + timedelta(hours=2))

    assert form.is_accepting_responses() is False
    assert ctx.triggers.owned_triggers() == []


def test_handler_errors_do_not_escape_dispatch(ctx, now, monkeypatch):
    save_settings(ctx, "2026-10-19", "13:00", "")

    def _boom(*_args, **_kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setitem(evaluator.HANDLERS, evaluator.TriggerKind.DEADLINE, _boom)

    assert fire_due_deadline_triggers(ctx, now + timedelta(hours=1)) == 1
    assert ctx.triggers.owned_triggers() == []


class _FlakyForm(FormRef):
    id = "flaky"

    def get_response_count(self):
        raise RuntimeError("host timeout")

    def set_accepting_responses(self, accepting):
        raise RuntimeError("host timeout")


def test_submission_handler_swallows_unexpected_host_errors(ctx):
    save_settings(ctx, "", "", "3")

    assert evaluator.handle_submission_fire(ctx, SubmissionEvent(form=_FlakyForm())) is False


def test_closed_form_is_not_re_evaluated(ctx, monkeypatch):
    save_settings(ctx, "", "", "1")
    form = ctx.forms.get_active()
    _submit(ctx, form, 1)
    assert form.is_accepting_responses() is False

    clears = []
    monkeypatch.setattr(ctx.triggers, "clear_owned_triggers", lambda: clears.append(1) or 0)
    for _ in range(3):
        assert evaluator.handle_submission_fire(ctx, SubmissionEvent(form=form)) is False
    assert clears == []
