from __future__ import annotations

from celery.signals import setup_logging
from sqlalchemy import select

import freightmatch.tasks.celery_app as celery_app_module
import freightmatch.tasks.dispatch as dispatch_module
import freightmatch.tasks.notification_tasks as notification_tasks
from freightmatch.models import Notification
from freightmatch.tasks.celery_app import celery_app
from tests.factories import make_assigned_request, make_request, make_transporter


def _message(dispatcher, event_type: str) -> dict:
    return next(m for m in dispatcher.messages if m["event_type"] == event_type)


def test_first_qualification_notifies_recommended_transporters(service, session, dispatcher):
    first = make_transporter(session, rating="4.50")
    second = make_transporter(session, rating="3.00")
    request = make_request(service)
    service.qualify_request(request.id, transporter_amount=500, platform_fee=50)

    created = notification_tasks.handle_request_event(session, _message(dispatcher, "request.qualified"))
    session.commit()
    assert [n.user_id for n in created] == [first.id, second.id]
    assert {n.type for n in created} == {"recommendation"}

    again = notification_tasks.handle_request_event(session, _message(dispatcher, "request.qualified"))
    assert again == []


def test_requalification_sends_nothing(service, session, dispatcher):
    make_transporter(session)
    request = make_request(service)
    service.qualify_request(request.id, transporter_amount=500, platform_fee=50)
    service.qualify_request(request.id, transporter_amount=450, platform_fee=50)

    second = [m for m in dispatcher.messages if m["event_type"] == "request.qualified"][1]
    assert notification_tasks.handle_request_event(session, second) == []


def test_assignment_notifies_both_parties(service, session, dispatcher):
    transporter = make_transporter(session)
    make_assigned_request(service, transporter)

    created = notification_tasks.handle_request_event(session, _message(dispatcher, "request.transporter_assigned"))
    assert {(n.user_id, n.type) for n in created} == {
        (transporter.id, "assignment"),
        ("client-1", "transporter_assigned"),
    }


def test_unknown_events_are_ignored(session):
    assert notification_tasks.handle_request_event(session, {"event_type": "request.edited", "payload": {}}) == []


def test_dispatch_task_commits_notifications(service, session, dispatcher, monkeypatch, isolated_db_session):
    transporter = make_transporter(session)
    make_assigned_request(service, transporter)
    monkeypatch.setattr(notification_tasks, "get_db_session", isolated_db_session)

    result = notification_tasks.dispatch_request_event.apply(
        args=(_message(dispatcher, "request.transporter_assigned"),)
    ).get()

    assert result["notifications"] == 2
    session.expire_all()
    stored = session.scalars(select(Notification).where(Notification.user_id == transporter.id)).all()
    assert len(stored) == 1


def test_celery_dispatcher_queues_message(monkeypatch):
    queued = []

    class _Task:
        def delay(self, message):
            queued.append(message)

    monkeypatch.setattr(dispatch_module, "dispatch_request_event", _Task())
    dispatch_module.get_event_dispatcher().publish({"event_type": "request.created", "request_id": "req-1"})
    assert queued == [{"event_type": "request.created", "request_id": "req-1"}]


def test_dispatch_failure_does_not_undo_commit(service, session):
    class _Broken:
        def publish(self, message):
            raise ConnectionError("broker down")

    service.dispatcher = _Broken()
    request = make_request(service)
    session.expire_all()
    assert service.get_request(request.id).reference_id == request.reference_id


def test_beat_schedule_registers_expiry_sweeps():
    tasks = {entry["task"] for entry in celery_app.conf.beat_schedule.values()}
    assert tasks == {"maintenance.expire_stale_requests", "maintenance.expire_empty_returns"}


def test_worker_logging_uses_json_handlers(monkeypatch):
    calls = []
    monkeypatch.setattr(celery_app_module, "configure_logging", lambda: calls.append("configured"))

    setup_logging.send(sender=None, loglevel="INFO", logfile=None, format="", colorize=False)
    assert calls == ["configured"]
