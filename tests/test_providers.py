"""Tests for the provider registry and the built-in providers."""

import logging
import sys
from unittest.mock import MagicMock, patch

import pytest

from bootwire.container import Container
from bootwire.exceptions import EmptyServiceNameError, UnknownProviderError, UnknownStreamError
from bootwire.providers import (
    PROVIDERS,
    ErrorHandler,
    EventsManager,
    ServiceProvider,
    get_provider,
    install,
    list_providers,
    register_provider,
)
from bootwire.providers.logger import detach_handler, make_handler


class NamelessProvider(ServiceProvider):

    def name(self) -> str:
        return ''

    def register(self) -> None:
        self.container.set('nameless', 1)


def test_builtin_providers_are_registered():
    for name in ('environment', 'logger', 'error_handler', 'events_manager',
                 'filesystem', 'config', 'database'):
        assert name in list_providers()


def test_register_provider_decorator():
    @register_provider('greeter')
    class GreeterProvider(ServiceProvider):
        def name(self) -> str:
            return 'greeter'

        def register(self) -> None:
            self.container.set_shared('greeter', 'hello')

    try:
        container = Container()
        install(get_provider('greeter', container))

        assert container.get('greeter') == 'hello'
    finally:
        PROVIDERS.pop('greeter', None)


def test_unknown_provider_raises():
    with pytest.raises(UnknownProviderError):
        get_provider('does-not-exist', Container())


def test_install_rejects_empty_name():
    container = Container()

    with pytest.raises(EmptyServiceNameError):
        install(NamelessProvider(container))

    assert not container.has('nameless')


def test_events_manager_priority_and_wildcards():
    events = EventsManager()
    calls = []

    events.attach('bootstrap:afterServices', lambda e, s, d: calls.append(('low', e)), priority=10)
    events.attach('bootstrap:afterServices', lambda e, s, d: calls.append(('high', e)), priority=200)
    events.attach('bootstrap:*', lambda e, s, d: calls.append(('any', e)))
    events.attach('other:event', lambda e, s, d: calls.append(('other', e)))

    events.fire('bootstrap:afterServices', source=None)

    assert calls == [
        ('high', 'bootstrap:afterServices'),
        ('any', 'bootstrap:afterServices'),
        ('low', 'bootstrap:afterServices'),
    ]


def test_events_manager_listener_objects_and_results():
    class Counter:
        def __init__(self):
            self.seen = []

        def handle(self, event, source, data=None):
            self.seen.append((event, source, data))
            return len(self.seen)

    events = EventsManager()
    listener = Counter()
    events.attach('app:boot', listener)

    assert events.fire('app:boot', 'src', {'x': 1}) == [1]
    assert listener.seen == [('app:boot', 'src', {'x': 1})]

    assert events.detach('app:boot', listener) is True
    assert events.fire('app:boot', 'src') == []
    assert not events.has_listeners('app:boot')


def test_error_handler_logs_uncaught_exceptions(caplog):
    handler = ErrorHandler()
    handler.install()
    try:
        assert sys.excepthook == handler.handle

        try:
            raise RuntimeError('boom')
        except RuntimeError:
            sys.excepthook(*sys.exc_info())

        assert 'Uncaught exception: boom' in caplog.text
    finally:
        handler.uninstall()

    assert not handler.installed


def test_error_handler_passes_keyboard_interrupt_through():
    previous = MagicMock()
    with patch.object(sys, 'excepthook', previous):
        handler = ErrorHandler()
        handler.install()
        handler.handle(KeyboardInterrupt, KeyboardInterrupt(), None)
        handler.uninstall()

    previous.assert_called_once()


def test_make_handler_streams(tmp_path):
    assert isinstance(make_handler('stderr'), logging.StreamHandler)
    assert isinstance(make_handler('stdout'), logging.StreamHandler)

    file_handler = make_handler(f"file:{tmp_path / 'app.log'}")
    try:
        assert isinstance(file_handler, logging.FileHandler)
    finally:
        file_handler.close()


def test_unknown_log_stream_raises(monkeypatch):
    monkeypatch.setenv('BOOTWIRE_LOG_STREAM', 'syslog')
    container = Container()

    with pytest.raises(UnknownStreamError):
        install(get_provider('logger', container))


def test_logger_provider_applies_level(monkeypatch):
    monkeypatch.setenv('BOOTWIRE_LOG_LEVEL', 'debug')
    container = Container()
    bootwire_logger = logging.getLogger('bootwire')
    original_level = bootwire_logger.level

    try:
        install(get_provider('logger', container))
        assert container.get('logger') is bootwire_logger
        assert bootwire_logger.level == logging.DEBUG
    finally:
        bootwire_logger.setLevel(original_level)


def test_file_stream_is_attached_to_unconfigured_root(monkeypatch, tmp_path):
    log_file = tmp_path / 'bootwire.log'
    monkeypatch.setenv('BOOTWIRE_LOG_STREAM', f"file:{log_file}")
    root = logging.getLogger()
    saved = root.handlers[:]
    for handler in saved:
        root.removeHandler(handler)

    try:
        install(get_provider('logger', Container()))
        assert len(root.handlers) == 1
        logging.getLogger('bootwire.tests').warning('written to the file stream')
    finally:
        detach_handler()
        for handler in saved:
            root.addHandler(handler)

    assert 'written to the file stream' in log_file.read_text(encoding='utf-8')


def test_file_stream_is_attached_to_bootwire_logger_when_root_is_configured(monkeypatch, tmp_path):
    log_file = tmp_path / 'bootwire.log'
    monkeypatch.setenv('BOOTWIRE_LOG_STREAM', f"file:{log_file}")
    root = logging.getLogger()
    host_handler = MagicMock(spec=logging.Handler)
    host_handler.level = logging.NOTSET
    root.addHandler(host_handler)
    bootwire_logger = logging.getLogger('bootwire')

    try:
        install(get_provider('logger', Container()))
        assert host_handler in root.handlers
        assert not bootwire_logger.propagate
        logging.getLogger('bootwire.tests').warning('kept away from the host handlers')
    finally:
        detach_handler()
        root.removeHandler(host_handler)

    assert bootwire_logger.propagate
    assert bootwire_logger.handlers == []
    assert 'kept away from the host handlers' in log_file.read_text(encoding='utf-8')
    host_handler.handle.assert_not_called()


def test_reinstalling_logger_replaces_attached_handler(monkeypatch, tmp_path):
    monkeypatch.setenv('BOOTWIRE_LOG_STREAM', f"file:{tmp_path / 'bootwire.log'}")
    loggers = [logging.getLogger(), logging.getLogger('bootwire')]

    def file_handlers():
        return [h for lg in loggers for h in lg.handlers if isinstance(h, logging.FileHandler)]

    try:
        install(get_provider('logger', Container()))
        install(get_provider('logger', Container()))
        assert len(file_handlers()) == 1
    finally:
        detach_handler()

    assert file_handlers() == []
