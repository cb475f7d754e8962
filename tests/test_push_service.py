import pytest
from firebase_admin import exceptions, messaging

from cmlb.services import push_service
from cmlb.services.push_service import (
    TOKEN_INVALID,
    TOKEN_UNREGISTERED,
    FirebasePushSender,
    classify_send_error,
)

APP = object()


class FakeSendResponse:
    def __init__(self, exception=None):
        self.exception = exception
        self.success = exception is None


class FakeBatchResponse:
    def __init__(self, responses):
        self.responses = responses
        self.success_count = sum(1 for r in responses if r.success)
        self.failure_count = len(responses) - self.success_count


@pytest.fixture
def sender() -> FirebasePushSender:
    return FirebasePushSender(
        icon_url='https://cjroberts28.github.io/cmlbRecipes/favicon.svg',
        link='https://cjroberts28.github.io/cmlbRecipes/',
        app=APP,
    )


def test_build_message(sender) -> None:
    message = sender.build_message("Tonight's Dinner Idea", 'Tacos!', ['T1', 'T2'])

    assert message.tokens == ['T1', 'T2']
    assert message.notification.title == "Tonight's Dinner Idea"
    assert message.notification.body == 'Tacos!'
    assert message.webpush.notification.icon == 'https://cjroberts28.github.io/cmlbRecipes/favicon.svg'
    assert message.webpush.notification.badge == 'https://cjroberts28.github.io/cmlbRecipes/favicon.svg'
    assert message.webpush.notification.require_interaction is False
    assert message.webpush.fcm_options.link == 'https://cjroberts28.github.io/cmlbRecipes/'


def test_send_multicast_maps_results_per_token(sender, monkeypatch) -> None:
    calls = []

    def fake_send(message, app=None):
        calls.append((message, app))
        return FakeBatchResponse([
            FakeSendResponse(),
            FakeSendResponse(messaging.UnregisteredError('Requested entity was not found.')),
            FakeSendResponse(),
        ])

    monkeypatch.setattr(push_service.messaging, 'send_each_for_multicast', fake_send)

    results = sender.send_multicast('Title', 'Body', ['T1', 'T2', 'T3'])

    assert len(calls) == 1
    assert calls[0][1] is APP
    assert [(r.token, r.success, r.error_code) for r in results] == [
        ('T1', True, None),
        ('T2', False, TOKEN_UNREGISTERED),
        ('T3', True, None),
    ]


def test_send_multicast_chunks_large_token_lists(sender, monkeypatch) -> None:
    sizes = []

    def fake_send(message, app=None):
        sizes.append(len(message.tokens))
        return FakeBatchResponse([FakeSendResponse() for _ in message.tokens])

    monkeypatch.setattr(push_service.messaging, 'send_each_for_multicast', fake_send)

    results = sender.send_multicast('Title', 'Body', [f'T{i}' for i in range(501)])

    assert sizes == [500, 1]
    assert len(results) == 501


@pytest.mark.parametrize(
    "error,expected",
    (
        (None, None),
        (messaging.UnregisteredError('Requested entity was not found.'), TOKEN_UNREGISTERED),
        (
            exceptions.InvalidArgumentError('The registration token is not a valid FCM registration token'),
            TOKEN_INVALID,
        ),
        (exceptions.InvalidArgumentError('Invalid JSON payload received.'), 'invalid-argument'),
        (exceptions.UnavailableError('Service unavailable'), 'unavailable'),
    ),
)
def test_classify_send_error(error, expected) -> None:
    assert classify_send_error(error) == expected
