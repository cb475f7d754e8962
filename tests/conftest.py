from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from cmlb.context import AppConfig, AppContext
from cmlb.models import DeliveryResult, NotificationSettings, RecipeRecord, RegisteredDevice


class FakeSettingsStore:
    def __init__(self, settings: Optional[NotificationSettings] = None) -> None:
        self.settings = settings
        self.loads = 0
        self.marked: List[str] = []

    def load(self) -> Optional[NotificationSettings]:
        self.loads += 1
        return self.settings

    def mark_sent(self, date_str: str) -> None:
        self.marked.append(date_str)
        if self.settings is not None:
            self.settings.last_sent = date_str


class FakeDeviceRegistry:
    def __init__(self, devices: Optional[List[RegisteredDevice]] = None) -> None:
        self.devices = list(devices or [])
        self.list_calls = 0
        self.deleted_batches: List[List[str]] = []

    def list_devices(self) -> List[RegisteredDevice]:
        self.list_calls += 1
        return list(self.devices)

    def delete_devices(self, device_ids) -> int:
        device_ids = list(device_ids)
        self.deleted_batches.append(device_ids)
        self.devices = [d for d in self.devices if d.id not in device_ids]
        return len(device_ids)


class FakeRecipeCatalog:
    def __init__(self, recipes: Optional[List[RecipeRecord]] = None) -> None:
        self.recipes = list(recipes or [])
        self.list_calls = 0

    def list_recipes(self) -> List[RecipeRecord]:
        self.list_calls += 1
        return list(self.recipes)


class FakePushSender:
    def __init__(self, failures: Optional[Dict[str, str]] = None) -> None:
        # token -> error code
        self.failures = failures or {}
        self.sent: List[Dict[str, Any]] = []

    def send_multicast(self, title: str, body: str, tokens: List[str]) -> List[DeliveryResult]:
        self.sent.append({'title': title, 'body': body, 'tokens': list(tokens)})
        return [
            DeliveryResult(token=t, success=t not in self.failures, error_code=self.failures.get(t))
            for t in tokens
        ]


class FakeChatCompleter:
    def __init__(self, response: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None) -> None:
        self.response = response if response is not None else {
            'content': [{'type': 'text', 'text': 'Make the lemon chicken tonight. It is quick and you loved it.'}]
        }
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def complete(self, model, max_tokens, system, messages) -> Dict[str, Any]:
        self.calls.append({'model': model, 'max_tokens': max_tokens, 'system': system, 'messages': messages})
        if self.error is not None:
            raise self.error
        return self.response

    def forward(self, payload) -> Dict[str, Any]:
        self.calls.append(dict(payload))
        if self.error is not None:
            raise self.error
        return self.response


# 17:00 in New York during daylight saving time
SEND_TIME = datetime(2026, 10, 17, 21, 0, tzinfo=timezone.utc)
SEND_DATE = '2026-10-17'


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(anthropic_api_key='test-key', timezone='America/New_York')


@pytest.fixture
def recipes() -> List[RecipeRecord]:
    return [
        RecipeRecord(id='r1', title='Lemon Chicken', rating=5, tags=['chicken', 'quick']),
        RecipeRecord(id='r2', title='Mushroom Risotto', rating=2, favorite=True, tags=['vegetarian']),
        RecipeRecord(id='r3', title='Beef Chili', rating=4),
        RecipeRecord(id='r4', title='Plain Toast', rating=1),
    ]


@pytest.fixture
def devices() -> List[RegisteredDevice]:
    return [
        RegisteredDevice(id='chris', token='T1', owner='chris@example.com'),
        RegisteredDevice(id='lindsay', token='T2', owner='lindsay@example.com'),
        RegisteredDevice(id='tablet', token='T3', owner='chris@example.com'),
    ]


@pytest.fixture
def make_context(config, recipes, devices):
    def _make(
        settings: Optional[NotificationSettings] = None,
        devices_override: Optional[List[RegisteredDevice]] = None,
        recipes_override: Optional[List[RecipeRecord]] = None,
        push_failures: Optional[Dict[str, str]] = None,
        chat: Optional[FakeChatCompleter] = None,
        app_config: Optional[AppConfig] = None,
    ) -> AppContext:
        if settings is None:
            settings = NotificationSettings(enabled=True, hour=17, last_sent='2026-10-16')
        return AppContext(
            config=app_config or config,
            settings_store=FakeSettingsStore(settings),
            device_registry=FakeDeviceRegistry(devices if devices_override is None else devices_override),
            recipe_catalog=FakeRecipeCatalog(recipes if recipes_override is None else recipes_override),
            push_sender=FakePushSender(push_failures),
            chat_completer=chat or FakeChatCompleter(),
        )
    return _make
