from cmlb.models import NotificationSettings
from cmlb.stores import (
    FirestoreDeviceRegistry,
    FirestoreRecipeCatalog,
    FirestoreSettingsStore,
)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return None if self._data is None else dict(self._data)


class FakeDocument:
    def __init__(self, db, collection, doc_id):
        self.db = db
        self.collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self.db.data.get(self.collection, {}).get(self.id))

    def set(self, data):
        self.db.data.setdefault(self.collection, {})[self.id] = dict(data)

    def update(self, data):
        self.db.data[self.collection][self.id].update(data)


class FakeCollection:
    def __init__(self, db, name):
        self.db = db
        self.name = name

    def document(self, doc_id):
        return FakeDocument(self.db, self.name, doc_id)

    def stream(self):
        return [FakeSnapshot(k, v) for k, v in self.db.data.get(self.name, {}).items()]


class FakeBatch:
    def __init__(self, db):
        self.db = db
        self.deletes = []

    def delete(self, ref):
        self.deletes.append(ref)

    def commit(self):
        self.db.commits.append(len(self.deletes))
        for ref in self.deletes:
            self.db.data[ref.collection].pop(ref.id, None)


class FakeFirestore:
    def __init__(self, data=None):
        self.data = data or {}
        self.commits = []

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)


def test_settings_missing_document() -> None:
    assert FirestoreSettingsStore(FakeFirestore()).load() is None


def test_settings_load_and_mark_sent() -> None:
    db = FakeFirestore({'settings': {'notifications': {'enabled': True, 'hour': 17, 'lastSent': '2026-10-16'}}})
    store = FirestoreSettingsStore(db)

    assert store.load() == NotificationSettings(enabled=True, hour=17, last_sent='2026-10-16')

    store.mark_sent('2026-10-17')
    assert db.data['settings']['notifications'] == {'enabled': True, 'hour': 17, 'lastSent': '2026-10-17'}


def test_settings_save() -> None:
    db = FakeFirestore()

    FirestoreSettingsStore(db).save(NotificationSettings(enabled=True, hour=18))

    assert db.data['settings']['notifications'] == {'enabled': True, 'hour': 18, 'lastSent': None}


def test_settings_hour_coercion() -> None:
    # a string hour never matches the clock
    assert NotificationSettings.from_dict({'enabled': True, 'hour': '7'}).hour is None
    assert NotificationSettings.from_dict({'enabled': True, 'hour': 7.0}).hour == 7
    assert NotificationSettings.from_dict({'enabled': True, 'hour': 'evening'}).hour is None
    assert NotificationSettings.from_dict({'enabled': True}).hour is None


def test_device_registry_lists_and_deletes_in_one_batch() -> None:
    db = FakeFirestore({'fcm_tokens': {
        'chris': {'token': 'T1', 'email': 'chris@example.com', 'updatedAt': 1},
        'lindsay': {'token': 'T2', 'email': 'lindsay@example.com'},
        'old': {'email': 'old@example.com'},
    }})
    registry = FirestoreDeviceRegistry(db)

    devices = registry.list_devices()
    assert [(d.id, d.token, d.owner) for d in devices] == [
        ('chris', 'T1', 'chris@example.com'),
        ('lindsay', 'T2', 'lindsay@example.com'),
        ('old', None, 'old@example.com'),
    ]

    assert registry.delete_devices(['lindsay', 'old']) == 2
    assert db.commits == [2]
    assert list(db.data['fcm_tokens']) == ['chris']


def test_device_registry_delete_nothing() -> None:
    db = FakeFirestore()

    assert FirestoreDeviceRegistry(db).delete_devices([]) == 0
    assert db.commits == []


def test_recipe_catalog_parses_optional_fields() -> None:
    db = FakeFirestore({'recipes': {
        'r1': {'title': 'Lemon Chicken', 'rating': 5, 'favorite': True, 'tags': ['quick']},
        'r2': {'title': 'Soup'},
        'r3': {'title': 'Odd', 'rating': 'great', 'tags': None},
    }})

    recipes = FirestoreRecipeCatalog(db).list_recipes()

    assert [(r.id, r.title, r.rating, r.favorite, r.tags) for r in recipes] == [
        ('r1', 'Lemon Chicken', 5, True, ['quick']),
        ('r2', 'Soup', None, False, []),
        ('r3', 'Odd', None, False, []),
    ]


def test_recipe_tags_stored_as_single_string() -> None:
    db = FakeFirestore({'recipes': {
        'r1': {'title': 'Tacos', 'tags': 'quick'},
        'r2': {'title': 'Stew', 'tags': {'winter': True}},
    }})

    recipes = FirestoreRecipeCatalog(db).list_recipes()

    assert [r.tags for r in recipes] == [['quick'], []]
