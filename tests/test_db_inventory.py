"""Tests for InventoryDB and ProfileDB CRUD operations."""

import pytest

from shelflife.db.inventory import InventoryDB, ItemNotFoundError
from shelflife.db.profile import ProfileDB
from shelflife.models import Category, InventoryItem, LeadTimeConfig, Status, UserProfile


@pytest.fixture
def db(tmp_path):
    """Create a temporary InventoryDB."""
    inventory = InventoryDB(db_path=tmp_path / "test.db")
    yield inventory
    inventory.close()


@pytest.fixture
def profiles(tmp_path):
    store = ProfileDB(db_path=tmp_path / "test.db")
    yield store
    store.close()


@pytest.fixture
def sample_items():
    """Sample items for testing."""
    return [
        InventoryItem(
            name="Tomatoes",
            category=Category.FOOD,
            expiration_date="2025-01-17",
            barcode="4901234567894",
        ),
        InventoryItem(
            name="Ibuprofen",
            category=Category.MEDICINE,
            expiration_date="2026-03-01",
            image_uri="file:///photos/ibuprofen.jpg",
        ),
        InventoryItem(
            name="Sunscreen",
            category=Category.COSMETICS,
            expiration_date="2025-01-13",
        ),
    ]


def test_add_and_get_item(db, sample_items):
    item_id = db.add_item(sample_items[0])
    assert item_id == sample_items[0].id

    stored = db.get_item(item_id)
    assert stored.name == "Tomatoes"
    assert stored.category is Category.FOOD
    assert stored.expiration_date == "2025-01-17"
    assert stored.barcode == "4901234567894"
    assert stored.image_uri is None
    assert stored.reminder_id is None
    assert stored.created_at == sample_items[0].created_at


def test_status_is_not_stored(db):
    """Cached status is dropped on write; reads come back as the default."""
    item = InventoryItem(
        name="Milk",
        category=Category.FOOD,
        expiration_date="2020-01-01",
        status=Status.EXPIRED,
    )
    db.add_item(item)
    assert db.get_item(item.id).status == Status.FRESH


def test_get_missing_item(db):
    with pytest.raises(ItemNotFoundError):
        db.get_item("missing")


def test_item_not_found_is_key_error():
    assert issubclass(ItemNotFoundError, KeyError)


def test_list_items_sorted_by_expiration(db, sample_items):
    for item in sample_items:
        db.add_item(item)

    names = [i.name for i in db.list_items()]
    assert names == ["Sunscreen", "Tomatoes", "Ibuprofen"]


def test_list_items_empty(db):
    assert db.list_items() == []


def test_update_item(db, sample_items):
    db.add_item(sample_items[0])
    db.update_item(
        sample_items[0].id,
        name="Cherry tomatoes",
        category="Food",
        expiration_date="2025-01-20",
    )

    stored = db.get_item(sample_items[0].id)
    assert stored.name == "Cherry tomatoes"
    assert stored.expiration_date == "2025-01-20"


def test_update_item_rejects_non_editable_fields(db, sample_items):
    db.add_item(sample_items[0])
    with pytest.raises(ValueError, match="reminder_id"):
        db.update_item(sample_items[0].id, reminder_id="x")


def test_update_missing_item(db):
    with pytest.raises(ItemNotFoundError):
        db.update_item("missing", name="x")


def test_set_reminder_id_leaves_other_fields(db, sample_items):
    item = sample_items[1]
    db.add_item(item)

    db.set_reminder_id(item.id, "reminder-1")
    stored = db.get_item(item.id)
    assert stored.reminder_id == "reminder-1"
    assert stored.name == item.name
    assert stored.image_uri == item.image_uri

    db.set_reminder_id(item.id, None)
    assert db.get_item(item.id).reminder_id is None


def test_delete_item(db, sample_items):
    for item in sample_items:
        db.add_item(item)
    db.delete_item(sample_items[0].id)

    items = db.list_items()
    assert len(items) == 2
    assert sample_items[0].id not in {i.id for i in items}


def test_profile_absent(profiles):
    assert profiles.get_profile() is None


def test_profile_roundtrip(profiles):
    profile = UserProfile(user_name="Ana", lead_times=LeadTimeConfig(food=2, medicine=10, cosmetics=14))
    profiles.save_profile(profile)

    stored = profiles.get_profile()
    assert stored.id == profile.id
    assert stored.user_name == "Ana"
    assert stored.lead_times == LeadTimeConfig(food=2, medicine=10, cosmetics=14)


def test_profile_update_lead_times(profiles):
    profiles.save_profile(UserProfile())
    profiles.update_lead_times(LeadTimeConfig(food=5, medicine=5, cosmetics=5))
    assert profiles.get_profile().lead_times == LeadTimeConfig(food=5, medicine=5, cosmetics=5)


def test_save_profile_replaces_existing(profiles):
    profiles.save_profile(UserProfile(user_name="first"))
    profiles.save_profile(UserProfile(user_name="second"))
    assert profiles.get_profile().user_name == "second"
