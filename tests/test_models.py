from __future__ import annotations

from datetime import datetime

import pytest

from friendreminder.models import ContactNote, FriendContact, sort_for_display


def test_from_dict_maps_wire_names():
    contact = FriendContact.from_dict(
        {
            "id": "1",
            "name": "Alice",
            "contactPoint": "Phone",
            "contactDetail": "555",
            "notes": [{"content": "hi", "date": "2025-01-01", "time": "08:00:00"}, "junk"],
            "dateCreated": "2025-01-01",
            "remindDate": "2025-09-30",
            "remindTime": "12:00",
        }
    )
    assert contact.contact_point == "Phone"
    assert contact.notes == [ContactNote("hi", "2025-01-01", "08:00:00")]
    assert contact.remind_at() == datetime(2025, 9, 30, 12, 0)


def test_to_dict_omits_empty_id():
    assert "id" not in FriendContact(name="New").to_dict()


def test_stamped_note_format():
    note = ContactNote.stamped("call back", datetime(2025, 9, 20, 7, 5, 3))
    assert note.to_dict() == {"content": "call back", "date": "2025-09-20", "time": "07:05:03"}


def test_sort_for_display_by_reminder_time():
    later = FriendContact(id="1", remind_date="2025-09-30", remind_time="18:00")
    earlier = FriendContact(id="2", remind_date="2025-09-30", remind_time="09:00")
    assert [c.id for c in sort_for_display([later, earlier])] == ["2", "1"]


@pytest.mark.parametrize("remind_time", ["12:00+02:00", "12:00Z", "12:00:00-05:00"])
def test_remind_at_rejects_utc_offsets(remind_time):
    contact = FriendContact(id="1", remind_date="2025-09-30", remind_time=remind_time)
    assert contact.remind_at() is None


def test_sort_for_display_with_offset_reminder():
    offset = FriendContact(id="1", remind_date="2025-09-30", remind_time="08:00+02:00")
    local = FriendContact(id="2", remind_date="2025-09-30", remind_time="09:00")
    assert [c.id for c in sort_for_display([offset, local])] == ["2", "1"]


def test_from_dict_keeps_null_fields():
    contact = FriendContact.from_dict({"id": "1", "name": "A", "contactDetail": None})
    assert contact.contact_detail is None
    assert contact.to_dict()["contactDetail"] is None
