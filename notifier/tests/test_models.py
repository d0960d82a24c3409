# notifier/tests/test_models.py
from datetime import datetime, timezone

from bson import ObjectId

from notifier.models.report import Report, ReportWriteEvent
from notifier.models.user import User


def test_insert_change_uses_full_document():
    oid = ObjectId()
    change = {
        "operationType": "insert",
        "documentKey": {"_id": oid},
        "fullDocument": {"_id": oid, "userId": "u1", "title": "Broken light"},
    }
    event = ReportWriteEvent.from_change(change)
    assert event.report_id == str(oid)
    assert event.before is None
    assert not event.deleted
    report = event.after_report()
    assert report.id == str(oid)
    assert report.user_id == "u1"
    assert report.title == "Broken light"


def test_update_change_keeps_before_image():
    change = {
        "operationType": "update",
        "documentKey": {"_id": "r1"},
        "fullDocumentBeforeChange": {"_id": "r1", "userId": "u1", "status": "open"},
        "fullDocument": {"_id": "r1", "userId": "u1", "status": "closed"},
    }
    event = ReportWriteEvent.from_change(change)
    assert event.before["status"] == "open"
    assert event.after["status"] == "closed"


def test_update_of_vanished_document_counts_as_deleted():
    change = {"operationType": "update", "documentKey": {"_id": "r1"}, "fullDocument": None}
    assert ReportWriteEvent.from_change(change).deleted


def test_delete_change_has_no_after_state():
    change = {
        "operationType": "delete",
        "documentKey": {"_id": "r1"},
        "fullDocumentBeforeChange": {"_id": "r1", "userId": "u1"},
    }
    event = ReportWriteEvent.from_change(change)
    assert event.deleted
    assert event.after_report() is None
    assert event.before == {"_id": "r1", "userId": "u1"}


def test_non_write_operations_are_ignored():
    assert ReportWriteEvent.from_change({"operationType": "invalidate"}) is None
    assert ReportWriteEvent.from_change({"operationType": "drop", "ns": {"coll": "reports"}}) is None


def test_report_keeps_extra_fields_and_stringifies_user_id():
    uid = ObjectId()
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    report = Report.model_validate({"id": "r1", "userId": uid, "createdAt": created, "photoUrl": "x.jpg"})
    assert report.user_id == str(uid)
    assert report.title is None
    assert report.model_extra["photoUrl"] == "x.jpg"


def test_user_model_reads_store_document():
    oid = ObjectId()
    user = User.model_validate({"_id": oid, "fcmToken": "tok", "email": "a@b.c"})
    assert user.id == str(oid)
    assert user.fcm_token == "tok"
    assert User.model_validate({"_id": "u1", "fcmToken": ""}).fcm_token is None
    assert User.model_validate({"_id": "u1"}).fcm_token is None


def test_falsy_user_id_and_title_count_as_absent():
    for value in ("", 0, False, None):
        report = Report.model_validate({"id": "r1", "userId": value, "title": value})
        assert report.user_id is None
        assert report.title is None
