"""
Summary counters on the client row (contacts, last_contact) against the interaction log.
"""

from datetime import date, datetime, time, timedelta

import pytest
from sqlalchemy import update

from outreach.core.errors import ClientNotFound, StaleCounterError, ValidationError
from outreach.crud.clients import get_client, update_counters
from outreach.crud.interactions import list_for_client, log_interaction
from outreach.models.client import Client
from outreach.schemas.clients import ClientIntakeCreate
from outreach.schemas.interactions import InteractionCreate
from outreach.services.intake import intake_client
from outreach.services.logbook import contact_timestamp, log_client_interaction
from outreach.services.reconcile import (
    client_summary,
    import_legacy_interactions,
    reconcile_all,
    reconcile_client,
)


@pytest.fixture()
def jane(db):
    return intake_client(db, ClientIntakeCreate(first_name="Jane", last_name="Doe")).client


class TestLogInteraction:
    def test_increments_and_advances_last_contact(self, db, jane):
        res = log_client_interaction(db, jane.id, InteractionCreate(type="service", notes="Hygiene kit"))
        assert res.client.contacts == 2
        assert res.client.last_contact == res.interaction.interaction_date

    def test_backdated_interaction_does_not_move_last_contact_back(self, db, jane):
        latest = jane.last_contact
        res = log_client_interaction(
            db, jane.id,
            InteractionCreate(type="follow_up", notes="Called shelter", date=date(2020, 1, 1)),
        )
        assert res.client.contacts == 2
        assert res.client.last_contact == latest
        assert res.interaction.interaction_date.date() == date(2020, 1, 1)

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "", "notes": "x"},
            {"type": "service", "notes": "  "},
            {"type": "Initial Intake", "notes": "x"},
            {"type": "lunch", "notes": "x"},
        ],
    )
    def test_rejects_bad_input(self, db, jane, payload):
        with pytest.raises(ValidationError):
            log_client_interaction(db, jane.id, InteractionCreate(**payload))
        assert get_client(db, jane.id).contacts == 1

    def test_unknown_client(self, db):
        with pytest.raises(ClientNotFound):
            log_client_interaction(db, "missing", InteractionCreate(type="contact", notes="x"))


class TestContactTimestamp:
    def test_day_plus_clock_time(self):
        now = datetime(2025, 6, 1, 13, 14, 15)
        payload = InteractionCreate(type="contact", notes="x", date=date(2025, 5, 30))
        assert contact_timestamp(payload, now=now) == datetime(2025, 5, 30, 13, 14, 15)

    def test_explicit_timestamp_wins(self):
        payload = InteractionCreate(
            type="contact", notes="x", date=date(2025, 5, 30), interaction_date="2025-05-29T08:00:00Z"
        )
        assert contact_timestamp(payload) == datetime(2025, 5, 29, 8, 0)


class TestGuardedUpdate:
    def test_matching_previous_value(self, db, jane):
        at = datetime(2030, 1, 1, 9, 0)
        update_counters(db, jane.id, previous_contacts=1, contact_at=at)
        db.commit()
        db.refresh(jane)
        assert jane.contacts == 2
        assert jane.last_contact == at

    def test_stale_previous_value_is_refused(self, db, jane):
        update_counters(db, jane.id, previous_contacts=1)
        db.commit()
        # second writer still believes contacts == 1
        with pytest.raises(StaleCounterError):
            update_counters(db, jane.id, previous_contacts=1)
        db.rollback()
        assert get_client(db, jane.id).contacts == 2

    def test_missing_client(self, db):
        with pytest.raises(ClientNotFound):
            update_counters(db, "nope", previous_contacts=0)


class TestReconcile:
    def test_summary_consistent_after_intake(self, db, jane):
        s = client_summary(db, jane.id)
        assert s["consistent"]
        assert s["derived_contacts"] == 1

    def test_drift_is_repaired(self, db, jane):
        db.execute(update(Client).where(Client.id == jane.id).values(contacts=7, last_contact=None))
        db.commit()
        assert not client_summary(db, jane.id)["consistent"]

        s = reconcile_client(db, jane.id)
        assert s["consistent"] and s["stored_contacts"] == 1
        db.expire_all()
        assert get_client(db, jane.id).contacts == 1

    def test_sweep_counts_fixed_rows(self, db, jane):
        other = intake_client(db, ClientIntakeCreate(first_name="Sam", last_name="Lee")).client
        log_interaction(db, client_id=other.id, type_="contact",
                        interaction_date=datetime(2031, 1, 1), notes="written behind the counters")
        db.commit()

        assert reconcile_all(db) == {"checked": 2, "fixed": 1}
        db.expire_all()
        fixed = get_client(db, other.id)
        assert fixed.contacts == 2
        assert fixed.last_contact == datetime(2031, 1, 1)
        assert reconcile_all(db) == {"checked": 2, "fixed": 0}

    def test_sweep_keeps_interaction_logged_mid_sweep(self, db, jane, SessionTest, monkeypatch):
        import outreach.services.reconcile as reconcile

        real_list_ids = reconcile.list_client_ids
        logged = {}

        def _list_then_log(session):
            ids = real_list_ids(session)
            # a field worker saves an interaction while the sweep is running
            other = SessionTest()
            try:
                res = log_client_interaction(other, jane.id, InteractionCreate(
                    type="service", notes="Sleeping bag", interaction_date="2032-05-01T12:00:00Z",
                ))
                logged["at"] = res.interaction.interaction_date
            finally:
                other.close()
            return ids

        monkeypatch.setattr(reconcile, "list_client_ids", _list_then_log)
        reconcile_all(db)

        db.expire_all()
        c = get_client(db, jane.id)
        assert c.contacts == 2 == len(list_for_client(db, jane.id))
        assert c.last_contact == logged["at"] == datetime(2032, 5, 1, 12, 0)
        assert client_summary(db, jane.id)["consistent"]


class TestLegacyImport:
    def test_rows_in_both_conventions(self, db, jane):
        rows = [
            {"client_id": jane.id, "log_type": "service", "outreach_user": "maria",
             "notes": "Food voucher", "latitude": 0, "longitude": 0,
             "interaction_date": "2035-03-01T10:00:00Z"},
            {"client_id": jane.id, "interaction_type": "referral", "worker_name": "jo",
             "notes": "Shelter referral", "location_lat": 33.1, "location_lng": -117.1,
             "interaction_date": "2035-02-01T10:00:00Z"},
            {"client_id": "ghost", "log_type": "contact", "interaction_date": "2035-01-01"},
            {"client_id": jane.id, "log_type": "contact"},
        ]
        res = import_legacy_interactions(db, rows)
        assert res["imported"] == 2
        assert [s["index"] for s in res["skipped"]] == [2, 3]
        assert res["reconciled"] == 1

        db.expire_all()
        c = get_client(db, jane.id)
        assert c.contacts == 3
        assert c.last_contact == datetime(2035, 3, 1, 10, 0)

    def test_rerun_imports_nothing(self, db, jane):
        rows = [
            {"id": 41, "client_id": jane.id, "log_type": "service", "outreach_user": "maria",
             "notes": "Food voucher", "interaction_date": "2035-03-01T10:00:00Z"},
            {"id": 42, "client_id": jane.id, "interaction_type": "referral", "worker_name": "jo",
             "notes": "Shelter referral", "interaction_date": "2035-02-01T10:00:00Z"},
        ]
        first = import_legacy_interactions(db, rows)
        assert first["imported"] == 2 and first["skipped"] == []

        again = import_legacy_interactions(db, rows)
        assert again["imported"] == 0
        assert [s["reason"] for s in again["skipped"]] == ["already imported: 41", "already imported: 42"]
        assert again["reconciled"] == 0

        db.expire_all()
        assert get_client(db, jane.id).contacts == 3
        assert len(list_for_client(db, jane.id)) == 3

    def test_duplicate_ids_in_one_batch(self, db, jane):
        row = {"legacy_id": "a-1", "client_id": jane.id, "log_type": "contact",
               "notes": "Checked in", "interaction_date": "2035-01-01T09:00:00Z"}
        res = import_legacy_interactions(db, [row, dict(row)])
        assert res["imported"] == 1
        assert res["skipped"] == [{"index": 1, "reason": "already imported: a-1"}]
        db.expire_all()
        assert get_client(db, jane.id).contacts == 2
