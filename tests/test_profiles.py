"""Tests for profile load / save / edit discipline."""
import pytest

from clinic.errors import StorageError
from clinic.models import DoctorProfile, PatientProfile
from clinic.profiles import ProfileManager


@pytest.fixture
def doctors(store):
    return ProfileManager(store, "doctors", DoctorProfile)


@pytest.fixture
def patients(store):
    return ProfileManager(store, "patients", PatientProfile)


class TestLoadProfile:
    def test_missing_profile_leaves_empty_defaults(self, doctors):
        assert doctors.load_profile("d1") is None
        assert doctors.profile.name == ""
        assert doctors.profile.specialization == ""

    def test_loads_stored_fields(self, store, patients):
        store.collections["patients"]["p1"] = {
            "name": "Ann",
            "contactDetails": "555-0100",
            "medicalHistory": None,
        }

        profile = patients.load_profile("p1")

        assert profile.id == "p1"
        assert profile.name == "Ann"
        assert profile.contact_details == "555-0100"
        assert profile.medical_history == ""


class TestSaveProfile:
    def test_save_then_load_returns_saved_values(self, store, doctors):
        doctors.save_profile("d1", {"name": "Dr. Garcia", "specialization": "Cardiology"})

        fresh = ProfileManager(store, "doctors", DoctorProfile)
        profile = fresh.load_profile("d1")

        assert profile.name == "Dr. Garcia"
        assert profile.specialization == "Cardiology"

    def test_save_writes_stored_field_names(self, store, patients):
        patients.save_profile("p1", {"contact_details": "a@b.c"})
        assert store.collections["patients"]["p1"] == {"contactDetails": "a@b.c"}

    def test_merge_keeps_unspecified_fields(self, store, patients):
        store.collections["patients"]["p1"] = {
            "name": "Ann",
            "medicalHistory": "asthma",
            "insurer": "ACME",
        }

        patients.save_profile("p1", {"contact_details": "555"})

        assert store.collections["patients"]["p1"] == {
            "name": "Ann",
            "medicalHistory": "asthma",
            "insurer": "ACME",
            "contactDetails": "555",
        }

    def test_disjoint_saves_commute(self, store):
        a = ProfileManager(store, "doctors", DoctorProfile)
        b = ProfileManager(store, "doctors", DoctorProfile)
        a.save_profile("d1", {"name": "X"})
        b.save_profile("d1", {"specialization": "Y"})
        first = dict(store.collections["doctors"]["d1"])

        store.collections["doctors"].clear()
        b.save_profile("d1", {"specialization": "Y"})
        a.save_profile("d1", {"name": "X"})

        assert store.collections["doctors"]["d1"] == first

    def test_empty_strings_are_persisted(self, store, doctors):
        doctors.save_profile("d1", {"name": "", "specialization": ""})
        assert store.collections["doctors"]["d1"] == {"name": "", "specialization": ""}

    def test_unknown_fields_are_ignored(self, store, doctors):
        doctors.save_profile("d1", {"name": "A", "role": "admin"})
        assert store.collections["doctors"]["d1"] == {"name": "A"}

    def test_default_saves_draft_and_ends_editing(self, store, doctors):
        doctors.begin_edit()
        doctors.draft.name = "Dr. Who"
        doctors.save_profile("d1")

        assert doctors.is_editing is False
        assert doctors.profile.name == "Dr. Who"
        assert store.collections["doctors"]["d1"] == {"name": "Dr. Who", "specialization": ""}

    def test_storage_failure_propagates_and_keeps_state(self, store, doctors):
        doctors.begin_edit()
        store.fail_with = "offline"

        with pytest.raises(StorageError):
            doctors.save_profile("d1", {"name": "Z"})

        assert doctors.is_editing is True
        assert doctors.profile.name == ""


class TestEditing:
    def test_begin_edit_seeds_draft_from_snapshot(self, store, doctors):
        store.collections["doctors"]["d1"] = {"name": "A", "specialization": "B"}
        doctors.load_profile("d1")

        doctors.begin_edit()

        assert doctors.is_editing
        assert doctors.draft.name == "A"

    def test_cancel_restores_last_snapshot(self, store, doctors):
        store.collections["doctors"]["d1"] = {"name": "A", "specialization": "B"}
        doctors.load_profile("d1")
        doctors.begin_edit()
        doctors.draft.name = "changed"

        doctors.cancel_edit()

        assert doctors.is_editing is False
        assert doctors.draft.name == "A"
        assert doctors.profile.name == "A"
