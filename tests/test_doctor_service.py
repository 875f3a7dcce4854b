import pytest

from app.core.constants import DenialReason
from app.core.database import SessionLocal
from app.models.audit import AdminActivityLog
from app.services.doctor_service import DoctorService
from app.utils.errors import AuthorizationError, NotFoundError, StateError


def _activity_count(db, doctor_id):
    return (
        db.query(AdminActivityLog)
        .filter(AdminActivityLog.activity.like(f"doctor:{doctor_id}:%"))
        .count()
    )


def test_new_doctor_is_not_approved(db_session, make_doctor):
    doctor, user = make_doctor()
    assert doctor.approval_status == "pending"
    assert DoctorService.is_approved(db_session, doctor.id) is False
    assert DoctorService.is_user_approved(db_session, user.id) is False


def test_is_approved_unknown_doctor(db_session):
    with pytest.raises(NotFoundError):
        DoctorService.is_approved(db_session, 999999)


def test_is_user_approved_for_non_doctor(db_session, patient):
    assert DoctorService.is_user_approved(db_session, patient.id) is False


def test_admin_approves_doctor(db_session, make_doctor, admin):
    doctor, _ = make_doctor()
    approved = DoctorService.approve_doctor(db_session, doctor.id, admin.id, notes="License checked")

    assert approved.approval_status == "approved"
    assert approved.approved is True
    assert approved.admin_approved_by == admin.id
    assert approved.admin_approved_at is not None
    assert approved.admin_approval_notes == "License checked"
    assert DoctorService.is_approved(db_session, doctor.id) is True
    assert _activity_count(db_session, doctor.id) == 1


def test_repeat_approval_is_noop(db_session, make_doctor, admin):
    doctor, _ = make_doctor()
    first = DoctorService.approve_doctor(db_session, doctor.id, admin.id)
    approved_at = first.admin_approved_at

    again = DoctorService.approve_doctor(db_session, doctor.id, admin.id)

    assert again.approval_status == "approved"
    assert again.admin_approved_at == approved_at
    assert _activity_count(db_session, doctor.id) == 1


@pytest.mark.parametrize("role", ["patient", "doctor"])
def test_non_admin_cannot_approve(db_session, make_doctor, make_user, role):
    doctor, _ = make_doctor()
    actor = make_user(role)
    with pytest.raises(AuthorizationError) as exc:
        DoctorService.approve_doctor(db_session, doctor.id, actor.id)
    assert exc.value.reason == DenialReason.WRONG_ROLE

    db_session.refresh(doctor)
    assert doctor.approval_status == "pending"
    assert _activity_count(db_session, doctor.id) == 0


def test_principal_without_role_cannot_approve(db_session, make_doctor, make_user):
    doctor, _ = make_doctor()
    with pytest.raises(AuthorizationError) as exc:
        DoctorService.approve_doctor(db_session, doctor.id, make_user(role=None).id)
    assert exc.value.reason == DenialReason.NO_ROLE


def test_approve_unknown_doctor(db_session, admin):
    with pytest.raises(NotFoundError):
        DoctorService.approve_doctor(db_session, 999999, admin.id)


def test_authorization_checked_before_existence(db_session, patient):
    with pytest.raises(AuthorizationError):
        DoctorService.approve_doctor(db_session, 999999, patient.id)


def test_rejected_doctor_cannot_be_approved(db_session, make_doctor, admin):
    doctor, _ = make_doctor()
    rejected = DoctorService.reject_doctor(db_session, doctor.id, admin.id, reason="License expired")
    assert rejected.approval_status == "rejected"
    assert rejected.admin_approval_notes == "License expired"

    with pytest.raises(StateError) as exc:
        DoctorService.approve_doctor(db_session, doctor.id, admin.id)
    assert exc.value.code == "InvalidTransition"
    assert DoctorService.is_approved(db_session, doctor.id) is False


def test_approved_doctor_cannot_be_rejected(db_session, make_doctor, admin):
    doctor, _ = make_doctor()
    DoctorService.approve_doctor(db_session, doctor.id, admin.id)
    with pytest.raises(StateError) as exc:
        DoctorService.reject_doctor(db_session, doctor.id, admin.id)
    assert exc.value.code == "InvalidTransition"


def test_list_pending_excludes_decided(db_session, make_doctor, admin):
    first, _ = make_doctor()
    second, _ = make_doctor()
    decided, _ = make_doctor()
    DoctorService.approve_doctor(db_session, decided.id, admin.id)

    pending_ids = [row["id"] for row in DoctorService.list_pending(db_session, admin.id)]

    assert first.id in pending_ids
    assert second.id in pending_ids
    assert decided.id not in pending_ids
    assert pending_ids.index(first.id) < pending_ids.index(second.id)


def test_list_pending_requires_admin(db_session, patient):
    with pytest.raises(AuthorizationError):
        DoctorService.list_pending(db_session, patient.id)


def test_stale_decision_loses_to_concurrent_one(db_session, make_doctor, admin):
    doctor, _ = make_doctor()
    other = SessionLocal()
    try:
        stale = DoctorService.get_by_id(other, doctor.id)
        assert stale.approval_status == "pending"

        DoctorService.reject_doctor(db_session, doctor.id, admin.id)

        with pytest.raises(StateError) as exc:
            DoctorService.approve_doctor(other, doctor.id, admin.id)
        assert exc.value.code == "Conflict"
    finally:
        other.close()

    db_session.expire_all()
    assert DoctorService.get_by_id(db_session, doctor.id).approval_status == "rejected"
    assert _activity_count(db_session, doctor.id) == 1


def test_stale_duplicate_decision_is_noop(db_session, make_doctor, admin):
    doctor, _ = make_doctor()
    other = SessionLocal()
    try:
        DoctorService.get_by_id(other, doctor.id)
        DoctorService.approve_doctor(db_session, doctor.id, admin.id)

        result = DoctorService.approve_doctor(other, doctor.id, admin.id)
        assert result.approval_status == "approved"
    finally:
        other.close()
    assert _activity_count(db_session, doctor.id) == 1
