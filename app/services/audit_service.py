"""Hash-chained, append-only audit trail for KYC decisions."""
import hashlib
import json
import logging
from typing import Optional
from sqlalchemy.orm import Session
from app.core.constants import KycAuditAction, AuditOutcome
from app.models.audit import KycAuditLog
from app.models.kyc import KycDocument
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def compute_entry_hash(
    kyc_document_id: int,
    actor_id: int,
    action: str,
    outcome: str,
    reason: Optional[str],
    created_at,
    previous_hash: Optional[str],
) -> str:
    canonical = json.dumps(
        {
            "kyc_document_id": kyc_document_id,
            "actor_id": actor_id,
            "action": action,
            "outcome": outcome,
            "reason": reason,
            "created_at": created_at.isoformat(),
            "previous_hash": previous_hash,
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class KycAuditService:
    @staticmethod
    def append(
        db: Session,
        kyc_document_id: int,
        actor_id: int,
        action: KycAuditAction,
        outcome: AuditOutcome,
        reason: Optional[str] = None,
    ) -> KycAuditLog:
        """Stage a new entry linked to the document's latest one.

        The document row is locked so concurrent appends cannot fork the
        chain. That relies on ``SELECT ... FOR UPDATE`` (PostgreSQL); SQLite
        ignores it, so appends there are only safe from a single writer.
        The caller commits.
        """
        db.query(KycDocument.id).filter(KycDocument.id == kyc_document_id).with_for_update().first()
        last = (
            db.query(KycAuditLog.entry_hash)
            .filter(KycAuditLog.kyc_document_id == kyc_document_id)
            .order_by(KycAuditLog.id.desc())
            .first()
        )
        previous_hash = last.entry_hash if last else None
        created_at = utcnow()
        entry = KycAuditLog(
            kyc_document_id=kyc_document_id,
            actor_id=int(actor_id),
            action=action.value,
            outcome=outcome.value,
            reason=reason,
            created_at=created_at,
            previous_hash=previous_hash,
            entry_hash=compute_entry_hash(
                kyc_document_id,
                int(actor_id),
                action.value,
                outcome.value,
                reason,
                created_at,
                previous_hash,
            ),
        )
        db.add(entry)
        return entry

    @staticmethod
    def list_entries(db: Session, kyc_document_id: int) -> list[KycAuditLog]:
        return (
            db.query(KycAuditLog)
            .filter(KycAuditLog.kyc_document_id == kyc_document_id)
            .order_by(KycAuditLog.id)
            .all()
        )

    @staticmethod
    def verify_chain(db: Session, kyc_document_id: int) -> dict:
        """Recompute every hash and link; report the first entry that breaks."""
        entries = KycAuditService.list_entries(db, kyc_document_id)
        previous_hash = None
        for entry in entries:
            expected = compute_entry_hash(
                entry.kyc_document_id,
                entry.actor_id,
                entry.action,
                entry.outcome,
                entry.reason,
                entry.created_at,
                entry.previous_hash,
            )
            if entry.previous_hash != previous_hash or entry.entry_hash != expected:
                logger.warning("Audit chain broken for kyc document %s at entry %s", kyc_document_id, entry.id)
                return {"valid": False, "entries": len(entries), "broken_entry_id": entry.id}
            previous_hash = entry.entry_hash
        return {"valid": True, "entries": len(entries), "broken_entry_id": None}
