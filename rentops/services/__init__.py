"""
Services implementing the maintenance runs.
"""
from rentops.services.audit_rule_seed_service import AuditRuleSeedService
from rentops.services.batch_deleter import BatchDeleter
from rentops.services.bucket_prune_service import BucketPruneService
from rentops.services.proof_cleanup_service import ProofCleanupService

__all__ = [
    "AuditRuleSeedService",
    "BatchDeleter",
    "BucketPruneService",
    "ProofCleanupService",
]
