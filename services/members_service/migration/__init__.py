"""Unified-member migration, verification and legacy cleanup."""

from services.members_service.migration.cleanup import (
    CleanupReport,
    cleanup_legacy_tables,
)
from services.members_service.migration.unified_member import (
    MigrationReport,
    UnifiedMemberMigration,
    run_unified_member_migration,
)
from services.members_service.migration.verify import (
    VerificationReport,
    verify_unified_member_migration,
)

__all__ = [
    "CleanupReport",
    "MigrationReport",
    "UnifiedMemberMigration",
    "VerificationReport",
    "cleanup_legacy_tables",
    "run_unified_member_migration",
    "verify_unified_member_migration",
]
