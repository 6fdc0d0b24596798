"""dbdump Backup Module

Usage:
    from dbdump.backup import BackupScheduler, ConnectionSpec, EngineKind

    spec = ConnectionSpec(EngineKind.POSTGRES, host="db1", database="app", username="u", password="p")
"""

from dbdump.backup.artifacts import ArtifactNamer, remove_artifact
from dbdump.backup.commands import CREDENTIAL_POLICY, CommandBuilder, CredentialMode, ExternalCommand
from dbdump.backup.compress import Compressor
from dbdump.backup.connection import ConnectionSpec, EngineKind
from dbdump.backup.process import ProcessRunner
from dbdump.backup.scheduler import BackupResult, BackupScheduler, Stage
from dbdump.backup.uploader import S3Uploader, Uploader

__all__ = [
    "ArtifactNamer",
    "remove_artifact",
    "CommandBuilder",
    "CredentialMode",
    "CREDENTIAL_POLICY",
    "ExternalCommand",
    "Compressor",
    "ConnectionSpec",
    "EngineKind",
    "ProcessRunner",
    "BackupResult",
    "BackupScheduler",
    "Stage",
    "S3Uploader",
    "Uploader",
]
