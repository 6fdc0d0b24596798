"""Dump command construction

Builds the external dump tool invocation for a ConnectionSpec. Building is
deterministic and touches neither the filesystem nor the network; the only
side channel is the PATH lookup for the tool itself.
"""

import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from dbdump.backup.connection import ConnectionSpec, EngineKind
from dbdump.exceptions import ToolNotFoundError, UnsupportedEngineError

PG_DUMP_CMD = "pg_dump"
PG_DUMP_STD_OPTS = ("--no-owner", "--no-acl", "--clean", "--blobs", "-v")
PG_DUMP_DEFAULT_FORMAT = "c"

MYSQLDUMP_CMD = "mysqldump"
MYSQLDUMP_STD_OPTS = (
    "--compact",
    "--skip-add-drop-table",
    "--skip-add-locks",
    "--skip-disable-keys",
    "--skip-set-charset",
    "-v",
)

_PASSWORD_FLAG = "--password="


class CredentialMode(str, Enum):
    """How a dump tool receives the database password"""

    ENVIRONMENT = "environment"
    ARGUMENT = "argument"


# pg_dump reads PGPASSWORD; mysqldump has no safe environment channel
CREDENTIAL_POLICY: Mapping[EngineKind, CredentialMode] = {
    EngineKind.POSTGRES: CredentialMode.ENVIRONMENT,
    EngineKind.MYSQL: CredentialMode.ARGUMENT,
}

TOOLS: Mapping[EngineKind, str] = {
    EngineKind.POSTGRES: PG_DUMP_CMD,
    EngineKind.MYSQL: MYSQLDUMP_CMD,
}


@dataclass(frozen=True)
class ExternalCommand:
    """A fully specified external tool invocation

    Attributes:
        program: Executable name
        args: Arguments after the program name
        env: Variables added to the inherited process environment
        output_path: File the tool writes its dump to
    """

    program: str
    args: Tuple[str, ...]
    env: Dict[str, str] = field(default_factory=dict, repr=False)
    output_path: Optional[Path] = None

    @property
    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def redacted_argv(self) -> List[str]:
        """argv with password flags masked, for logging"""
        return [
            f"{_PASSWORD_FLAG}****" if arg.startswith(_PASSWORD_FLAG) else arg
            for arg in self.argv
        ]


class CommandBuilder:
    """Builds dump commands per engine kind"""

    def __init__(self, which: Callable[[str], Optional[str]] = shutil.which):
        """
        Args:
            which: PATH lookup used to check that the dump tool is installed
        """
        self._which = which
        self._builders: Dict[EngineKind, Callable[[ConnectionSpec, str], ExternalCommand]] = {
            EngineKind.POSTGRES: self._build_pg_dump,
            EngineKind.MYSQL: self._build_mysqldump,
        }

    def build(self, spec: ConnectionSpec, output_path: "str | Path") -> ExternalCommand:
        """Build the dump invocation for ``spec`` writing to ``output_path``

        Raises:
            UnsupportedEngineError: Engine kind has no builder
            ToolNotFoundError: The engine's dump tool is not installed
        """
        builder = self._builders.get(spec.engine)
        tool = TOOLS.get(spec.engine)
        if builder is None or tool is None:
            raise UnsupportedEngineError(
                f"Unsupported database type: {spec.engine!r}",
                details={"engine": str(spec.engine)},
            )

        if self._which(tool) is None:
            raise ToolNotFoundError(tool, details={"target": spec.describe()})

        command = builder(spec, str(output_path))
        return ExternalCommand(
            program=command.program,
            args=command.args,
            env=command.env,
            output_path=Path(output_path),
        )

    def _build_pg_dump(self, spec: ConnectionSpec, out_file: str) -> ExternalCommand:
        args = (
            *PG_DUMP_STD_OPTS,
            f"-f{out_file}",
            f"--dbname={spec.database}",
            f"--host={spec.host}",
            f"--port={spec.port}",
            f"--username={spec.username}",
            f"--format={PG_DUMP_DEFAULT_FORMAT}",
        )
        return ExternalCommand(PG_DUMP_CMD, args, env=_credential_env(spec))

    def _build_mysqldump(self, spec: ConnectionSpec, out_file: str) -> ExternalCommand:
        args = (
            *MYSQLDUMP_STD_OPTS,
            "-h", spec.host,
            "-P", str(spec.port),
            "-u", spec.username,
            *_credential_args(spec),
            "--databases", spec.database,
            "-r", out_file,
        )
        return ExternalCommand(MYSQLDUMP_CMD, args, env=_credential_env(spec))


def _credential_env(spec: ConnectionSpec) -> Dict[str, str]:
    if CREDENTIAL_POLICY[spec.engine] is CredentialMode.ENVIRONMENT:
        return {"PGPASSWORD": spec.password}
    return {}


def _credential_args(spec: ConnectionSpec) -> Tuple[str, ...]:
    if CREDENTIAL_POLICY[spec.engine] is CredentialMode.ARGUMENT:
        return (f"{_PASSWORD_FLAG}{spec.password}",)
    return ()
