import shutil
import subprocess
from typing import Optional, Sequence, override

from capngen import logging as capngen_logging
from capngen import utils
from capngen.errors import CapnpCompileError

from .thirdparty import ThirdParty

logger = capngen_logging.get_logger(__name__)

DEFAULT_EXECUTABLE = "capnp"


class CapnpCompiler(ThirdParty):
    """Runs ``capnp compile`` on a generated schema as a pass/fail check."""

    def __init__(
        self,
        schema_path: str,
        executable: str = DEFAULT_EXECUTABLE,
        timeout: Optional[float] = None,
        import_paths: Sequence[str] = (),
    ):
        self.schema_path = schema_path
        self.executable = executable
        self.timeout = timeout
        self.import_paths = list(import_paths)

    @staticmethod
    @override
    def check_requirements() -> list[str]:
        if not shutil.which(DEFAULT_EXECUTABLE):
            return [DEFAULT_EXECUTABLE]
        return []

    def command(self) -> list[str]:
        cmd = [self.executable, "compile", "-o-"]
        for path in self.import_paths:
            cmd.append(f"-I{path}")
        cmd.append(self.schema_path)
        return cmd

    def compile(self) -> None:
        cmd = self.command()
        logger.debug("running %s", " ".join(cmd))
        try:
            result = utils.run_command(cmd, text=False, timeout=self.timeout)
        except FileNotFoundError as exc:
            raise CapnpCompileError(f"capnp executable '{self.executable}' was not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise CapnpCompileError(
                f"capnp did not finish compiling {self.schema_path} within {self.timeout}s") from exc
        if result.returncode != 0:
            diagnostics = result.stderr.decode(errors="ignore") if isinstance(result.stderr, bytes) else result.stderr
            raise CapnpCompileError(
                f"capnp rejected {self.schema_path} (exit status {result.returncode})",
                diagnostics=diagnostics.strip(),
            )
        logger.info("capnp accepted %s", self.schema_path)
