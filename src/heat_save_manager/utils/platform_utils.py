import logging
import subprocess
import sys

log = logging.getLogger(__name__)


class PlatformUtils:
    """
    Centralized platform utilities.
    - Detection of a running game process before the live root is touched
    - Subprocess execution with consistent defaults (no console window on Windows)
    """

    PROCESS_CHECK_TIMEOUT = 10
    # Linux keeps only this many characters of a process name (/proc/<pid>/comm)
    LINUX_COMM_LENGTH = 15

    @staticmethod
    def run_command(
        cmd: list[str], *, timeout: int | None = None
    ) -> tuple[int, str, str]:
        """
        Execute a command and return (returncode, stdout, stderr).
        """
        startupinfo = None
        if sys.platform == "win32":
            try:
                startupinfo = subprocess.STARTUPINFO()
                startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
            except AttributeError:
                startupinfo = None

        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=False,
            startupinfo=startupinfo,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
        return result.returncode, result.stdout or "", result.stderr or ""

    @staticmethod
    def process_check_command(executable: str) -> list[str]:
        """Build the command listing processes named like the executable."""
        if sys.platform == "win32":
            return ["tasklist", "/FI", f"IMAGENAME eq {executable}", "/NH"]
        # Wine/Proton processes show up under the truncated image name
        return ["pgrep", "-x", executable[: PlatformUtils.LINUX_COMM_LENGTH]]

    @staticmethod
    def is_process_running(executable: str) -> bool:
        """
        Best-effort check whether a process with this image name is running.
        A check that cannot run is logged and reported as not running.

        Args:
            executable: Image name, e.g. ``NeedForSpeedHeat.exe``

        Returns:
            True if a matching process was found
        """
        if not executable:
            return False
        cmd = PlatformUtils.process_check_command(executable)
        try:
            returncode, stdout, _ = PlatformUtils.run_command(
                cmd, timeout=PlatformUtils.PROCESS_CHECK_TIMEOUT
            )
        except (OSError, subprocess.SubprocessError) as e:
            log.warning("Could not check for running %s: %s", executable, e)
            return False

        if sys.platform == "win32":
            return executable.lower() in stdout.lower()
        return returncode == 0
