"""Command runners used by the package installer.

A runner executes an argv on a host, streams what the command prints to an
output sink and returns the captured output. ``LocalRunner`` runs commands
on this machine, ``SSHRunner`` on a remote host over paramiko.
"""

import logging
import shlex
import subprocess
import sys
import time
from pathlib import Path
from typing import Optional, Protocol, Sequence, TextIO

import paramiko
from paramiko.ssh_exception import NoValidConnectionsError, SSHException
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .errors import CommandError

logger = logging.getLogger("kubeprep.linux.runner")


class CommandRunner(Protocol):
    """What the installer needs from a host."""

    def run(self, argv: Sequence[str]) -> str:
        """Run a command, streaming combined output. Raises CommandError."""
        ...

    def output(self, argv: Sequence[str]) -> str:
        """Run a command and return its stdout. Raises CommandError."""
        ...

    def exists(self, path: str) -> bool:
        ...

    def write_file(self, path: str, content: str) -> None:
        ...


class LocalRunner:
    """Runs commands on the local host with subprocess."""

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout

    def run(self, argv: Sequence[str]) -> str:
        argv = list(argv)
        logger.debug(f"Running: {shlex.join(argv)}")
        start = time.time()
        try:
            process = subprocess.Popen(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise CommandError(argv, output=str(e)) from e

        lines = []
        with process.stdout:
            for line in process.stdout:
                self.out.write(line)
                lines.append(line)
        returncode = process.wait()
        output = ''.join(lines)

        logger.debug(f"{argv[0]} exited with {returncode} after {time.time() - start:.2f}s")
        if returncode != 0:
            raise CommandError(argv, returncode, output)
        return output

    def output(self, argv: Sequence[str]) -> str:
        argv = list(argv)
        logger.debug(f"Running: {shlex.join(argv)}")
        try:
            result = subprocess.run(argv, capture_output=True, text=True)
        except OSError as e:
            raise CommandError(argv, output=str(e)) from e

        if result.stderr:
            self.out.write(result.stderr)
        if result.returncode != 0:
            raise CommandError(argv, result.returncode, result.stdout + result.stderr)
        return result.stdout

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def write_file(self, path: str, content: str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        logger.debug(f"Wrote {path}")


class SSHRunner:
    """Runs commands on a remote host over SSH.

    Only establishing the connection is retried; commands are run once.
    """

    def __init__(
        self,
        host: str,
        user: str = 'root',
        key_path: Optional[str] = None,
        port: int = 22,
        connect_timeout: int = 10,
        retry_attempts: int = 3,
        sudo: bool = False,
        out: Optional[TextIO] = None,
        client: Optional[paramiko.SSHClient] = None,
    ):
        self.host = host
        self.user = user
        self.key_path = key_path
        self.port = port
        self.connect_timeout = connect_timeout
        self.retry_attempts = retry_attempts
        self.sudo = sudo
        self.out = out if out is not None else sys.stdout
        self._client = client

    @classmethod
    def from_config(cls, host: str, ssh_config, **overrides) -> 'SSHRunner':
        """Build a runner from an SSHConfig, with keyword overrides."""
        params = dict(
            user=ssh_config.user,
            key_path=ssh_config.key_path,
            port=ssh_config.port,
            connect_timeout=ssh_config.connect_timeout,
            retry_attempts=ssh_config.retry_attempts,
            sudo=ssh_config.sudo,
        )
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(host, **params)

    def __enter__(self) -> 'SSHRunner':
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def client(self) -> paramiko.SSHClient:
        if self._client is None:
            self.connect()
        return self._client

    def connect(self) -> None:
        if self._client is not None:
            return

        @retry(
            stop=stop_after_attempt(max(1, self.retry_attempts)),
            wait=wait_exponential(multiplier=1, max=10),
            retry=retry_if_exception_type((NoValidConnectionsError, SSHException, OSError)),
            reraise=True,
        )
        def _connect() -> paramiko.SSHClient:
            logger.debug(f"Connecting to {self.user}@{self.host}:{self.port}")
            client = paramiko.SSHClient()
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            client.connect(
                self.host,
                port=self.port,
                username=self.user,
                key_filename=self.key_path,
                timeout=self.connect_timeout,
            )
            return client

        try:
            self._client = _connect()
        except (SSHException, OSError) as e:
            raise CommandError(["ssh", f"{self.user}@{self.host}:{self.port}"], output=str(e)) from e
        logger.info(f"Connected to {self.host}")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _command(self, argv: Sequence[str]) -> str:
        command = shlex.join(argv)
        return f"sudo {command}" if self.sudo else command

    def _exec(self, argv: Sequence[str], stdin: Optional[str] = None):
        """Run a command with combined output streamed to ``out``.

        Returns:
            tuple: (returncode, output)
        """
        command = self._command(argv)
        logger.debug(f"[{self.host}] Running: {command}")
        try:
            channel = self.client.get_transport().open_session()
            channel.set_combine_stderr(True)
            channel.exec_command(command)
            if stdin is not None:
                channel.sendall(stdin.encode())
                channel.shutdown_write()
        except (SSHException, OSError) as e:
            raise CommandError(argv, output=str(e)) from e

        lines = []
        with channel.makefile('r') as stdout:
            for line in stdout:
                self.out.write(line)
                lines.append(line)
        return channel.recv_exit_status(), ''.join(lines)

    def run(self, argv: Sequence[str]) -> str:
        argv = list(argv)
        returncode, output = self._exec(argv)
        if returncode != 0:
            raise CommandError(argv, returncode, output)
        return output

    def output(self, argv: Sequence[str]) -> str:
        argv = list(argv)
        command = self._command(argv)
        logger.debug(f"[{self.host}] Running: {command}")
        try:
            _, stdout, stderr = self.client.exec_command(command)
        except (SSHException, OSError) as e:
            raise CommandError(argv, output=str(e)) from e

        out = stdout.read().decode()
        err = stderr.read().decode()
        returncode = stdout.channel.recv_exit_status()
        if err:
            self.out.write(err)
        if returncode != 0:
            raise CommandError(argv, returncode, out + err)
        return out

    def exists(self, path: str) -> bool:
        # SFTP runs as the login user; with sudo, ask the shell instead
        if self.sudo:
            returncode, _ = self._exec(["test", "-e", path])
            return returncode == 0
        try:
            with self.client.open_sftp() as sftp:
                sftp.stat(path)
        except FileNotFoundError:
            return False
        except (SSHException, OSError) as e:
            raise CommandError(["sftp", "stat", path], output=str(e)) from e
        return True

    def write_file(self, path: str, content: str) -> None:
        if self.sudo:
            argv = ["sh", "-c", f"cat > {shlex.quote(path)}"]
            returncode, output = self._exec(argv, stdin=content)
            if returncode != 0:
                raise CommandError(argv, returncode, output)
        else:
            try:
                with self.client.open_sftp() as sftp:
                    with sftp.open(path, 'w') as f:
                        f.write(content)
            except (SSHException, OSError) as e:
                raise CommandError(["sftp", "put", path], output=str(e)) from e
        logger.debug(f"[{self.host}] Wrote {path}")
