import logging
import os

import pytest

from kubeprep.config import InstallerConfig, set_config
from kubeprep.modules.linux import CommandError


class FakeRunner:
    """Records commands and answers rpm queries from a table."""

    def __init__(self, rpm=None, fail=None, files=None):
        self.rpm = dict(rpm or {})
        self.fail = set(fail or ())
        self.files = dict(files or {})
        self.calls = []

    def _check(self, argv):
        self.calls.append(list(argv))
        for prefix in self.fail:
            if " ".join(argv).startswith(prefix):
                raise CommandError(argv, 1, f"{argv[0]} failed")

    def run(self, argv):
        self._check(argv)
        return ""

    def output(self, argv):
        self._check(argv)
        package = argv[-1]
        if package not in self.rpm:
            raise CommandError(argv, 1, f"package {package} is not installed\n")
        return self.rpm[package] + "\n"

    def exists(self, path):
        return path in self.files

    def write_file(self, path, content):
        self.calls.append(["write", path])
        self.files[path] = content

    def queried(self):
        return [c[-1] for c in self.calls if c[:2] == ["/bin/rpm", "-q"]]


@pytest.fixture
def config():
    return InstallerConfig()


@pytest.fixture
def fake_runner():
    return FakeRunner


@pytest.fixture(autouse=True)
def reset_global_state(monkeypatch):
    for key in [k for k in os.environ if k.startswith("KUBEPREP_")]:
        monkeypatch.delenv(key)
    set_config(InstallerConfig())
    yield
    set_config(None)
    kubeprep_logger = logging.getLogger("kubeprep")
    for handler in kubeprep_logger.handlers[:]:
        kubeprep_logger.removeHandler(handler)
