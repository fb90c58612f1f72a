import subprocess
import sys
from collections import namedtuple
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from rocksdeps.config import ConfigLoader
from rocksdeps.utils import Logger

PACKAGED_CONFIG = ROOT_DIR / "rocksdeps" / "config"

Call = namedtuple("Call", ["cmd", "cwd", "env"])


def _touch(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"!<arch>\n")


class FakeRunner:
    """Records commands and fakes what make/configure would leave on disk."""

    def __init__(self, fail_on=None, returncode=2):
        self.calls = []
        self.fail_on = fail_on
        self.returncode = returncode
        self.prefix = None

    def run(self, cmd, cwd, env=None):
        cmd = [str(c) for c in cmd]
        cwd = Path(cwd)
        self.calls.append(Call(cmd, cwd, dict(env or {})))
        if self.fail_on is not None and self.fail_on(cmd, cwd):
            return subprocess.CompletedProcess(cmd, self.returncode)
        self._simulate(cmd, cwd, env or {})
        return subprocess.CompletedProcess(cmd, 0)

    def _simulate(self, cmd, cwd, env):
        for arg in cmd:
            if arg.startswith("--prefix="):
                self.prefix = Path(arg.split("=", 1)[1])

        if cwd.name == "jemalloc" and cmd == ["make", "install"]:
            _touch(self.prefix / "include" / "jemalloc" / "jemalloc.h")
            _touch(self.prefix / "lib" / "libjemalloc.a")
        elif cwd.name == "rocksdb":
            if cmd[-1] == "clean":
                for archive in cwd.glob("*.a"):
                    archive.unlink()
            elif "install-static" in cmd:
                _touch(cwd / "librocksdb.a")
                _touch(Path(env["PREFIX"]) / "lib" / "librocksdb.a")
            else:
                for target in cmd:
                    if target.endswith(".a"):
                        _touch(cwd / target)

    def calls_in(self, dirname):
        return [c for c in self.calls if c.cwd.name == dirname]


@pytest.fixture
def logger():
    return Logger(verbose=True)


@pytest.fixture
def config():
    return ConfigLoader(PACKAGED_CONFIG)


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    (root / "jemalloc").mkdir(parents=True)
    (root / "rocksdb").mkdir()
    return root


@pytest.fixture
def fake_runner():
    return FakeRunner()
