import subprocess
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from desksetup.common.config_loader import ConfigLoader
from desksetup.common.errors import InstallError


class FakeShellExecutor:
    """Records commands instead of running them; results are scripted by command prefix"""

    def __init__(self, available=(), root=False):
        self.debug_mode = False
        self.available = set(available)
        self.root = root
        self.calls = []
        self.spawned = []
        self._results = []

    def script(self, prefix, returncode=0, stdout="", stderr="", side_effect=None):
        """Return this result for any command starting with prefix (longest prefix wins)"""
        self._results.append((tuple(prefix), returncode, stdout, stderr, side_effect))

    def is_root(self):
        return self.root

    def command_exists(self, name):
        return name in self.available

    def commands(self):
        return [call['cmd'] for call in self.calls]

    def ran(self, *prefix):
        return any(tuple(cmd[:len(prefix)]) == prefix for cmd in self.commands())

    def run_command(self, cmd, cwd=None, capture=True, check=True, shell=False, user=None,
                    sudo=False, log_cmd=False, timeout=1800, extra_env=None, input_text=None):
        cmd = [str(part) for part in cmd]
        self.calls.append({'cmd': cmd, 'sudo': sudo, 'user': user, 'cwd': cwd, 'input': input_text})

        best = None
        for scripted in self._results:
            prefix = scripted[0]
            if tuple(cmd[:len(prefix)]) == prefix and (best is None or len(prefix) > len(best[0])):
                best = scripted
        returncode, stdout, stderr = 0, "", ""
        if best is not None:
            _, returncode, stdout, stderr, side_effect = best
            if side_effect is not None:
                side_effect(cmd)

        if check and returncode != 0:
            raise subprocess.CalledProcessError(returncode, cmd, stdout, stderr)
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    def spawn_detached(self, cmd):
        self.spawned.append(list(cmd))
        return True


class FakeHttpClient:
    """Serves JSON documents, text and file bodies from dictionaries keyed by URL"""

    def __init__(self, json_data=None, files=None, texts=None):
        self.json_data = dict(json_data or {})
        self.files = dict(files or {})
        self.texts = dict(texts or {})
        self.requests = []

    def get_json(self, url, params=None):
        self.requests.append((url, params))
        key = (url, tuple(sorted((params or {}).items())))
        if key in self.json_data:
            return self.json_data[key]
        if url in self.json_data:
            return self.json_data[url]
        raise InstallError(f"Request failed for {url}: 404")

    def get_text(self, url):
        self.requests.append((url, None))
        if url not in self.texts:
            raise InstallError(f"Request failed for {url}: 404")
        return self.texts[url]

    def download(self, url, dest):
        self.requests.append((url, None))
        if url not in self.files:
            raise InstallError(f"Download of {url} failed: 404")
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(self.files[url])
        return dest

    def try_download(self, url, dest):
        try:
            self.download(url, dest)
            return True
        except InstallError:
            return False


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def settings(home):
    loaded = ConfigLoader.load(environ={'DESKSETUP_HOME': str(home)})
    loaded['restart_file_manager'] = False
    return loaded


@pytest.fixture
def executor():
    return FakeShellExecutor()


@pytest.fixture
def http():
    return FakeHttpClient()


def write_converter_output(cmd):
    """Side effect for scripted image converters: create the PNG the command would write"""
    for part in cmd:
        if part.startswith('--export-filename='):
            Path(part.split('=', 1)[1]).write_bytes(b"\x89PNG\r\n\x1a\n")
            return
    Path(cmd[-1]).write_bytes(b"\x89PNG\r\n\x1a\n")
