"""Shared fixtures and fakes for asset-deploy tests

Every external collaborator (git, sops, esbuild, S3, webhooks) is replaced
with an in-memory fake so the orchestration can be tested without network
or external tools.
"""

import asyncio
import json
from pathlib import Path

import pytest

from asset_deploy.api.exceptions import BundlingError
from asset_deploy.core.bundler import Bundler
from asset_deploy.core.repo_inspector import RepoInspector
from asset_deploy.core.secrets import SecretDecryptor
from asset_deploy.models.context import RepoStatus
from asset_deploy.models.entry import Bundle
from asset_deploy.services.deploy_service import DeployService
from asset_deploy.services.notifier import Notifier
from asset_deploy.storage.base import StorageBackend


class FakeStorage(StorageBackend):
    """Object store kept in a dict; keys in ``fail_keys`` raise on upload"""

    def __init__(self, fail_keys=(), distribution_id=None):
        super().__init__({'name': 'fake'})
        self.objects = {}
        self.content_types = {}
        self.fail_keys = set(fail_keys)
        self.distribution_id = distribution_id
        self.invalidations = []
        self.closed = False

    @property
    def can_invalidate(self) -> bool:
        return bool(self.distribution_id)

    async def _do_initialize(self) -> None:
        pass

    async def put_object(self, key, body, content_type=None) -> None:
        await asyncio.sleep(0)
        if key in self.fail_keys:
            raise RuntimeError(f"simulated upload failure for {key}")
        self.objects[key] = body
        self.content_types[key] = content_type

    async def invalidate(self, keys):
        self.invalidations.append(list(keys))
        return "I-FAKE"

    async def _do_close(self) -> None:
        self.closed = True


class FakeBundler(Bundler):
    """Returns deterministic output and records the config it was given"""

    def __init__(self, fail_sources=()):
        self.calls = []
        self.fail_sources = set(fail_sources)

    async def bundle(self, entry, config):
        self.calls.append((entry, config))
        if entry.source_path.name in self.fail_sources:
            raise BundlingError(str(entry.source_path), "syntax error")
        code = f"/* {entry.output_name} minify={config.minify} */".encode()
        sourcemap = json.dumps({"version": 3, "file": entry.output_name}).encode()
        return Bundle(code=code, sourcemap=sourcemap)


class FakeDecryptor(SecretDecryptor):
    def __init__(self, plaintext=b"SECRET_TOKEN: decrypted\n", error=None):
        self.plaintext = plaintext
        self.error = error
        self.calls = []

    async def decrypt(self, path: Path) -> bytes:
        self.calls.append(path)
        if self.error:
            raise self.error
        return self.plaintext


class FakeInspector(RepoInspector):
    def __init__(self, status: RepoStatus):
        self._status = status
        self.calls = []

    async def status(self, path: Path) -> RepoStatus:
        self.calls.append(path)
        return self._status


class RecordingNotifier(Notifier):
    """Notifier that records events instead of posting them"""

    def __init__(self):
        super().__init__([])
        self.events = []

    async def notify(self, event, context, error=None):
        self.events.append((event, context, error))
        return []


UP_TO_DATE = RepoStatus(
    root=None,
    remote_url="git@github.com:acme/configurations.git",
    local_commit="c0ffee0000000000000000000000000000000000",
    is_up_to_date=True,
)

STALE = RepoStatus(
    root=None,
    remote_url="git@github.com:acme/configurations.git",
    local_commit="c0ffee0000000000000000000000000000000000",
    is_up_to_date=False,
    errors=("Uncommitted changes: env.yml", "Local branch is 1 commit(s) ahead of remote, push first"),
)

NOT_A_REPO = RepoStatus(is_up_to_date=False, errors=("not a git repository",))


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project with package.json, one source entry and a default configuration"""
    (tmp_path / "package.json").write_text(json.dumps({
        "name": "acme-web",
        "version": "2.3.4",
        "repository": "https://github.com/acme/acme-web",
    }))
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.js").write_text("console.log('app')\n")

    config_dir = tmp_path / "configurations" / "default"
    config_dir.mkdir(parents=True)
    (config_dir / "settings.yml").write_text(
        "s3bucket: acme-assets\n"
        "environments:\n"
        "  production:\n"
        "    s3bucket: acme-assets-prod\n"
        "    minify: true\n"
    )
    (config_dir / "messages.yml").write_text("greeting: hello\n")
    return tmp_path


@pytest.fixture
def static_dir(project: Path) -> Path:
    dist = project / "dist"
    dist.mkdir()
    (dist / "a.js").write_text("var a = 1;")
    (dist / "b.css").write_text("body { color: red; }")
    (dist / "img").mkdir()
    (dist / "img" / "logo.png").write_bytes(b"\x89PNG")
    return dist


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_service(project, notifier):
    """Factory for a DeployService wired with fakes"""

    def _make(status=NOT_A_REPO, storage=None, bundler=None, decryptor=None):
        storage = storage if storage is not None else FakeStorage()
        service = DeployService(
            cwd=project,
            inspector=FakeInspector(status),
            decryptor=decryptor or FakeDecryptor(),
            bundler=bundler or FakeBundler(),
            storage_factory=lambda config: storage,
            notifier_factory=lambda get: notifier,
            environ={},
        )
        service.fake_storage = storage
        return service

    return _make
