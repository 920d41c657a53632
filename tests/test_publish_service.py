import pytest

from asset_deploy.api.exceptions import PublishError
from asset_deploy.models.config import ResolvedConfig
from asset_deploy.models.entry import Artifact
from asset_deploy.services.publish_service import PublishService

from conftest import FakeStorage


@pytest.mark.asyncio
async def test_static_discovery_skips_directories(static_dir):
    config = ResolvedConfig(environment="development")
    artifacts = await PublishService(FakeStorage()).discover_static(static_dir, config)

    assert [a.key for a in artifacts] == ["a.js", "b.css"]
    assert artifacts[0].source_path == static_dir / "a.js"
    assert artifacts[1].content_type == "text/css"


@pytest.mark.asyncio
async def test_static_discovery_of_missing_directory(tmp_path):
    config = ResolvedConfig(environment="development")
    with pytest.raises(PublishError):
        await PublishService(FakeStorage()).discover_static(tmp_path / "missing", config)


@pytest.mark.asyncio
async def test_publish_reads_files_and_uploads(static_dir):
    storage = FakeStorage()
    service = PublishService(storage)
    config = ResolvedConfig(environment="development", outdir="site")

    artifacts = await service.discover_static(static_dir, config)
    result = await service.publish(artifacts)

    assert storage.objects == {"site/a.js": b"var a = 1;", "site/b.css": b"body { color: red; }"}
    assert sorted(result.published) == ["site/a.js", "site/b.css"]
    assert result.total_bytes == len(b"var a = 1;") + len(b"body { color: red; }")
    assert storage.invalidations == []


@pytest.mark.asyncio
async def test_invalidates_every_published_key():
    storage = FakeStorage(distribution_id="E123")
    result = await PublishService(storage).publish([
        Artifact(key="app.js", body=b"a"),
        Artifact(key="app.js.map", body=b"{}"),
    ])

    assert storage.invalidations == [["app.js", "app.js.map"]]
    assert result.invalidated == ["app.js", "app.js.map"]


@pytest.mark.asyncio
async def test_failure_does_not_cancel_siblings():
    storage = FakeStorage(fail_keys={"b.js"}, distribution_id="E123")
    artifacts = [Artifact(key=k, body=k.encode()) for k in ("a.js", "b.js", "c.js")]
    progress = []

    with pytest.raises(PublishError) as exc_info:
        await PublishService(storage, progress=lambda done, total: progress.append(done)).publish(artifacts)

    error = exc_info.value
    assert sorted(error.published) == ["a.js", "c.js"]
    assert error.failed == ["b.js"]
    # Siblings finished and what landed was still invalidated
    assert set(storage.objects) == {"a.js", "c.js"}
    assert sorted(storage.invalidations[0]) == ["a.js", "c.js"]
    assert sorted(progress) == [1, 2, 3]


@pytest.mark.asyncio
async def test_duplicate_keys_last_write_wins():
    storage = FakeStorage()
    result = await PublishService(storage).publish([
        Artifact(key="out.js", body=b"first"),
        Artifact(key="other.js", body=b"x"),
        Artifact(key="out.js", body=b"second"),
    ])

    assert storage.objects["out.js"] == b"second"
    assert len(result.published) == 2
