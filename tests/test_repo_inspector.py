import shutil
import subprocess

import pytest

from asset_deploy.core.repo_inspector import GitRepoInspector

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(cwd, *args):
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=cwd, check=True, capture_output=True,
    )


def commit_file(repo, name, content, message):
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-m", message)


@pytest.fixture
def remote(tmp_path):
    path = tmp_path / "configurations.git"
    git(tmp_path, "init", "--bare", str(path))
    return path


@pytest.fixture
def work(tmp_path, remote):
    """Clone with one pushed commit that tracks its upstream"""
    path = tmp_path / "work"
    git(tmp_path, "clone", str(remote), str(path))
    commit_file(path, "env.yml", "TOKEN: a\n", "initial")
    git(path, "push", "-u", "origin", "HEAD")
    return path


@pytest.mark.asyncio
async def test_pushed_clone_is_up_to_date(work, remote):
    status = await GitRepoInspector().status(work)

    assert status.is_up_to_date is True
    assert status.errors == ()
    assert status.remote_url == str(remote)
    assert len(status.local_commit) == 40


@pytest.mark.asyncio
async def test_modified_file_is_reported_by_name(work):
    (work / "env.yml").write_text("TOKEN: b\n")

    status = await GitRepoInspector(fetch=False).status(work)

    assert status.is_up_to_date is False
    assert status.errors == ("Uncommitted changes: env.yml",)


@pytest.mark.asyncio
async def test_unpushed_commit_is_ahead(work):
    commit_file(work, "settings.yml", "s3bucket: acme\n", "settings")

    status = await GitRepoInspector(fetch=False).status(work)

    assert status.errors == ("Local branch is 1 commit(s) ahead of remote, push first",)


@pytest.mark.asyncio
async def test_fetch_detects_commits_behind(tmp_path, work, remote):
    other = tmp_path / "other"
    git(tmp_path, "clone", str(remote), str(other))
    commit_file(other, "store.yml", "items: []\n", "store")
    git(other, "push")

    status = await GitRepoInspector().status(work)

    assert status.errors == ("Local branch is 1 commit(s) behind remote, pull first",)


@pytest.mark.asyncio
async def test_branch_without_upstream(tmp_path):
    repo = tmp_path / "solo"
    repo.mkdir()
    git(repo, "init")
    commit_file(repo, "env.yml", "TOKEN: a\n", "initial")

    status = await GitRepoInspector().status(repo)

    assert status.remote_url is None
    assert status.errors == ("Current branch has no upstream",)


@pytest.mark.asyncio
async def test_outside_a_repository(tmp_path):
    status = await GitRepoInspector(fetch=False).status(tmp_path)

    assert status.is_up_to_date is False
    assert status.remote_url is None
    assert "not a git repository" in status.errors[0]
