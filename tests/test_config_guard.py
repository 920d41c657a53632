import pytest

from asset_deploy.api.exceptions import ConfigRepoStaleError, SecretDecryptionError
from asset_deploy.core.config_guard import ConfigRepoGuard, repo_name
from asset_deploy.models.context import RepoStatus

from conftest import FakeDecryptor, FakeInspector, NOT_A_REPO, STALE, UP_TO_DATE


@pytest.mark.parametrize("url, expected", [
    ("git@github.com:acme/configurations.git", "configurations"),
    ("https://github.com/acme/configurations", "configurations"),
    ("https://github.com/acme/web-configurations.git/", "web-configurations"),
    (None, ""),
])
def test_repo_name(url, expected):
    assert repo_name(url) == expected


@pytest.mark.asyncio
async def test_stale_configuration_repo_is_fatal(tmp_path):
    decryptor = FakeDecryptor()
    guard = ConfigRepoGuard(FakeInspector(STALE), decryptor)

    with pytest.raises(ConfigRepoStaleError) as exc_info:
        await guard.verify(tmp_path)

    assert exc_info.value.errors == list(STALE.errors)
    assert decryptor.calls == []


@pytest.mark.asyncio
async def test_stale_unrelated_repo_is_not_fatal(tmp_path):
    status = RepoStatus(remote_url="git@github.com:acme/website.git", is_up_to_date=False,
                        errors=("Uncommitted changes: x",))
    guard = ConfigRepoGuard(FakeInspector(status), FakeDecryptor())

    assert await guard.verify(tmp_path) == status


@pytest.mark.asyncio
async def test_non_repository_is_not_fatal(tmp_path):
    guard = ConfigRepoGuard(FakeInspector(NOT_A_REPO), FakeDecryptor())
    assert (await guard.verify(tmp_path)).is_up_to_date is False


def test_should_decrypt(tmp_path):
    guard = ConfigRepoGuard(FakeInspector(UP_TO_DATE), FakeDecryptor())
    assert guard.should_decrypt(UP_TO_DATE, tmp_path, static=False) is False

    (tmp_path / "env.enc.yml").write_text("encrypted")
    assert guard.should_decrypt(UP_TO_DATE, tmp_path, static=False) is True
    assert guard.should_decrypt(UP_TO_DATE, tmp_path, static=True) is False
    assert guard.should_decrypt(NOT_A_REPO, tmp_path, static=False) is False


@pytest.mark.asyncio
async def test_decrypt_fully_overwrites_plaintext(tmp_path):
    (tmp_path / "env.enc.yml").write_text("encrypted")
    (tmp_path / "env.yml").write_text("OLD_SECRET: stale\nANOTHER: value\n" * 10)
    decryptor = FakeDecryptor(plaintext=b"NEW_SECRET: fresh\n")
    guard = ConfigRepoGuard(FakeInspector(UP_TO_DATE), decryptor)

    plaintext = await guard.decrypt_secrets(tmp_path)

    assert plaintext == tmp_path / "env.yml"
    assert plaintext.read_bytes() == b"NEW_SECRET: fresh\n"
    assert decryptor.calls == [tmp_path / "env.enc.yml"]
    assert not (tmp_path / ".env.yml.tmp").exists()


@pytest.mark.asyncio
async def test_decryption_failure_leaves_no_partial_write(tmp_path):
    (tmp_path / "env.enc.yml").write_text("encrypted")
    (tmp_path / "env.yml").write_text("OLD: 1\n")
    guard = ConfigRepoGuard(
        FakeInspector(UP_TO_DATE),
        FakeDecryptor(error=SecretDecryptionError("bad key")),
    )

    with pytest.raises(SecretDecryptionError):
        await guard.decrypt_secrets(tmp_path)
    assert (tmp_path / "env.yml").read_text() == "OLD: 1\n"
