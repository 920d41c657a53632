import json
import sys
from pathlib import Path

import pytest

from asset_deploy.api.exceptions import BundlingError
from asset_deploy.core.bundler import EsbuildBundler, runtime_namespace
from asset_deploy.models.config import ResolvedConfig
from asset_deploy.models.entry import Entry


def make_config(**overrides):
    values = dict(
        environment="production",
        config_path=Path("/srv/app/configurations/default"),
        env={"API_TOKEN": "s3cr3t", "RETRIES": 3, "DEBUG": False,
             "nested": {"a": 1}, "not-an-identifier": "x"},
        settings={"s3bucket": "acme"},
        messages={"greeting": "hello"},
        store={},
    )
    values.update(overrides)
    return ResolvedConfig(**values)


def test_runtime_namespace():
    namespace = runtime_namespace(make_config())

    assert namespace["NODE_ENV"] == "production"
    assert namespace["CONFIG_PATH"] == "/srv/app/configurations/default"
    assert json.loads(namespace["MESSAGES"]) == {"greeting": "hello"}
    assert json.loads(namespace["SETTINGS"]) == {"s3bucket": "acme"}
    assert namespace["STORE"] == "{}"
    assert namespace["API_TOKEN"] == "s3cr3t"
    assert namespace["RETRIES"] == "3"
    assert namespace["DEBUG"] == "false"
    # Only scalar values under valid identifiers are exposed
    assert "nested" not in namespace
    assert "not-an-identifier" not in namespace


def test_build_command():
    bundler = EsbuildBundler(command=("npx", "esbuild"))
    entry = Entry(Path("/srv/app/src/app.js"), "app.js")

    command = bundler.build_command(entry, make_config(minify=True), Path("/tmp/out/app.js"))

    assert command[:6] == ["npx", "esbuild", "/srv/app/src/app.js", "--bundle",
                           "--outfile=/tmp/out/app.js", "--sourcemap"]
    assert '--define:process.env.NODE_ENV="production"' in command
    assert '--define:process.env.API_TOKEN="s3cr3t"' in command
    assert command[-1] == "--minify"


def test_build_command_without_minify():
    command = EsbuildBundler().build_command(
        Entry(Path("src/app.js"), "app.js"), make_config(), Path("out.js")
    )
    assert command[0] == "esbuild"
    assert "--minify" not in command


FAKE_ESBUILD = '''
import sys

args = sys.argv[1:]
outfile = next(arg.split("=", 1)[1] for arg in args if arg.startswith("--outfile="))
with open(outfile, "w") as f:
    f.write("bundled " + args[0] + (" minified" if "--minify" in args else ""))
with open(outfile + ".map", "w") as f:
    f.write('{"version": 3}')
'''

FAILING_ESBUILD = '''
import sys

sys.stderr.write("Could not resolve './missing'")
sys.exit(1)
'''

SILENT_ESBUILD = '''
print("nothing to do")
'''


def script_bundler(tmp_path, source):
    script = tmp_path / "fake_esbuild.py"
    script.write_text(source)
    return EsbuildBundler(command=(sys.executable, str(script)), cwd=tmp_path)


@pytest.mark.asyncio
async def test_bundle_reads_output_and_sourcemap(tmp_path):
    bundler = script_bundler(tmp_path, FAKE_ESBUILD)

    bundle = await bundler.bundle(Entry(Path("src/app.js"), "assets/app.js"), make_config(minify=True))

    assert bundle.code == b"bundled src/app.js minified"
    assert bundle.sourcemap == b'{"version": 3}'


@pytest.mark.asyncio
async def test_bundle_failure_carries_stderr(tmp_path):
    bundler = script_bundler(tmp_path, FAILING_ESBUILD)

    with pytest.raises(BundlingError) as exc_info:
        await bundler.bundle(Entry(Path("src/app.js"), "app.js"), make_config())

    assert exc_info.value.source == "src/app.js"
    assert "Could not resolve" in str(exc_info.value)


@pytest.mark.asyncio
async def test_bundle_without_output_is_an_error(tmp_path):
    bundler = script_bundler(tmp_path, SILENT_ESBUILD)

    with pytest.raises(BundlingError) as exc_info:
        await bundler.bundle(Entry(Path("src/app.js"), "app.js"), make_config())

    assert "no output" in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_bundler_executable(tmp_path):
    bundler = EsbuildBundler(command=(str(tmp_path / "no-such-esbuild"),))

    with pytest.raises(BundlingError) as exc_info:
        await bundler.bundle(Entry(Path("src/app.js"), "app.js"), make_config())

    assert "is not installed" in str(exc_info.value)
