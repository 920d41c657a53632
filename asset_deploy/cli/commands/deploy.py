"""Deploy command implementation"""

import sys

import click
from rich.console import Console

from ..utils.output import format_deploy_result
from ...services.deploy_service import DeployService
from ...utils.async_utils import run_async

console = Console()


@click.command()
@click.argument('entries', nargs=-1)
@click.option('--config', 'config_path', default=None,
              help='Configuration directory (default: configurations/default)')
@click.option('--env', default=None, help='Environment to deploy (default: development)')
@click.option('--minify/--no-minify', default=None, help='Minify built bundles')
@click.option('--outdir', default=None, help='Key prefix inside the bucket')
@click.option('--cloudfront', default=None, help='CloudFront distribution id to invalidate')
@click.option('--s3bucket', default=None, help='S3 bucket to publish to')
@click.option('--static-file-directory', default=None,
              type=click.Path(file_okay=False),
              help='Upload the top-level files of this directory instead of building')
@click.pass_context
def deploy(ctx, entries, config_path, env, minify, outdir, cloudfront, s3bucket,
           static_file_directory):
    """Build entries and publish them to S3

    ENTRIES are paths to bundle, either ``src/app.js`` (published as
    ``app.js``) or ``src/app.js:assets/app.js``. Entries listed under
    ``entries`` in settings.yml are built after them.

    Examples:

        # Build and publish one entry to production
        asset-deploy deploy src/index.js:index.js --env production --minify

        # Publish a pre-built directory
        asset-deploy deploy --static-file-directory dist --s3bucket my-site
    """
    if static_file_directory and entries:
        raise click.UsageError("Entries cannot be combined with --static-file-directory")

    service = DeployService(cwd=ctx.obj.cwd)

    with console.status("[bold green]Deploying...[/bold green]"):
        result = run_async(service.run(
            entries=entries,
            config_path=config_path,
            env=env,
            minify=minify,
            outdir=outdir,
            cloudfront=cloudfront,
            s3bucket=s3bucket,
            static_file_directory=static_file_directory,
        ))

    format_deploy_result(result)
    sys.exit(result.exit_code)
