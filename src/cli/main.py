"""Main CLI entry point for the md-page-sync command.

Each subcommand resolves connection settings, runs one operation and prints
its result as JSON on stdout. Errors are reported on stderr with a non-zero
exit code.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from src.adf_document.document import AdfDocument
from src.adf_document.local_reference import is_local_reference
from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.auth import Authenticator
from src.confluence_client.errors import (
    SyncError,
    InvalidCredentialsError,
    APIUnreachableError,
)
from src.cli.config import ConfigLoader
from src.cli.models import ConnectionSettings, ExitCode
from src.cli.output import OutputHandler
from src.page_sync.attachment_store import AttachmentStore
from src.page_sync.models import SyncConfig
from src.page_sync.page_directory import PageDirectory
from src.page_sync.sync_engine import PageSync

app = typer.Typer(
    name="md-page-sync",
    help="""Publish a Markdown file to a Confluence page, uploading local images.

QUICK START:
  md-page-sync sync docs/Spec.md          # Create or update the page titled "Spec"
  md-page-sync dump docs/Spec.md          # Print the ADF the page would receive
  md-page-sync list                       # List pages in the space

Credentials default to CONFLUENCE_DOMAIN, CONFLUENCE_USER, CONFLUENCE_TOKEN and
CONFLUENCE_SPACE_ID (a .env file is honoured).""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# Shared options
DOMAIN_OPTION = typer.Option(
    None, "--domain", "-d", help="Confluence domain (e.g., your-company.atlassian.net)"
)
USER_OPTION = typer.Option(None, "--user", "-u", help="Confluence username/email")
TOKEN_OPTION = typer.Option(None, "--token", "-t", help="Confluence API token")
SPACE_OPTION = typer.Option(None, "--space-id", "-i", help="Confluence space ID")
PAGE_OPTION = typer.Option(..., "--page-id", "-p", help="Page ID in Confluence")
PARENT_OPTION = typer.Option(
    None, "--parent-id", help="Parent page ID for newly created pages"
)
TITLE_OPTION = typer.Option(
    None, "--title", "-T", help="Override page title (default: derived from file name)"
)
CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="YAML config file (default: .md-page-sync.yaml if present)"
)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"md-page-sync_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _output(ctx: typer.Context) -> OutputHandler:
    return ctx.obj["output"]


def _settings(
    ctx: typer.Context,
    domain: Optional[str],
    user: Optional[str],
    token: Optional[str],
    space_id: Optional[str] = None,
    parent_id: Optional[str] = None,
    require_space: bool = True,
) -> ConnectionSettings:
    return ConfigLoader.resolve(
        domain=domain,
        user=user,
        token=token,
        space_id=space_id,
        parent_page_id=parent_id,
        config_path=ctx.obj.get("config"),
        require_space=require_space,
    )


def _api(settings: ConnectionSettings) -> APIWrapper:
    return APIWrapper(Authenticator(
        domain=settings.domain,
        user=settings.user,
        api_token=settings.token,
    ))


def _engine(settings: ConnectionSettings, document: Optional[AdfDocument] = None) -> PageSync:
    config = SyncConfig(space_id=settings.space_id or "", parent_page_id=settings.parent_page_id)
    return PageSync(config, document=document, api=_api(settings))


def _run(ctx: typer.Context, command: str, action: Callable[[], Any]) -> None:
    """Run a command action, print its result and map errors to exit codes."""
    output = _output(ctx)

    try:
        result = action()
    except InvalidCredentialsError as e:
        logger.error(f"{command} failed: {e}")
        output.error(f"{command} failed: {e}")
        raise typer.Exit(ExitCode.AUTH_ERROR)
    except APIUnreachableError as e:
        logger.error(f"{command} failed: {e}")
        output.error(f"{command} failed: {e}")
        raise typer.Exit(ExitCode.NETWORK_ERROR)
    except (SyncError, ValueError) as e:
        logger.error(f"{command} failed: {e}")
        output.error(f"{command} failed: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except typer.Exit:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error during {command}")
        output.error(f"Unexpected error during {command}: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if result is not None:
        output.print_json(result)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"md-page-sync version {VERSION}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbosity: int = typer.Option(
        0, "--verbosity", "-v", help="Verbosity level: 0=summary, 1=info, 2=debug"
    ),
    logdir: Optional[str] = typer.Option(
        None, "--logdir", help="Directory for log files (creates timestamped log file)"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    config: Optional[str] = CONFIG_OPTION,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Publish a Markdown file to a Confluence page, uploading local images."""
    _configure_logging(verbosity, logdir)
    ctx.obj = {
        "output": OutputHandler(verbosity=verbosity, no_color=no_color),
        "config": config,
    }


@app.command("sync")
def sync_command(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Markdown file to sync"),
    title: Optional[str] = TITLE_OPTION,
    content_only: bool = typer.Option(
        False, "--content-only", help="Do not upload local images"
    ),
    domain: Optional[str] = DOMAIN_OPTION,
    user: Optional[str] = USER_OPTION,
    token: Optional[str] = TOKEN_OPTION,
    space_id: Optional[str] = SPACE_OPTION,
    parent_id: Optional[str] = PARENT_OPTION,
) -> None:
    """Sync a Markdown file to the page with the same title."""
    def action():
        output = _output(ctx)
        settings = _settings(ctx, domain, user, token, space_id, parent_id)
        document = AdfDocument.from_markdown_file(file, title)
        output.debug(
            f"Target space {settings.space_id}, parent {settings.parent_page_id or 'none'}"
        )

        if content_only:
            local_images = [url for url in document.list_images() if is_local_reference(url)]
            if local_images:
                output.warning(
                    f"{len(local_images)} local image(s) not uploaded (--content-only)"
                )

        engine = _engine(settings, document)
        with output.spinner(f"Syncing '{document.title}'..."):
            result = engine.sync_content() if content_only else engine.sync()

        for attachment in result.uploaded:
            output.info(f"Uploaded {attachment.title} (file {attachment.file_id})")
        verb = "Created" if result.created else "Updated"
        output.success(
            f"{verb} page '{result.page.title}' ({result.page.id}), version {result.page.version}"
        )
        return result.to_dict()

    _run(ctx, "sync", action)


@app.command("create")
def create_command(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Markdown file to publish"),
    title: Optional[str] = TITLE_OPTION,
    domain: Optional[str] = DOMAIN_OPTION,
    user: Optional[str] = USER_OPTION,
    token: Optional[str] = TOKEN_OPTION,
    space_id: Optional[str] = SPACE_OPTION,
    parent_id: Optional[str] = PARENT_OPTION,
) -> None:
    """Create a new page from a Markdown file without looking for an existing one."""
    def action():
        settings = _settings(ctx, domain, user, token, space_id, parent_id)
        document = AdfDocument.from_markdown_file(file, title)
        return _engine(settings, document).force_create_page().to_dict()

    _run(ctx, "create", action)


@app.command("publish")
def publish_command(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Markdown file to publish"),
    page_id: str = PAGE_OPTION,
    title: Optional[str] = TITLE_OPTION,
    domain: Optional[str] = DOMAIN_OPTION,
    user: Optional[str] = USER_OPTION,
    token: Optional[str] = TOKEN_OPTION,
) -> None:
    """Replace the content of a known page, uploading local images to it."""
    def action():
        settings = _settings(ctx, domain, user, token, require_space=False)
        document = AdfDocument.from_markdown_file(file, title)
        return _engine(settings, document).publish_to_page(page_id).to_dict()

    _run(ctx, "publish", action)


@app.command("list")
def list_command(
    ctx: typer.Context,
    as_table: bool = typer.Option(False, "--table", help="Print a table instead of JSON"),
    domain: Optional[str] = DOMAIN_OPTION,
    user: Optional[str] = USER_OPTION,
    token: Optional[str] = TOKEN_OPTION,
    space_id: Optional[str] = SPACE_OPTION,
) -> None:
    """List pages in the space."""
    def action():
        settings = _settings(ctx, domain, user, token, space_id)
        pages = _engine(settings).list_pages()
        if as_table:
            _output(ctx).print_pages(pages)
            return None
        return [page.to_dict() for page in pages]

    _run(ctx, "list", action)


@app.command("get")
def get_command(
    ctx: typer.Context,
    page_id: str = PAGE_OPTION,
    domain: Optional[str] = DOMAIN_OPTION,
    user: Optional[str] = USER_OPTION,
    token: Optional[str] = TOKEN_OPTION,
) -> None:
    """Get a page (with its ADF body) by page ID."""
    def action():
        settings = _settings(ctx, domain, user, token, require_space=False)
        return PageDirectory(_api(settings)).get_by_id(page_id).to_dict()

    _run(ctx, "get", action)


@app.command("dump")
def dump_command(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Markdown file to convert"),
) -> None:
    """Parse a Markdown file into ADF and print it as JSON."""
    def action():
        return AdfDocument.from_markdown_file(file).to_dict()

    _run(ctx, "dump", action)


@app.command("upload")
def upload_command(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="File to attach"),
    page_id: str = PAGE_OPTION,
    comment: Optional[str] = typer.Option(None, "--comment", help="Attachment comment"),
    minor_edit: bool = typer.Option(False, "--minor-edit", help="Do not notify watchers"),
    domain: Optional[str] = DOMAIN_OPTION,
    user: Optional[str] = USER_OPTION,
    token: Optional[str] = TOKEN_OPTION,
) -> None:
    """Upload an attachment to a page."""
    def action():
        settings = _settings(ctx, domain, user, token, require_space=False)
        store = AttachmentStore(_api(settings))
        return store.upload(page_id, file, comment=comment, minor_edit=minor_edit).to_dict()

    _run(ctx, "upload", action)


@app.command("list-attachments")
def list_attachments_command(
    ctx: typer.Context,
    page_id: str = PAGE_OPTION,
    domain: Optional[str] = DOMAIN_OPTION,
    user: Optional[str] = USER_OPTION,
    token: Optional[str] = TOKEN_OPTION,
) -> None:
    """List attachments for a page."""
    def action():
        settings = _settings(ctx, domain, user, token, require_space=False)
        attachments = AttachmentStore(_api(settings)).list_for_page(page_id)
        return [attachment.to_dict() for attachment in attachments]

    _run(ctx, "list-attachments", action)


@app.command("get-attachment")
def get_attachment_command(
    ctx: typer.Context,
    attachment_id: str = typer.Option(..., "--attachment-id", "-a", help="Attachment ID"),
    domain: Optional[str] = DOMAIN_OPTION,
    user: Optional[str] = USER_OPTION,
    token: Optional[str] = TOKEN_OPTION,
) -> None:
    """Get attachment details by attachment ID."""
    def action():
        settings = _settings(ctx, domain, user, token, require_space=False)
        return AttachmentStore(_api(settings)).get_by_id(attachment_id).to_dict()

    _run(ctx, "get-attachment", action)


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
