"""
Command line interface for syncing Qiita posts with local markdown files.
"""

import logging
from typing import Optional

import click
import requests
import yaml
from rich.table import Table

from qiitasync.client.qiita_client import QiitaClient
from qiitasync.config import Config
from qiitasync.interfaces.api_client import ApiClient
from qiitasync.models.post import Post
from qiitasync.models.posts import fetch_posts
from qiitasync.models.team import Team, fetch_teams
from qiitasync.utils.error_handler import (
    AuthenticationError,
    ErrorHandler,
    InvalidPostError,
    QiitaSyncError,
)
from qiitasync.utils.progress_tracker import OperationResult, ProgressTracker

logger = logging.getLogger(__name__)

# Errors reported to the user instead of raised with a traceback
HANDLED_ERRORS = (QiitaSyncError, requests.RequestException, yaml.YAMLError, ValueError, OSError)


def _default_client_factory(config: Config) -> ApiClient:
    return QiitaClient(access_token=config.access_token, timeout=config.timeout)


class AppContext:
    """State shared by every command of one invocation."""

    def __init__(self, config: Config, client_factory, tracker: ProgressTracker):
        self.config = config
        self.client_factory = client_factory
        self.tracker = tracker
        self.error_handler = ErrorHandler(logger)
        self._client = None

    @property
    def client(self) -> ApiClient:
        if self._client is None:
            self._client = self.client_factory(self.config)
        return self._client

    def resolve_team(self, team_id: Optional[str]) -> Optional[Team]:
        """Look up a team workspace by ID, None for the personal space."""
        if not team_id:
            return None
        for team in fetch_teams(self.client):
            if team.id == team_id:
                return team
        raise click.BadParameter(f"unknown team: {team_id}", param_hint="--team")

    def fail(self, error: Exception, title: Optional[str], operation: str) -> None:
        # the client logs authentication errors with setup guidance
        if not isinstance(error, AuthenticationError):
            self.error_handler.log_api_error(error, title, operation)
        self.tracker.add_result(
            OperationResult(title=title or "-", action=operation, success=False, error_message=str(error))
        )
        self.tracker.print_summary()
        click.get_current_context().exit(1)


@click.group()
@click.option("--root", "root_dir", default=None, help="Directory holding local posts (QIITA_ROOT_DIR)")
@click.option("--log-level", default=None, help="Logging level (QIITA_LOG_LEVEL)")
@click.pass_context
def cli(ctx: click.Context, root_dir: Optional[str], log_level: Optional[str]) -> None:
    """Sync Qiita posts with local markdown files."""
    ctx.ensure_object(dict)
    config = ctx.obj.get("config") or Config.from_env()
    if root_dir:
        config.root_dir = root_dir
    if log_level:
        config.log_level = log_level.upper()

    tracker = ProgressTracker()
    tracker.setup_colored_logging(config.log_level)
    client_factory = ctx.obj.get("client_factory", _default_client_factory)
    ctx.obj = AppContext(config, client_factory, tracker)


@cli.group()
def generate() -> None:
    """Generate local files."""


@cli.group()
def fetch() -> None:
    """Fetch posts from Qiita into local files."""


@cli.group()
def create() -> None:
    """Create remote posts."""


@cli.group()
def update() -> None:
    """Update remote posts."""


@cli.group()
def delete() -> None:
    """Delete remote posts."""


@cli.group()
def show() -> None:
    """Show remote resources."""


@generate.command("file")
@click.option("-t", "--title", required=True, help="Title of the post")
@click.option("-T", "--team", "team_id", default=None, help="Team ID, omit for your own posts")
@click.pass_obj
def generate_file(obj: AppContext, title: str, team_id: Optional[str]) -> None:
    """Create a new local post file."""
    team = Team(active=True, id=team_id, name="") if team_id else None
    post = Post.new(title, team=team)
    try:
        path = post.save(obj.config.root_dir)
    except HANDLED_ERRORS as e:
        obj.fail(e, title, "generate")
        return

    obj.tracker.add_result(OperationResult(title=title, action="generated", success=True, path=path))
    click.echo(path)


@fetch.command("posts")
@click.option("-T", "--team", "team_id", default=None, help="Team ID, omit for your own posts")
@click.pass_obj
def fetch_posts_command(obj: AppContext, team_id: Optional[str]) -> None:
    """Fetch all posts and save them as local files."""
    try:
        team = obj.resolve_team(team_id)
        posts = fetch_posts(obj.client, team)
    except HANDLED_ERRORS as e:
        obj.fail(e, None, "fetch")
        return

    logger.info(f"Fetched {len(posts)} posts")

    with obj.tracker.create_progress_context() as progress:
        task = progress.add_task("Saving posts", total=len(posts))
        for post in posts:
            try:
                path = post.save(obj.config.root_dir)
            except HANDLED_ERRORS as e:
                obj.fail(e, post.title, "save")
                return
            obj.tracker.add_result(
                OperationResult(title=post.title, action="fetched", success=True, post_id=post.id, path=path)
            )
            progress.advance(task)

    obj.tracker.print_summary()


@fetch.command("post")
@click.option("-i", "--id", "post_id", required=True, help="ID of the post")
@click.option("-T", "--team", "team_id", default=None, help="Team ID, omit for your own posts")
@click.pass_obj
def fetch_post_command(obj: AppContext, post_id: str, team_id: Optional[str]) -> None:
    """Fetch a single post and save it as a local file."""
    try:
        team = obj.resolve_team(team_id)
        post = Post.fetch(obj.client, post_id, team)
        path = post.save(obj.config.root_dir)
    except HANDLED_ERRORS as e:
        obj.fail(e, post_id, "fetch")
        return

    obj.error_handler.log_success(post.title, "fetched", post.id, {"path": path})
    click.echo(path)


@create.command("post")
@click.option("-f", "--file", "path", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--tweet", is_flag=True, default=False, help="Announce the post on Twitter")
@click.option("--gist", is_flag=True, default=False, help="Export code blocks to GitHub Gist")
@click.pass_obj
def create_post_command(obj: AppContext, path: str, tweet: bool, gist: bool) -> None:
    """Create a remote post from a local file."""
    post = None
    try:
        post = Post.from_file(path)
        errors = post.validate()
        if errors:
            raise InvalidPostError(errors)
        post.create(obj.client, tweet=tweet, gist=gist)
        post.save(obj.config.root_dir)
    except HANDLED_ERRORS as e:
        obj.fail(e, post.title if post else path, "create")
        return

    obj.error_handler.log_success(post.title, "created", post.id, {"url": post.url})
    click.echo(post.url)


@update.command("post")
@click.option("-f", "--file", "path", required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def update_post_command(obj: AppContext, path: str) -> None:
    """Update a remote post from its local file."""
    post = None
    try:
        post = Post.from_file(path)
        errors = post.validate()
        if errors:
            raise InvalidPostError(errors)
        post.update(obj.client)
        post.save(obj.config.root_dir)
    except HANDLED_ERRORS as e:
        obj.fail(e, post.title if post else path, "update")
        return

    obj.error_handler.log_success(post.title, "updated", post.id)
    click.echo(post.url)


@delete.command("post")
@click.option("-f", "--file", "path", required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def delete_post_command(obj: AppContext, path: str) -> None:
    """Delete a remote post and its local file."""
    post = None
    try:
        post = Post.from_file(path)
        post.delete(obj.client)
    except HANDLED_ERRORS as e:
        obj.fail(e, post.title if post else path, "delete")
        return

    obj.error_handler.log_success(post.title, "deleted", post.id)
    click.echo(path)


@show.command("teams")
@click.pass_obj
def show_teams_command(obj: AppContext) -> None:
    """List the team workspaces you belong to."""
    try:
        teams = fetch_teams(obj.client)
    except HANDLED_ERRORS as e:
        obj.fail(e, None, "show teams")
        return

    table = Table(title="Teams", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Active", justify="center")
    for team in teams:
        table.add_row(team.id, team.name, "✅" if team.active else "-")
    obj.tracker.console.print(table)


def main() -> None:
    """Main entry point for the qiitasync CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
