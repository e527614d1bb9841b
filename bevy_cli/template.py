"""Generating new projects from templates."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import requests

from bevy_cli.cargo_args import cargo_program
from bevy_cli.command import CommandExt

TEMPLATE_ORG = "TheBevyFlock"
TEMPLATE_PREFIX = "bevy_new_"

_GITHUB_SHORTFORM = re.compile(r"^[a-zA-Z0-9_.\-]+/[a-zA-Z0-9_\-.]+$")


@dataclass(frozen=True)
class Repository:
    """A GitHub repository; `html_url` is the URL used for cloning."""

    html_url: str
    name: str


@dataclass(frozen=True)
class TemplatePath:
    """Where a template comes from."""

    git: str
    branch: str


def generate_template(name: str, template: str, branch: str) -> Path:
    """Generate a new project called `name` from a template; return its path."""
    path = template_path(template, branch)
    (
        CommandExt(cargo_program())
        .args(
            [
                "generate",
                "--git",
                path.git,
                "--branch",
                path.branch,
                "--name",
                name,
                # prevent conversion to kebab-case
                "--force",
            ]
        )
        .ensure_status()
    )
    return Path.cwd() / name


def template_path(template: str, branch: str) -> TemplatePath:
    """Resolve a builtin shortcut, an org/repo shortform or a URL."""
    git = expand_builtin(template) or expand_github_shortform(template) or template
    return TemplatePath(git=git, branch=branch)


def expand_builtin(template: str) -> str | None:
    """The URL of a builtin `bevy_new_` template matching `template`, if any."""
    for repository in fetch_template_repositories(TEMPLATE_ORG, TEMPLATE_PREFIX):
        if repository.name[len(TEMPLATE_PREFIX):] == template:
            return repository.html_url
    return None


def expand_github_shortform(template: str) -> str | None:
    """Expand `org/repo` into a GitHub URL."""
    if _GITHUB_SHORTFORM.match(template):
        return f"https://github.com/{template}.git"
    return None


def fetch_template_repositories(org: str, prefix: str) -> list[Repository]:
    """The repositories of a GitHub org whose names start with `prefix`."""
    response = requests.get(
        f"https://api.github.com/orgs/{org}/repos",
        headers={"User-Agent": "bevy_cli"},
        timeout=30,
    )
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, list):
        raise ValueError("unexpected response when listing template repositories")
    repositories = [Repository(html_url=item["html_url"], name=item["name"]) for item in data]
    return [repo for repo in repositories if repo.name.startswith(prefix)]