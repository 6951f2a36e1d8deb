"""Shared fixtures and test doubles."""

import pytest

from add_remote.config import Settings
from add_remote.core.entities import LocalRemote, LocalRemoteTable
from add_remote.hosting.client import Page
from add_remote.remotes.url import parse_remote_url


class FakeApiClient:
    """Serves canned pages by URL and records every request."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []

    def get(self, url, credential=None):
        self.requests.append((url, credential))
        if url not in self.routes:
            raise AssertionError(f"Unexpected request: {url}")
        route = self.routes[url]
        return route if isinstance(route, Page) else Page(route)


class FakeGit:
    """Records git operations and returns canned output."""

    def __init__(self, remotes_before="", remotes_after="", branches=None, config=None):
        self.calls = []
        self._verbose = [remotes_before, remotes_after]
        self.branches = branches or {}
        self.config = dict(config or {})

    def remotes_verbose(self):
        self.calls.append(("remote -v",))
        return self._verbose.pop(0) if len(self._verbose) > 1 else self._verbose[0]

    def add_remote(self, alias, url):
        self.calls.append(("remote add", alias, url))

    def set_push_url(self, alias, url):
        self.calls.append(("remote set-url --push", alias, url))

    def fetch(self, alias):
        self.calls.append(("fetch", alias))
        return ""

    def list_branches(self, alias):
        self.calls.append(("branch --list", alias))
        return self.branches.get(alias, "")

    def get_config(self, key):
        return self.config.get(key)

    def get_config_regexp(self, pattern):
        return {key: value for key, value in self.config.items() if key.lower().startswith("add-remote.forkalias.")}

    def set_global_config(self, key, value):
        self.calls.append(("config --global", key, value))
        self.config[key] = value


def local_remote(alias, url):
    endpoint = parse_remote_url(url)
    return LocalRemote(owner=endpoint.owner, name=endpoint.name, alias=alias, endpoint=endpoint)


def remote_table(*pairs):
    return LocalRemoteTable([local_remote(alias, url) for alias, url in pairs])


@pytest.fixture
def settings():
    return Settings(gitlab_token="glpat-test", github_token="me:token")
