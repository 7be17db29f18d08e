from __future__ import annotations

import pytest

from repo_graph.domain.entities import Repository, TreeEntry
from tests._fixtures.fake_remote import FakeProject, FakeRemoteClient


def _repo(id_: str, name: str) -> Repository:
    return Repository(
        id=id_,
        url=f"https://gitlab.example.com/group/{name}.git",
        name=name,
        description=f"The {name} project",
    )

@pytest.fixture
def remote() -> FakeRemoteClient:
    """Three projects; ``1`` has a ``main`` branch and a ``dev`` branch."""
    client = FakeRemoteClient(
        projects=[
            FakeProject(_repo("1", "api"), language="go", member=True),
            FakeProject(_repo("2", "web"), language="typescript", member=True),
            FakeProject(_repo("3", "tools"), language="go", member=False),
        ],
    )
    client.trees[("1", "main")] = [
        TreeEntry("README.md", "blob"),
        TreeEntry("src", "tree"),
        TreeEntry("src/main.go", "blob"),
        TreeEntry("src/util", "tree"),
        TreeEntry("src/util/strings.go", "blob"),
        TreeEntry("vendor-lib", "commit"),
    ]
    client.trees[("1", "dev")] = [TreeEntry("NOTES.txt", "blob")]
    client.blobs.update(
        {
            ("1", "main", "README.md"): b"# api\n",
            ("1", "main", "src/main.go"): b"package main\n",
            ("1", "main", "src/util/strings.go"): b"package util\n",
            ("1", "dev", "NOTES.txt"): b"wip\n",
        }
    )
    return client
