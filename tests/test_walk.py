"""Tests for the post-order directory walk."""

import os

import pytest

from fs2utf8.model import EntryKind
from fs2utf8.walk import MAX_DEPTH_CAP, descriptor_depth_limit, iter_entries


def build_tree(root):
    """root/{a.txt, sub/{b.txt, deeper/{c.txt}}, z.txt}"""
    os.makedirs(os.path.join(root, b"sub", b"deeper"))
    for rel in (b"a.txt", b"z.txt", b"sub/b.txt", b"sub/deeper/c.txt"):
        with open(os.path.join(root, rel), "wb"):
            pass


@pytest.fixture
def broot(tmp_path):
    root = os.path.join(os.fsencode(tmp_path), b"root")
    os.mkdir(root)
    return root


class TestPostOrder:
    def test_children_before_parents(self, broot):
        build_tree(broot)
        paths = [e.path for e in iter_entries(broot)]
        assert paths[-1] == broot
        for i, path in enumerate(paths):
            later = paths[i + 1:]
            assert not any(p.startswith(path + b"/") for p in later), path

    def test_visits_everything_once(self, broot):
        build_tree(broot)
        names = sorted(e.name for e in iter_entries(broot))
        assert names == sorted([b"root", b"a.txt", b"z.txt", b"sub", b"b.txt", b"deeper", b"c.txt"])

    def test_depth_and_kind(self, broot):
        build_tree(broot)
        by_name = {e.name: e for e in iter_entries(broot)}
        assert by_name[b"root"].depth == 0
        assert by_name[b"sub"].depth == 1
        assert by_name[b"c.txt"].depth == 3
        assert by_name[b"deeper"].kind is EntryKind.DIRECTORY
        assert by_name[b"a.txt"].kind is EntryKind.FILE
        assert by_name[b"c.txt"].parent == os.path.join(broot, b"sub", b"deeper")

    def test_str_root_accepted(self, broot):
        build_tree(broot)
        assert len(list(iter_entries(os.fsdecode(broot)))) == 7

    def test_renames_during_walk_do_not_break_it(self, broot):
        build_tree(broot)
        seen = []
        for entry in iter_entries(broot):
            seen.append(entry.name)
            if entry.depth > 0:
                os.rename(entry.path, entry.path + b"_x")
        assert len(seen) == 7
        assert os.path.exists(os.path.join(broot, b"sub_x", b"deeper_x", b"c.txt_x"))


class TestSpecialEntries:
    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
    def test_symlinks_not_followed(self, broot):
        build_tree(broot)
        os.symlink(os.path.join(broot, b"sub"), os.path.join(broot, b"link"))
        entries = list(iter_entries(broot))
        link = [e for e in entries if e.name == b"link"]
        assert len(link) == 1
        assert link[0].kind is EntryKind.SYMLINK
        assert not any(e.parent.startswith(os.path.join(broot, b"link")) for e in entries)

    def test_single_file_root(self, broot):
        path = os.path.join(broot, b"only.txt")
        with open(path, "wb"):
            pass
        entries = list(iter_entries(path))
        assert len(entries) == 1
        assert entries[0].parent == broot
        assert entries[0].name == b"only.txt"
        assert entries[0].kind is EntryKind.FILE

    def test_trailing_separator_on_root(self, broot):
        entries = list(iter_entries(broot + b"/"))
        assert entries[-1].name == b"root"

    def test_missing_root_raises(self, broot):
        with pytest.raises(FileNotFoundError):
            list(iter_entries(os.path.join(broot, b"missing")))

    @pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0,
                        reason="root can read any directory")
    def test_unreadable_directory(self, broot):
        locked = os.path.join(broot, b"locked")
        os.mkdir(locked)
        os.chmod(locked, 0)
        try:
            entries = list(iter_entries(broot))
        finally:
            os.chmod(locked, 0o755)
        kinds = {e.name: e.kind for e in entries}
        assert kinds[b"locked"] is EntryKind.DIRECTORY_UNREADABLE


class TestDepthLimit:
    def test_limit_not_entered(self, broot):
        build_tree(broot)
        names = {e.name for e in iter_entries(broot, max_depth=1)}
        assert b"sub" in names
        assert b"b.txt" not in names
        assert b"a.txt" in names

    def test_descriptor_budget(self):
        limit = descriptor_depth_limit()
        assert 1 <= limit <= MAX_DEPTH_CAP
