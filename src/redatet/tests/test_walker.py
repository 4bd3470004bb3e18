"""Tests for expanding files and folders"""

import pytest

from redatet.core.events import EventKind
from redatet.core.models import Totals
from redatet.core.runner import CancelToken
from redatet.core.walker import FileWalker, is_hidden, sort_entries


@pytest.fixture
def tree(tmp_path):
    """
    tmp_path/
        b.jpg  A.jpg  c.JPG  .hidden.jpg
        sub/        d.jpg
        .secret/    e.jpg
    """
    for name in ("b.jpg", "A.jpg", "c.JPG", ".hidden.jpg"):
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "d.jpg").write_bytes(b"x")
    (tmp_path / ".secret").mkdir()
    (tmp_path / ".secret" / "e.jpg").write_bytes(b"x")
    return tmp_path


def walk_names(tree, **kwargs):
    totals = Totals()
    events = []
    walker = FileWalker(totals, on_event=events.append, **kwargs)
    names = [record.name for record in walker.walk([tree])]
    return names, totals, events


class TestOrdering:
    """测试处理顺序"""

    def test_files_before_folders_case_insensitive(self, tree):
        names, _, _ = walk_names(tree, recursive=True)
        assert names == ["A.jpg", "b.jpg", "c.JPG", "d.jpg"]

    def test_sort_entries(self, tmp_path):
        (tmp_path / "Z").mkdir()
        for name in ("b", "a", "B"):
            (tmp_path / name).write_bytes(b"")
        names = [p.name for p in sort_entries(tmp_path.iterdir())]
        assert names == ["a", "B", "b", "Z"]


class TestFiltering:
    """测试隐藏文件和子文件夹"""

    def test_defaults_skip_hidden_and_subfolders(self, tree):
        names, totals, events = walk_names(tree)
        assert names == ["A.jpg", "b.jpg", "c.JPG"]
        assert totals.files == 3
        assert totals.folders == 1
        comments = [e.message for e in events if e.kind is EventKind.COMMENT]
        assert ".hidden.jpg - 忽略隐藏文件或子文件夹" in comments
        assert "sub - 忽略子文件夹" in comments

    def test_include_hidden(self, tree):
        names, _, _ = walk_names(tree, include_hidden=True, recursive=True)
        assert names == [".hidden.jpg", "A.jpg", "b.jpg", "c.JPG", "e.jpg", "d.jpg"]

    def test_recursive_counts_folders(self, tree):
        names, totals, events = walk_names(tree, recursive=True)
        assert totals.folders == 2
        assert totals.files == 4
        notices = [e.message for e in events if e.kind is EventKind.NOTICE]
        assert notices == [f"搜索文件夹 {tree.resolve()}", f"搜索文件夹 {(tree / 'sub').resolve()}"]

    def test_hidden_file_given_directly_is_processed(self, tree):
        totals = Totals()
        records = list(FileWalker(totals).walk([tree / ".hidden.jpg"]))
        assert [r.name for r in records] == [".hidden.jpg"]
        assert totals.files == 1
        assert totals.folders == 0

    def test_is_hidden(self, tree):
        assert is_hidden(tree / ".hidden.jpg")
        assert not is_hidden(tree / "A.jpg")


class TestErrors:
    def test_missing_path(self, tmp_path):
        totals = Totals()
        events = []
        records = list(FileWalker(totals, on_event=events.append).walk([tmp_path / "nope"]))
        assert records == []
        assert totals.error == 1
        assert events[0].message == "nope - 不是文件或文件夹"


class TestCancel:
    def test_stops_between_entries(self, tree):
        token = CancelToken()
        walker = FileWalker(Totals(), recursive=True, cancel=token)
        walk = walker.walk([tree])
        first = next(walk)
        token.cancel()
        assert first.name == "A.jpg"
        assert list(walk) == []

    def test_cancelled_before_start(self, tree):
        token = CancelToken()
        token.cancel()
        assert list(FileWalker(Totals(), cancel=token).walk([tree])) == []

    def test_cancelled_file_not_counted(self, tree):
        """测试取消后刚轮到的文件既不产出也不计数"""

        class FlipToken:
            def __init__(self):
                self.checks = 0

            @property
            def cancelled(self):
                self.checks += 1
                return self.checks > 1

        totals = Totals()
        records = list(FileWalker(totals, cancel=FlipToken()).walk([tree / "A.jpg"]))
        assert records == []
        assert totals.files == 0
