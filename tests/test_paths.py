"""
Tests for the path helpers.
"""
import pytest

from image_sync.exceptions import NotFoundError
from image_sync.utils.paths import (
    cleanup,
    file_base,
    file_extension,
    file_name,
    file_path,
    find_ancestor_dir,
    find_dir,
    find_file,
    format_path,
    glob_paths,
)

from conftest import write_file


class TestPathStrings:
    """Test cases for the string-only path helpers."""

    def test_file_extension(self):
        assert file_extension("a/b/file.tar.gz") == "gz"
        assert file_extension("a/b/file") == "file"
        assert file_extension("lambda.zip") == "zip"

    def test_file_extension_is_case_sensitive(self):
        assert file_extension("dist/LAMBDA.ZIP") == "ZIP"

    def test_file_extension_ignores_dots_in_directories(self):
        assert file_extension("releases/v1.2/notes") == "notes"

    def test_file_path(self):
        assert file_path("a/b/c") == "a/b"
        assert file_path("c") == "c"
        assert file_path("/x") == ""

    def test_file_name(self):
        assert file_name("a/b/c.txt") == "c.txt"
        assert file_name("c.txt") == "c.txt"

    def test_file_base(self):
        assert file_base("a/b/file.tar.gz") == "file.tar"
        assert file_base("a/b/file") == "file"

    def test_format_path(self):
        assert format_path("builds", "123", "lambda.zip") == "builds/123/lambda.zip"


class TestFindAncestorDir:
    """Test cases for find_ancestor_dir."""

    def test_matches_directory_name(self, tmp_path):
        start = tmp_path / 'x' / 'repo' / 'sub' / 'dir'
        start.mkdir(parents=True)

        assert find_ancestor_dir('repo', start) == tmp_path / 'x' / 'repo'

    def test_matches_marker_file(self, tmp_path):
        root = tmp_path / 'x' / 'checkout'
        start = root / 'sub' / 'dir'
        start.mkdir(parents=True)
        write_file(root / 'repo')

        assert find_ancestor_dir('repo', start) == root

    def test_first_match_walking_upward_wins(self, tmp_path):
        outer = tmp_path / 'repo'
        inner = outer / 'nested'
        start = inner / 'dir'
        start.mkdir(parents=True)
        write_file(inner / 'repo')

        assert find_ancestor_dir('repo', start) == inner

    def test_start_dir_itself_can_match(self, tmp_path):
        start = tmp_path / 'repo'
        start.mkdir()

        assert find_ancestor_dir('repo', start) == start

    def test_marker_directory_inside_does_not_count(self, tmp_path):
        start = tmp_path / 'a' / 'b'
        (start / 'marker-only-dir').mkdir(parents=True)

        with pytest.raises(NotFoundError):
            find_ancestor_dir('marker-only-dir', start)

    def test_not_found_raises(self, tmp_path):
        start = tmp_path / 'a' / 'b'
        start.mkdir(parents=True)

        with pytest.raises(NotFoundError):
            find_ancestor_dir('no-such-marker-anywhere-8c1f', start)

    def test_defaults_to_current_directory(self, tmp_path, monkeypatch):
        start = tmp_path / 'proj' / 'deep'
        start.mkdir(parents=True)
        monkeypatch.chdir(start)

        assert find_ancestor_dir('proj') == tmp_path / 'proj'


class TestGlobSearch:
    """Test cases for the recursive glob helpers."""

    def test_find_dir_returns_parent_of_matching_file(self, tmp_path):
        write_file(tmp_path / 'app' / 'devops' / 'docker' / 'Dockerfile')

        assert find_dir(tmp_path, 'Dockerfile') == tmp_path / 'app' / 'devops' / 'docker'

    def test_find_dir_returns_matching_directory(self, tmp_path):
        (tmp_path / 'a' / 'dist').mkdir(parents=True)

        assert find_dir(tmp_path, 'dist') == tmp_path / 'a' / 'dist'

    def test_find_dir_checks_patterns_in_order(self, tmp_path):
        write_file(tmp_path / 'one' / 'first.txt')
        write_file(tmp_path / 'two' / 'second.txt')

        assert find_dir(tmp_path, 'second.txt', 'first.txt') == tmp_path / 'two'

    def test_find_dir_without_match_raises(self, tmp_path):
        with pytest.raises(NotFoundError):
            find_dir(tmp_path, 'missing')

    def test_find_dir_non_recursive(self, tmp_path):
        write_file(tmp_path / 'nested' / 'marker.txt')

        with pytest.raises(NotFoundError):
            find_dir(tmp_path, 'marker.txt', recursive=False)

    def test_hidden_paths_skipped_unless_requested(self, tmp_path):
        write_file(tmp_path / '.cache' / 'marker.txt')

        assert glob_paths(tmp_path, 'marker.txt') == []
        assert glob_paths(tmp_path, 'marker.txt', include_hidden=True) == [tmp_path / '.cache' / 'marker.txt']

    def test_find_file_first_existing(self, tmp_path):
        second = write_file(tmp_path / 'b' / 'config.json')

        found = find_file(str(tmp_path / 'missing.json'), str(tmp_path / '**' / 'config.json'))

        assert found == second

    def test_find_file_ignores_directories(self, tmp_path):
        (tmp_path / 'config.json').mkdir()

        with pytest.raises(NotFoundError):
            find_file(str(tmp_path / 'config.json'))


class TestCleanup:
    """Test cases for cleanup."""

    def test_removes_scratch_files_and_temp_dirs(self, tmp_path):
        write_file(tmp_path / 'composite_stack.json')
        write_file(tmp_path / 'sub' / 'STATUS.txt')
        write_file(tmp_path / 'stripped_template.json')
        write_file(tmp_path / 'ciphertext.bin')
        write_file(tmp_path / 'temp_list.txt')
        write_file(tmp_path / 'temp_dir' / 'temp_inner' / 'file.txt')
        keep = write_file(tmp_path / 'keep.json')

        removed = cleanup(tmp_path)

        assert removed > 0
        assert sorted(p.name for p in tmp_path.rglob('*')) == ['keep.json', 'sub']
        assert keep.exists()

    def test_nothing_to_remove(self, tmp_path):
        write_file(tmp_path / 'keep.json')

        assert cleanup(tmp_path) == 0
