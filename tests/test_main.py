"""
Tests for the command line entry point.
"""
import sys
from unittest.mock import patch

import pytest
from loguru import logger

from image_sync import main as cli
from image_sync.exceptions import StagingError
from image_sync.models.data_models import SyncResult

from conftest import write_file


@pytest.fixture(autouse=True)
def work_dir(tmp_path, monkeypatch):
    monkeypatch.setenv('WORK_DIR', str(tmp_path))
    monkeypatch.setenv('AWS_REGION', 'eu-west-1')
    monkeypatch.delenv('GENERATION_DEBUG', raising=False)
    monkeypatch.delenv('LOG_FILE', raising=False)
    yield tmp_path
    # main() swaps the sinks; restore a plain stderr sink for later tests
    logger.remove()
    logger.add(sys.stderr)


class TestSyncCommand:
    """Test cases for the sync command."""

    def test_options_forwarded_in_order(self):
        with patch.object(cli.BucketSyncer, 'sync', return_value=SyncResult('s3://b/p/')) as mock_sync:
            status = cli.main(['sync', '-b', 'b', '-p', 'p', '--delete', '--dryrun',
                               '--exclude', '*', '--include', '*.html', 'a.txt', 'b.zip'])

        assert status == 0
        mock_sync.assert_called_once_with(
            'eu-west-1', 'b', 'p', ['a.txt', 'b.zip'],
            ['--delete', '--dryrun', '--exclude', '*', '--include', '*.html']
        )

    def test_region_flag_overrides_environment(self):
        with patch.object(cli.BucketSyncer, 'sync', return_value=SyncResult('s3://b/')) as mock_sync:
            cli.main(['sync', '-r', 'us-east-2', '-b', 'b', 'a.txt'])

        assert mock_sync.call_args.args[0] == 'us-east-2'

    def test_failure_exits_non_zero(self):
        with patch.object(cli.BucketSyncer, 'sync', side_effect=StagingError('missing')):
            assert cli.main(['sync', '-b', 'b', 'a.txt']) == 1

    def test_missing_input_file_fails_end_to_end(self, tmp_path):
        assert cli.main(['sync', '-b', 'b', str(tmp_path / 'missing.txt')]) == 1


class TestOtherCommands:
    """Test cases for the remaining commands."""

    def test_delete_tree_dry_run(self):
        with patch.object(cli.TreeDeleter, 'delete_tree', return_value=SyncResult('s3://b/p/')) as mock_delete:
            status = cli.main(['delete-tree', '-b', 'b', '-p', 'builds/123', '--dryrun'])

        assert status == 0
        mock_delete.assert_called_once_with('eu-west-1', 'b', 'builds/123', ['--dryrun'])

    def test_find_ancestor_prints_directory(self, tmp_path, capsys):
        start = tmp_path / 'repo' / 'sub'
        start.mkdir(parents=True)

        status = cli.main(['find-ancestor', 'repo', str(start)])

        assert status == 0
        assert capsys.readouterr().out.strip() == str(tmp_path / 'repo')

    def test_find_ancestor_not_found(self, tmp_path):
        assert cli.main(['find-ancestor', 'no-such-marker-5e2a', str(tmp_path)]) == 1

    def test_cleanup(self, tmp_path):
        write_file(tmp_path / 'temp_scratch.txt')

        assert cli.main(['cleanup', str(tmp_path)]) == 0
        assert not (tmp_path / 'temp_scratch.txt').exists()

    def test_manage_images_without_configuration_fails(self, monkeypatch):
        for name in ('DEPLOYMENT_UNIT_LIST', 'CODE_COMMIT_LIST', 'IMAGE_FORMATS_LIST'):
            monkeypatch.delenv(name, raising=False)

        assert cli.main(['manage-images']) == 1

    def test_unknown_command_exits_with_usage_error(self):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(['bogus'])

        assert excinfo.value.code == 2
