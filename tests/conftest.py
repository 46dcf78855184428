"""Test configuration and fixtures"""

import pytest

from fakes import FakeDownloader, FakeSession

from spotrip.models.config import DownloadConfig


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def downloader():
    return FakeDownloader()


@pytest.fixture
def config(tmp_path):
    return DownloadConfig(output_dir=str(tmp_path / "downloads"))
