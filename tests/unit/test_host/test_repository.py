# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
import requests
from fakes.fake_logger import FakeLogger

from debian2pve.core.steps import StepStatus
from debian2pve.host.repository import ProxmoxRepository, remove_enterprise_list, render_repo_list

KEY_URL = "https://enterprise.proxmox.com/debian/proxmox-release-bookworm.gpg"


def _response(content=b"-----KEY-----"):
    resp = Mock()
    resp.content = content
    resp.raise_for_status.return_value = None
    return resp


@pytest.mark.unit
class TestRepoList:
    def test_render(self):
        assert render_repo_list("bookworm") == (
            "deb [arch=amd64] http://download.proxmox.com/debian/pve bookworm pve-no-subscription\n"
        )

    def test_render_custom_mirror(self):
        assert render_repo_list("bullseye", "http://mirror.example/pve/") == (
            "deb [arch=amd64] http://mirror.example/pve bullseye pve-no-subscription\n"
        )

    def test_write_repo_list(self, tmp_path):
        repo = ProxmoxRepository(FakeLogger(), "bookworm", root=tmp_path)

        assert repo.write_repo_list().ok

        target = tmp_path / "etc/apt/sources.list.d/pve-install-repo.list"
        assert target.read_text(encoding="utf-8") == render_repo_list("bookworm")
        assert target.stat().st_mode & 0o777 == 0o644

    def test_write_repo_list_dry_run(self, tmp_path):
        r = ProxmoxRepository(FakeLogger(), "bookworm", root=tmp_path, dry_run=True).write_repo_list()

        assert r.status is StepStatus.SKIPPED
        assert not (tmp_path / "etc").exists()


@pytest.mark.unit
class TestEnterpriseList:
    def test_removed(self, tmp_path):
        p = tmp_path / "etc/apt/sources.list.d/pve-enterprise.list"
        p.parent.mkdir(parents=True)
        p.write_text("deb https://enterprise.proxmox.com/debian/pve bookworm pve-enterprise\n", encoding="utf-8")

        r = remove_enterprise_list(FakeLogger(), root=tmp_path)

        assert r.ok and r.detail == "removed"
        assert not p.exists()

    def test_absent(self, tmp_path):
        r = remove_enterprise_list(FakeLogger(), root=tmp_path)
        assert r.ok and r.detail == "not present"

    def test_dry_run_keeps_file(self, tmp_path):
        p = tmp_path / "etc/apt/sources.list.d/pve-enterprise.list"
        p.parent.mkdir(parents=True)
        p.write_text("x", encoding="utf-8")

        r = remove_enterprise_list(FakeLogger(), root=tmp_path, dry_run=True)

        assert r.status is StepStatus.SKIPPED
        assert p.exists()


@pytest.mark.unit
class TestSigningKey:
    def test_key_url_uses_codename(self):
        assert ProxmoxRepository(FakeLogger(), "bookworm").key_url == KEY_URL

    def test_install(self, tmp_path):
        repo = ProxmoxRepository(FakeLogger(), "bookworm", root=tmp_path)

        with patch("debian2pve.host.repository.requests.get", return_value=_response()) as get:
            r = repo.install_signing_key()

        assert r.ok
        get.assert_called_once_with(KEY_URL, timeout=30.0)
        key = tmp_path / "etc/apt/trusted.gpg.d/proxmox-release-bookworm.gpg"
        assert key.read_bytes() == b"-----KEY-----"
        assert key.stat().st_mode & 0o777 == 0o644

    def test_transient_failure_is_retried(self, tmp_path):
        sleeps = []
        repo = ProxmoxRepository(FakeLogger(), "bookworm", root=tmp_path, sleep=sleeps.append)
        side = [requests.ConnectionError("reset"), _response()]

        with patch("debian2pve.host.repository.requests.get", side_effect=side) as get:
            assert repo.install_signing_key().ok

        assert get.call_count == 2
        assert len(sleeps) == 1

    def test_persistent_failure_is_a_warning(self, tmp_path):
        sleeps = []
        repo = ProxmoxRepository(FakeLogger(), "bookworm", root=tmp_path, sleep=sleeps.append)

        with patch(
            "debian2pve.host.repository.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        ) as get:
            r = repo.install_signing_key()

        assert r.status is StepStatus.WARNING
        assert KEY_URL in r.detail
        assert get.call_count == 3
        assert len(sleeps) == 2
        assert not repo.key_path.exists()

    def test_http_error_is_a_warning(self, tmp_path):
        resp = _response()
        resp.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        repo = ProxmoxRepository(FakeLogger(), "bookworm", root=tmp_path, sleep=lambda _s: None)

        with patch("debian2pve.host.repository.requests.get", return_value=resp):
            assert repo.install_signing_key().status is StepStatus.WARNING

    def test_dry_run_fetches_nothing(self, tmp_path):
        repo = ProxmoxRepository(FakeLogger(), "bookworm", root=tmp_path, dry_run=True)

        with patch("debian2pve.host.repository.requests.get") as get:
            r = repo.install_signing_key()

        get.assert_not_called()
        assert r.status is StepStatus.SKIPPED
