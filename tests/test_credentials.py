"""Tests for client credential and worker resolution."""

import pytest

from izanami_cli.exceptions import NotFoundError
from izanami_cli.models.config import ProjectClientKeys, TenantClientKeys, WorkerConfig
from izanami_cli.models.enums import WorkerSource
from izanami_cli.models.resolved import ResolvedConfig
from izanami_cli.resolution import (
    apply_worker,
    resolve_client_credentials,
    resolve_credentials_from_keys,
    resolve_worker,
)


@pytest.fixture
def store() -> dict[str, TenantClientKeys]:
    """Client-key store with a tenant-level pair and two project pairs."""
    return {
        "acme": TenantClientKeys(
            client_id="tenant-id",
            client_secret="tenant-secret",
            projects={
                "web": ProjectClientKeys(client_id="web-id", client_secret="web-secret"),
                "api": ProjectClientKeys(client_id="api-id", client_secret="api-secret"),
            },
        )
    }


class TestResolveCredentialsFromKeys:
    """Tests for the tenant -> project hierarchy lookup."""

    def test_project_beats_tenant(self, store) -> None:
        assert resolve_credentials_from_keys(store, "acme", ["web"]) == ("web-id", "web-secret")

    def test_first_matching_project_wins(self, store) -> None:
        """Projects are tried in the order the caller gives them."""
        assert resolve_credentials_from_keys(store, "acme", ["missing", "api", "web"]) == (
            "api-id",
            "api-secret",
        )

    def test_tenant_fallback(self, store) -> None:
        assert resolve_credentials_from_keys(store, "acme", ["missing"]) == (
            "tenant-id",
            "tenant-secret",
        )
        assert resolve_credentials_from_keys(store, "acme") == ("tenant-id", "tenant-secret")

    def test_unknown_tenant(self, store) -> None:
        assert resolve_credentials_from_keys(store, "other", ["web"]) == ("", "")

    def test_no_tenant(self, store) -> None:
        assert resolve_credentials_from_keys(store, "", ["web"]) == ("", "")

    def test_incomplete_project_pair_is_skipped(self) -> None:
        store = {
            "acme": TenantClientKeys(
                client_id="tenant-id",
                client_secret="tenant-secret",
                projects={"web": ProjectClientKeys(client_id="web-id")},
            )
        }
        assert resolve_credentials_from_keys(store, "acme", ["web"]) == (
            "tenant-id",
            "tenant-secret",
        )


class TestResolveClientCredentials:
    """Tests for the full client credential precedence."""

    def test_flags_win(self, make_ctx, store) -> None:
        config = ResolvedConfig(tenant="acme", client_id="env-id", client_secret="env-secret")
        config.client_keys = store

        resolve_client_credentials(
            make_ctx(), config, flag_client_id="flag-id", flag_client_secret="flag-secret"
        )

        assert (config.client_id, config.client_secret) == ("flag-id", "flag-secret")

    def test_partial_flag_applies_field_by_field(self, make_ctx) -> None:
        config = ResolvedConfig(client_id="env-id", client_secret="env-secret")

        resolve_client_credentials(make_ctx(), config, flag_client_secret="flag-secret")

        assert (config.client_id, config.client_secret) == ("env-id", "flag-secret")

    def test_existing_values_untouched(self, make_ctx, store) -> None:
        config = ResolvedConfig(tenant="acme", client_id="env-id", client_secret="env-secret")
        config.client_keys = store

        resolve_client_credentials(make_ctx(), config, projects=["web"])

        assert (config.client_id, config.client_secret) == ("env-id", "env-secret")

    def test_hierarchy_with_projects(self, make_ctx, store) -> None:
        config = ResolvedConfig(tenant="acme")
        config.client_keys = store

        resolve_client_credentials(make_ctx(), config, projects=["web"])

        assert (config.client_id, config.client_secret) == ("web-id", "web-secret")

    def test_worker_keys_replace_profile_store(self, make_ctx, store) -> None:
        config = ResolvedConfig(tenant="acme")
        config.client_keys = store
        worker_keys = {"acme": TenantClientKeys(client_id="w-id", client_secret="w-secret")}

        resolve_client_credentials(make_ctx(), config, worker_client_keys=worker_keys)

        assert (config.client_id, config.client_secret) == ("w-id", "w-secret")

    def test_nothing_resolves_is_not_an_error(self, make_ctx) -> None:
        config = ResolvedConfig(tenant="acme")

        resolve_client_credentials(make_ctx(), config, projects=["web"])

        assert (config.client_id, config.client_secret) == ("", "")

    def test_verbose_line_names_tenant_and_projects(self, make_ctx, store) -> None:
        ctx = make_ctx()
        config = ResolvedConfig(tenant="acme", verbose=True)
        config.client_keys = store

        resolve_client_credentials(ctx, config, projects=["web"])

        output = ctx.err_console.file.getvalue()
        assert "tenant: acme" in output
        assert "web" in output

    def test_verbose_line_tenant_only(self, make_ctx, store) -> None:
        ctx = make_ctx()
        config = ResolvedConfig(tenant="acme", verbose=True)
        config.client_keys = store

        resolve_client_credentials(ctx, config)

        assert "Using client credentials from config (tenant: acme)" in (
            ctx.err_console.file.getvalue()
        )

    def test_quiet_without_verbose(self, make_ctx, store) -> None:
        ctx = make_ctx()
        config = ResolvedConfig(tenant="acme")
        config.client_keys = store

        resolve_client_credentials(ctx, config)

        assert ctx.err_console.file.getvalue() == ""

    def test_client_base_url_flag(self, make_ctx) -> None:
        config = ResolvedConfig(leader_url="http://leader")

        resolve_client_credentials(make_ctx(), config, flag_client_base_url="http://client")

        assert config.get_client_url() == "http://client"


class TestResolveWorker:
    """Tests for worker endpoint selection."""

    @pytest.fixture
    def workers(self) -> dict[str, WorkerConfig]:
        return {
            "eu-west": WorkerConfig(
                url="http://eu.example.com",
                client_keys={"acme": TenantClientKeys(client_id="eu", client_secret="s")},
            ),
            "us-east": WorkerConfig(url="http://us.example.com"),
        }

    def test_flag_selects_worker(self, workers) -> None:
        worker = resolve_worker("us-east", workers, "eu-west")

        assert worker.source == WorkerSource.FLAG
        assert worker.url == "http://us.example.com"
        assert worker.name == "us-east"

    def test_unknown_flag_fails_with_available_names(self, workers) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            resolve_worker("ap-south", workers, "")

        message = str(exc_info.value)
        assert "worker 'ap-south' not found" in message
        assert "eu-west, us-east" in message

    def test_unknown_flag_without_workers(self) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            resolve_worker("ap-south", {}, "")

        assert "no workers configured" in str(exc_info.value)

    def test_default_ignored_without_worker_awareness(self, workers) -> None:
        """Without opting in, the leader URL is used even with a default worker."""
        worker = resolve_worker("", workers, "eu-west", {"IZ_WORKER": "us-east"})

        assert worker.is_standalone
        assert worker.url == ""

    def test_env_worker_name(self, workers) -> None:
        worker = resolve_worker(
            "", workers, "eu-west", {"IZ_WORKER": "us-east"}, worker_aware=True
        )

        assert worker.source == WorkerSource.ENV_NAME
        assert worker.name == "us-east"

    def test_env_worker_name_must_exist(self, workers) -> None:
        with pytest.raises(NotFoundError):
            resolve_worker("", workers, "", {"IZ_WORKER": "nope"}, worker_aware=True)

    def test_env_worker_url(self, workers) -> None:
        worker = resolve_worker(
            "", workers, "eu-west", {"IZ_WORKER_URL": "http://direct"}, worker_aware=True
        )

        assert worker.source == WorkerSource.ENV_URL
        assert worker.url == "http://direct"
        assert worker.name == ""

    def test_default_worker(self, workers) -> None:
        worker = resolve_worker("", workers, "eu-west", {}, worker_aware=True)

        assert worker.source == WorkerSource.DEFAULT
        assert worker.client_keys["acme"].client_id == "eu"

    def test_dangling_default_warns_and_falls_back(self, workers) -> None:
        warnings: list[str] = []

        worker = resolve_worker(
            "", workers, "gone", {}, warn=warnings.append, worker_aware=True
        )

        assert worker.is_standalone
        assert len(warnings) == 1
        assert "default-worker 'gone' not found" in warnings[0]
        assert "eu-west, us-east" in warnings[0]

    def test_apply_worker(self) -> None:
        config = ResolvedConfig(leader_url="http://leader")

        apply_worker(config, resolve_worker("", {}, ""))
        assert config.get_worker_url() == "http://leader"

        apply_worker(
            config,
            resolve_worker("w", {"w": WorkerConfig(url="http://worker")}, ""),
        )
        assert config.get_worker_url() == "http://worker"
        assert config.worker_name == "w"
