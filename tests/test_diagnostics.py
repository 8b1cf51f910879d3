"""Tests for verbose diagnostics output."""

from pathlib import Path

import pytest

from izanami_cli.models.resolved import ResolvedConfig
from izanami_cli.resolution import load_config_with_profile, log_diagnostics
from izanami_cli.resolution.diagnostics import (
    describe_authentication,
    log_authentication_mode,
    log_effective_config,
    log_environment_variables,
)


def err_lines(ctx) -> list[str]:
    return ctx.err_console.file.getvalue().splitlines()


class TestLogEffectiveConfig:
    """Tests for the per-field effective configuration listing."""

    def test_sandbox_scenario(self, make_ctx, sandbox_config: Path) -> None:
        """Profile, file and environment values are each attributed correctly."""
        ctx = make_ctx(environ={"IZ_CONTEXT": "staging/eu-west"})

        log_effective_config(ctx, load_config_with_profile(ctx))

        lines = err_lines(ctx)
        assert "[verbose] Config: leader-url=http://sandbox.example.com (source: profile)" in lines
        assert "[verbose] Config: tenant=sandbox-tenant (source: profile)" in lines
        assert "[verbose] Config: context=staging/eu-west (source: env)" in lines
        assert "[verbose] Config: timeout=45 (source: file)" in lines

    def test_empty_fields_are_skipped(self, make_ctx) -> None:
        ctx = make_ctx()

        log_effective_config(ctx, load_config_with_profile(ctx))

        output = ctx.err_console.file.getvalue()
        assert "leader-url=" not in output
        assert "tenant=" not in output

    def test_zero_timeout_is_shown(self, make_ctx, write_config) -> None:
        write_config({"timeout": 0})
        ctx = make_ctx()

        log_effective_config(ctx, load_config_with_profile(ctx))

        assert "[verbose] Config: timeout=0 (source: file)" in err_lines(ctx)

    def test_insecure_false_is_hidden(self, make_ctx) -> None:
        ctx = make_ctx()

        log_effective_config(ctx, load_config_with_profile(ctx))

        assert "insecure" not in ctx.err_console.file.getvalue()

    def test_insecure_true_is_shown(self, make_ctx) -> None:
        ctx = make_ctx(flags_set={"insecure"}, insecure=True)

        log_effective_config(ctx, load_config_with_profile(ctx))

        assert "[verbose] Config: insecure=true (source: flag)" in err_lines(ctx)

    @pytest.mark.parametrize("secret", ["s", "a-much-longer-secret-value", "<redacted>"])
    def test_client_secret_is_redacted(self, make_ctx, secret: str) -> None:
        ctx = make_ctx(environ={"IZ_CLIENT_ID": "my-id", "IZ_CLIENT_SECRET": secret})

        log_effective_config(ctx, load_config_with_profile(ctx))

        lines = err_lines(ctx)
        assert "[verbose] Config: client-id=my-id (source: env)" in lines
        secret_lines = [line for line in lines if "client-secret=" in line]
        assert secret_lines == ["[verbose] Config: client-secret=<redacted> (source: env)"]


class TestLogEnvironmentVariables:
    """Tests for the IZ_* environment listing."""

    def test_no_variables(self, make_ctx) -> None:
        ctx = make_ctx(environ={"PATH": "/usr/bin"})

        log_environment_variables(ctx)

        assert err_lines(ctx) == ["[verbose] Environment: no IZ_* variables set"]

    def test_sorted_and_redacted(self, make_ctx) -> None:
        ctx = make_ctx(
            environ={
                "IZ_TENANT": "acme",
                "IZ_CLIENT_SECRET": "hunter2",
                "IZ_JWT_TOKEN": "jwt",
                "IZ_CONTEXT": "prod",
                "HOME": "/home/me",
            }
        )

        log_environment_variables(ctx)

        assert err_lines(ctx) == [
            "[verbose] Environment: IZ_CLIENT_SECRET=<redacted>",
            "[verbose] Environment: IZ_CONTEXT=prod",
            "[verbose] Environment: IZ_JWT_TOKEN=<redacted>",
            "[verbose] Environment: IZ_TENANT=acme",
        ]


class TestAuthenticationMode:
    """Tests for the authentication mode classification."""

    def test_fresh_defaults(self, make_ctx) -> None:
        ctx = make_ctx()

        log_authentication_mode(ctx, load_config_with_profile(ctx).config)

        assert err_lines(ctx) == [
            "[verbose] Authentication - Admin operations: none, Feature checks: none"
        ]

    def test_pat_beats_session(self) -> None:
        config = ResolvedConfig(personal_access_token="pat", jwt_token="jwt")

        admin, _ = describe_authentication(config)

        assert admin == "Personal Access Token (PAT)"

    def test_session_token(self) -> None:
        admin, _ = describe_authentication(ResolvedConfig(jwt_token="jwt"))

        assert admin == "JWT Cookie (session)"

    def test_client_key_needs_both_halves(self) -> None:
        assert describe_authentication(ResolvedConfig(client_id="id"))[1] == "none"
        assert (
            describe_authentication(ResolvedConfig(client_id="id", client_secret="s"))[1]
            == "Client API Key"
        )


class TestLogDiagnostics:
    """Tests for the full verbose report."""

    def test_profile_line_from_active_profile(self, make_ctx, sandbox_config: Path) -> None:
        ctx = make_ctx(verbose=True)

        log_diagnostics(ctx, load_config_with_profile(ctx))

        lines = err_lines(ctx)
        assert lines[0] == "[verbose] Using profile: sandbox (active profile)"
        assert lines[-1].startswith("[verbose] Authentication")

    def test_profile_line_from_flag(self, make_ctx, sandbox_config: Path) -> None:
        ctx = make_ctx(verbose=True, flags_set={"profile"}, profile="sandbox")

        log_diagnostics(ctx, load_config_with_profile(ctx))

        assert err_lines(ctx)[0] == "[verbose] Using profile: sandbox (from --profile flag)"

    def test_no_stdout_output(self, make_ctx, sandbox_config: Path) -> None:
        ctx = make_ctx(verbose=True)

        log_diagnostics(ctx, load_config_with_profile(ctx))

        assert ctx.console.file.getvalue() == ""
