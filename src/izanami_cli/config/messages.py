"""UI messages and strings for izanami-cli.

This module consolidates all user-facing messages including:
- Success/error/info messages
- Verbose diagnostics line formats
- Interactive prompts
"""

# =============================================================================
# Project Metadata
# =============================================================================

PROJECT_TAGLINE = "Command-line client for the Izanami feature-flag service"
PROJECT_URL = "https://github.com/MAIF/izanami"

# =============================================================================
# Success Messages
# =============================================================================

SUCCESS_MESSAGES = {
    "config_set": "Set {key} = {value}",
    "config_unset": "Unset {key}",
    "config_initialized": "Configuration file created at {path}",
    "config_valid": "Configuration is valid",
    "config_backed_up": "✓ Config backed up to: {path}",
    "sessions_backed_up": "✓ Sessions backed up to: {path}",
    "config_deleted": "✓ Config deleted: {path}",
    "sessions_deleted": "✓ Sessions deleted: {path}",
    "reset_complete": "Reset complete!",
    "profile_added": "Profile '{name}' created",
    "profile_activated": "Switched to profile '{name}'",
    "profile_deleted": "Profile '{name}' deleted",
    "profile_value_set": "Set {key} = {value} on profile '{name}'",
    "profile_value_unset": "Unset {key} on profile '{name}'",
    "client_keys_added_tenant": "Client keys saved for tenant '{tenant}' in profile '{profile}'",
    "client_keys_added_projects": (
        "Client keys saved for tenant '{tenant}', projects {projects} in profile '{profile}'"
    ),
    "client_keys_deleted": "Client keys deleted for {scope}",
    "worker_added": "Worker '{name}' added ({url})",
    "worker_deleted": "Worker '{name}' deleted",
    "worker_default_set": "Default worker set to '{name}'",
    "session_activated": "Switched to session '{name}'",
    "session_deleted": "Session '{name}' deleted",
    "session_logged_out": "Logged out of session '{name}'",
}

# =============================================================================
# Error Messages
# =============================================================================

ERROR_MESSAGES = {
    "generic_error": "An error occurred: {error}",
    "quiet_verbose_exclusive": "--quiet and --verbose are mutually exclusive",
    "invalid_config_key": "invalid config key: {key}",
    "profile_specific_key": (
        "'{key}' is a profile-specific setting. Use 'iz profiles set {key} <value>' instead"
    ),
    "invalid_profile_key": "invalid profile key: {key}",
    "invalid_value": "invalid value for {key}: {value} ({expected})",
    "config_not_found": "config file does not exist",
    "config_exists": "config file already exists at {path}",
    "config_read_failed": "failed to read config file",
    "config_parse_failed": "failed to parse config file",
    "config_write_failed": "failed to write config file",
    "sessions_read_failed": "failed to read sessions file",
    "sessions_parse_failed": "failed to parse sessions file",
    "sessions_write_failed": "failed to write sessions file",
    "nothing_to_reset": "no configuration or session files found - nothing to reset",
    "backup_failed": "failed to back up {path}",
    "delete_failed": "failed to delete {path}",
    "profile_not_found": "profile '{name}' not found",
    "profile_load_failed": "failed to load profile '{name}': {error}",
    "profile_exists": "profile '{name}' already exists",
    "no_active_profile": (
        "no active profile. Create one with: iz profiles add <name> "
        "or select one with: iz profiles use <name>"
    ),
    "session_not_found": "session '{name}' not found",
    "no_active_session": "no active session",
    "worker_not_found": "worker '{name}' not found; available workers: {available}",
    "worker_not_found_none": (
        "worker '{name}' not found: no workers configured. "
        "Add workers with: iz profiles workers add <name> --url <url>"
    ),
    "worker_exists": "worker '{name}' already exists (use --force to overwrite)",
    "worker_url_required": "worker URL is required",
    "tenant_required": "tenant is required",
    "tenant_required_hint": "tenant is required (use --tenant flag or set IZ_TENANT)",
    "client_keys_required": "both client-id and client-secret are required",
    "client_keys_not_found": "no client keys found for {scope}",
    "leader_url_required": (
        "leader URL is required (use --url flag, set IZ_LEADER_URL, or configure a profile)"
    ),
    "admin_auth_required": (
        "admin authentication is required (log in to create a session, "
        "or set IZ_PERSONAL_ACCESS_TOKEN)"
    ),
    "client_auth_required": (
        "client credentials are required (use --client-id/--client-secret flags, "
        "set IZ_CLIENT_ID/IZ_CLIENT_SECRET, or add them with: iz profiles client-keys add)"
    ),
    "pat_username_required": (
        "personal-access-token-username is required when using a personal access token"
    ),
}

# =============================================================================
# Info Messages
# =============================================================================

INFO_MESSAGES = {
    "cancelled": "Cancelled",
    "reset_files_header": "The following files will be backed up and deleted:",
    "reset_next_steps": (
        "Next steps:\n"
        "  iz config init                      # Create a fresh config file\n"
        "  iz profiles add <name> --url <url>  # Configure a profile"
    ),
    "config_value_not_set": "(not set)",
    "no_profiles": "No profiles configured. Create one with: iz profiles add <name> --url <url>",
    "no_sessions": "No sessions found.",
    "no_workers": "No workers configured for profile '{profile}'.",
    "no_client_keys": "No client keys configured for profile '{profile}'.",
    "no_active_profile": "No active profile.",
    "client_keys_overwrite": "Existing client keys will be overwritten:",
    "worker_standalone": "Worker: standalone (using leader URL: {url})",
    "worker_env_url": "Worker: <direct> ({url}) [source: IZ_WORKER_URL]",
    "worker_named": "Worker: {name} ({url}) [source: {source}]",
    "worker_no_url": "No URL resolved (leader URL not configured)",
    "credentials_worker": "Credentials: per-worker ({summary})",
    "credentials_profile": "Credentials: profile-level ({summary})",
    "credentials_env": "Credentials: env/flags",
    "credentials_none": "Credentials: not configured",
    "validation_issues": "Configuration has {count} issue(s):",
}

# =============================================================================
# Verbose Diagnostics
# =============================================================================

VERBOSE_MESSAGES = {
    "config_field": "[verbose] Config: {key}={value} (source: {source})",
    "env_none": "[verbose] Environment: no IZ_* variables set",
    "env_var": "[verbose] Environment: {name}={value}",
    "auth_mode": "[verbose] Authentication - Admin operations: {admin}, Feature checks: {client}",
    "profile_from_flag": "[verbose] Using profile: {name} (from --profile flag)",
    "profile_active": "[verbose] Using profile: {name} (active profile)",
    "client_credentials_projects": (
        "Using client credentials from config (tenant: {tenant}, projects: {projects})"
    ),
    "client_credentials_tenant": "Using client credentials from config (tenant: {tenant})",
    "default_worker_dangling": (
        "[warning] default-worker '{name}' not found in current profile; "
        "available: {available}; falling back to standalone mode"
    ),
    "default_worker_dangling_none": (
        "[warning] default-worker '{name}' not found in current profile; "
        "falling back to standalone mode"
    ),
}

# =============================================================================
# Interactive Prompts
# =============================================================================

PROMPTS = {
    "reset_confirm": "Are you sure? (y/N): ",
    "overwrite_confirm": "Overwrite? (y/N): ",
    "delete_profile_confirm": "Delete profile '{name}'? (y/N): ",
}

AFFIRMATIVE_ANSWERS: frozenset[str] = frozenset({"y", "yes"})
